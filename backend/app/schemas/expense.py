"""Expense schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.ticket_payment import PaymentMethod


class ExpenseCreate(BaseModel):
    agent_id: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    payment_method: PaymentMethod = PaymentMethod.CASH
    commentary: str | None = None

    @field_validator("payment_method", mode="before")
    @classmethod
    def default_unknown_method(cls, v: Any) -> PaymentMethod:
        return PaymentMethod.coerce(v)


class ExpenseUpdate(BaseModel):
    amount: Decimal | None = Field(default=None, gt=0, max_digits=14, decimal_places=2)
    payment_method: PaymentMethod | None = None
    commentary: str | None = None

    @field_validator("payment_method", mode="before")
    @classmethod
    def default_unknown_method(cls, v: Any) -> PaymentMethod | None:
        if v is None:
            return None
        return PaymentMethod.coerce(v)


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    agent_id: str
    amount: Decimal
    payment_method: str
    commentary: str | None = None
    created_at: datetime | None = None


class ExpenseTotalResponse(BaseModel):
    total: Decimal
    count: int
