"""Prepaid client schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.ticket_payment import PaymentMethod


class PrepaidClientCreate(BaseModel):
    agent_id: str = Field(..., min_length=1, max_length=255)
    agent_name: str = Field(default="", max_length=255)
    client_name: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: datetime | None = None
    notes: str | None = None

    @field_validator("payment_method", mode="before")
    @classmethod
    def default_unknown_method(cls, v: Any) -> PaymentMethod:
        return PaymentMethod.coerce(v)


class PrepaidClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    agent_id: str
    agent_name: str
    client_name: str
    amount: Decimal
    payment_method: str
    payment_date: datetime
    notes: str | None = None
    created_at: datetime | None = None


class PrepaidTotalResponse(BaseModel):
    total: Decimal
    count: int
