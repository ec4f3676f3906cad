"""Ticket payment (ledger) schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.ticket import PaymentStatus
from app.models.ticket_payment import PaymentMethod


class PaymentEntry(BaseModel):
    """One amount received through one instrument."""

    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    payment_method: PaymentMethod = PaymentMethod.CASH

    @field_validator("payment_method", mode="before")
    @classmethod
    def default_unknown_method(cls, v: Any) -> PaymentMethod:
        return PaymentMethod.coerce(v)


class PaymentSubmission(BaseModel):
    """Request body for applying a batch of payment entries to a ticket."""

    entries: list[PaymentEntry] = Field(default_factory=list)
    price: Decimal | None = Field(
        default=None,
        description="Ticket price as displayed to the agent; the stored price is authoritative.",
    )


class PaymentSubmissionResponse(BaseModel):
    ticket_id: UUID
    payment_status: PaymentStatus
    price: Decimal
    paid_amount: Decimal
    remaining: Decimal
    payment_date: datetime | None = None
    entries: list[PaymentEntry]


class TicketPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    ticket_id: UUID
    amount: Decimal
    payment_method: str
    payment_date: datetime
    created_at: datetime | None = None


class PaymentPreviewRequest(BaseModel):
    """Live state of the four-field payment form."""

    cash_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    card_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    terminal_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    transfer_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)


class PaymentPreviewResponse(BaseModel):
    entries: list[PaymentEntry]
    price: Decimal
    existing_total: Decimal
    current_entry_total: Decimal
    remaining: Decimal
    projected_status: PaymentStatus


class PaymentMethodInfo(BaseModel):
    value: PaymentMethod
    label: str


class PaymentMethodTotal(BaseModel):
    payment_method: PaymentMethod
    label: str
    total: Decimal
    count: int
