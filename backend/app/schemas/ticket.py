"""Ticket schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.ticket import PaymentStatus, ServiceType
from app.schemas.ticket_payment import PaymentEntry, PaymentMethodTotal, TicketPaymentResponse


class TicketCreate(BaseModel):
    passenger_name: str = Field(..., min_length=1, max_length=255)
    service_type: ServiceType = ServiceType.TICKET
    supplier: str | None = Field(default=None, max_length=255)
    origin_code: str | None = Field(default=None, min_length=3, max_length=3)
    destination_code: str | None = Field(default=None, min_length=3, max_length=3)
    airline_code: str | None = Field(default=None, min_length=2, max_length=3)
    travel_date: date | None = None
    return_date: date | None = None
    agent_id: str = Field(..., min_length=1, max_length=255)
    agent_name: str | None = Field(default=None, max_length=255)
    order_number: str | None = Field(default=None, max_length=255)
    contact_info: str | None = Field(default=None, max_length=255)
    comments: str | None = None
    price: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    # Payments taken at the moment of sale; applied through the regular submission path.
    payments: list[PaymentEntry] = Field(default_factory=list)


class TicketUpdate(BaseModel):
    """Descriptive fields only. Price and payment state are never edited directly."""

    passenger_name: str | None = Field(default=None, min_length=1, max_length=255)
    supplier: str | None = Field(default=None, max_length=255)
    travel_date: date | None = None
    return_date: date | None = None
    order_number: str | None = Field(default=None, max_length=255)
    contact_info: str | None = Field(default=None, max_length=255)
    comments: str | None = None


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    passenger_name: str
    service_type: str
    supplier: str | None = None
    origin_code: str | None = None
    destination_code: str | None = None
    airline_code: str | None = None
    travel_date: date | None = None
    return_date: date | None = None
    agent_id: str
    agent_name: str | None = None
    order_number: str | None = None
    contact_info: str | None = None
    comments: str | None = None
    price: Decimal
    paid_amount: Decimal
    payment_status: PaymentStatus
    payment_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TicketView(TicketResponse):
    """Ticket with its ledger and derived totals, as shown in payment lists."""

    payments: list[TicketPaymentResponse] = Field(default_factory=list)
    paid_total: Decimal
    remaining: Decimal
    # Paid beyond the tolerance; such tickets stay pending until reconciled by hand.
    overpaid: bool = False


class UnpaidSummary(BaseModel):
    count: int
    total_price: Decimal
    total_paid: Decimal
    total_remaining: Decimal


class TicketSummaryResponse(BaseModel):
    currency: str
    unpaid: UnpaidSummary
    paid_count: int
    by_payment_method: list[PaymentMethodTotal]


class ReconcileResponse(BaseModel):
    ticket_id: UUID
    previous_paid_amount: Decimal
    paid_amount: Decimal
    payment_status: PaymentStatus
    changed: bool


class ServiceTypeStats(BaseModel):
    service_type: str
    count: int
    revenue: Decimal


class AgentPerformance(BaseModel):
    """Sales of one agent: ticket counts and revenue (sum of prices) per service type."""

    agent_id: str
    agent_name: str | None = None
    total_count: int
    total_revenue: Decimal
    average_price: Decimal
    by_service_type: list[ServiceTypeStats]
