"""TicketPayment model: one immutable ledger entry of money received against a ticket."""

import logging
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid, utc_now

logger = logging.getLogger(__name__)


class PaymentMethod(str, Enum):
    """Payment instrument a ledger entry was received through."""

    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    TERMINAL = "terminal"
    VISA = "visa"
    UZCARD = "uzcard"

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self]

    @classmethod
    def coerce(cls, value: "str | PaymentMethod | None") -> "PaymentMethod":
        """Map a raw instrument value to a member, defaulting to CASH.

        Unrecognized and missing values fall back to cash; the fallback is
        logged so that bad client input stays visible.
        """
        if isinstance(value, cls):
            return value
        if value is not None:
            try:
                return cls(str(value).strip().lower())
            except ValueError:
                pass
        logger.warning("Unrecognized payment method %r, recording as cash", value)
        return cls.CASH


PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "Наличные",
    PaymentMethod.BANK_TRANSFER: "Банковский перевод",
    PaymentMethod.TERMINAL: "Терминал",
    PaymentMethod.VISA: "Visa",
    PaymentMethod.UZCARD: "UzCard",
}


class TicketPayment(Base):
    """Ledger row. Created only by the payment submission service, never updated."""

    __tablename__ = "ticket_payments"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    ticket_id = Column(
        UUIDType, ForeignKey("tickets.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    amount = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)
    payment_date = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
