"""Ticket model: a sellable item (air ticket, tour, train, insurance) with a payment status."""

from enum import Enum

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, Text, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class ServiceType(str, Enum):
    TICKET = "ticket"
    TOUR = "tour"
    TRAIN = "train"
    INSURANCE = "insurance"
    OTHER = "other"


class Ticket(Base):
    """Ticket model.

    ``price`` is fixed at creation. Progress towards it is tracked only by
    ``paid_amount``, which always equals the sum of the ticket's
    ``ticket_payments`` rows. ``version`` guards every update against lost
    writes from concurrent submissions.
    """

    __tablename__ = "tickets"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    passenger_name = Column(String(255), nullable=False)
    service_type = Column(String(20), nullable=False, default=ServiceType.TICKET.value, index=True)
    supplier = Column(String(255), nullable=True)

    # Route
    origin_code = Column(String(3), nullable=True)
    destination_code = Column(String(3), nullable=True)
    airline_code = Column(String(3), nullable=True)
    travel_date = Column(Date, nullable=True)
    return_date = Column(Date, nullable=True)

    # Attribution
    agent_id = Column(String(255), nullable=False, index=True)
    agent_name = Column(String(255), nullable=True)

    order_number = Column(String(255), nullable=True)
    contact_info = Column(String(255), nullable=True)
    comments = Column(Text, nullable=True)

    # Payment
    price = Column(Numeric(14, 2), nullable=False)
    paid_amount = Column(Numeric(14, 2), nullable=False, default=0)
    payment_status = Column(
        String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True
    )
    payment_date = Column(DateTime(timezone=True), nullable=True)

    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}
