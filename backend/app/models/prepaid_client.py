"""PrepaidClient model for client credits received before a sale."""

from sqlalchemy import Column, DateTime, Numeric, String, Text, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid, utc_now
from app.models.ticket_payment import PaymentMethod


class PrepaidClient(Base):
    __tablename__ = "prepaid_clients"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    agent_id = Column(String(255), nullable=False, index=True)
    agent_name = Column(String(255), nullable=False, default="")
    client_name = Column(String(255), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)
    payment_date = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
