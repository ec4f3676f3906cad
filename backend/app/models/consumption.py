"""Consumption model: office supplies and other running costs paid from the till."""

from sqlalchemy import Column, DateTime, Numeric, String, Text, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid
from app.models.ticket_payment import PaymentMethod


class Consumption(Base):
    __tablename__ = "consumptions"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    agent_id = Column(String(255), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)
    commentary = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
