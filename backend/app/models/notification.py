"""Notification model for user-facing success/error messages."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(Base):
    """Notification model - stores messages shown to agents after an action."""

    __tablename__ = "notifications"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    level = Column(String(20), nullable=False, default=NotificationLevel.SUCCESS.value)
    category = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(String(1000), nullable=False)
    resource_type = Column(String(50), nullable=True)
    resource_id = Column(UUIDType, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
