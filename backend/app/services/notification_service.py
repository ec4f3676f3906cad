"""Service for user-facing success and error notifications."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.notification import Notification, NotificationLevel
from app.repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)

# Notification categories
CATEGORY_PAYMENT = "payment"
CATEGORY_TICKET = "ticket"
CATEGORY_PREPAID = "prepaid"
CATEGORY_EXPENSE = "expense"
CATEGORY_CONSUMPTION = "consumption"


class NotificationService:
    """Notification sink.

    Calls are fire-and-forget: the message is logged and stored, and a
    failure to store it never fails the action that produced it.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository(db)

    def success(
        self,
        title: str,
        description: str,
        *,
        category: str = CATEGORY_PAYMENT,
        resource_type: str | None = None,
        resource_id: UUID | None = None,
    ) -> Notification | None:
        logger.info("%s: %s", title, description)
        return self._store(
            NotificationLevel.SUCCESS, category, title, description, resource_type, resource_id
        )

    def error(
        self,
        title: str,
        description: str,
        *,
        category: str = CATEGORY_PAYMENT,
        resource_type: str | None = None,
        resource_id: UUID | None = None,
    ) -> Notification | None:
        logger.warning("%s: %s", title, description)
        return self._store(
            NotificationLevel.ERROR, category, title, description, resource_type, resource_id
        )

    def _store(
        self,
        level: NotificationLevel,
        category: str,
        title: str,
        message: str,
        resource_type: str | None,
        resource_id: UUID | None,
    ) -> Notification | None:
        try:
            return self.repo.create(
                level=level,
                category=category,
                title=title,
                message=message[:1000],
                resource_type=resource_type,
                resource_id=resource_id,
            )
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to store %s notification %r", level.value, title)
            return None
