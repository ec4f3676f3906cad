"""Notification API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.notification import NotificationLevel
from app.repositories.notification_repository import NotificationRepository
from app.schemas.notification import NotificationCountResponse, NotificationResponse

router = APIRouter()


@router.get(
    "/",
    response_model=list[NotificationResponse],
    summary="List notifications",
)
async def list_notifications(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    level: NotificationLevel | None = None,
    category: str | None = None,
    is_read: bool | None = None,
    db: Session = Depends(get_db),
) -> list[NotificationResponse]:
    """List notifications with optional filters, newest first."""
    repo = NotificationRepository(db)
    notifications = repo.get_all(
        skip=skip,
        limit=limit,
        level=level,
        category=category,
        is_read=is_read,
    )
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get(
    "/unread_count",
    response_model=NotificationCountResponse,
    summary="Get unread notification count",
)
async def get_unread_count(
    db: Session = Depends(get_db),
) -> NotificationCountResponse:
    """Get the count of unread notifications."""
    repo = NotificationRepository(db)
    return NotificationCountResponse(unread_count=repo.count_unread())


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_as_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
) -> NotificationResponse:
    """Mark a single notification as read."""
    repo = NotificationRepository(db)
    updated = repo.mark_as_read(notification_id)
    if updated is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationResponse.model_validate(updated)


@router.post(
    "/read_all",
    response_model=NotificationCountResponse,
    summary="Mark all notifications as read",
)
async def mark_all_as_read(
    db: Session = Depends(get_db),
) -> NotificationCountResponse:
    """Mark all unread notifications as read and return how many were changed."""
    repo = NotificationRepository(db)
    return NotificationCountResponse(unread_count=repo.mark_all_as_read())
