"""Prepaid client API endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.prepaid_client import PrepaidClient
from app.repositories.prepaid_client_repository import PrepaidClientRepository
from app.schemas.prepaid_client import (
    PrepaidClientCreate,
    PrepaidClientResponse,
    PrepaidTotalResponse,
)
from app.services.notification_service import CATEGORY_PREPAID, NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=PrepaidClientResponse,
    status_code=201,
    summary="Record prepaid client",
    responses={422: {"description": "Validation error"}},
)
async def create_prepaid_client(
    data: PrepaidClientCreate,
    db: Session = Depends(get_db),
) -> PrepaidClient:
    """Record money received from a client ahead of any ticket sale."""
    client = PrepaidClientRepository(db).create(data)
    logger.info("Prepaid %s received from %s by agent %s", data.amount, data.client_name, data.agent_id)
    NotificationService(db).success(
        "Клиент добавлен",
        f"Предоплата для {data.client_name} зарегистрирована",
        category=CATEGORY_PREPAID,
        resource_type="prepaid_client",
        resource_id=client.id,  # type: ignore[arg-type]
    )
    return client


@router.get(
    "/",
    response_model=list[PrepaidClientResponse],
    summary="List prepaid clients",
)
async def list_prepaid_clients(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    agent_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[PrepaidClient]:
    """List prepaid clients, newest first."""
    return PrepaidClientRepository(db).get_all(skip=skip, limit=limit, agent_id=agent_id)


@router.get(
    "/total",
    response_model=PrepaidTotalResponse,
    summary="Get prepaid total",
)
async def get_prepaid_total(
    db: Session = Depends(get_db),
) -> PrepaidTotalResponse:
    """Sum of all prepaid amounts."""
    total, count = PrepaidClientRepository(db).total()
    return PrepaidTotalResponse(total=total, count=count)


@router.delete(
    "/{client_id}",
    status_code=204,
    summary="Delete prepaid client",
    responses={404: {"description": "Prepaid client not found"}},
)
async def delete_prepaid_client(
    client_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    """Delete a prepaid client record."""
    if not PrepaidClientRepository(db).delete(client_id):
        raise HTTPException(status_code=404, detail="Prepaid client not found")
    NotificationService(db).success(
        "Клиент удален",
        "Предоплата была успешно удалена",
        category=CATEGORY_PREPAID,
        resource_type="prepaid_client",
        resource_id=client_id,
    )
