"""Consumption API endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.consumption import Consumption
from app.repositories.consumption_repository import ConsumptionRepository
from app.schemas.consumption import (
    ConsumptionCreate,
    ConsumptionResponse,
    ConsumptionTotalResponse,
    ConsumptionUpdate,
)
from app.services.notification_service import CATEGORY_CONSUMPTION, NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=ConsumptionResponse,
    status_code=201,
    summary="Record consumption",
    responses={422: {"description": "Validation error"}},
)
async def create_consumption(
    data: ConsumptionCreate,
    db: Session = Depends(get_db),
) -> Consumption:
    """Record a running cost paid from the till."""
    consumption = ConsumptionRepository(db).create(data)
    logger.info("Consumption of %s recorded by agent %s", data.amount, data.agent_id)
    NotificationService(db).success(
        "Расход по кассе добавлен",
        "Запись о потреблении успешно сохранена",
        category=CATEGORY_CONSUMPTION,
        resource_type="consumption",
        resource_id=consumption.id,  # type: ignore[arg-type]
    )
    return consumption


@router.get(
    "/",
    response_model=list[ConsumptionResponse],
    summary="List consumptions",
)
async def list_consumptions(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    agent_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[Consumption]:
    """List consumption records, newest first."""
    return ConsumptionRepository(db).get_all(skip=skip, limit=limit, agent_id=agent_id)


@router.get(
    "/total",
    response_model=ConsumptionTotalResponse,
    summary="Get consumption total",
)
async def get_consumption_total(
    agent_id: str | None = None,
    db: Session = Depends(get_db),
) -> ConsumptionTotalResponse:
    total, count = ConsumptionRepository(db).total(agent_id=agent_id)
    return ConsumptionTotalResponse(total=total, count=count)


@router.get(
    "/{consumption_id}",
    response_model=ConsumptionResponse,
    summary="Get consumption",
    responses={404: {"description": "Consumption not found"}},
)
async def get_consumption(
    consumption_id: UUID,
    db: Session = Depends(get_db),
) -> Consumption:
    consumption = ConsumptionRepository(db).get_by_id(consumption_id)
    if not consumption:
        raise HTTPException(status_code=404, detail="Consumption not found")
    return consumption


@router.put(
    "/{consumption_id}",
    response_model=ConsumptionResponse,
    summary="Update consumption",
    responses={
        404: {"description": "Consumption not found"},
        422: {"description": "Validation error"},
    },
)
async def update_consumption(
    consumption_id: UUID,
    data: ConsumptionUpdate,
    db: Session = Depends(get_db),
) -> Consumption:
    consumption = ConsumptionRepository(db).update(consumption_id, data)
    if not consumption:
        raise HTTPException(status_code=404, detail="Consumption not found")
    return consumption


@router.delete(
    "/{consumption_id}",
    status_code=204,
    summary="Delete consumption",
    responses={404: {"description": "Consumption not found"}},
)
async def delete_consumption(
    consumption_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    """Delete a consumption record."""
    if not ConsumptionRepository(db).delete(consumption_id):
        raise HTTPException(status_code=404, detail="Consumption not found")
