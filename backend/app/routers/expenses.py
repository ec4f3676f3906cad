"""Expense API endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.expense import Expense
from app.repositories.expense_repository import ExpenseRepository
from app.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseTotalResponse,
    ExpenseUpdate,
)
from app.services.notification_service import CATEGORY_EXPENSE, NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=ExpenseResponse,
    status_code=201,
    summary="Record expense",
    responses={422: {"description": "Validation error"}},
)
async def create_expense(
    data: ExpenseCreate,
    db: Session = Depends(get_db),
) -> Expense:
    """Record money paid out by the agency."""
    expense = ExpenseRepository(db).create(data)
    logger.info("Expense of %s recorded by agent %s", data.amount, data.agent_id)
    NotificationService(db).success(
        "Расход добавлен",
        "Расход успешно сохранен",
        category=CATEGORY_EXPENSE,
        resource_type="expense",
        resource_id=expense.id,  # type: ignore[arg-type]
    )
    return expense


@router.get(
    "/",
    response_model=list[ExpenseResponse],
    summary="List expenses",
)
async def list_expenses(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    agent_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[Expense]:
    """List expenses, newest first."""
    return ExpenseRepository(db).get_all(skip=skip, limit=limit, agent_id=agent_id)


@router.get(
    "/total",
    response_model=ExpenseTotalResponse,
    summary="Get expense total",
)
async def get_expense_total(
    agent_id: str | None = None,
    db: Session = Depends(get_db),
) -> ExpenseTotalResponse:
    total, count = ExpenseRepository(db).total(agent_id=agent_id)
    return ExpenseTotalResponse(total=total, count=count)


@router.get(
    "/{expense_id}",
    response_model=ExpenseResponse,
    summary="Get expense",
    responses={404: {"description": "Expense not found"}},
)
async def get_expense(
    expense_id: UUID,
    db: Session = Depends(get_db),
) -> Expense:
    expense = ExpenseRepository(db).get_by_id(expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.put(
    "/{expense_id}",
    response_model=ExpenseResponse,
    summary="Update expense",
    responses={
        404: {"description": "Expense not found"},
        422: {"description": "Validation error"},
    },
)
async def update_expense(
    expense_id: UUID,
    data: ExpenseUpdate,
    db: Session = Depends(get_db),
) -> Expense:
    expense = ExpenseRepository(db).update(expense_id, data)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.delete(
    "/{expense_id}",
    status_code=204,
    summary="Delete expense",
    responses={404: {"description": "Expense not found"}},
)
async def delete_expense(
    expense_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    if not ExpenseRepository(db).delete(expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
