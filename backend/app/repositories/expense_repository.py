"""Expense repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.expense import Expense
from app.schemas.expense import ExpenseCreate, ExpenseUpdate


class ExpenseRepository:
    """Repository for Expense model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, skip: int = 0, limit: int = 100, agent_id: str | None = None) -> list[Expense]:
        query = self.db.query(Expense)
        if agent_id:
            query = query.filter(Expense.agent_id == agent_id)
        return query.order_by(Expense.created_at.desc()).offset(skip).limit(limit).all()

    def get_by_id(self, expense_id: UUID) -> Expense | None:
        return self.db.query(Expense).filter(Expense.id == expense_id).first()

    def create(self, data: ExpenseCreate) -> Expense:
        expense = Expense(
            agent_id=data.agent_id,
            amount=data.amount,
            payment_method=data.payment_method.value,
            commentary=data.commentary,
        )
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def update(self, expense_id: UUID, data: ExpenseUpdate) -> Expense | None:
        expense = self.get_by_id(expense_id)
        if not expense:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "payment_method" in update_data:
            update_data["payment_method"] = update_data["payment_method"].value
        for key, value in update_data.items():
            setattr(expense, key, value)

        self.db.commit()
        self.db.refresh(expense)
        return expense

    def delete(self, expense_id: UUID) -> bool:
        expense = self.get_by_id(expense_id)
        if not expense:
            return False
        self.db.delete(expense)
        self.db.commit()
        return True

    def total(self, agent_id: str | None = None) -> tuple[Decimal, int]:
        """Sum and number of expenses, optionally for one agent."""
        query = self.db.query(
            func.coalesce(func.sum(Expense.amount), Decimal("0")),
            func.count(Expense.id),
        )
        if agent_id:
            query = query.filter(Expense.agent_id == agent_id)
        total, count = query.one()
        return Decimal(str(total)), int(count)
