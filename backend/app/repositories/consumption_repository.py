"""Consumption repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.consumption import Consumption
from app.schemas.consumption import ConsumptionCreate, ConsumptionUpdate


class ConsumptionRepository:
    """Repository for Consumption model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, skip: int = 0, limit: int = 100, agent_id: str | None = None) -> list[Consumption]:
        query = self.db.query(Consumption)
        if agent_id:
            query = query.filter(Consumption.agent_id == agent_id)
        return query.order_by(Consumption.created_at.desc()).offset(skip).limit(limit).all()

    def get_by_id(self, consumption_id: UUID) -> Consumption | None:
        return self.db.query(Consumption).filter(Consumption.id == consumption_id).first()

    def create(self, data: ConsumptionCreate) -> Consumption:
        consumption = Consumption(
            agent_id=data.agent_id,
            amount=data.amount,
            payment_method=data.payment_method.value,
            commentary=data.commentary,
        )
        self.db.add(consumption)
        self.db.commit()
        self.db.refresh(consumption)
        return consumption

    def update(self, consumption_id: UUID, data: ConsumptionUpdate) -> Consumption | None:
        consumption = self.get_by_id(consumption_id)
        if not consumption:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "payment_method" in update_data:
            update_data["payment_method"] = update_data["payment_method"].value
        for key, value in update_data.items():
            setattr(consumption, key, value)

        self.db.commit()
        self.db.refresh(consumption)
        return consumption

    def delete(self, consumption_id: UUID) -> bool:
        consumption = self.get_by_id(consumption_id)
        if not consumption:
            return False
        self.db.delete(consumption)
        self.db.commit()
        return True

    def total(self, agent_id: str | None = None) -> tuple[Decimal, int]:
        """Sum and number of consumption records, optionally for one agent."""
        query = self.db.query(
            func.coalesce(func.sum(Consumption.amount), Decimal("0")),
            func.count(Consumption.id),
        )
        if agent_id:
            query = query.filter(Consumption.agent_id == agent_id)
        total, count = query.one()
        return Decimal(str(total)), int(count)
