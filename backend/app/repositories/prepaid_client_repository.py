"""PrepaidClient repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.prepaid_client import PrepaidClient
from app.models.shared import utc_now
from app.schemas.prepaid_client import PrepaidClientCreate


class PrepaidClientRepository:
    """Repository for PrepaidClient model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, skip: int = 0, limit: int = 100, agent_id: str | None = None) -> list[PrepaidClient]:
        query = self.db.query(PrepaidClient)
        if agent_id:
            query = query.filter(PrepaidClient.agent_id == agent_id)
        return query.order_by(PrepaidClient.created_at.desc()).offset(skip).limit(limit).all()

    def get_by_id(self, client_id: UUID) -> PrepaidClient | None:
        return self.db.query(PrepaidClient).filter(PrepaidClient.id == client_id).first()

    def create(self, data: PrepaidClientCreate) -> PrepaidClient:
        client = PrepaidClient(
            agent_id=data.agent_id,
            agent_name=data.agent_name,
            client_name=data.client_name,
            amount=data.amount,
            payment_method=data.payment_method.value,
            payment_date=data.payment_date or utc_now(),
            notes=data.notes,
        )
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        return client

    def delete(self, client_id: UUID) -> bool:
        client = self.get_by_id(client_id)
        if not client:
            return False
        self.db.delete(client)
        self.db.commit()
        return True

    def total(self) -> tuple[Decimal, int]:
        """Sum and number of all prepaid amounts."""
        total, count = self.db.query(
            func.coalesce(func.sum(PrepaidClient.amount), Decimal("0")),
            func.count(PrepaidClient.id),
        ).one()
        return Decimal(str(total)), int(count)
