"""Repository for IdempotencyRecord CRUD operations."""

from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from app.models.idempotency_record import IdempotencyRecord


class IdempotencyRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_key(self, idempotency_key: str) -> IdempotencyRecord | None:
        return (
            self.db.query(IdempotencyRecord)
            .filter(IdempotencyRecord.idempotency_key == idempotency_key)
            .first()
        )

    def create(
        self,
        *,
        idempotency_key: str,
        request_method: str,
        request_path: str,
    ) -> IdempotencyRecord:
        record = IdempotencyRecord(
            idempotency_key=idempotency_key,
            request_method=request_method,
            request_path=request_path,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def update_response(
        self,
        record: IdempotencyRecord,
        response_status: int,
        response_body: dict[str, Any],
    ) -> IdempotencyRecord:
        record.response_status = response_status  # type: ignore[assignment]
        record.response_body = response_body  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete_expired(self, max_age_hours: int = 24) -> int:
        cutoff = datetime.now(UTC) - timedelta(hours=max_age_hours)
        count = (
            self.db.query(IdempotencyRecord)
            .filter(IdempotencyRecord.created_at < cutoff)
            .delete()
        )
        self.db.commit()
        return int(count)
