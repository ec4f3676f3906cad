import logging
from typing import Any
from uuid import UUID

from arq import cron

from app.core.config import settings
from app.core.database import SessionLocal
from app.repositories.idempotency_repository import IdempotencyRepository
from app.services.ticket_payment_service import TicketPaymentService
from app.tasks import redis_settings

logger = logging.getLogger(__name__)


async def reconcile_ticket_payments_task(ctx: dict[str, Any]) -> int:
    """Background task: repair tickets whose paid amount drifted from their ledger.

    Tickets written by older clients could end up with a paid amount that
    does not match the sum of their payments. Runs hourly.
    """
    db = SessionLocal()
    try:
        repaired = TicketPaymentService(db).reconcile_all()
        if repaired:
            logger.info("Reconciled %d ticket(s) with their payment ledger", len(repaired))
        return len(repaired)
    finally:
        db.close()


async def reconcile_ticket_task(ctx: dict[str, Any], ticket_id: str) -> bool:
    """Background task: reconcile a single ticket.

    Args:
        ctx: ARQ worker context.
        ticket_id: UUID string of the ticket.

    Returns:
        Whether the ticket's stored totals were changed.
    """
    db = SessionLocal()
    try:
        return TicketPaymentService(db).reconcile_paid_amount(UUID(ticket_id)).changed
    finally:
        db.close()


async def purge_idempotency_records_task(ctx: dict[str, Any]) -> int:
    """Background task: delete idempotency records older than the replay window.

    Runs daily.
    """
    db = SessionLocal()
    try:
        count = IdempotencyRepository(db).delete_expired(settings.IDEMPOTENCY_MAX_AGE_HOURS)
        if count > 0:
            logger.info("Purged %d expired idempotency records", count)
        return count
    finally:
        db.close()


class WorkerSettings:
    functions = [
        reconcile_ticket_payments_task,
        reconcile_ticket_task,
        purge_idempotency_records_task,
    ]
    cron_jobs = [
        cron(reconcile_ticket_payments_task, minute={0}),  # hourly
        cron(purge_idempotency_records_task, hour=3, minute=0),  # daily at 03:00
    ]
    redis_settings = redis_settings
