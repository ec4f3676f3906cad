"""Read side: tickets with their ledgers, balances and summaries."""

import logging
from collections.abc import Callable, Iterable
from datetime import timedelta
from decimal import Decimal
from threading import Lock
from uuid import UUID

from sqlalchemy.orm import Session

from app.core import database
from app.core.config import settings
from app.models.shared import utc_now
from app.models.ticket import PaymentStatus, ServiceType, Ticket
from app.models.ticket_payment import TicketPayment
from app.repositories.ticket_payment_repository import TicketPaymentRepository
from app.repositories.ticket_repository import TicketRepository
from app.schemas.ticket import (
    AgentPerformance,
    ServiceTypeStats,
    TicketSummaryResponse,
    TicketView,
    UnpaidSummary,
)
from app.schemas.ticket_payment import PaymentMethodTotal, TicketPaymentResponse
from app.services.change_feed import ChangeFeed, TicketChangeEvent, ticket_change_feed
from app.services.payment_errors import TicketNotFoundError
from app.services.payment_status import CENT, remaining_amount

logger = logging.getLogger(__name__)


class TicketQueryService:
    def __init__(self, db: Session):
        self.db = db
        self.ticket_repo = TicketRepository(db)
        self.payment_repo = TicketPaymentRepository(db)

    @staticmethod
    def to_view(ticket: Ticket, payments: Iterable[TicketPayment]) -> TicketView:
        payment_views = [TicketPaymentResponse.model_validate(p) for p in payments]
        paid_total = sum((p.amount for p in payment_views), Decimal("0"))
        data = {
            name: getattr(ticket, name)
            for name in TicketView.model_fields
            if name not in ("payments", "paid_total", "remaining", "overpaid")
        }
        remaining = remaining_amount(ticket.price, paid_total)  # type: ignore[arg-type]
        return TicketView(
            **data,
            payments=payment_views,
            paid_total=paid_total,
            remaining=remaining,
            overpaid=remaining < 0 and ticket.payment_status != PaymentStatus.PAID.value,
        )

    def get_view(self, ticket_id: UUID) -> TicketView:
        ticket = self.ticket_repo.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        return self.to_view(ticket, self.payment_repo.get_by_ticket_id(ticket_id))

    def list_views(self) -> list[TicketView]:
        """All tickets, newest first, each with its ledger."""
        tickets = self.ticket_repo.get_all(limit=None)
        payments = self.payment_repo.get_by_ticket_ids([t.id for t in tickets])  # type: ignore[misc]
        return [self.to_view(t, payments.get(t.id, [])) for t in tickets]  # type: ignore[call-overload]

    def unpaid_summary(self) -> UnpaidSummary:
        """Totals over pending tickets; the paid part is summed from their ledgers."""
        count, total_price = self.ticket_repo.status_totals(PaymentStatus.PENDING)
        total_paid = self.payment_repo.sum_for_status(PaymentStatus.PENDING)
        return UnpaidSummary(
            count=count,
            total_price=total_price,
            total_paid=total_paid,
            total_remaining=remaining_amount(total_price, total_paid),
        )

    def summary(self) -> TicketSummaryResponse:
        """Computed in SQL over every ticket, never from the cached list."""
        paid_count, _ = self.ticket_repo.status_totals(PaymentStatus.PAID)
        return TicketSummaryResponse(
            currency=settings.CURRENCY,
            unpaid=self.unpaid_summary(),
            paid_count=paid_count,
            by_payment_method=[
                PaymentMethodTotal(payment_method=method, label=method.label, total=total, count=count)
                for method, total, count in self.payment_repo.totals_by_method()
            ],
        )

    def agent_performance(self, days: int | None = None) -> list[AgentPerformance]:
        """Per-agent sales over the last ``days`` days (all time when None), best first."""
        since = utc_now() - timedelta(days=days) if days else None
        names: dict[str, str | None] = {}
        stats: dict[str, list[ServiceTypeStats]] = {}
        for agent_id, agent_name, service_type, count, revenue in self.ticket_repo.sales_by_agent(since):
            names[agent_id] = names.get(agent_id) or agent_name
            stats.setdefault(agent_id, []).append(
                ServiceTypeStats(service_type=service_type, count=count, revenue=revenue)
            )

        result = []
        for agent_id, by_type in stats.items():
            total_count = sum(s.count for s in by_type)
            total_revenue = sum((s.revenue for s in by_type), Decimal("0"))
            result.append(
                AgentPerformance(
                    agent_id=agent_id,
                    agent_name=names[agent_id],
                    total_count=total_count,
                    total_revenue=total_revenue,
                    average_price=(total_revenue / total_count).quantize(CENT),
                    by_service_type=sorted(by_type, key=lambda s: s.service_type),
                )
            )
        result.sort(key=lambda a: (-a.total_revenue, a.agent_id))
        return result


def filter_views(
    views: Iterable[TicketView],
    payment_status: PaymentStatus | None = None,
    agent_id: str | None = None,
    service_type: ServiceType | None = None,
    overpaid: bool | None = None,
) -> list[TicketView]:
    result = []
    for view in views:
        if payment_status and view.payment_status != payment_status:
            continue
        if agent_id and view.agent_id != agent_id:
            continue
        if service_type and view.service_type != service_type.value:
            continue
        if overpaid is not None and view.overpaid != overpaid:
            continue
        result.append(view)
    return result


class TicketListCache:
    """Cached ticket list, dropped whenever the change feed reports a ticket change.

    The next read after a change refetches the whole list. A load that
    races with a change is returned to its caller but not cached.
    """

    def __init__(
        self,
        loader: Callable[[], list[TicketView]],
        feed: ChangeFeed = ticket_change_feed,
    ):
        self._loader = loader
        self._items: list[TicketView] | None = None
        self._generation = 0
        self._lock = Lock()
        self._unsubscribe = feed.subscribe(self._on_change)

    def get(self) -> list[TicketView]:
        with self._lock:
            if self._items is not None:
                return list(self._items)
            generation = self._generation

        items = self._loader()

        with self._lock:
            if generation == self._generation:
                self._items = items
        return list(items)

    def invalidate(self) -> None:
        with self._lock:
            self._generation += 1
            self._items = None

    def close(self) -> None:
        self._unsubscribe()

    def _on_change(self, change: TicketChangeEvent) -> None:
        logger.debug("Ticket %s changed (%s), dropping cached ticket list", change.ticket_id, change.action)
        self.invalidate()


def load_ticket_views() -> list[TicketView]:
    db = database.SessionLocal()
    try:
        return TicketQueryService(db).list_views()
    finally:
        db.close()


ticket_list_cache = TicketListCache(load_ticket_views)
