"""TicketPayment (ledger) repository for data access."""

from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.ticket import PaymentStatus, Ticket
from app.models.ticket_payment import PaymentMethod, TicketPayment


class TicketPaymentRepository:
    """Repository for TicketPayment model.

    Ledger rows are append-only: there is no update or delete here.
    """

    def __init__(self, db: Session):
        self.db = db

    def add(self, ticket_id: UUID, amount: Decimal, payment_method: PaymentMethod) -> TicketPayment:
        """Insert a ledger row. Flushes only; the caller owns the transaction."""
        payment = TicketPayment(
            ticket_id=ticket_id,
            amount=amount,
            payment_method=payment_method.value,
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def get_by_ticket_id(self, ticket_id: UUID) -> list[TicketPayment]:
        """Get all ledger rows for a ticket, oldest first."""
        return (
            self.db.query(TicketPayment)
            .filter(TicketPayment.ticket_id == ticket_id)
            .order_by(TicketPayment.payment_date.asc())
            .all()
        )

    def get_by_ticket_ids(self, ticket_ids: list[UUID]) -> dict[UUID, list[TicketPayment]]:
        """Get ledger rows for many tickets at once, grouped by ticket."""
        grouped: dict[UUID, list[TicketPayment]] = defaultdict(list)
        if not ticket_ids:
            return grouped
        rows = (
            self.db.query(TicketPayment)
            .filter(TicketPayment.ticket_id.in_(ticket_ids))
            .order_by(TicketPayment.payment_date.asc())
            .all()
        )
        for row in rows:
            grouped[row.ticket_id].append(row)  # type: ignore[index]
        return grouped

    def sum_for_ticket(self, ticket_id: UUID) -> Decimal:
        result = (
            self.db.query(func.coalesce(func.sum(TicketPayment.amount), Decimal("0")))
            .filter(TicketPayment.ticket_id == ticket_id)
            .scalar()
        )
        return Decimal(str(result))

    def sums_by_ticket(self) -> dict[UUID, Decimal]:
        """Ledger total per ticket, for tickets with at least one row."""
        rows = (
            self.db.query(TicketPayment.ticket_id, func.sum(TicketPayment.amount))
            .group_by(TicketPayment.ticket_id)
            .all()
        )
        return {ticket_id: Decimal(str(total)) for ticket_id, total in rows}

    def sum_for_status(self, payment_status: PaymentStatus) -> Decimal:
        """Ledger total over all tickets currently in ``payment_status``."""
        result = (
            self.db.query(func.coalesce(func.sum(TicketPayment.amount), Decimal("0")))
            .join(Ticket, Ticket.id == TicketPayment.ticket_id)
            .filter(Ticket.payment_status == payment_status.value)
            .scalar()
        )
        return Decimal(str(result))

    def totals_by_method(self) -> list[tuple[PaymentMethod, Decimal, int]]:
        """Money received per instrument across the whole ledger."""
        rows = (
            self.db.query(
                TicketPayment.payment_method,
                func.sum(TicketPayment.amount),
                func.count(TicketPayment.id),
            )
            .group_by(TicketPayment.payment_method)
            .order_by(TicketPayment.payment_method.asc())
            .all()
        )
        return [
            (PaymentMethod.coerce(method), Decimal(str(total)), int(count))
            for method, total, count in rows
        ]
