"""Ticket repository for data access."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.shared import utc_now
from app.models.ticket import PaymentStatus, ServiceType, Ticket
from app.schemas.ticket import TicketCreate, TicketUpdate


class TicketRepository:
    """Repository for Ticket model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        skip: int = 0,
        limit: int | None = 100,
        payment_status: PaymentStatus | None = None,
        agent_id: str | None = None,
        service_type: ServiceType | None = None,
    ) -> list[Ticket]:
        """Get tickets, newest first, with optional filters. ``limit=None`` returns all."""
        query = self.db.query(Ticket)

        if payment_status:
            query = query.filter(Ticket.payment_status == payment_status.value)
        if agent_id:
            query = query.filter(Ticket.agent_id == agent_id)
        if service_type:
            query = query.filter(Ticket.service_type == service_type.value)

        query = query.order_by(Ticket.created_at.desc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_by_id(self, ticket_id: UUID) -> Ticket | None:
        """Get a ticket by ID."""
        return self.db.get(Ticket, ticket_id)

    def status_totals(self, payment_status: PaymentStatus) -> tuple[int, Decimal]:
        """Number of tickets in a status and the sum of their prices."""
        count, total = (
            self.db.query(
                func.count(Ticket.id),
                func.coalesce(func.sum(Ticket.price), Decimal("0")),
            )
            .filter(Ticket.payment_status == payment_status.value)
            .one()
        )
        return int(count), Decimal(str(total))

    def sales_by_agent(self, since: datetime | None = None) -> list[tuple[str, str | None, str, int, Decimal]]:
        """Ticket count and price total per agent and service type."""
        query = self.db.query(
            Ticket.agent_id,
            func.max(Ticket.agent_name),
            Ticket.service_type,
            func.count(Ticket.id),
            func.coalesce(func.sum(Ticket.price), Decimal("0")),
        )
        if since is not None:
            query = query.filter(Ticket.created_at >= since)
        rows = query.group_by(Ticket.agent_id, Ticket.service_type).all()
        return [
            (agent_id, agent_name, service_type, int(count), Decimal(str(revenue)))
            for agent_id, agent_name, service_type, count, revenue in rows
        ]

    def create(self, data: TicketCreate, payment_status: PaymentStatus) -> Ticket:
        """Create a new ticket with nothing paid yet.

        A zero-price ticket is created already paid.
        """
        ticket = Ticket(
            passenger_name=data.passenger_name,
            service_type=data.service_type.value,
            supplier=data.supplier,
            origin_code=data.origin_code,
            destination_code=data.destination_code,
            airline_code=data.airline_code,
            travel_date=data.travel_date,
            return_date=data.return_date,
            agent_id=data.agent_id,
            agent_name=data.agent_name,
            order_number=data.order_number,
            contact_info=data.contact_info,
            comments=data.comments,
            price=data.price,
            paid_amount=Decimal("0"),
            payment_status=payment_status.value,
            payment_date=utc_now() if payment_status == PaymentStatus.PAID else None,
        )
        self.db.add(ticket)
        self.db.commit()
        self.db.refresh(ticket)
        return ticket

    def update(self, ticket_id: UUID, data: TicketUpdate) -> Ticket | None:
        """Update descriptive ticket fields."""
        ticket = self.get_by_id(ticket_id)
        if not ticket:
            return None

        update_data = data.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(ticket, key, value)

        self.db.commit()
        self.db.refresh(ticket)
        return ticket

    def apply_payment_totals(
        self,
        ticket: Ticket,
        paid_amount: Decimal,
        payment_status: PaymentStatus,
        payment_date: datetime | None,
    ) -> Ticket:
        """Write paid amount and status. Flushes only; the caller owns the transaction.

        The flush issues a version-checked UPDATE and raises ``StaleDataError``
        when another transaction changed the row since it was read.
        """
        ticket.paid_amount = paid_amount  # type: ignore[assignment]
        ticket.payment_status = payment_status.value  # type: ignore[assignment]
        ticket.payment_date = payment_date  # type: ignore[assignment]
        self.db.flush()
        return ticket
