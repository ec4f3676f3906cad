"""Ticket service: sale creation and descriptive edits."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.models.ticket import ServiceType, Ticket
from app.repositories.ticket_repository import TicketRepository
from app.schemas.ticket import TicketCreate, TicketUpdate
from app.services.notification_service import CATEGORY_TICKET, NotificationService
from app.services.payment_errors import StoreWriteError, TicketNotFoundError
from app.services.payment_status import derive_payment_status
from app.services.ticket_payment_service import TicketPaymentService

logger = logging.getLogger(__name__)

CREATED_MESSAGES = {
    ServiceType.TICKET: "Авиабилет успешно оформлен",
    ServiceType.TOUR: "Турпакет успешно оформлен",
    ServiceType.TRAIN: "Ж/Д билет успешно оформлен",
    ServiceType.INSURANCE: "Страховка успешно оформлена",
    ServiceType.OTHER: "Услуга успешно оформлена",
}


class TicketService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TicketRepository(db)

    def create_ticket(self, data: TicketCreate) -> Ticket:
        """Record a sale.

        Payments taken at the counter are applied through
        ``TicketPaymentService.submit_payments`` after the ticket exists, the
        same path later payments take. If they fail, the ticket stays
        pending and the error propagates.
        """
        ticket = self.repo.create(data, derive_payment_status(data.price, 0))
        logger.info(
            "Created %s %s for %s, price %s", ticket.service_type, ticket.id, ticket.passenger_name, ticket.price
        )
        NotificationService(self.db).success(
            "Успешно",
            CREATED_MESSAGES[data.service_type],
            category=CATEGORY_TICKET,
            resource_type="ticket",
            resource_id=ticket.id,  # type: ignore[arg-type]
        )

        if data.payments:
            TicketPaymentService(self.db).submit_payments(ticket.id, data.payments)  # type: ignore[arg-type]
            self.db.refresh(ticket)
        return ticket

    def update_ticket(self, ticket_id: UUID, data: TicketUpdate) -> Ticket:
        try:
            ticket = self.repo.update(ticket_id, data)
        except StaleDataError as e:
            self.db.rollback()
            raise StoreWriteError(f"Ticket {ticket_id} was modified concurrently", conflict=True) from e
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        return ticket
