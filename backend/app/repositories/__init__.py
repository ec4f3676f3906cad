from app.repositories.consumption_repository import ConsumptionRepository
from app.repositories.expense_repository import ExpenseRepository
from app.repositories.idempotency_repository import IdempotencyRepository
from app.repositories.notification_repository import NotificationRepository
from app.repositories.prepaid_client_repository import PrepaidClientRepository
from app.repositories.ticket_payment_repository import TicketPaymentRepository
from app.repositories.ticket_repository import TicketRepository

__all__ = [
    "ConsumptionRepository",
    "ExpenseRepository",
    "IdempotencyRepository",
    "NotificationRepository",
    "PrepaidClientRepository",
    "TicketPaymentRepository",
    "TicketRepository",
]
