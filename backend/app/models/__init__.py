from app.models.consumption import Consumption
from app.models.expense import Expense
from app.models.idempotency_record import IdempotencyRecord
from app.models.notification import Notification, NotificationLevel
from app.models.prepaid_client import PrepaidClient
from app.models.ticket import PaymentStatus, ServiceType, Ticket
from app.models.ticket_payment import PAYMENT_METHOD_LABELS, PaymentMethod, TicketPayment

__all__ = [
    "Consumption",
    "Expense",
    "IdempotencyRecord",
    "Notification",
    "NotificationLevel",
    "PAYMENT_METHOD_LABELS",
    "PaymentMethod",
    "PaymentStatus",
    "PrepaidClient",
    "ServiceType",
    "Ticket",
    "TicketPayment",
]
