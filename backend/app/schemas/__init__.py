from app.schemas.consumption import (
    ConsumptionCreate,
    ConsumptionResponse,
    ConsumptionTotalResponse,
    ConsumptionUpdate,
)
from app.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseTotalResponse,
    ExpenseUpdate,
)
from app.schemas.notification import NotificationCountResponse, NotificationResponse
from app.schemas.prepaid_client import (
    PrepaidClientCreate,
    PrepaidClientResponse,
    PrepaidTotalResponse,
)
from app.schemas.ticket import (
    AgentPerformance,
    ReconcileResponse,
    ServiceTypeStats,
    TicketCreate,
    TicketResponse,
    TicketSummaryResponse,
    TicketUpdate,
    TicketView,
    UnpaidSummary,
)
from app.schemas.ticket_payment import (
    PaymentEntry,
    PaymentMethodInfo,
    PaymentMethodTotal,
    PaymentPreviewRequest,
    PaymentPreviewResponse,
    PaymentSubmission,
    PaymentSubmissionResponse,
    TicketPaymentResponse,
)

__all__ = [
    "AgentPerformance",
    "ConsumptionCreate",
    "ConsumptionResponse",
    "ConsumptionTotalResponse",
    "ConsumptionUpdate",
    "ExpenseCreate",
    "ExpenseResponse",
    "ExpenseTotalResponse",
    "ExpenseUpdate",
    "NotificationCountResponse",
    "NotificationResponse",
    "PaymentEntry",
    "PaymentMethodInfo",
    "PaymentMethodTotal",
    "PaymentPreviewRequest",
    "PaymentPreviewResponse",
    "PaymentSubmission",
    "PaymentSubmissionResponse",
    "PrepaidClientCreate",
    "PrepaidClientResponse",
    "PrepaidTotalResponse",
    "ReconcileResponse",
    "ServiceTypeStats",
    "TicketCreate",
    "TicketPaymentResponse",
    "TicketResponse",
    "TicketSummaryResponse",
    "TicketUpdate",
    "TicketView",
    "UnpaidSummary",
]
