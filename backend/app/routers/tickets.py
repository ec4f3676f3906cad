"""Ticket API endpoints: sales, payment submission and balances."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.idempotency import IdempotencyResult, check_idempotency, record_idempotency_response
from app.models.ticket import PaymentStatus, ServiceType, Ticket
from app.models.ticket_payment import TicketPayment
from app.repositories.ticket_payment_repository import TicketPaymentRepository
from app.repositories.ticket_repository import TicketRepository
from app.schemas.ticket import (
    AgentPerformance,
    ReconcileResponse,
    TicketCreate,
    TicketResponse,
    TicketSummaryResponse,
    TicketUpdate,
    TicketView,
)
from app.schemas.ticket_payment import (
    PaymentPreviewRequest,
    PaymentPreviewResponse,
    PaymentSubmission,
    PaymentSubmissionResponse,
    TicketPaymentResponse,
)
from app.services.payment_entry_aggregator import PaymentEntryAggregator
from app.services.payment_errors import (
    PaymentError,
    PaymentValidationError,
    StoreWriteError,
    TicketNotFoundError,
)
from app.services.ticket_payment_service import TicketPaymentService
from app.services.ticket_query_service import (
    TicketQueryService,
    filter_views,
    ticket_list_cache,
)
from app.services.ticket_service import TicketService

router = APIRouter()


def _http_error(e: PaymentError) -> HTTPException:
    if isinstance(e, TicketNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PaymentValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, StoreWriteError) and e.conflict:
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@router.post(
    "/",
    response_model=TicketResponse,
    status_code=201,
    summary="Create ticket",
    responses={
        400: {"description": "Invalid initial payment"},
        422: {"description": "Validation error"},
    },
)
async def create_ticket(
    data: TicketCreate,
    db: Session = Depends(get_db),
) -> Ticket:
    """Record a sale, optionally with payments taken at the counter."""
    service = TicketService(db)
    try:
        return service.create_ticket(data)
    except PaymentError as e:
        raise _http_error(e) from None


@router.get(
    "/",
    response_model=list[TicketView],
    summary="List tickets",
)
async def list_tickets(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    payment_status: PaymentStatus | None = None,
    agent_id: str | None = None,
    service_type: ServiceType | None = None,
    overpaid: bool | None = None,
) -> list[TicketView]:
    """List tickets with their payments, newest first."""
    views = filter_views(
        ticket_list_cache.get(),
        payment_status=payment_status,
        agent_id=agent_id,
        service_type=service_type,
        overpaid=overpaid,
    )
    response.headers["X-Total-Count"] = str(len(views))
    return views[skip : skip + limit]


@router.get(
    "/summary",
    response_model=TicketSummaryResponse,
    summary="Get payment summary",
)
async def get_summary(
    db: Session = Depends(get_db),
) -> TicketSummaryResponse:
    """Unpaid balance totals and money received per payment method."""
    return TicketQueryService(db).summary()


@router.get(
    "/agent_performance",
    response_model=list[AgentPerformance],
    summary="Get sales per agent",
)
async def get_agent_performance(
    days: int | None = Query(default=None, ge=1, le=3660),
    db: Session = Depends(get_db),
) -> list[AgentPerformance]:
    """Ticket counts and revenue per agent and service type, highest revenue first.

    ``days`` limits the report to tickets created in the last N days.
    """
    return TicketQueryService(db).agent_performance(days=days)


@router.get(
    "/{ticket_id}",
    response_model=TicketView,
    summary="Get ticket",
    responses={404: {"description": "Ticket not found"}},
)
async def get_ticket(
    ticket_id: UUID,
    db: Session = Depends(get_db),
) -> TicketView:
    """Get a ticket with its payments and remaining balance."""
    try:
        return TicketQueryService(db).get_view(ticket_id)
    except PaymentError as e:
        raise _http_error(e) from None


@router.put(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Update ticket",
    responses={
        404: {"description": "Ticket not found"},
        409: {"description": "Ticket was modified concurrently"},
        422: {"description": "Validation error"},
    },
)
async def update_ticket(
    ticket_id: UUID,
    data: TicketUpdate,
    db: Session = Depends(get_db),
) -> Ticket:
    """Update descriptive ticket fields. Price and payment state cannot be edited."""
    try:
        return TicketService(db).update_ticket(ticket_id, data)
    except PaymentError as e:
        raise _http_error(e) from None


@router.get(
    "/{ticket_id}/payments",
    response_model=list[TicketPaymentResponse],
    summary="List ticket payments",
    responses={404: {"description": "Ticket not found"}},
)
async def list_ticket_payments(
    ticket_id: UUID,
    db: Session = Depends(get_db),
) -> list[TicketPayment]:
    """List the ledger entries of a ticket, oldest first."""
    if not TicketRepository(db).get_by_id(ticket_id):
        raise HTTPException(status_code=404, detail="Ticket not found")
    return TicketPaymentRepository(db).get_by_ticket_id(ticket_id)


@router.post(
    "/{ticket_id}/payments",
    response_model=PaymentSubmissionResponse,
    summary="Submit payments",
    responses={
        400: {"description": "No payment amount entered or invalid amount"},
        404: {"description": "Ticket not found"},
        409: {"description": "Ticket kept changing concurrently; nothing was saved"},
        422: {"description": "Validation error"},
    },
)
async def submit_payments(
    ticket_id: UUID,
    data: PaymentSubmission,
    request: Request,
    db: Session = Depends(get_db),
) -> PaymentSubmissionResponse | JSONResponse:
    """Record one or more payment entries against a ticket.

    Send an ``Idempotency-Key`` header to make retries safe; without it every
    call records its payments again.
    """
    idempotency = check_idempotency(request, db)
    if isinstance(idempotency, JSONResponse):
        return idempotency

    service = TicketPaymentService(db)
    try:
        result = service.submit_payments(ticket_id, data.entries, price=data.price)
    except PaymentError as e:
        raise _http_error(e) from None

    response = PaymentSubmissionResponse(
        ticket_id=result.ticket_id,
        payment_status=result.payment_status,
        price=result.price,
        paid_amount=result.paid_amount,
        remaining=result.remaining,
        payment_date=result.payment_date,
        entries=result.entries,
    )
    if isinstance(idempotency, IdempotencyResult):
        record_idempotency_response(db, idempotency.key, 200, response.model_dump(mode="json"))
    return response


@router.post(
    "/{ticket_id}/payment_preview",
    response_model=PaymentPreviewResponse,
    summary="Preview a split payment",
    responses={
        404: {"description": "Ticket not found"},
        422: {"description": "Validation error"},
    },
)
async def preview_payment(
    ticket_id: UUID,
    data: PaymentPreviewRequest,
    db: Session = Depends(get_db),
) -> PaymentPreviewResponse:
    """Normalize the four payment form fields and compute the remaining balance.

    Nothing is stored.
    """
    ticket = TicketRepository(db).get_by_id(ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")

    aggregator = PaymentEntryAggregator.from_fields(
        ticket.price,  # type: ignore[arg-type]
        TicketPaymentRepository(db).get_by_ticket_id(ticket_id),
        **data.model_dump(),
    )
    summary = aggregator.summary()
    return PaymentPreviewResponse(
        entries=summary.entries,
        price=summary.price,
        existing_total=summary.existing_total,
        current_entry_total=summary.current_entry_total,
        remaining=summary.remaining,
        projected_status=summary.projected_status,
    )


@router.post(
    "/{ticket_id}/reconcile",
    response_model=ReconcileResponse,
    summary="Reconcile ticket with its ledger",
    responses={
        404: {"description": "Ticket not found"},
        409: {"description": "Ticket was modified concurrently"},
    },
)
async def reconcile_ticket(
    ticket_id: UUID,
    db: Session = Depends(get_db),
) -> ReconcileResponse:
    """Recompute paid amount and status from the ticket's payments."""
    try:
        result = TicketPaymentService(db).reconcile_paid_amount(ticket_id)
    except PaymentError as e:
        raise _http_error(e) from None
    return ReconcileResponse(
        ticket_id=result.ticket_id,
        previous_paid_amount=result.previous_paid_amount,
        paid_amount=result.paid_amount,
        payment_status=result.payment_status,
        changed=result.changed,
    )
