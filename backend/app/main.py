import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from app.core.config import settings
from app.routers import (
    consumptions,
    expenses,
    notifications,
    payment_methods,
    prepaid_clients,
    tickets,
)
from app.services import change_feed  # noqa: F401  registers ticket change listeners

logging.getLogger("app").setLevel(settings.LOG_LEVEL.upper())

OPENAPI_TAGS = [
    {"name": "Tickets", "description": "Record sales, submit payments and track balances."},
    {"name": "Payment Methods", "description": "Accepted payment instruments and their labels."},
    {"name": "Prepaid Clients", "description": "Money received from clients ahead of a sale."},
    {"name": "Expenses", "description": "Money paid out by the agency."},
    {"name": "Consumptions", "description": "Running costs paid from the till."},
    {"name": "Notifications", "description": "Success and error messages produced by payment actions."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Travel agency back office API. "
        "Record tickets and tours, split payments across cash, card, terminal "
        "and transfer, and keep each ticket's balance reconciled with its payment ledger."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "Idempotency-Replayed"],
)


@app.middleware("http")
async def options_handler(request: Request, call_next):  # type: ignore[no-untyped-def]
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "*")
        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": "*",
                "Access-Control-Allow-Headers": "*",
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Max-Age": "86400",
            },
        )
    return await call_next(request)


app.include_router(tickets.router, prefix="/v1/tickets", tags=["Tickets"])
app.include_router(
    payment_methods.router,
    prefix="/v1/payment_methods",
    tags=["Payment Methods"],
)
app.include_router(
    prepaid_clients.router,
    prefix="/v1/prepaid_clients",
    tags=["Prepaid Clients"],
)
app.include_router(expenses.router, prefix="/v1/expenses", tags=["Expenses"])
app.include_router(
    consumptions.router,
    prefix="/v1/consumptions",
    tags=["Consumptions"],
)
app.include_router(
    notifications.router,
    prefix="/v1/notifications",
    tags=["Notifications"],
)


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "currency": settings.CURRENCY,
        "status": "running",
    }
