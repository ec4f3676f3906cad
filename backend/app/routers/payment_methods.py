"""Payment instrument endpoints."""

from fastapi import APIRouter

from app.models.ticket_payment import PaymentMethod
from app.schemas.ticket_payment import PaymentMethodInfo

router = APIRouter()


@router.get(
    "/",
    response_model=list[PaymentMethodInfo],
    summary="List payment methods",
)
async def list_payment_methods() -> list[PaymentMethodInfo]:
    """List the accepted payment instruments with their display labels."""
    return [PaymentMethodInfo(value=method, label=method.label) for method in PaymentMethod]
