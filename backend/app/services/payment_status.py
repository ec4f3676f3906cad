"""Payment status rule shared by the submission service and the payment form preview."""

from decimal import Decimal

from app.core.config import settings
from app.models.ticket import PaymentStatus

CENT = Decimal("0.01")


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def derive_payment_status(
    price: Decimal | int | float | str,
    paid_amount: Decimal | int | float | str,
    tolerance: Decimal | None = None,
) -> PaymentStatus:
    """Return PAID when ``paid_amount`` is within ``tolerance`` of ``price``.

    The tolerance is absolute, in currency units. There is no overpaid state:
    a ticket overpaid by more than the tolerance stays PENDING until
    reconciled by hand.
    """
    price = _to_decimal(price)
    paid_amount = _to_decimal(paid_amount)
    if tolerance is None:
        tolerance = settings.PAYMENT_TOLERANCE

    if abs(paid_amount - price) < tolerance:
        return PaymentStatus.PAID
    return PaymentStatus.PENDING


def remaining_amount(
    price: Decimal | int | float | str,
    paid_amount: Decimal | int | float | str,
) -> Decimal:
    """Amount still owed. Negative when overpaid."""
    return _to_decimal(price) - _to_decimal(paid_amount)


def has_sub_cent_digits(amount: Decimal | int | float | str) -> bool:
    """True when ``amount`` cannot be stored in a two-decimal money column."""
    amount = _to_decimal(amount)
    return amount != amount.quantize(CENT)
