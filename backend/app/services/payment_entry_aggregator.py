"""Multi-instrument payment form state.

An agent may split one payment across four fields (cash, card, terminal,
transfer). The aggregator turns the live field values into the normalized
entry list accepted by ``TicketPaymentService.submit_payments`` and keeps the
running totals shown next to the form.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from app.models.ticket import PaymentStatus
from app.models.ticket_payment import PaymentMethod
from app.schemas.ticket_payment import PaymentEntry
from app.services.payment_errors import PaymentValidationError
from app.services.payment_status import (
    derive_payment_status,
    has_sub_cent_digits,
    remaining_amount,
)

# Field order is the order of the emitted entries.
FIELD_METHODS: tuple[tuple[str, PaymentMethod], ...] = (
    ("cash_amount", PaymentMethod.CASH),
    ("card_amount", PaymentMethod.BANK_TRANSFER),
    ("terminal_amount", PaymentMethod.TERMINAL),
    ("transfer_amount", PaymentMethod.VISA),
)


@dataclass
class PaymentFormSummary:
    entries: list[PaymentEntry]
    price: Decimal
    existing_total: Decimal
    current_entry_total: Decimal
    remaining: Decimal
    projected_status: PaymentStatus


def _amount_of(payment: Any) -> Decimal:
    amount = getattr(payment, "amount", payment)
    return Decimal(str(amount))


class PaymentEntryAggregator:
    """Form state for one payment dialog.

    ``on_change`` receives the entry list after every field change. The
    aggregator never submits anything and never blocks on ``remaining``;
    whether a partial payment is acceptable is the caller's decision.
    """

    def __init__(
        self,
        price: Decimal | int | float | str,
        existing_payments: Iterable[Any] = (),
        on_change: Callable[[list[PaymentEntry]], None] | None = None,
    ):
        self.price = Decimal(str(price))
        self.existing_total = sum(
            (_amount_of(p) for p in existing_payments),
            Decimal("0"),
        )
        self._on_change = on_change
        self._values: dict[str, Decimal | None] = {name: None for name, _ in FIELD_METHODS}

    @classmethod
    def from_fields(
        cls,
        price: Decimal | int | float | str,
        existing_payments: Iterable[Any] = (),
        **fields: Decimal | int | float | str | None,
    ) -> "PaymentEntryAggregator":
        """Build an aggregator with the given field values already entered."""
        aggregator = cls(price, existing_payments)
        for name, value in fields.items():
            aggregator.set_amount(name, value)
        return aggregator

    def set_amount(self, field: str, value: Decimal | int | float | str | None) -> list[PaymentEntry]:
        """Set one field (None or "" clears it) and emit the new entry list."""
        if field not in self._values:
            raise ValueError(f"Unknown payment field '{field}'")

        if value is None or value == "":
            amount = None
        else:
            amount = Decimal(str(value))
            if amount < 0:
                raise PaymentValidationError(
                    f"{field} cannot be negative",
                    user_message="Сумма не может быть отрицательной",
                )
            if has_sub_cent_digits(amount):
                raise PaymentValidationError(
                    f"{field} has more than two decimal places",
                    user_message="Сумма может содержать не более двух знаков после запятой",
                )

        self._values[field] = amount
        entries = self.entries()
        if self._on_change is not None:
            self._on_change(entries)
        return entries

    def clear(self) -> None:
        for name in self._values:
            self._values[name] = None
        if self._on_change is not None:
            self._on_change([])

    def entries(self) -> list[PaymentEntry]:
        """One entry per field currently greater than zero, in field order."""
        entries = []
        for name, method in FIELD_METHODS:
            amount = self._values[name]
            if amount is not None and amount > 0:
                entries.append(PaymentEntry(amount=amount, payment_method=method))
        return entries

    @property
    def current_entry_total(self) -> Decimal:
        return sum((v for v in self._values.values() if v is not None), Decimal("0"))

    @property
    def remaining(self) -> Decimal:
        return remaining_amount(self.price, self.existing_total + self.current_entry_total)

    @property
    def projected_status(self) -> PaymentStatus:
        return derive_payment_status(self.price, self.existing_total + self.current_entry_total)

    def summary(self) -> PaymentFormSummary:
        return PaymentFormSummary(
            entries=self.entries(),
            price=self.price,
            existing_total=self.existing_total,
            current_entry_total=self.current_entry_total,
            remaining=self.remaining,
            projected_status=self.projected_status,
        )
