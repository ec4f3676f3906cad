"""Ticket payment service: applies payment entries to a ticket's ledger and status."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import settings
from app.models.shared import utc_now
from app.models.ticket import PaymentStatus, Ticket
from app.models.ticket_payment import PaymentMethod
from app.repositories.ticket_payment_repository import TicketPaymentRepository
from app.repositories.ticket_repository import TicketRepository
from app.schemas.ticket_payment import PaymentEntry
from app.services.notification_service import NotificationService
from app.services.payment_errors import (
    PaymentError,
    PaymentValidationError,
    StoreWriteError,
    TicketNotFoundError,
)
from app.services.payment_status import (
    derive_payment_status,
    has_sub_cent_digits,
    remaining_amount,
)

logger = logging.getLogger(__name__)


@dataclass
class PaymentSubmissionResult:
    """Outcome of one successful payment submission."""

    ticket_id: UUID
    payment_status: PaymentStatus
    price: Decimal
    paid_amount: Decimal
    remaining: Decimal
    payment_date: datetime | None
    entries: list[PaymentEntry]


@dataclass
class ReconcileResult:
    ticket_id: UUID
    previous_paid_amount: Decimal
    paid_amount: Decimal
    payment_status: PaymentStatus
    changed: bool


def format_amount(amount: Decimal) -> str:
    """Render an amount the way agents read it: ``1,500`` or ``1,500.50``."""
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


class TicketPaymentService:
    """Service for ticket payment business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.ticket_repo = TicketRepository(db)
        self.payment_repo = TicketPaymentRepository(db)
        self.notifications = NotificationService(db)

    def submit_payments(
        self,
        ticket_id: UUID | None,
        entries: Sequence[PaymentEntry],
        price: Decimal | None = None,
    ) -> PaymentSubmissionResult:
        """Append payment entries to a ticket's ledger and recompute its status.

        Ledger inserts and the ticket update run in one transaction. The
        ticket update is version-checked: if another submission changed the
        ticket after it was read, the whole transaction is rolled back and
        retried from a fresh read, so concurrent payments are never lost.

        The operation is not idempotent: submitting the same entries twice
        records them twice.

        ``price`` is the price the caller displayed; the stored price is
        used for the status either way.
        """
        try:
            self._validate(ticket_id, entries)
            result = self._submit_with_retry(ticket_id, entries, price)  # type: ignore[arg-type]
        except PaymentError as e:
            self.notifications.error(
                "Ошибка",
                e.user_message,
                resource_type="ticket",
                resource_id=ticket_id,
            )
            raise

        if result.payment_status == PaymentStatus.PAID:
            self.notifications.success(
                "Платеж завершен",
                "Билет отмечен как полностью оплаченный",
                resource_type="ticket",
                resource_id=result.ticket_id,
            )
        else:
            self.notifications.success(
                "Частичная оплата сохранена",
                f"Остаток к оплате: {format_amount(result.remaining)} {settings.CURRENCY}",
                resource_type="ticket",
                resource_id=result.ticket_id,
            )
        return result

    def _validate(self, ticket_id: UUID | None, entries: Sequence[PaymentEntry]) -> None:
        if not ticket_id:
            raise PaymentValidationError("Ticket id is required", user_message="ID билета не найден")
        if not entries:
            raise PaymentValidationError(
                "No payment amount entered",
                user_message="Введите хотя бы одну сумму оплаты",
            )
        for entry in entries:
            if entry.amount is None or Decimal(str(entry.amount)) <= 0:
                raise PaymentValidationError(
                    f"Payment amount must be positive, got {entry.amount}",
                    user_message="Сумма оплаты должна быть больше нуля",
                )
            if has_sub_cent_digits(entry.amount):
                raise PaymentValidationError(
                    f"Payment amount {entry.amount} has more than two decimal places",
                    user_message="Сумма может содержать не более двух знаков после запятой",
                )

    def _submit_with_retry(
        self,
        ticket_id: UUID,
        entries: Sequence[PaymentEntry],
        price: Decimal | None,
    ) -> PaymentSubmissionResult:
        attempts = max(1, settings.PAYMENT_RETRY_ATTEMPTS)
        for attempt in range(1, attempts + 1):
            try:
                result = self._apply(ticket_id, entries, price)
                self.db.commit()
                return result
            except StaleDataError:
                self.db.rollback()
                logger.warning(
                    "Ticket %s changed during payment submission, retrying (attempt %d/%d)",
                    ticket_id,
                    attempt,
                    attempts,
                )
            except TicketNotFoundError:
                self.db.rollback()
                raise
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception("Payment submission for ticket %s failed", ticket_id)
                raise StoreWriteError(str(e)) from e

        raise StoreWriteError(
            f"Ticket {ticket_id} was modified concurrently {attempts} times, payment not saved",
            conflict=True,
        )

    def _apply(
        self,
        ticket_id: UUID,
        entries: Sequence[PaymentEntry],
        price: Decimal | None,
    ) -> PaymentSubmissionResult:
        """One attempt. Writes are flushed, not committed."""
        ticket = self.ticket_repo.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")

        stored_price = Decimal(str(ticket.price))
        if price is not None and Decimal(str(price)) != stored_price:
            logger.warning(
                "Ticket %s submitted with price %s but stored price is %s; using stored price",
                ticket_id,
                price,
                stored_price,
            )

        current_paid = Decimal(str(ticket.paid_amount or 0))
        recorded: list[PaymentEntry] = []
        added = Decimal("0")
        for entry in entries:
            method = PaymentMethod.coerce(entry.payment_method)
            amount = Decimal(str(entry.amount))
            self.payment_repo.add(ticket.id, amount, method)  # type: ignore[arg-type]
            recorded.append(PaymentEntry(amount=amount, payment_method=method))
            added += amount

        new_paid = current_paid + added
        status = derive_payment_status(stored_price, new_paid)
        payment_date = self._payment_date_for(ticket, status)
        self.ticket_repo.apply_payment_totals(ticket, new_paid, status, payment_date)

        logger.info(
            "Recorded %d payment(s) totalling %s for ticket %s: paid %s of %s (%s)",
            len(recorded),
            added,
            ticket_id,
            new_paid,
            stored_price,
            status.value,
        )
        return PaymentSubmissionResult(
            ticket_id=ticket_id,
            payment_status=status,
            price=stored_price,
            paid_amount=new_paid,
            remaining=remaining_amount(stored_price, new_paid),
            payment_date=payment_date,
            entries=recorded,
        )

    @staticmethod
    def _payment_date_for(ticket: Ticket, status: PaymentStatus) -> datetime | None:
        if status != PaymentStatus.PAID:
            return None
        # Keep the date of the first transition to paid.
        if ticket.payment_status == PaymentStatus.PAID.value and ticket.payment_date is not None:
            return ticket.payment_date  # type: ignore[return-value]
        return utc_now()

    def reconcile_paid_amount(self, ticket_id: UUID) -> ReconcileResult:
        """Recompute a ticket's paid amount and status from its ledger.

        Repairs tickets whose stored totals drifted from the ledger, e.g.
        rows written by clients that updated the ticket outside a transaction.
        """
        ticket = self.ticket_repo.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")

        price = Decimal(str(ticket.price))
        previous = Decimal(str(ticket.paid_amount or 0))
        ledger_total = self.payment_repo.sum_for_ticket(ticket_id)
        status = derive_payment_status(price, ledger_total)
        changed = previous != ledger_total or ticket.payment_status != status.value

        if changed:
            try:
                self.ticket_repo.apply_payment_totals(
                    ticket, ledger_total, status, self._payment_date_for(ticket, status)
                )
                self.db.commit()
            except StaleDataError as e:
                self.db.rollback()
                raise StoreWriteError(
                    f"Ticket {ticket_id} changed during reconciliation", conflict=True
                ) from e
            except SQLAlchemyError as e:
                self.db.rollback()
                raise StoreWriteError(str(e)) from e
            logger.info(
                "Reconciled ticket %s: paid amount %s -> %s (%s)",
                ticket_id,
                previous,
                ledger_total,
                status.value,
            )

        return ReconcileResult(
            ticket_id=ticket_id,
            previous_paid_amount=previous,
            paid_amount=ledger_total,
            payment_status=status,
            changed=changed,
        )

    def reconcile_all(self) -> list[UUID]:
        """Reconcile every ticket whose stored totals disagree with its ledger.

        Returns the IDs of the tickets that were repaired.
        """
        ledger_totals = self.payment_repo.sums_by_ticket()
        drifted = []
        for ticket in self.db.query(Ticket).all():
            expected = ledger_totals.get(ticket.id, Decimal("0"))  # type: ignore[call-overload]
            status = derive_payment_status(Decimal(str(ticket.price)), expected)
            if Decimal(str(ticket.paid_amount or 0)) != expected or ticket.payment_status != status.value:
                drifted.append(ticket.id)

        repaired = []
        for ticket_id in drifted:
            try:
                if self.reconcile_paid_amount(ticket_id).changed:  # type: ignore[arg-type]
                    repaired.append(ticket_id)
            except StoreWriteError:
                logger.warning("Could not reconcile ticket %s, will retry on next run", ticket_id)
        return repaired  # type: ignore[return-value]
