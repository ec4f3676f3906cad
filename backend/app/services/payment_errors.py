"""Errors raised by payment operations.

Each error carries ``user_message``, the text shown to the agent, next to the
technical message used in logs and API responses.
"""


class PaymentError(Exception):
    user_message = "Не удалось обновить информацию о платеже"

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        if user_message is not None:
            self.user_message = user_message


class PaymentValidationError(PaymentError, ValueError):
    """Rejected before any write: nothing was stored."""


class TicketNotFoundError(PaymentError, ValueError):
    user_message = "ID билета не найден"


class StoreWriteError(PaymentError):
    """A database write failed and the transaction was rolled back."""

    def __init__(self, message: str, user_message: str | None = None, conflict: bool = False):
        super().__init__(
            message,
            user_message or f"{PaymentError.user_message}: {message}",
        )
        self.conflict = conflict
