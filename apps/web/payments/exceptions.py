"""Payment exceptions."""


class PaymentError(Exception):
    """Error during payment processing."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class PaymentDeclined(PaymentError):
    """The provider refused the charge."""
