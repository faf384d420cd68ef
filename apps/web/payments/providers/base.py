"""Base payment provider protocol - interface for all payment providers."""

from typing import Protocol, runtime_checkable

from tableside_schemas import OrderRecord, PaymentMethod, ProviderCharge


@runtime_checkable
class PaymentProvider(Protocol):
    """
    Protocol defining the interface for payment providers.

    Methods are async so a provider round trip never blocks the caller's
    event loop.
    """

    @property
    def method(self) -> PaymentMethod:
        """The payment method this provider handles."""
        ...

    async def process(self, order: OrderRecord) -> ProviderCharge:
        """
        Charge the customer for an order.

        Args:
            order: Order being paid; total_amount is the amount charged.

        Returns:
            The accepted charge with a provider transaction id.

        Raises:
            PaymentDeclined: If the provider refuses the charge.
            PaymentError: If the provider cannot be reached.
        """
        ...
