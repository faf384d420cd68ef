"""Payment providers - one implementation per supported wallet."""

from typing import Any

from tableside_schemas import PaymentMethod

from apps.web.payments.providers.base import PaymentProvider
from apps.web.payments.providers.simulated import (
    EsewaProvider,
    KhaltiProvider,
    SimulatedProvider,
    generate_transaction_id,
)


def get_provider(method: PaymentMethod | str, **kwargs: Any) -> PaymentProvider:
    """
    Get a payment provider instance for the specified method.

    Args:
        method: The payment method to get a provider for.
        **kwargs: Additional arguments passed to the provider constructor.
            For simulated providers: delay_seconds, decline.

    Returns:
        A provider instance implementing the PaymentProvider protocol.

    Raises:
        ValueError: If the method is not supported.

    Example:
        provider = get_provider(PaymentMethod.ESEWA)
        charge = await provider.process(order)
    """
    if method == PaymentMethod.ESEWA:
        return EsewaProvider(**kwargs)
    elif method == PaymentMethod.KHALTI:
        return KhaltiProvider(**kwargs)
    else:
        supported = ", ".join([PaymentMethod.ESEWA.value, PaymentMethod.KHALTI.value])
        raise ValueError(
            f"Unsupported payment method: {method}. Supported: {supported}"
        )


__all__ = [
    "EsewaProvider",
    "KhaltiProvider",
    "PaymentProvider",
    "SimulatedProvider",
    "generate_transaction_id",
    "get_provider",
]
