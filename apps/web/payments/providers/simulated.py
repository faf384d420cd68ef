"""
Simulated payment providers.

No money moves. A charge waits PAYMENT_SIMULATED_DELAY_SECONDS, then is
accepted with a fabricated transaction id of the form
{PROVIDER}-{epoch milliseconds}-{9 base36 characters}.
"""

import asyncio
import logging
import secrets
import string
import time
from datetime import UTC, datetime

from django.conf import settings

from tableside_schemas import OrderRecord, PaymentMethod, ProviderCharge

from apps.web.payments.exceptions import PaymentDeclined

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_lowercase
TRANSACTION_SUFFIX_LENGTH = 9


def generate_transaction_id(prefix: str) -> str:
    """Build a display-only transaction id such as ESEWA-1718000000000-k3j9x0a2b."""
    millis = int(time.time() * 1000)
    suffix = "".join(
        secrets.choice(BASE36_ALPHABET) for _ in range(TRANSACTION_SUFFIX_LENGTH)
    )
    return f"{prefix}-{millis}-{suffix}"


class SimulatedProvider:
    """
    Payment provider that accepts every charge after a fixed delay
    unless configured to decline.

    Usage:
        provider = EsewaProvider(delay_seconds=0)
        charge = await provider.process(order)

        # Force a declined charge
        provider = KhaltiProvider(decline=True)
    """

    method: PaymentMethod
    prefix: str

    def __init__(
        self, delay_seconds: float | None = None, decline: bool = False
    ) -> None:
        """
        Initialize simulated provider.

        Args:
            delay_seconds: Simulated processing time. Defaults to
                settings.PAYMENT_SIMULATED_DELAY_SECONDS.
            decline: If True, every charge is declined.
        """
        self._delay_seconds = (
            delay_seconds
            if delay_seconds is not None
            else settings.PAYMENT_SIMULATED_DELAY_SECONDS
        )
        self._decline = decline

    async def process(self, order: OrderRecord) -> ProviderCharge:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)

        if self._decline:
            logger.info(
                "Simulated %s charge declined for order %s", self.prefix, order.id
            )
            raise PaymentDeclined("Payment was declined", code="declined")

        charge = ProviderCharge(
            provider=self.method,
            transaction_id=generate_transaction_id(self.prefix),
            processed_at=datetime.now(UTC),
        )
        logger.info(
            "Simulated %s charge of %s accepted for order %s",
            self.prefix,
            order.total_amount,
            order.id,
        )
        return charge


class EsewaProvider(SimulatedProvider):
    """Simulated eSewa wallet."""

    method = PaymentMethod.ESEWA
    prefix = "ESEWA"


class KhaltiProvider(SimulatedProvider):
    """Simulated Khalti wallet."""

    method = PaymentMethod.KHALTI
    prefix = "KHALTI"
