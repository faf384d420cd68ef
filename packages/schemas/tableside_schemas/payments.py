"""Payment schemas - results of the simulated provider round trip."""

from datetime import datetime

from pydantic import BaseModel, Field

from tableside_schemas.orders import PaymentMethod


class ProviderCharge(BaseModel):
    """What a provider returns for an accepted payment."""

    provider: PaymentMethod
    transaction_id: str = Field(description="Display-only reference, not verified")
    processed_at: datetime


class PaymentResult(BaseModel):
    """Outcome of processing payment for an order."""

    success: bool
    message: str
    transaction_id: str | None = None
