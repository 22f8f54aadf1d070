# =============================================================================
# core/models/payment.py - Payment Schemas
# =============================================================================

from pydantic import Field, field_validator

from core.models.business import CamelModel


class PaymentIntentRequest(CamelModel):
    """
    Request body for POST /api/payments/create-intent.

    `amount` is in major units (dollars); it is converted to cents before it
    reaches Stripe.
    """

    amount: float = Field(..., gt=0, description="Amount in major currency units")
    currency: str = Field(default="usd", min_length=3, max_length=3)
    customer_id: str | None = None
    rental_id: str | None = None
    business_id: str = Field(..., min_length=1)

    @field_validator("currency")
    @classmethod
    def lower_currency(cls, value: str) -> str:
        return value.lower()

    @property
    def amount_cents(self) -> int:
        """Amount in the smallest currency unit."""
        return round(self.amount * 100)

    def stripe_metadata(self) -> dict[str, str]:
        """Metadata attached to the PaymentIntent."""
        return {
            "customerId": self.customer_id or "",
            "rentalId": self.rental_id or "",
            "businessId": self.business_id,
        }
