"""
Order Service Event Models

Pydantic models for notifications consumed by order service
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PaidOrderEvent(BaseModel):
    """Payment service notification that an order's charge succeeded"""
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("orderId", "order_id")
    )
    # stripeChargeId is the payment service's own name for the charge
    external_charge_id: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("externalChargeId", "stripeChargeId", "external_charge_id")
    )
    receipt_url: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("receiptUrl", "receipt_url")
    )
