"""
Types du checkout: articles du panier, lignes Stripe, règle de livraison, session, événement webhook.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CURRENCY = "usd"
SHIPPING_LINE_NAME = "Shipping"


class CartItem(BaseModel):
    """
    Article du panier tel qu'envoyé par le front: {id, name, price, qty}.
    - price en unités majeures (dollars), >= 0 et fini
    - qty entier >= 1 (les chaînes numériques sont acceptées, pas les valeurs non numériques)
    Les champs d'affichage supplémentaires (img, description, ...) sont ignorés.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: Optional[str] = None
    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    qty: int = Field(ge=1)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("price", "qty", mode="before")
    @classmethod
    def _reject_bool(cls, v: Any) -> Any:
        # true/false JSON ne sont pas des montants ni des quantités
        if isinstance(v, bool):
            raise ValueError("must be a number, not a boolean")
        return v


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_name: str
    unit_amount: int = Field(ge=0)  # centimes
    quantity: int = Field(ge=1)
    currency: str = CURRENCY

    def to_stripe(self) -> Dict[str, Any]:
        """Forme attendue par checkout.Session.create (price_data inline)."""
        return {
            "price_data": {
                "currency": self.currency,
                "product_data": {"name": self.product_name},
                "unit_amount": self.unit_amount,
            },
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class ShippingRule:
    free_threshold_qty: int
    per_unit_fee_cents: int


@dataclass(frozen=True)
class CartSummary:
    total_qty: int
    subtotal_cents: int
    shipping_cents: int

    @property
    def total_cents(self) -> int:
        return self.subtotal_cents + self.shipping_cents


class CheckoutSession(BaseModel):
    id: Optional[str] = None
    url: str


class WebhookEvent(BaseModel):
    kind: str
    session_id: Optional[str] = None
    customer_email: Optional[str] = None
    amount_total: Optional[int] = None
