"""
Frais de livraison (logique pure, pas de Stripe).
Fonction en escalier: gratuite dès free_threshold_qty articles, sinon qty * frais unitaire.
"""
from typing import Iterable, List, Optional

from .models import CartItem, CartSummary, LineItem, ShippingRule, SHIPPING_LINE_NAME
from .cart import to_line_items, subtotal_cents

# module storefront.payments.shipping
def total_quantity(items: Iterable[CartItem]) -> int:
    return sum(item.qty for item in items)

def compute_shipping_fee(total_qty: int, rule: ShippingRule) -> int:
    """
    Frais en centimes pour une quantité totale.
    - 0 si panier vide ou si le seuil de gratuité est atteint (le seuil annule tout, pas de prorata)
    - sinon total_qty * per_unit_fee_cents
    """
    if total_qty <= 0 or total_qty >= rule.free_threshold_qty:
        return 0
    return total_qty * rule.per_unit_fee_cents

def shipping_line_item(fee_cents: int) -> Optional[LineItem]:
    """Ligne synthétique "Shipping" (quantité 1), ou None si les frais sont nuls."""
    if fee_cents <= 0:
        return None
    return LineItem(product_name=SHIPPING_LINE_NAME, unit_amount=fee_cents, quantity=1)

def build_checkout_line_items(items: List[CartItem], rule: ShippingRule) -> List[LineItem]:
    """
    Lignes envoyées à Stripe: articles du panier puis, si besoin, une seule ligne de livraison.
    Stripe n'a pas de champ de frais de port à ce niveau d'intégration.
    """
    line_items = to_line_items(items)
    shipping = shipping_line_item(compute_shipping_fee(total_quantity(items), rule))
    if shipping is not None:
        line_items.append(shipping)
    return line_items

def summarize(items: List[CartItem], rule: ShippingRule) -> CartSummary:
    """Récapitulatif affiché avant paiement (hors taxes calculées par Stripe)."""
    total_qty = total_quantity(items)
    return CartSummary(
        total_qty=total_qty,
        subtotal_cents=subtotal_cents(items),
        shipping_cents=compute_shipping_fee(total_qty, rule),
    )
