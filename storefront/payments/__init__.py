"""
Module 'payments' (feature-first): point d'entrée public.
Réunit logique panier, livraison, client Stripe et services de checkout/webhook.
"""

from .models import CartItem, LineItem, ShippingRule, CartSummary, CheckoutSession, WebhookEvent
from .cart import Cart, validate_items, aggregate_items, to_line_item, to_line_items, to_minor_units
from .shipping import total_quantity, compute_shipping_fee, shipping_line_item, build_checkout_line_items, summarize
from .stripe_client import require_stripe, build_session_params, create_session, verify_event, parse_event
from .service import create_checkout_session, handle_event, current_shipping_rule

__all__ = [
    # models
    "CartItem",
    "LineItem",
    "ShippingRule",
    "CartSummary",
    "CheckoutSession",
    "WebhookEvent",
    # cart
    "Cart",
    "validate_items",
    "aggregate_items",
    "to_line_item",
    "to_line_items",
    "to_minor_units",
    # shipping
    "total_quantity",
    "compute_shipping_fee",
    "shipping_line_item",
    "build_checkout_line_items",
    "summarize",
    # stripe
    "require_stripe",
    "build_session_params",
    "create_session",
    "verify_event",
    "parse_event",
    # services
    "create_checkout_session",
    "handle_event",
    "current_shipping_rule",
]
