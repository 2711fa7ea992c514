"""
Cas d'usage 'payments': orchestre cart, shipping et stripe_client.
"""
import logging
from typing import Any, Dict, List, Optional

from storefront import config
from storefront.errors import PaymentProviderError
from . import stripe_client
from .models import CartItem, CheckoutSession, ShippingRule, WebhookEvent
from .shipping import build_checkout_line_items

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"

def current_shipping_rule() -> ShippingRule:
    """Règle de livraison injectée depuis la configuration."""
    return ShippingRule(
        free_threshold_qty=config.SHIPPING_FREE_THRESHOLD_QTY,
        per_unit_fee_cents=config.SHIPPING_PER_UNIT_FEE_CENTS,
    )

def create_checkout_session(
    items: List[CartItem],
    *,
    rule: Optional[ShippingRule] = None,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
    idempotency_key: Optional[str] = None,
) -> CheckoutSession:
    """
    Prépare et crée la session Stripe à partir d'un panier déjà validé.
    success_url / cancel_url: par défaut ceux de la configuration.
    """
    rule = rule or current_shipping_rule()
    line_items = build_checkout_line_items(items, rule)
    params = stripe_client.build_session_params(
        line_items=[li.to_stripe() for li in line_items],
        success_url=success_url or config.CHECKOUT_SUCCESS_URL,
        cancel_url=cancel_url or config.CHECKOUT_CANCEL_URL,
        automatic_tax=config.STRIPE_AUTOMATIC_TAX,
        collect_billing_address=config.COLLECT_BILLING_ADDRESS,
        shipping_countries=config.SHIPPING_COUNTRIES,
    )
    try:
        session = stripe_client.create_session(params, idempotency_key=idempotency_key)
        url = session.get("url")
        if not url:
            raise PaymentProviderError("Unable to create checkout session", detail="Checkout session has no URL")
    except PaymentProviderError as e:
        logger.error(
            "payments.checkout failed detail=%s items=%s line_items=%s",
            e.detail,
            [it.model_dump() for it in items],
            [li.model_dump() for li in line_items],
        )
        raise
    logger.info(
        "payments.checkout session created id=%s lines=%s qty=%s",
        session.get("id"), len(line_items), sum(it.qty for it in items),
    )
    return CheckoutSession(id=session.get("id"), url=url)

def parse_webhook_event(event: Dict[str, Any]) -> WebhookEvent:
    obj = (event.get("data") or {}).get("object") or {}
    details = obj.get("customer_details") or {}
    return WebhookEvent(
        kind=str(event.get("type") or ""),
        session_id=obj.get("id"),
        customer_email=details.get("email") or obj.get("customer_email"),
        amount_total=obj.get("amount_total"),
    )

def handle_event(event: Dict[str, Any]) -> Optional[WebhookEvent]:
    """
    Réagit à un événement déjà vérifié.
    - checkout.session.completed: journalise session, email et montant; retourne le WebhookEvent
    - autres types: acquittés mais ignorés (None)
    """
    if event.get("type") != CHECKOUT_COMPLETED:
        logger.debug("payments.webhook ignored type=%s", event.get("type"))
        return None
    completed = parse_webhook_event(event)
    logger.info(
        "payments.webhook checkout completed session_id=%s email=%s amount_total=%s",
        completed.session_id, completed.customer_email, completed.amount_total,
    )
    return completed
