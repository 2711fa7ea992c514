"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
- Aucun appel n'est rejoué automatiquement (risque de sessions en double).
- Les exceptions du SDK sont traduites en PaymentProviderError / SignatureVerificationError.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import stripe
from fastapi import Request

from storefront import config
from storefront.errors import PaymentProviderError, SignatureVerificationError

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300
_http_client_timeout: Optional[int] = None

# module storefront.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - stripe.api_key depuis STRIPE_SECRET_KEY
    - pas de retry réseau, timeout borné (STRIPE_TIMEOUT_SECONDS)
    """
    global _http_client_timeout
    stripe.api_key = config.STRIPE_SECRET_KEY
    stripe.max_network_retries = 0
    timeout = config.STRIPE_TIMEOUT_SECONDS
    if _http_client_timeout != timeout:
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)
        _http_client_timeout = timeout
    return stripe

def build_session_params(
    *,
    line_items: List[Dict[str, Any]],
    success_url: str,
    cancel_url: str,
    automatic_tax: bool = False,
    collect_billing_address: bool = False,
    shipping_countries: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Paramètres de checkout.Session.create.
    - mode "payment" (paiement unique), carte uniquement
    - options taxe/adresses activées par déploiement; avec automatic_tax,
      Stripe peut ajouter une taxe absente du total calculé localement.
    """
    params: Dict[str, Any] = {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": line_items,
        "success_url": success_url,
        "cancel_url": cancel_url,
    }
    if automatic_tax:
        params["automatic_tax"] = {"enabled": True}
    if collect_billing_address:
        params["billing_address_collection"] = "required"
    countries = [c for c in shipping_countries if c]
    if countries:
        params["shipping_address_collection"] = {"allowed_countries": countries}
    return params

def create_session(params: Dict[str, Any], *, idempotency_key: Optional[str] = None) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout.
    Retour: {"id": "cs_test_...", "url": "https://checkout.stripe.com/..."}
    Erreurs: PaymentProviderError avec le message Stripe (jamais la clé API).
    """
    require_stripe()
    options: Dict[str, Any] = {}
    if idempotency_key:
        options["idempotency_key"] = idempotency_key
    try:
        session = stripe.checkout.Session.create(**params, **options)
    except stripe.StripeError as e:
        detail = getattr(e, "user_message", None) or str(e)
        raise PaymentProviderError("Unable to create checkout session", detail=detail) from e
    # l'objet Stripe expose id/url en attributs
    return {"id": getattr(session, "id", None), "url": getattr(session, "url", None)}

def verify_event(payload: bytes, sig_header: Optional[str], secret: str) -> Dict[str, Any]:
    """
    Valide un webhook signé puis décode le JSON.
    - payload: corps brut, octet pour octet (aucun re-parsing préalable)
    - sig_header: en-tête Stripe-Signature "t=<ts>,v1=<hmac>"
    - HMAC-SHA256 de "<ts>.<payload>" avec le secret partagé, tolérance 300 s
    """
    if not sig_header:
        raise SignatureVerificationError("Webhook Error", detail="Missing Stripe-Signature header")
    try:
        text = payload.decode("utf-8")
        stripe.WebhookSignature.verify_header(text, sig_header, secret, WEBHOOK_TOLERANCE_SECONDS)
    except UnicodeDecodeError as e:
        raise SignatureVerificationError("Webhook Error", detail="Payload is not valid UTF-8") from e
    except stripe.SignatureVerificationError as e:
        raise SignatureVerificationError("Webhook Error", detail=getattr(e, "user_message", None) or str(e)) from e
    try:
        event = json.loads(text)
    except ValueError as e:
        raise SignatureVerificationError("Webhook Error", detail="Invalid payload") from e
    if not isinstance(event, dict):
        raise SignatureVerificationError("Webhook Error", detail="Invalid payload")
    return event

async def parse_event(request: Request) -> Dict[str, Any]:
    """
    Lit le body brut + en-tête Stripe-Signature et valide l'événement.
    Doit être appelé avant tout parsing JSON du corps sur cette route.
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    try:
        return verify_event(payload, sig_header, config.STRIPE_WEBHOOK_SECRET)
    except SignatureVerificationError as e:
        logger.warning("payments.webhook rejected: %s", e.detail)
        raise
