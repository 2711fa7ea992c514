import logging

from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from storefront.errors import InvalidCartError
from storefront.utils.rate_limit import optional_rate_limit
from storefront.payments import cart as payments_cart
from storefront.payments import stripe_client
from storefront.payments import service as payments_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Checkout"])
webhook_router = APIRouter(tags=["Webhooks"])

# module storefront.payments.views
@router.post("/create-checkout-session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_checkout_session(request: Request):
    """
    Crée une session Checkout Stripe pour le panier envoyé par le front.
    - Entrée JSON: { "items": [ { "id": "<produit>", "name": "...", "price": 8.25, "qty": 2 }, ... ] }
    - En-tête optionnel Idempotency-Key transmis à Stripe
    - Étapes:
      1) Valider le panier (payments_cart.validate_items), sans jamais appeler Stripe si invalide
      2) Construire les lignes + livraison et créer la session (payments_service)
      3) Renvoyer {url} pour la redirection
    - Erreurs: 400 panier invalide, 500 échec Stripe
    """
    try:
        payload = await request.json()
    except ValueError:
        raise InvalidCartError("Invalid JSON body")
    try:
        items = payments_cart.validate_items(payload)
    except InvalidCartError as e:
        logger.warning("payments.checkout rejected cart error=%s payload=%s", e.message, payload)
        raise
    idempotency_key = (request.headers.get("idempotency-key") or "").strip() or None
    # appel Stripe bloquant: exécuté hors de la boucle événementielle
    session = await run_in_threadpool(
        payments_service.create_checkout_session, items, idempotency_key=idempotency_key
    )
    return JSONResponse({"url": session.url})

@webhook_router.post("/webhook", include_in_schema=False)
async def stripe_webhook(request: Request):
    """
    Webhook Stripe: lit le corps brut, vérifie la signature, puis traite l'événement.
    - checkout.session.completed: journalisé (session, email, montant)
    - autres types: acquittés et ignorés
    - Erreurs: 400 texte "Webhook Error: ..." si signature absente/invalide
    """
    event = await stripe_client.parse_event(request)
    payments_service.handle_event(event)
    return JSONResponse({"received": True})
