# module storefront.app
from fastapi import FastAPI

from storefront.app_setup.lifespan import lifespan as app_lifespan
from storefront.app_setup.middlewares import (
    register_security_middleware,
    register_origin_guard_middleware,
    register_basic_middlewares,
)
from storefront.app_setup.exception_handlers import register_exception_handlers
from storefront.app_setup.routes import register_routes
from storefront.app_setup.routers import register_routers

def create_app() -> FastAPI:
    """
    Crée et configure l'instance FastAPI de la boutique.
    Étapes et ordre (le dernier middleware ajouté s'exécute en premier):
      1) register_security_middleware: en-têtes de sécurité.
      2) register_origin_guard_middleware: 403 si Origin hors liste blanche.
      3) register_basic_middlewares: CORS, extérieur au garde pour traiter les preflight.
      4) register_exception_handlers: erreurs métier -> JSON / texte webhook.
      5) register_routes: / (liveness), favicon.
      6) register_routers: catalogue, checkout, webhook (si activé), health.
    Aucun middleware ne lit le corps: le webhook reçoit les octets bruts.
    """
    app = FastAPI(title="Storefront Checkout API", lifespan=app_lifespan)
    register_security_middleware(app)
    register_origin_guard_middleware(app)
    register_basic_middlewares(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app

# App globale
app = create_app()
