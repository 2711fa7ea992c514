"""
Registre central des routers (catalogue, checkout, webhook, health).
- Le webhook n'est monté que si WEBHOOK_ENABLED; il lit lui-même le corps brut,
  aucun middleware ne parse le JSON avant lui.
"""
from fastapi import FastAPI

from storefront import config
from storefront.catalog import views as catalog_views
from storefront.payments import views as payments_views
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(catalog_views.router)
    app.include_router(payments_views.router)
    if config.WEBHOOK_ENABLED:
        app.include_router(payments_views.webhook_router)
    # Health & monitoring
    app.include_router(health_router)
