"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn/uvicorn-workers) importe `storefront.asgi:app`.
- Toute la configuration FastAPI (routes, middlewares, CORS) est centralisée dans storefront.app.
"""

from storefront.app import app
