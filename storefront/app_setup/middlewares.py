from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from storefront import config

# Appels serveur à serveur (Stripe): pas d'Origin, pas de liste blanche
ORIGIN_EXEMPT_PATHS = {
    "/webhook",
}

"""
Middlewares transverses de l'application.
- register_origin_guard_middleware: rejette toute Origin hors liste blanche (403).
- register_basic_middlewares: CORS (liste blanche des fronts de la boutique).
- register_security_middleware: en-têtes de sécurité.
Notes:
- L'ordre d'ajout est important: le dernier ajouté s'exécute en premier.
  CORS est ajouté après le garde d'origine pour répondre aux preflight OPTIONS.
"""
def is_origin_allowed(origin: str) -> bool:
    return origin.rstrip("/") in config.CORS_ORIGINS

def register_origin_guard_middleware(app: FastAPI) -> None:
    """
    Refuse explicitement les requêtes dont l'en-tête Origin n'est pas autorisé,
    au lieu de simplement omettre les en-têtes CORS.
    - Sans Origin (curl, serveurs, tests): autorisé.
    """
    @app.middleware("http")
    async def origin_guard(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin and request.url.path not in ORIGIN_EXEMPT_PATHS and not is_origin_allowed(origin):
            return JSONResponse(status_code=403, content={"error": "Origin not allowed"})
        return await call_next(request)

def register_basic_middlewares(app: FastAPI) -> None:
    """
    CORSMiddleware: autorise les origines définies (dev/prod), méthodes GET/POST.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Idempotency-Key"],
    )

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response
