"""
Gestionnaires d'exceptions.
- Erreurs métier (StorefrontError): JSON {"error": ..., "message"?: ...} avec leur code HTTP.
- Webhook (SignatureVerificationError): texte brut "Webhook Error: <détail>" en 400.
- HTTPException Starlette/FastAPI (404, 429 du rate limiting...): même enveloppe {"error": ...}.
"""
import logging
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse

from storefront.errors import StorefrontError, SignatureVerificationError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers; Starlette choisit le plus spécifique selon la MRO,
    donc SignatureVerificationError passe avant StorefrontError.
    """
    @app.exception_handler(SignatureVerificationError)
    async def webhook_signature_error(request: Request, exc: SignatureVerificationError):
        return PlainTextResponse(f"Webhook Error: {exc.detail or exc.message}", status_code=exc.status_code)

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        else:
            logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)
