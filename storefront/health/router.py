from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from storefront import config
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root(request: Request):
    """État du service: rate limiting et options actives (jamais les secrets)."""
    return JSONResponse({
        "ok": True,
        "webhook_enabled": config.WEBHOOK_ENABLED,
        "rate_limit": rate_limit_health_info(request),
    })
