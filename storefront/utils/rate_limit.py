"""
Rate limiting du checkout.
- Clé: IP du client + chemin (pas de comptes utilisateurs dans la boutique).
- LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire, par process (dev/tests).
- Sinon fastapi-limiter (Redis), initialisé par le lifespan.
"""
from typing import Dict, Any, Optional
from fastapi import Request, Response, HTTPException
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
import logging
import os
import time

logger = logging.getLogger(__name__)

def _client_key(req: Request) -> str:
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{req.url.path}"

def _memory_fallback() -> bool:
    return os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"

def _hit_memory_window(request: Request, times: int, seconds: int) -> None:
    now = time.time()
    key = _client_key(request)
    store = getattr(request.app.state, "_rl_store", None)
    if store is None:
        store = request.app.state._rl_store = {}
    hits = [t for t in store.get(key, []) if now - t < seconds]
    if len(hits) >= times:
        store[key] = hits
        raise HTTPException(status_code=429, detail="Too Many Requests")
    hits.append(now)
    store[key] = hits

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI: `times` requêtes par fenêtre de `seconds` secondes.
    - rate_limit_enabled différent de True (lifespan): aucun contrôle
    - 429 levée par le limiteur: remonte vers le handler {"error": ...}
    - Redis en panne: requête acceptée, le checkout reste possible
    """
    async def _dep(request: Request, response: Response):
        if _memory_fallback():
            _hit_memory_window(request, times, seconds)
            return
        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        async def _identifier(req: Request) -> str:
            return _client_key(req)

        try:
            await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception as e:
            logger.warning("rate_limit unavailable path=%s: %s", request.url.path, e)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    """Pour /health: {"enabled": bool, "backend": "memory" | "redis" | None}."""
    enabled = getattr(request.app.state, "rate_limit_enabled", None) is True
    backend: Optional[str] = None
    if _memory_fallback():
        backend = "memory"
    elif enabled and getattr(FastAPILimiter, "redis", None) is not None:
        backend = "redis"
    return {"enabled": enabled, "backend": backend}
