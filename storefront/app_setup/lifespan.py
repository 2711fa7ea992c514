"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Vérifie la configuration obligatoire (ConfigurationError => l'app ne démarre pas).
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d'environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l'init échoue
"""
import os
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from storefront import config

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure la boutique au démarrage.
    - Configuration incomplète: ConfigurationError propagée, le process ne sert aucune requête.
    - En cas d'échec de Redis et sans fallback, le rate limiting est désactivé proprement.
    """
    logger = logging.getLogger("uvicorn.error")
    config.require_settings()
    logger.info(
        "Storefront ready: shipping free from %s items, %s cents/unit below; webhook %s",
        config.SHIPPING_FREE_THRESHOLD_QTY,
        config.SHIPPING_PER_UNIT_FEE_CENTS,
        "enabled" if config.WEBHOOK_ENABLED else "disabled",
    )

    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        yield
        return

    r = None
    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning("Rate limiting falling back to local in-memory due to init error: %s", e)
        else:
            app.state.rate_limit_enabled = False
            logger.warning("Rate limiting disabled due to init error: %s", e)

    yield

    if r is not None:
        await r.aclose()
