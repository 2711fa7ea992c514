"""
Point d'entrée principal du backend de la boutique.

Usage:
    python -m storefront   (ou la commande `storefront`)

Ce mode vérifie la configuration puis lance uvicorn. Variables lues:
- PORT: port d'écoute (par défaut 4242)
- UVICORN_RELOAD: active le reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs (ex: "info", "debug")
Sans STRIPE_SECRET_KEY (ou sans secret webhook si le webhook est actif), sortie en code 1.
"""
import logging
import sys

import uvicorn

from storefront import config
from storefront.errors import ConfigurationError

logger = logging.getLogger("storefront")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def main() -> int:
    # configuration vérifiée avant logging: LOG_LEVEL peut être invalide
    try:
        config.require_settings()
    except ConfigurationError as e:
        logging.basicConfig(format=LOG_FORMAT)
        logger.error("Refusing to start: %s", e)
        return 1
    logging.basicConfig(level=config.LOG_LEVEL.upper(), format=LOG_FORMAT)
    uvicorn.run(
        "storefront.asgi:app",  # on réutilise l'ASGI app unique
        host="0.0.0.0",
        port=config.PORT,
        reload=config.UVICORN_RELOAD,
        log_level=config.LOG_LEVEL,
    )
    return 0

if __name__ == "__main__":
    sys.exit(main())
