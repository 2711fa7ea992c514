# storefront.config
from pathlib import Path
from typing import Optional
import os
from dotenv import load_dotenv

from storefront.errors import ConfigurationError

# Calculer le chemin du projet puis charger .env de manière explicite
# (les variables déjà présentes dans l'environnement restent prioritaires)
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du backend de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets Stripe (clé secrète, secret webhook)
- Expose la politique de livraison (seuil de gratuité, frais par unité)
- Expose les URLs de redirection du checkout et la liste blanche CORS
- require_settings() refuse un démarrage avec une configuration incomplète
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

def _int_env(name: str, default: int) -> Optional[int]:
    """Entier depuis l'env; None si la valeur n'est pas un entier (signalé par require_settings)."""
    raw = _clean_env(os.getenv(name) or "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return None

def _csv_env(name: str, default: str = "") -> list:
    return [v.strip() for v in _clean_env(os.getenv(name, default)).split(",") if v.strip()]

# Stripe: clé secrète (obligatoire) et secret de signature des webhooks
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
WEBHOOK_ENABLED = _flag("WEBHOOK_ENABLED", "true")
STRIPE_TIMEOUT_SECONDS = _int_env("STRIPE_TIMEOUT_SECONDS", 10)

# Options de session Checkout (activées par déploiement)
STRIPE_AUTOMATIC_TAX = _flag("STRIPE_AUTOMATIC_TAX")
COLLECT_BILLING_ADDRESS = _flag("COLLECT_BILLING_ADDRESS")
SHIPPING_COUNTRIES = [c.upper() for c in _csv_env("SHIPPING_COUNTRIES")]

# Serveur
PORT = _int_env("PORT", 4242)
LOG_LEVEL = _clean_env(os.getenv("LOG_LEVEL") or "info").lower()
# niveaux communs à logging et uvicorn
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")
UVICORN_RELOAD = _flag("UVICORN_RELOAD")

# Front de la boutique et redirections post-paiement
STOREFRONT_URL = _clean_env(os.getenv("STOREFRONT_URL") or "http://localhost:5173").rstrip("/")
CHECKOUT_SUCCESS_URL = _clean_env(os.getenv("CHECKOUT_SUCCESS_URL") or f"{STOREFRONT_URL}/?success=true")
CHECKOUT_CANCEL_URL = _clean_env(os.getenv("CHECKOUT_CANCEL_URL") or f"{STOREFRONT_URL}/?canceled=true")

# Livraison: gratuite à partir de N articles, sinon frais par article (centimes)
SHIPPING_FREE_THRESHOLD_QTY = _int_env("SHIPPING_FREE_THRESHOLD_QTY", 3)
SHIPPING_PER_UNIT_FEE_CENTS = _int_env("SHIPPING_PER_UNIT_FEE_CENTS", 300)

# CORS: hôtes de dev locaux + domaine déployé de la boutique
_DEFAULT_ORIGINS = ",".join([
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:5175",
    STOREFRONT_URL,
])
CORS_ORIGINS = list(dict.fromkeys(o.rstrip("/") for o in _csv_env("CORS_ORIGINS", _DEFAULT_ORIGINS)))


def require_settings() -> None:
    """
    Vérifie la configuration au démarrage.
    - STRIPE_SECRET_KEY obligatoire
    - STRIPE_WEBHOOK_SECRET obligatoire si le webhook est activé
    - règle de livraison et timeout: entiers valides
    - LOG_LEVEL parmi LOG_LEVELS
    Lève ConfigurationError (jamais la valeur des secrets dans le message).
    """
    if not STRIPE_SECRET_KEY:
        raise ConfigurationError("STRIPE_SECRET_KEY manquant")
    if WEBHOOK_ENABLED and not STRIPE_WEBHOOK_SECRET:
        raise ConfigurationError("STRIPE_WEBHOOK_SECRET manquant (webhook activé)")
    if SHIPPING_FREE_THRESHOLD_QTY is None or SHIPPING_FREE_THRESHOLD_QTY < 1:
        raise ConfigurationError("SHIPPING_FREE_THRESHOLD_QTY doit être un entier >= 1")
    if SHIPPING_PER_UNIT_FEE_CENTS is None or SHIPPING_PER_UNIT_FEE_CENTS < 0:
        raise ConfigurationError("SHIPPING_PER_UNIT_FEE_CENTS doit être un entier >= 0")
    if STRIPE_TIMEOUT_SECONDS is None or STRIPE_TIMEOUT_SECONDS <= 0:
        raise ConfigurationError("STRIPE_TIMEOUT_SECONDS doit être un entier > 0")
    if PORT is None:
        raise ConfigurationError("PORT doit être un entier")
    if LOG_LEVEL not in LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL inconnu: {LOG_LEVEL} (attendu: {', '.join(LOG_LEVELS)})")
