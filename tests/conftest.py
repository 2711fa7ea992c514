import hashlib
import hmac
import os
import time
import pytest
from typing import Generator, Dict, Any
from fastapi.testclient import TestClient

# Configuration de test avant tout import de storefront (config lue à l'import)
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from storefront import config
from storefront.app import app as fastapi_app

WEBHOOK_SECRET = config.STRIPE_WEBHOOK_SECRET

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("tests/unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("tests/integration/"):
            item.add_marker(pytest.mark.integration)
        elif "/tests/functional/" in nodeid or nodeid.startswith("tests/functional/"):
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture(autouse=True)
def _default_shipping_rule(monkeypatch):
    # Règle de l'UI: livraison gratuite dès 3 articles, sinon 3 $ par article
    monkeypatch.setattr(config, "SHIPPING_FREE_THRESHOLD_QTY", 3)
    monkeypatch.setattr(config, "SHIPPING_PER_UNIT_FEE_CENTS", 300)
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)

@pytest.fixture
def stripe_calls(monkeypatch):
    """
    Remplace stripe_client.create_session: aucune requête réseau.
    Retourne la liste des appels (params, idempotency_key) pour assertions.
    """
    calls = []

    def _fake_create_session(params: Dict[str, Any], *, idempotency_key=None):
        calls.append({"params": params, "idempotency_key": idempotency_key})
        return {"id": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}

    monkeypatch.setattr("storefront.payments.stripe_client.create_session", _fake_create_session)
    return calls

def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """En-tête Stripe-Signature valide: t=<ts>,v1=HMAC-SHA256(secret, "<ts>.<payload>")."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.".encode("utf-8") + payload
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"

@pytest.fixture
def signer():
    return sign_payload
