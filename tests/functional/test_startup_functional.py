import pytest
from fastapi.testclient import TestClient
from fastapi_limiter import FastAPILimiter

from storefront import config
from storefront import __main__ as entrypoint
from storefront.app import create_app
from storefront.errors import ConfigurationError


def test_app_refuses_to_start_without_secret_key(monkeypatch):
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "")
    with pytest.raises(ConfigurationError):
        with TestClient(create_app()):
            pass


def test_main_exits_non_zero_without_secret_key(monkeypatch):
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "")
    started = []
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda *a, **kw: started.append(kw))
    assert entrypoint.main() == 1
    assert started == []


def test_main_runs_uvicorn_on_configured_port(monkeypatch):
    monkeypatch.setattr(config, "PORT", 4242)
    started = []
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda app, **kw: started.append((app, kw)))
    assert entrypoint.main() == 0
    app, kw = started[0]
    assert app == "storefront.asgi:app"
    assert kw["port"] == 4242


def test_webhook_route_not_mounted_when_disabled(monkeypatch):
    monkeypatch.setattr(config, "WEBHOOK_ENABLED", False)
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", "")
    with TestClient(create_app()) as client:
        assert client.post("/webhook", content=b"{}").status_code == 404
        assert client.get("/").status_code == 200


def test_lifespan_enables_rate_limit_with_fakeredis(monkeypatch):
    monkeypatch.delenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", raising=False)
    monkeypatch.setenv("USE_FAKE_REDIS_FOR_TESTS", "1")
    # restaurer l'état global du limiteur après le test
    monkeypatch.setattr(FastAPILimiter, "redis", None)
    app = create_app()
    with TestClient(app) as client:
        assert app.state.rate_limit_enabled is True
        health = client.get("/health").json()
        assert health["rate_limit"] == {"enabled": True, "backend": "redis"}


def test_main_exits_non_zero_on_unknown_log_level(monkeypatch):
    monkeypatch.setattr(config, "LOG_LEVEL", "verbose")
    started = []
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda *a, **kw: started.append(kw))
    assert entrypoint.main() == 1
    assert started == []
