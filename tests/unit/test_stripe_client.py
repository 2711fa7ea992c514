import json
from types import SimpleNamespace

import pytest
import stripe

from storefront import config
from storefront.errors import PaymentProviderError, SignatureVerificationError
from storefront.payments import stripe_client
WEBHOOK_SECRET = config.STRIPE_WEBHOOK_SECRET


LINE = {"price_data": {"currency": "usd", "product_data": {"name": "A"}, "unit_amount": 825}, "quantity": 1}


def test_build_session_params_defaults():
    params = stripe_client.build_session_params(
        line_items=[LINE],
        success_url="https://shop.test/?success=true",
        cancel_url="https://shop.test/?canceled=true",
    )
    assert params == {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": [LINE],
        "success_url": "https://shop.test/?success=true",
        "cancel_url": "https://shop.test/?canceled=true",
    }


def test_build_session_params_tax_and_address_toggles():
    params = stripe_client.build_session_params(
        line_items=[LINE],
        success_url="s",
        cancel_url="c",
        automatic_tax=True,
        collect_billing_address=True,
        shipping_countries=["US", "CA"],
    )
    assert params["automatic_tax"] == {"enabled": True}
    assert params["billing_address_collection"] == "required"
    assert params["shipping_address_collection"] == {"allowed_countries": ["US", "CA"]}


def test_require_stripe_configures_key_timeout_and_no_retries(monkeypatch):
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "sk_test_configured")
    monkeypatch.setattr(config, "STRIPE_TIMEOUT_SECONDS", 7)
    module = stripe_client.require_stripe()
    assert module is stripe
    assert stripe.api_key == "sk_test_configured"
    assert stripe.max_network_retries == 0
    assert isinstance(stripe.default_http_client, stripe.RequestsClient)


def test_create_session_returns_id_and_url(monkeypatch):
    captured = {}

    def fake_create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.test/cs_test_1")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
    params = stripe_client.build_session_params(line_items=[LINE], success_url="s", cancel_url="c")
    session = stripe_client.create_session(params, idempotency_key="cart-42")
    assert session == {"id": "cs_test_1", "url": "https://checkout.stripe.test/cs_test_1"}
    assert captured["mode"] == "payment"
    assert captured["idempotency_key"] == "cart-42"


def test_create_session_without_idempotency_key_sends_none(monkeypatch):
    captured = {}

    def fake_create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.test/cs_test_1")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
    stripe_client.create_session({"mode": "payment"})
    assert "idempotency_key" not in captured


def test_create_session_translates_stripe_errors(monkeypatch):
    calls = {"count": 0}

    def failing_create(**kwargs):
        calls["count"] += 1
        raise stripe.APIConnectionError("Request timed out")

    monkeypatch.setattr(stripe.checkout.Session, "create", failing_create)
    with pytest.raises(PaymentProviderError) as exc:
        stripe_client.create_session({"mode": "payment"})
    assert exc.value.status_code == 500
    assert "Request timed out" in exc.value.detail
    # jamais rejoué
    assert calls["count"] == 1


def _event(kind="checkout.session.completed"):
    return {
        "id": "evt_1",
        "type": kind,
        "data": {"object": {"id": "cs_test_1", "amount_total": 2250, "customer_details": {"email": "a@b.test"}}},
    }


def test_verify_event_accepts_valid_signature(signer):
    payload = json.dumps(_event()).encode("utf-8")
    event = stripe_client.verify_event(payload, signer(payload), WEBHOOK_SECRET)
    assert event["type"] == "checkout.session.completed"
    assert event["data"]["object"]["id"] == "cs_test_1"


def test_verify_event_rejects_tampered_payload(signer):
    payload = json.dumps(_event()).encode("utf-8")
    header = signer(payload)
    tampered = payload.replace(b"2250", b"1")
    with pytest.raises(SignatureVerificationError):
        stripe_client.verify_event(tampered, header, WEBHOOK_SECRET)


def test_verify_event_rejects_wrong_secret(signer):
    payload = json.dumps(_event()).encode("utf-8")
    with pytest.raises(SignatureVerificationError):
        stripe_client.verify_event(payload, signer(payload, secret="whsec_other"), WEBHOOK_SECRET)


def test_verify_event_rejects_stale_timestamp(signer):
    payload = json.dumps(_event()).encode("utf-8")
    header = signer(payload, timestamp=1_000_000)
    with pytest.raises(SignatureVerificationError):
        stripe_client.verify_event(payload, header, WEBHOOK_SECRET)


@pytest.mark.parametrize("header", [None, "", "garbage", "t=abc,v1=deadbeef"])
def test_verify_event_rejects_missing_or_malformed_header(header, signer):
    payload = json.dumps(_event()).encode("utf-8")
    with pytest.raises(SignatureVerificationError) as exc:
        stripe_client.verify_event(payload, header, WEBHOOK_SECRET)
    assert exc.value.status_code == 400


def test_verify_event_rejects_signed_non_json_payload(signer):
    payload = b"not json"
    with pytest.raises(SignatureVerificationError) as exc:
        stripe_client.verify_event(payload, signer(payload), WEBHOOK_SECRET)
    assert exc.value.detail == "Invalid payload"
