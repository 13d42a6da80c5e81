import httpx
import pytest

from storefront.core.config import get_settings
from storefront.services import email as email_service
from storefront.services.email import build_gift_card_email_html, send_gift_card_email


def test_gift_card_html_escapes_message():
    html = build_gift_card_email_html(
        code="ABCD-EFGH-1234-5678",
        amount="$25.00",
        message="<b>Happy birthday</b>",
        redeem_link="http://localhost:5173/gift-cards?tab=manage",
    )

    assert "ABCD-EFGH-1234-5678" in html
    assert "&lt;b&gt;Happy birthday&lt;/b&gt;" in html
    assert "$25.00" in html


def test_console_provider_does_not_log_code(caplog):
    with caplog.at_level("INFO"):
        send_gift_card_email("friend@example.com", code="ABCD-EFGH-1234-5678", amount="25")

    assert "friend@example.com" in caplog.text
    assert "ABCD-EFGH-1234-5678" not in caplog.text


def test_resend_provider_posts_html(monkeypatch):
    captured = {}

    def _handler(request: httpx.Request):
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"id": "email_1"})

    real_client = httpx.Client
    monkeypatch.setattr(
        email_service.httpx,
        "Client",
        lambda **kwargs: real_client(transport=httpx.MockTransport(_handler), **kwargs),
    )
    settings = get_settings()
    monkeypatch.setattr(settings, "email_provider", "resend")
    monkeypatch.setattr(settings, "resend_api_key", "re_test")

    send_gift_card_email("friend@example.com", code="ABCD-EFGH-1234-5678", amount="25", message="Enjoy")

    assert captured["url"] == "https://api.resend.com/emails"
    assert captured["auth"] == "Bearer re_test"


def test_resend_error_is_raised(monkeypatch):
    real_client = httpx.Client
    monkeypatch.setattr(
        email_service.httpx,
        "Client",
        lambda **kwargs: real_client(transport=httpx.MockTransport(lambda r: httpx.Response(422, text="bad")), **kwargs),
    )
    settings = get_settings()
    monkeypatch.setattr(settings, "email_provider", "resend")
    monkeypatch.setattr(settings, "resend_api_key", "re_test")

    with pytest.raises(RuntimeError):
        send_gift_card_email("friend@example.com", code="ABCD-EFGH-1234-5678", amount="25")


def test_unknown_provider(monkeypatch):
    monkeypatch.setattr(get_settings(), "email_provider", "pigeon")

    with pytest.raises(ValueError):
        send_gift_card_email("friend@example.com", code="ABCD-EFGH-1234-5678", amount="25")
