"""
Tests for outbound email over SMTP.
"""
import smtplib

import pytest

from app.core.config import get_settings
from app.services import email_service


class FakeSMTP:
    """Records what send_email does with the connection."""

    sent = []
    calls = []

    def __init__(self, host, port, timeout=None):
        self.calls.append(("connect", host, port))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append(("starttls",))

    def login(self, username, password):
        self.calls.append(("login", username, password))

    def send_message(self, msg):
        self.sent.append(msg)


@pytest.fixture
def smtp_settings(monkeypatch):
    settings = get_settings().model_copy(update={
        "smtp_host": "smtp.example.com",
        "smtp_port": 2525,
        "smtp_username": "mailer",
        "smtp_password": "pw",
        "smtp_use_tls": True,
        "email_from": "noreply@college.edu",
    })
    monkeypatch.setattr(email_service, "get_settings", lambda: settings)
    return settings


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.sent = []
    FakeSMTP.calls = []
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def test_disabled_without_smtp_host(monkeypatch, fake_smtp, caplog):
    settings = get_settings().model_copy(update={"smtp_host": ""})
    monkeypatch.setattr(email_service, "get_settings", lambda: settings)

    with caplog.at_level("INFO", logger=email_service.__name__):
        assert email_service.send_email("alice@example.com", "Hi", "<p>Hi</p>") is False

    assert fake_smtp.calls == []
    assert "SMTP not configured" in caplog.text


def test_sends_html_message(smtp_settings, fake_smtp):
    assert email_service.send_email("alice@example.com", "Welcome", "<p>Hello</p>") is True

    assert fake_smtp.calls == [
        ("connect", "smtp.example.com", 2525),
        ("starttls",),
        ("login", "mailer", "pw"),
    ]
    msg = fake_smtp.sent[0]
    assert msg["To"] == "alice@example.com"
    assert msg["From"] == "noreply@college.edu"
    assert msg["Subject"] == "Welcome"
    assert msg.is_multipart()
    html = msg.get_body(preferencelist=("html",))
    assert "<p>Hello</p>" in html.get_content()


def test_smtp_failure_returns_false(smtp_settings, monkeypatch, caplog):
    def refuse(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, "service not available")

    monkeypatch.setattr(email_service.smtplib, "SMTP", refuse)

    with caplog.at_level("ERROR", logger=email_service.__name__):
        assert email_service.send_email("alice@example.com", "Hi", "<p>Hi</p>") is False
    assert "Failed to send email to alice@example.com" in caplog.text


def test_verification_email(smtp_settings, fake_smtp):
    student = {"name": "Alice", "email": "alice@example.com"}

    assert email_service.send_verification_email(student) is True

    msg = fake_smtp.sent[0]
    assert msg["Subject"] == "Your placement profile is verified"
    assert "Hi Alice" in msg.get_body(preferencelist=("html",)).get_content()
