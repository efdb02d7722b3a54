"""Tests for the email channel adapters, the mailer config and the confirmation template."""

import pytest
import requests
from preorders.notification.channel import get_email_channel, reset_email_channel
from preorders.notification.channel.fake_email import FakeEmailAdapter
from preorders.notification.channel.resend_email import RESEND_API_URL, ResendEmailAdapter
from preorders.notification.config import DEFAULT_STORE_NAME, MailerConfig
from preorders.notification.templates.preorder_confirmation import SUBJECT, PreorderConfirmationTemplate


class TestFakeEmailAdapter:
    def setup_method(self):
        self.adapter = FakeEmailAdapter()

    def test_send_records_email(self):
        result = self.adapter.send(to="fan@example.com", subject="Hi", body="Hello!", reply_to="hello@example.com")
        assert result["status"] == "sent"
        assert result["message_id"] is not None
        assert self.adapter.sent_emails[0]["to"] == "fan@example.com"
        assert self.adapter.sent_emails[0]["reply_to"] == "hello@example.com"

    def test_send_failure(self):
        self.adapter.configure(should_succeed=False, failure_reason="Mailbox full")
        result = self.adapter.send(to="a@b.com", subject="Hi", body="Hello")
        assert result["status"] == "failed"
        assert result["error"] == "Mailbox full"
        assert self.adapter.sent_emails == []

    def test_send_raises(self):
        self.adapter.configure(should_raise=True, failure_reason="Connection reset")
        with pytest.raises(ConnectionError):
            self.adapter.send(to="a@b.com", subject="Hi", body="Hello")

    def test_reset(self):
        self.adapter.send(to="a@b.com", subject="Hi", body="Hello")
        self.adapter.configure(should_succeed=False, should_raise=True)
        self.adapter.reset()
        assert self.adapter.sent_emails == []
        assert self.adapter.should_succeed is True
        assert self.adapter.should_raise is False


class _Response:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


class TestResendEmailAdapter:
    def test_posts_message(self, monkeypatch):
        calls = []

        def fake_post(url, json, headers, timeout):
            calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
            return _Response(200, {"id": "re_msg_123"})

        monkeypatch.setattr(requests, "post", fake_post)
        adapter = ResendEmailAdapter(api_key="re_key", default_from="studio@example.com")

        result = adapter.send(
            to="fan@example.com",
            subject="Thanks",
            body="Plain",
            html_body="<p>Html</p>",
            reply_to="hello@example.com",
        )

        assert result == {"message_id": "re_msg_123", "status": "sent"}
        call = calls[0]
        assert call["url"] == RESEND_API_URL
        assert call["headers"]["Authorization"] == "Bearer re_key"
        assert call["json"] == {
            "from": "studio@example.com",
            "to": "fan@example.com",
            "subject": "Thanks",
            "text": "Plain",
            "html": "<p>Html</p>",
            "reply_to": "hello@example.com",
        }

    def test_explicit_sender_wins(self, monkeypatch):
        calls = []
        monkeypatch.setattr(requests, "post", lambda url, **kwargs: calls.append(kwargs) or _Response(200))

        ResendEmailAdapter(api_key="k", default_from="default@example.com").send(
            to="a@b.com", subject="s", body="b", from_email="other@example.com"
        )
        assert calls[0]["json"]["from"] == "other@example.com"
        assert "reply_to" not in calls[0]["json"]

    def test_error_response_is_failed_send(self, monkeypatch):
        monkeypatch.setattr(requests, "post", lambda url, **kwargs: _Response(422, text="invalid from"))

        result = ResendEmailAdapter(api_key="k", default_from="x@example.com").send(to="a@b.com", subject="s", body="b")
        assert result["status"] == "failed"
        assert "422" in result["error"]


class TestEmailChannelRegistry:
    def test_fake_adapter_selected(self):
        assert isinstance(get_email_channel(), FakeEmailAdapter)

    def test_singleton(self):
        assert get_email_channel() is get_email_channel()

    def test_resend_adapter_selected(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "resend")
        reset_email_channel()
        channel = get_email_channel(MailerConfig(api_key="re_key", from_email="studio@example.com"))
        assert isinstance(channel, ResendEmailAdapter)
        assert channel.default_from == "studio@example.com"

    def test_resend_adapter_follows_rotated_credentials(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "resend")
        reset_email_channel()
        first = get_email_channel(MailerConfig(api_key="re_old", from_email="studio@example.com"))
        same = get_email_channel(MailerConfig(api_key="re_old", from_email="studio@example.com"))
        rotated = get_email_channel(MailerConfig(api_key="re_new", from_email="studio@example.com"))

        assert same is first
        assert rotated is not first
        assert rotated.api_key == "re_new"

    def test_resend_adapter_reads_env_when_no_config_given(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "resend")
        monkeypatch.setenv("RESEND_API_KEY", "re_env")
        monkeypatch.setenv("PREORDER_FROM_EMAIL", "env@example.com")
        reset_email_channel()
        get_email_channel()

        monkeypatch.setenv("PREORDER_FROM_EMAIL", "changed@example.com")
        assert get_email_channel().default_from == "changed@example.com"

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "pigeon")
        reset_email_channel()
        with pytest.raises(ValueError):
            get_email_channel()


class TestMailerConfig:
    def test_unconfigured_by_default(self):
        config = MailerConfig.from_env()
        assert config.is_configured is False
        assert config.store_name == DEFAULT_STORE_NAME

    def test_needs_key_and_sender(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_key")
        assert MailerConfig.from_env().is_configured is False

        monkeypatch.setenv("PREORDER_FROM_EMAIL", "studio@example.com")
        assert MailerConfig.from_env().is_configured is True

    def test_store_name_override(self, monkeypatch):
        monkeypatch.setenv("PREORDER_STORE_NAME", "Night Shift Records")
        assert MailerConfig.from_env().store_name == "Night Shift Records"


class TestPreorderConfirmationTemplate:
    def test_renders_subject_and_bodies(self):
        rendered = PreorderConfirmationTemplate.render({"store_name": "Night Shift Records"})
        assert rendered["subject"] == SUBJECT
        assert "first production run" in rendered["body"]
        assert "Night Shift Records" in rendered["body"]
        assert "Night Shift Records" in rendered["html_body"]

    def test_escapes_store_name_in_html(self):
        rendered = PreorderConfirmationTemplate.render({"store_name": "Tom & Jerry <Records>"})
        assert "Tom &amp; Jerry &lt;Records&gt;" in rendered["html_body"]
