"""Email channel registry — pluggable adapter for the preorder follow-up.

Uses the Resend adapter by default. Set EMAIL_ADAPTER=fake to record
messages in memory instead (tests, local development). The cached adapter
is rebuilt when the adapter choice, API key or sender address changes.
"""

import os

from preorders.notification.config import MailerConfig

_email_instance = None
_email_key = None


def get_email_channel(config: MailerConfig | None = None):
    """Return the configured email adapter (cached per adapter and credentials)."""
    global _email_instance, _email_key

    adapter = os.environ.get("EMAIL_ADAPTER", "resend")
    if adapter == "fake":
        key = (adapter,)
    elif adapter == "resend":
        config = config or MailerConfig.from_env()
        key = (adapter, config.api_key, config.from_email)
    else:
        raise ValueError(f"Unknown email adapter: {adapter}")

    if _email_instance is None or _email_key != key:
        if adapter == "fake":
            from preorders.notification.channel.fake_email import FakeEmailAdapter

            _email_instance = FakeEmailAdapter()
        else:
            from preorders.notification.channel.resend_email import ResendEmailAdapter

            _email_instance = ResendEmailAdapter(api_key=config.api_key, default_from=config.from_email)
        _email_key = key
    return _email_instance


def reset_email_channel():
    """Reset the email adapter cache (useful for testing)."""
    global _email_instance, _email_key
    _email_instance = None
    _email_key = None
