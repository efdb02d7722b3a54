"""Mailer configuration for the preorder follow-up email.

Read from the environment on every use so deployments can enable or
disable the follow-up without a restart of the worker that imports it.
Without an API key and a sender address the follow-up is switched off.
"""

import os
from dataclasses import dataclass

DEFAULT_STORE_NAME = "777Records777 Studio"


@dataclass(frozen=True)
class MailerConfig:
    api_key: str | None = None
    from_email: str | None = None
    reply_to: str | None = None
    store_name: str = DEFAULT_STORE_NAME

    @classmethod
    def from_env(cls) -> "MailerConfig":
        return cls(
            api_key=os.environ.get("RESEND_API_KEY") or None,
            from_email=os.environ.get("PREORDER_FROM_EMAIL") or None,
            reply_to=os.environ.get("PREORDER_REPLY_TO") or None,
            store_name=os.environ.get("PREORDER_STORE_NAME") or DEFAULT_STORE_NAME,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.from_email)
