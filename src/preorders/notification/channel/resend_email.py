"""Resend email adapter — delivers email through the Resend HTTP API."""

import requests
import structlog

from preorders.notification.channel.email_port import EmailPort

logger = structlog.get_logger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendEmailAdapter(EmailPort):
    """Production email adapter.

    Network errors are raised to the caller; a non-2xx answer from the API
    is reported as a failed send.
    """

    def __init__(self, api_key: str, default_from: str | None = None, timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.default_from = default_from
        self.timeout = timeout

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
        from_email: str | None = None,
        reply_to: str | None = None,
    ) -> dict:
        payload = {
            "from": from_email or self.default_from,
            "to": to,
            "subject": subject,
            "text": body,
        }
        if html_body:
            payload["html"] = html_body
        if reply_to:
            payload["reply_to"] = reply_to

        response = requests.post(
            RESEND_API_URL,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )

        if not response.ok:
            return {
                "message_id": None,
                "status": "failed",
                "error": f"Resend error ({response.status_code}): {response.text}",
            }

        return {"message_id": response.json().get("id"), "status": "sent"}
