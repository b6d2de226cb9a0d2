"""Mailgun email adapter.

Sends through the Mailgun messages endpoint of the configured domain using
HTTP basic auth (``api`` / API key). Non-200 answers and transport errors
come back as ``status: "failed"``.
"""

import requests
import structlog

from identity.shared.email import is_valid_email
from notifications.channel.email_port import EmailPort

logger = structlog.get_logger(__name__)


class MailgunEmailAdapter(EmailPort):
    def __init__(self, base_url: str, domain: str, api_key: str, timeout: float = 10.0):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.domain = domain
        self.api_key = api_key
        self.timeout = timeout

    @property
    def sender(self) -> str:
        return f"admin@{self.domain}"

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}{self.domain}/messages"

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        subject = (subject or "").strip()
        body = (body or "").strip()
        if not is_valid_email(to) or not subject or not body:
            return {"message_id": None, "status": "failed", "error": "Missing or invalid message fields"}

        payload = {"from": self.sender, "to": to, "subject": subject, "text": body}
        if html_body:
            payload["html"] = html_body

        try:
            response = requests.post(
                self.messages_url,
                data=payload,
                auth=("api", self.api_key),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Mailgun request failed", error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        if response.status_code != 200:
            logger.warning("Mailgun rejected message", status_code=response.status_code)
            return {
                "message_id": None,
                "status": "failed",
                "error": f"Mailgun returned status {response.status_code}",
            }

        try:
            message_id = response.json()["id"]
        except (ValueError, KeyError, TypeError):
            return {"message_id": None, "status": "failed", "error": "Unreadable Mailgun response"}
        return {"message_id": message_id, "status": "sent"}
