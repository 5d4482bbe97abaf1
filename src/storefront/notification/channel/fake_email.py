"""In-memory email adapter used in development and tests."""

from uuid import uuid4

from storefront.notification.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Keeps every delivered message in ``outbox`` instead of sending it.

    ``fail_with`` makes subsequent sends report a failure; ``raise_on_send``
    makes them raise, the way a provider outage would surface.
    """

    def __init__(self):
        self.outbox: list[dict] = []
        self.failure_reason: str | None = None
        self.raise_on_send = False

    def fail_with(self, reason: str = "Email delivery failed", raise_on_send: bool = False):
        self.failure_reason = reason
        self.raise_on_send = raise_on_send

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        if self.raise_on_send:
            raise ConnectionError(self.failure_reason or "Email provider unavailable")
        if self.failure_reason:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"email-{uuid4().hex[:12]}"
        self.outbox.append(
            {
                "message_id": message_id,
                "to": to,
                "subject": subject,
                "body": body,
                "html_body": html_body,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def messages_to(self, address: str) -> list[dict]:
        return [m for m in self.outbox if m["to"] == address]

    def reset(self):
        self.outbox.clear()
        self.failure_reason = None
        self.raise_on_send = False
