"""In-memory email adapter that keeps every delivered notification."""

from uuid import uuid4

from reviews.notifications.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Records messages for assertions; can be told to fail or to raise."""

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.configure()

    def configure(self, should_succeed=True, should_raise=False, failure_reason="Email delivery failed"):
        self.should_succeed = should_succeed
        self.should_raise = should_raise
        self.failure_reason = failure_reason

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        if self.should_raise:
            raise ConnectionError(self.failure_reason)
        if not self.should_succeed:
            return self.undelivered(self.failure_reason)

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {"message_id": message_id, "to": to, "subject": subject, "body": body, "html_body": html_body}
        )
        return self.delivered(message_id)

    def reset(self):
        self.sent_emails.clear()
        self.configure()
