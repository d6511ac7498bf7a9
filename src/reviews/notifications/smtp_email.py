"""SMTP email adapter configured from the SMTP_* environment variables."""

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

import structlog

from reviews import config
from reviews.notifications.email_port import EmailPort

logger = structlog.get_logger(__name__)


class SmtpEmailAdapter(EmailPort):
    def __init__(self, settings: config.SmtpSettings | None = None):
        self.settings = settings or config.smtp_settings()

    def _build_message(self, to, subject, body, html_body):
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.settings.from_email
        message["To"] = to
        message["Message-ID"] = make_msgid(domain=self.settings.from_email.rsplit("@", 1)[-1])
        message.set_content(body)
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        message = self._build_message(to, subject, body, html_body)
        settings = self.settings

        try:
            with smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout) as server:
                if settings.use_tls:
                    server.starttls()
                if settings.username and settings.password:
                    server.login(settings.username, settings.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP delivery failed", to=to, host=settings.host, error=str(exc))
            return self.undelivered(str(exc))

        logger.info("Email sent", to=to, message_id=message["Message-ID"])
        return self.delivered(message["Message-ID"])
