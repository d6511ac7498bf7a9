"""Email channel registry: singleton access to the email adapter.

``EMAIL_CHANNEL=smtp`` selects the SMTP adapter; anything else falls back
to the in-memory fake. Tests install their own with ``set_email_channel``.
"""

from reviews import config
from reviews.notifications.email_port import EmailPort

_channel_instance: EmailPort | None = None


def _build_channel() -> EmailPort:
    if config.email_channel() == "smtp":
        from reviews.notifications.smtp_email import SmtpEmailAdapter

        return SmtpEmailAdapter()

    from reviews.notifications.fake_email import FakeEmailAdapter

    return FakeEmailAdapter()


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _channel_instance
    if _channel_instance is None:
        _channel_instance = _build_channel()
    return _channel_instance


def set_email_channel(channel: EmailPort) -> None:
    global _channel_instance
    _channel_instance = channel


def reset_email_channel() -> None:
    global _channel_instance
    _channel_instance = None
