"""Outbound email port used for review and account notifications."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Delivers one rendered notification to one recipient.

    Adapters report delivery through a result dict with ``status`` set to
    ``"sent"`` or ``"failed"``; only transport breakdowns may raise.
    """

    @abstractmethod
    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict: ...

    @staticmethod
    def delivered(message_id: str) -> dict:
        return {"message_id": message_id, "status": "sent"}

    @staticmethod
    def undelivered(error: str) -> dict:
        return {"message_id": None, "status": "failed", "error": error}
