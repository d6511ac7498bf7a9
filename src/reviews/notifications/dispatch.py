"""Fire-and-forget email dispatch.

A failed or raising adapter is logged and never propagates to the
operation that triggered the notification.
"""

import structlog

from reviews.notifications import get_email_channel
from reviews.notifications.templates import get_template

logger = structlog.get_logger(__name__)


def notify(recipient: str | None, template_name: str, context: dict) -> dict | None:
    """Render ``template_name`` and send it to ``recipient``.

    Returns the adapter result, or None when nothing was delivered.
    """
    if not recipient:
        logger.warning("Notification skipped, no recipient", template=template_name)
        return None

    try:
        rendered = get_template(template_name).render(context)
        result = get_email_channel().send(
            to=recipient,
            subject=rendered["subject"],
            body=rendered["body"],
        )
    except Exception as exc:
        logger.warning(
            "Notification dispatch failed",
            template=template_name,
            recipient=recipient,
            error=str(exc),
        )
        return None

    if result.get("status") != "sent":
        logger.warning(
            "Notification not delivered",
            template=template_name,
            recipient=recipient,
            error=result.get("error"),
        )
        return None

    logger.info("Notification sent", template=template_name, message_id=result.get("message_id"))
    return result
