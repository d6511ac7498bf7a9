"""Feedback aggregate: messages left by visitors through the contact form.

Submissions go through a honeypot check and simple spam heuristics; the
stored text is HTML-escaped.
"""

import html
import re
from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text
from protean.utils.globals import current_domain

from reviews.domain import reviews
from reviews.utils.logging import get_logger

logger = get_logger(__name__)

MESSAGE_MIN_LENGTH = 20
MESSAGE_MAX_LENGTH = 1000

SPAM_KEYWORDS = (
    "whatsapp",
    "reference website",
    "business online",
    "digital presence",
    "seo service",
    "rank your website",
    "generate more leads",
    "professional website",
    "warm regards",
    "best regards",
    "click here",
    "limited time offer",
    "make money",
    "earn money",
    "crypto",
    "investment opportunity",
    "weight loss",
    "dating site",
    "adult content",
    "viagra",
    "cialis",
)

_URL_PATTERN = re.compile(r"https?://")


def looks_like_spam(text: str) -> bool:
    lowered = text.lower()

    if len(_URL_PATTERN.findall(lowered)) > 2:
        return True

    if sum(1 for keyword in SPAM_KEYWORDS if keyword in lowered) >= 2:
        return True

    letters = [ch for ch in text if ch.isascii() and ch.isalpha()]
    capitals = [ch for ch in letters if ch.isupper()]
    return len(letters) > 20 and len(capitals) / len(letters) > 0.3


@reviews.aggregate
class Feedback:
    name = String(max_length=100)
    email = String(max_length=100)
    message = Text(required=True)
    created_at = DateTime()

    @classmethod
    def submit(cls, message, name=None, email=None, honeypot=None):
        if honeypot:
            raise ValidationError({"feedback": ["Spam detected."]})

        text = (message or "").strip()
        if not text:
            raise ValidationError({"message": ["Feedback message is required."]})
        if len(text) < MESSAGE_MIN_LENGTH:
            raise ValidationError({"message": [f"Feedback must be at least {MESSAGE_MIN_LENGTH} characters."]})
        if len(text) > MESSAGE_MAX_LENGTH:
            raise ValidationError({"message": [f"Feedback must be less than {MESSAGE_MAX_LENGTH} characters."]})
        if looks_like_spam(text):
            raise ValidationError({"message": ["Your message appears to be spam."]})

        return cls(
            name=html.escape(name.strip()[:100]) if name and name.strip() else None,
            email=email.strip()[:100] if email and email.strip() else None,
            message=html.escape(text),
            created_at=datetime.now(UTC),
        )


@reviews.command(part_of="Feedback")
class SubmitFeedback:
    message = Text()
    name = String(max_length=1000)
    email = String(max_length=1000)
    website = String(max_length=1000)  # honeypot, left empty by humans


@reviews.command_handler(part_of=Feedback)
class FeedbackHandler:
    @handle(SubmitFeedback)
    def submit_feedback(self, command):
        feedback = Feedback.submit(
            message=command.message,
            name=command.name,
            email=command.email,
            honeypot=command.website,
        )
        current_domain.repository_for(Feedback).add(feedback)
        logger.info("Feedback received", feedback_id=str(feedback.id))
        return str(feedback.id)
