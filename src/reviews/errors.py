"""Exceptions raised by the reviews context beyond Protean's own.

Protean's ``ValidationError`` and ``ObjectNotFoundError`` cover malformed
input and missing records; these cover credentials, authorization, state
conflicts and throttling. All carry a ``messages`` dict shaped like
``ValidationError``.
"""


class ReviewsError(Exception):
    def __init__(self, messages: dict):
        self.messages = messages
        super().__init__(messages)


class Forbidden(ReviewsError):
    """The actor is not allowed to perform the operation."""


class Conflict(ReviewsError):
    """The operation is incompatible with the record's current state."""


class RateLimitExceeded(ReviewsError):
    """Too many requests from the same client within the window."""


class Unauthorized(ReviewsError):
    """The supplied credentials do not match the account."""
