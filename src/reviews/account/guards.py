"""Actor checks shared by moderation and account administration handlers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from reviews.account.user import User
from reviews.errors import Forbidden


def load_actor(actor_id) -> User:
    """Fetch the acting user; an unknown actor is treated as unauthorized."""
    try:
        return current_domain.repository_for(User).get(str(actor_id))
    except ObjectNotFoundError as exc:
        raise Forbidden({"actor": ["Unknown actor"]}) from exc


def require_admin(actor_id) -> User:
    actor = load_actor(actor_id)
    if not actor.is_admin or not actor.is_active:
        raise Forbidden({"actor": ["Admin access required"]})
    return actor


def find_user(user_id) -> User | None:
    """Return the user, or None when the account no longer exists."""
    try:
        return current_domain.repository_for(User).get(str(user_id))
    except ObjectNotFoundError:
        return None
