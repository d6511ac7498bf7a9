"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from reviews.domain import reviews


@reviews.event(part_of="User")
class UserRegistered:
    """A new account was created."""

    __version__ = 1

    user_id = Identifier(required=True)
    username = String(required=True)
    email = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@reviews.event(part_of="User")
class EmailVerified:
    """The account's email address was confirmed, by token or by an admin."""

    __version__ = 1

    user_id = Identifier(required=True)
    method = String(required=True)  # "token" or "admin"
    verified_at = DateTime(required=True)


@reviews.event(part_of="User")
class UserSuspended:
    __version__ = 1

    user_id = Identifier(required=True)
    suspended_at = DateTime(required=True)


@reviews.event(part_of="User")
class UserActivated:
    __version__ = 1

    user_id = Identifier(required=True)
    activated_at = DateTime(required=True)


@reviews.event(part_of="User")
class UserRoleChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    previous_role = String(required=True)
    role = String(required=True)
    changed_at = DateTime(required=True)


@reviews.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    changed_at = DateTime(required=True)


@reviews.event(part_of="User")
class ProfileUpdated:
    """Username or email changed; a changed email must be verified again."""

    __version__ = 1

    user_id = Identifier(required=True)
    username = String(required=True)
    email = String(required=True)
    email_changed = Boolean(default=False)
    updated_at = DateTime(required=True)
