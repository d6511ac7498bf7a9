"""User aggregate: reviewer and administrator accounts.

Holds standing (role, account status, email verification) and the bcrypt
hash of the password; bearer tokens are issued by the API after login.

Account status:
    ACTIVE ⇄ SUSPENDED
    ACTIVE | SUSPENDED → DELETED (terminal)

Role:
    USER ⇄ ADMIN, except for the master admin configured via ADMIN_EMAIL.
"""

import secrets
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from reviews import config
from reviews.account.events import (
    EmailVerified,
    PasswordChanged,
    ProfileUpdated,
    UserActivated,
    UserRegistered,
    UserRoleChanged,
    UserSuspended,
)
from reviews.account.passwords import hash_password, password_errors, verify_password
from reviews.domain import reviews
from reviews.errors import Forbidden, Unauthorized


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


class AccountStatus(Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"


def email_format_errors(email: str) -> list[str]:
    """Structural checks on an email address: one @, sane labels, no forbidden characters."""
    invalid = [f"Invalid email address: {email!r}"]

    if any(ch in email for ch in (" ", "\t", "\n")) or email.count("@") != 1:
        return invalid

    local_part, domain_part = email.split("@", 1)
    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return invalid
    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return invalid
    if "." not in domain_part or ".." in local_part or ".." in domain_part:
        return invalid
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        return invalid
    if any(ch in email for ch in (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")):
        return invalid

    return []


@reviews.aggregate
class User:
    """An account that submits reviews or moderates them."""

    username = String(required=True, max_length=30)
    email = String(required=True, max_length=254)
    role = String(choices=Role, default=Role.USER.value)
    account_status = String(choices=AccountStatus, default=AccountStatus.ACTIVE.value)

    # Email verification: a pending token/expiry pair, cleared once confirmed
    is_email_verified = Boolean(default=False)
    email_verification_token = String(max_length=64)
    email_verification_expires_at = DateTime()

    password_hash = String(max_length=255)
    last_login_at = DateTime()

    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def username_length(self):
        if self.username is not None and len(self.username.strip()) < 3:
            raise ValidationError({"username": ["Username must be at least 3 characters"]})

    @invariant.post
    def email_must_be_valid(self):
        if self.email:
            errors = email_format_errors(self.email)
            if errors:
                raise ValidationError({"email": errors})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, username, email, role=Role.USER.value, email_verified=False, password=None):
        now = datetime.now(UTC)
        user = cls(
            username=(username or "").strip(),
            email=(email or "").strip().lower(),
            role=role,
            account_status=AccountStatus.ACTIVE.value,
            is_email_verified=email_verified,
            created_at=now,
            updated_at=now,
        )
        if password is not None:
            user.set_password(password)

        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                username=user.username,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Queries on standing
    # -------------------------------------------------------------------
    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_active(self) -> bool:
        return self.account_status == AccountStatus.ACTIVE.value

    def is_master_admin(self) -> bool:
        master_email = config.master_admin_email()
        master_id = config.master_admin_id()
        return bool((master_email and self.email == master_email) or (master_id and str(self.id) == master_id))

    # -------------------------------------------------------------------
    # Email verification
    # -------------------------------------------------------------------
    def issue_email_verification(self) -> str:
        """Generate a fresh verification token valid for the configured TTL."""
        if self.is_email_verified:
            raise ValidationError({"email": ["Email is already verified"]})

        now = datetime.now(UTC)
        token = secrets.token_urlsafe(24)
        with atomic_change(self):
            self.email_verification_token = token
            self.email_verification_expires_at = now + timedelta(hours=config.email_verification_ttl_hours())
            self.updated_at = now
        return token

    def confirm_email(self, token):
        now = datetime.now(UTC)
        if (
            not token
            or token != self.email_verification_token
            or self.email_verification_expires_at is None
            or self.email_verification_expires_at <= now
        ):
            raise ValidationError({"token": ["Invalid or expired verification token"]})

        self._mark_email_verified(now, method="token")

    def mark_email_verified(self):
        """Administrative verification, bypassing the token."""
        self._mark_email_verified(datetime.now(UTC), method="admin")

    def _mark_email_verified(self, now, method):
        with atomic_change(self):
            self.is_email_verified = True
            self.email_verification_token = None
            self.email_verification_expires_at = None
            self.updated_at = now

        self.raise_(EmailVerified(user_id=str(self.id), method=method, verified_at=now))

    # -------------------------------------------------------------------
    # Credentials and profile
    # -------------------------------------------------------------------
    def set_password(self, password):
        errors = password_errors(password)
        if errors:
            raise ValidationError({"password": errors})

        self.password_hash = hash_password(password)
        self.updated_at = datetime.now(UTC)

    def check_password(self, password) -> bool:
        return verify_password(password, self.password_hash)

    def change_password(self, current_password, new_password):
        if not self.check_password(current_password):
            raise Unauthorized({"current_password": ["Current password is incorrect"]})

        self.set_password(new_password)
        self.raise_(PasswordChanged(user_id=str(self.id), changed_at=self.updated_at))

    def record_login(self):
        self.last_login_at = datetime.now(UTC)

    def update_profile(self, username, email) -> bool:
        """Rename the account or move it to a new address. Returns True when the email changed,
        in which case the address is unverified again.
        """
        username = (username or "").strip()
        email = (email or "").strip().lower()
        email_changed = email != self.email

        now = datetime.now(UTC)
        with atomic_change(self):
            self.username = username
            self.email = email
            if email_changed:
                self.is_email_verified = False
            self.updated_at = now

        self.raise_(
            ProfileUpdated(
                user_id=str(self.id),
                username=self.username,
                email=self.email,
                email_changed=email_changed,
                updated_at=now,
            )
        )
        return email_changed

    # -------------------------------------------------------------------
    # Account standing
    # -------------------------------------------------------------------
    def suspend(self):
        if self.is_admin:
            raise Forbidden({"user": ["Cannot suspend admin users"]})
        if self.account_status != AccountStatus.ACTIVE.value:
            raise ValidationError({"account_status": ["Only active accounts can be suspended"]})

        now = datetime.now(UTC)
        self.account_status = AccountStatus.SUSPENDED.value
        self.updated_at = now
        self.raise_(UserSuspended(user_id=str(self.id), suspended_at=now))

    def activate(self):
        if self.account_status == AccountStatus.DELETED.value:
            raise ValidationError({"account_status": ["Deleted accounts cannot be reactivated"]})

        now = datetime.now(UTC)
        self.account_status = AccountStatus.ACTIVE.value
        self.updated_at = now
        self.raise_(UserActivated(user_id=str(self.id), activated_at=now))

    def change_role(self, role):
        if role not in (Role.USER.value, Role.ADMIN.value):
            raise ValidationError({"role": ["Invalid role"]})
        if self.is_master_admin():
            raise Forbidden({"user": ["Master admin cannot be changed"]})

        now = datetime.now(UTC)
        previous = self.role
        self.role = role
        self.updated_at = now
        self.raise_(UserRoleChanged(user_id=str(self.id), previous_role=previous, role=role, changed_at=now))

    def assert_deletable(self):
        if self.is_master_admin():
            raise Forbidden({"user": ["Cannot delete master admin"]})
