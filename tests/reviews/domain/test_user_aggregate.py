"""Tests for the User aggregate: registration, email verification and standing."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from reviews.account.events import EmailVerified, PasswordChanged, ProfileUpdated, UserRegistered
from reviews.account.user import AccountStatus, Role, User, email_format_errors
from reviews.errors import Forbidden, Unauthorized


def _user(**overrides):
    defaults = {"username": "tenant", "email": "Tenant@Example.com"}
    defaults.update(overrides)
    user = User.register(**defaults)
    user._events.clear()
    return user


class TestRegistration:
    def test_defaults(self):
        user = _user()
        assert user.role == Role.USER.value
        assert user.account_status == AccountStatus.ACTIVE.value
        assert user.is_email_verified is False

    def test_email_is_lowercased(self):
        assert _user().email == "tenant@example.com"

    def test_event_raised(self):
        user = User.register(username="tenant", email="tenant@example.com")
        assert isinstance(user._events[0], UserRegistered)

    def test_short_username_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _user(username="ab")
        assert "Username must be at least 3 characters" in str(exc.value)

    @pytest.mark.parametrize(
        "email",
        ["no-at-sign", "two@@example.com", "space in@example.com", "x@nodot", "x@-bad.com", ".x@example.com"],
    )
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValidationError):
            _user(email=email)

    def test_valid_email_has_no_errors(self):
        assert email_format_errors("jane.doe@mail.example.co.uk") == []


class TestEmailVerification:
    def test_token_confirms_email(self):
        user = _user()
        token = user.issue_email_verification()
        user.confirm_email(token)
        assert user.is_email_verified is True
        assert user.email_verification_token is None
        assert isinstance(user._events[-1], EmailVerified)

    def test_wrong_token_rejected(self):
        user = _user()
        user.issue_email_verification()
        with pytest.raises(ValidationError) as exc:
            user.confirm_email("not-the-token")
        assert "Invalid or expired verification token" in str(exc.value)

    def test_expired_token_rejected(self):
        user = _user()
        token = user.issue_email_verification()
        user.email_verification_expires_at = datetime.now(UTC) - timedelta(minutes=1)
        with pytest.raises(ValidationError):
            user.confirm_email(token)

    def test_already_verified_cannot_reissue(self):
        user = _user(email_verified=True)
        with pytest.raises(ValidationError):
            user.issue_email_verification()

    def test_admin_verification_skips_token(self):
        user = _user()
        user.mark_email_verified()
        assert user.is_email_verified is True
        assert user._events[-1].method == "admin"


class TestCredentials:
    def test_password_stored_as_bcrypt_hash(self):
        user = _user(password="correct-horse-battery")
        assert user.password_hash.startswith("$2")
        assert "correct-horse-battery" not in user.password_hash

    def test_check_password(self):
        user = _user(password="correct-horse-battery")
        assert user.check_password("correct-horse-battery")
        assert not user.check_password("Correct-Horse-Battery")
        assert not user.check_password(None)

    def test_account_without_password_never_matches(self):
        assert not _user().check_password("anything-at-all")

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _user(password="short")
        assert exc.value.messages == {"password": ["Password must be at least 8 characters"]}

    def test_change_password(self):
        user = _user(password="correct-horse-battery")
        user.change_password("correct-horse-battery", "staple-lantern-river")
        assert user.check_password("staple-lantern-river")
        assert not user.check_password("correct-horse-battery")
        assert isinstance(user._events[-1], PasswordChanged)

    def test_change_password_needs_current_one(self):
        user = _user(password="correct-horse-battery")
        with pytest.raises(Unauthorized) as exc:
            user.change_password("guessed-password", "staple-lantern-river")
        assert exc.value.messages == {"current_password": ["Current password is incorrect"]}
        assert user.check_password("correct-horse-battery")

    def test_new_email_must_be_verified_again(self):
        user = _user(email_verified=True)
        assert user.update_profile("renamed", "Moved@Example.com") is True
        assert user.email == "moved@example.com"
        assert user.is_email_verified is False
        assert user._events[-1].email_changed is True

    def test_rename_keeps_verification(self):
        user = _user(email_verified=True)
        assert user.update_profile("renamed", "tenant@example.com") is False
        assert user.username == "renamed"
        assert user.is_email_verified is True
        assert isinstance(user._events[-1], ProfileUpdated)

    def test_record_login(self):
        user = _user()
        user.record_login()
        assert user.last_login_at is not None


class TestStanding:
    def test_suspend_and_activate(self):
        user = _user()
        user.suspend()
        assert user.account_status == AccountStatus.SUSPENDED.value
        assert user.is_active is False
        user.activate()
        assert user.is_active is True

    def test_admin_cannot_be_suspended(self):
        with pytest.raises(Forbidden) as exc:
            _user(role=Role.ADMIN.value).suspend()
        assert exc.value.messages == {"user": ["Cannot suspend admin users"]}

    def test_suspended_cannot_be_suspended_again(self):
        user = _user()
        user.suspend()
        with pytest.raises(ValidationError):
            user.suspend()

    def test_deleted_cannot_be_activated(self):
        user = _user()
        user.account_status = AccountStatus.DELETED.value
        with pytest.raises(ValidationError):
            user.activate()


class TestRoles:
    def test_promote_to_admin(self):
        user = _user()
        user.change_role("admin")
        assert user.is_admin

    def test_invalid_role(self):
        with pytest.raises(ValidationError) as exc:
            _user().change_role("owner")
        assert "Invalid role" in str(exc.value)

    def test_master_admin_by_email(self, monkeypatch):
        monkeypatch.setenv("ADMIN_EMAIL", "Boss@Example.com")
        master = _user(email="boss@example.com", role=Role.ADMIN.value)
        assert master.is_master_admin()
        with pytest.raises(Forbidden) as exc:
            master.change_role("user")
        assert exc.value.messages == {"user": ["Master admin cannot be changed"]}

    def test_master_admin_by_id(self, monkeypatch):
        master = _user(role=Role.ADMIN.value)
        monkeypatch.setenv("ADMIN_ID", str(master.id))
        with pytest.raises(Forbidden) as exc:
            master.assert_deletable()
        assert exc.value.messages == {"user": ["Cannot delete master admin"]}

    def test_ordinary_admin_is_deletable(self, monkeypatch):
        monkeypatch.delenv("ADMIN_EMAIL", raising=False)
        monkeypatch.delenv("ADMIN_ID", raising=False)
        _user(role=Role.ADMIN.value).assert_deletable()
