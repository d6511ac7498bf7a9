"""Self-service account operations: login, password change, profile
update and account deletion. Each acts on the caller's own account.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from reviews.account.registration import send_verification
from reviews.account.user import AccountStatus, User
from reviews.domain import reviews
from reviews.errors import Forbidden, Unauthorized
from reviews.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = {"credentials": ["Invalid credentials"]}


@reviews.command(part_of="User")
class LogIn:
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=128)


@reviews.command(part_of="User")
class ChangePassword:
    user_id = Identifier(required=True)
    current_password = String(required=True, max_length=128)
    new_password = String(required=True, max_length=128)


@reviews.command(part_of="User")
class UpdateProfile:
    user_id = Identifier(required=True)
    username = String(required=True, max_length=30)
    email = String(required=True, max_length=254)


@reviews.command(part_of="User")
class DeleteOwnAccount:
    user_id = Identifier(required=True)
    password = String(required=True, max_length=128)


def _taken_by_other(repo, user_id, **criteria) -> bool:
    return any(str(match.id) != str(user_id) for match in repo._dao.query.filter(**criteria).all().items)


@reviews.command_handler(part_of=User)
class CredentialsHandler:
    @handle(LogIn)
    def log_in(self, command):
        """Check the password, then the account's standing. Returns the user id."""
        repo = current_domain.repository_for(User)
        matches = repo._dao.query.filter(email=command.email.strip().lower()).all().items
        if not matches:
            raise Unauthorized(INVALID_CREDENTIALS)

        user = repo.get(matches[0].id)
        if not user.check_password(command.password):
            logger.info("Login failed", user_id=str(user.id))
            raise Unauthorized(INVALID_CREDENTIALS)
        if user.account_status != AccountStatus.ACTIVE.value:
            raise Forbidden({"account": ["Account is suspended or deleted"]})

        user.record_login()
        repo.add(user)
        return str(user.id)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_password(command.current_password, command.new_password)
        repo.add(user)
        logger.info("Password changed", user_id=str(user.id))
        return str(user.id)

    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        email = command.email.strip().lower()
        username = command.username.strip()
        if _taken_by_other(repo, user.id, email=email):
            raise ValidationError({"email": ["An account with this email already exists"]})
        if _taken_by_other(repo, user.id, username=username):
            raise ValidationError({"username": ["Username is already taken"]})

        email_changed = user.update_profile(username, email)
        token = user.issue_email_verification() if email_changed else None
        repo.add(user)

        if token:
            send_verification(user, token)
        return str(user.id)

    @handle(DeleteOwnAccount)
    def delete_own_account(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        if not user.check_password(command.password):
            raise Unauthorized({"password": ["Password is incorrect"]})

        user.assert_deletable()
        repo._dao.delete(user)
        logger.info("Account deleted by owner", user_id=str(user.id))
        return str(user.id)
