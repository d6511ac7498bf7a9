"""Account registration and email verification: commands and handler.

Registration stores the bcrypt password hash, issues a verification token and
emails it; the token must be confirmed before the account can submit reviews.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from reviews import config
from reviews.account.user import User
from reviews.domain import reviews
from reviews.notifications.dispatch import notify


@reviews.command(part_of="User")
class RegisterUser:
    username = String(required=True, max_length=30)
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=128)


@reviews.command(part_of="User")
class ConfirmEmail:
    token = String(required=True, max_length=64)


@reviews.command(part_of="User")
class ResendVerification:
    email = String(required=True, max_length=254)


def send_verification(user, token):
    notify(
        user.email,
        "email_verification",
        {
            "username": user.username,
            "verification_url": f"{config.app_url()}/verify-email/{token}",
            "ttl_hours": config.email_verification_ttl_hours(),
        },
    )


@reviews.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        email = command.email.strip().lower()
        username = command.username.strip()

        if repo._dao.query.filter(email=email).all().items:
            raise ValidationError({"email": ["An account with this email already exists"]})
        if repo._dao.query.filter(username=username).all().items:
            raise ValidationError({"username": ["Username is already taken"]})

        user = User.register(username=username, email=email, password=command.password)
        token = user.issue_email_verification()
        repo.add(user)

        send_verification(user, token)
        return str(user.id)

    @handle(ConfirmEmail)
    def confirm_email(self, command):
        repo = current_domain.repository_for(User)
        matches = repo._dao.query.filter(email_verification_token=command.token).all().items
        if not matches:
            raise ValidationError({"token": ["Invalid or expired verification token"]})

        user = repo.get(matches[0].id)
        user.confirm_email(command.token)
        repo.add(user)

        notify(user.email, "welcome", {"username": user.username})
        return str(user.id)

    @handle(ResendVerification)
    def resend_verification(self, command):
        repo = current_domain.repository_for(User)
        matches = repo._dao.query.filter(email=command.email.strip().lower()).all().items
        if not matches:
            raise ValidationError({"email": ["No account found with that email"]})

        user = repo.get(matches[0].id)
        token = user.issue_email_verification()
        repo.add(user)

        send_verification(user, token)
        return str(user.id)
