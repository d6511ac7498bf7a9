"""Account administration: suspend, activate, role changes, manual email
verification and deletion. Every command is issued by an admin actor.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from reviews.account.guards import require_admin
from reviews.account.user import User
from reviews.domain import reviews
from reviews.utils.logging import get_logger

logger = get_logger(__name__)


@reviews.command(part_of="User")
class VerifyUserEmail:
    actor_id = Identifier(required=True)
    user_id = Identifier(required=True)


@reviews.command(part_of="User")
class SuspendUser:
    actor_id = Identifier(required=True)
    user_id = Identifier(required=True)


@reviews.command(part_of="User")
class ActivateUser:
    actor_id = Identifier(required=True)
    user_id = Identifier(required=True)


@reviews.command(part_of="User")
class ChangeUserRole:
    actor_id = Identifier(required=True)
    user_id = Identifier(required=True)
    role = String(required=True, max_length=10)


@reviews.command(part_of="User")
class DeleteUser:
    actor_id = Identifier(required=True)
    user_id = Identifier(required=True)


@reviews.command_handler(part_of=User)
class ManageUserHandler:
    @handle(VerifyUserEmail)
    def verify_user_email(self, command):
        require_admin(command.actor_id)
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.mark_email_verified()
        repo.add(user)
        return str(user.id)

    @handle(SuspendUser)
    def suspend_user(self, command):
        require_admin(command.actor_id)
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.suspend()
        repo.add(user)
        logger.info("User suspended", user_id=str(user.id), actor_id=str(command.actor_id))
        return str(user.id)

    @handle(ActivateUser)
    def activate_user(self, command):
        require_admin(command.actor_id)
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.activate()
        repo.add(user)
        return str(user.id)

    @handle(ChangeUserRole)
    def change_user_role(self, command):
        require_admin(command.actor_id)
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_role(command.role)
        repo.add(user)
        logger.info("User role changed", user_id=str(user.id), role=command.role)
        return str(user.id)

    @handle(DeleteUser)
    def delete_user(self, command):
        actor = require_admin(command.actor_id)
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.assert_deletable()
        repo._dao.delete(user)
        logger.info("User deleted", user_id=str(user.id), actor_id=str(actor.id))
        return str(user.id)
