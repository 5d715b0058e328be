"""Account administration: role changes and (de)activation."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from urbanmart.domain import logger, urbanmart
from urbanmart.identity.user import User, UserRole
from urbanmart.utils.lookup import get_or_raise


@urbanmart.command(part_of="User")
class ChangeUserRole:
    user_id: Identifier(required=True)
    role: String(required=True, choices=UserRole)


@urbanmart.command(part_of="User")
class SetUserActive:
    """Deactivate (``is_active=False``) or reactivate a user."""

    user_id: Identifier(required=True)
    is_active: Boolean(required=True)


@urbanmart.command_handler(part_of=User)
class AccountAdministrationHandler:
    @handle(ChangeUserRole)
    def change_role(self, command):
        repo = current_domain.repository_for(User)
        user = get_or_raise(User, command.user_id, "User not found")
        user.change_role(command.role)
        repo.add(user)
        logger.info("user_role_changed", user_id=str(user.id), role=user.role)

    @handle(SetUserActive)
    def set_active(self, command):
        repo = current_domain.repository_for(User)
        user = get_or_raise(User, command.user_id, "User not found")
        if command.is_active:
            user.reactivate()
        else:
            user.deactivate()
        repo.add(user)
        logger.info("user_status_changed", user_id=str(user.id), is_active=user.is_active)
