"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from urbanmart.domain import logger, urbanmart
from urbanmart.identity.user import User, UserRole
from urbanmart.utils.lookup import find_one


@urbanmart.command(part_of="User")
class RegisterUser:
    """Create a new account with the given role."""

    email: String(required=True, max_length=254)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    role: String(choices=UserRole, default=UserRole.CUSTOMER.value)
    phone: String(max_length=20)


@urbanmart.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        email = command.email.strip().lower()
        if find_one(User, email=email) is not None:
            raise ValidationError({"email": ["User already exists with this email"]})

        user = User.register(
            email=email,
            first_name=command.first_name,
            last_name=command.last_name,
            role=command.role,
            phone=command.phone,
        )
        current_domain.repository_for(User).add(user)

        logger.info("user_registered", user_id=str(user.id), role=user.role)
        return str(user.id)
