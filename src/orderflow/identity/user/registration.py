"""User registration and profile commands."""

from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.mixins import handle

from orderflow.domain import orderflow
from orderflow.identity.user.store import UserStore
from orderflow.identity.user.user import User, normalize_email


@orderflow.command(part_of="User")
class RegisterUser:
    email = String(required=True, max_length=254)
    name = String(required=True, max_length=100)


@orderflow.command(part_of="User")
class ChangeUserEmail:
    user_id = Identifier(required=True)
    email = String(required=True, max_length=254)


@orderflow.command(part_of="User")
class RenameUser:
    user_id = Identifier(required=True)
    name = String(required=True, max_length=100)


@orderflow.command_handler(part_of=User)
class UserCommandHandler:
    @handle(RegisterUser)
    def register_user(self, command: RegisterUser):
        store = UserStore()
        if store.find_by_email(normalize_email(command.email)) is not None:
            raise ValidationError({"email": ["Email address is already registered"]})

        user = User.register(email=command.email, name=command.name)
        store.save(user)
        return str(user.id)

    @handle(ChangeUserEmail)
    def change_email(self, command: ChangeUserEmail):
        store = UserStore()
        user = store.get(command.user_id)
        user.change_email(command.email)
        store.save(user)

    @handle(RenameUser)
    def rename_user(self, command: RenameUser):
        store = UserStore()
        user = store.get(command.user_id)
        user.rename(command.name)
        store.save(user)
