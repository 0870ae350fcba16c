from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from medpass_core.core.application.dtos.user_dto import UserDTO


@dataclass(frozen=True)
class CreateUserCommand(CommandDTO):
    payload: UserDTO
