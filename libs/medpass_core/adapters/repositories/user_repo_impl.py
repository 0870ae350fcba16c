from medpass_core.adapters.repositories._orm import model_defaults
from medpass_core.core.domain.entities.user_entity import UserEntity
from medpass_core.core.domain.repositories.user_repository import UserRepository
from plugins.django_interface.models import User as UserModel


class UserRepoImpl(UserRepository):
    def find_by_id(self, user_id: str) -> UserEntity | None:
        try:
            m = UserModel.objects.get(id=user_id)
            return UserEntity.from_model(m)
        except UserModel.DoesNotExist:
            return None

    def find_by_email(self, email: str) -> UserEntity | None:
        m = UserModel.objects.filter(email__iexact=email).first()
        return UserEntity.from_model(m) if m else None

    def list_headquarters(self) -> list[UserEntity]:
        qs = UserModel.objects.filter(role=UserModel.Role.MATRIZ, is_active=True)
        return [UserEntity.from_model(m) for m in qs]

    def save(self, user: UserEntity) -> UserEntity:
        m, _ = UserModel.objects.update_or_create(id=user.id, defaults=model_defaults(user))
        return UserEntity.from_model(m)
