from medpass_core.adapters.repositories._orm import model_defaults
from medpass_core.core.domain.entities.subscription_entity import SubscriptionEntity
from medpass_core.core.domain.repositories.subscription_repository import SubscriptionRepository
from plugins.django_interface.models import Subscription as SubscriptionModel


class SubscriptionRepoImpl(SubscriptionRepository):
    def find_by_vindi_id(self, vindi_subscription_id: int) -> SubscriptionEntity | None:
        m = SubscriptionModel.objects.filter(vindi_subscription_id=vindi_subscription_id).first()
        return SubscriptionEntity.from_model(m) if m else None

    def save(self, entity: SubscriptionEntity) -> SubscriptionEntity:
        m, _ = SubscriptionModel.objects.update_or_create(id=entity.id, defaults=model_defaults(entity))
        return SubscriptionEntity.from_model(m)

    def set_status(self, subscription_id: str, status: str) -> None:
        SubscriptionModel.objects.filter(id=subscription_id).update(status=status)
