from medpass_core.core.domain.entities.cancellation_entity import CancellationEntity
from medpass_core.core.domain.repositories.cancellation_repository import CancellationRepository
from plugins.django_interface.models import Cancellation as CancellationModel


class CancellationRepoImpl(CancellationRepository):
    def add(self, entity: CancellationEntity) -> CancellationEntity:
        m = CancellationModel.objects.create(
            id=entity.id,
            beneficiary_id=entity.beneficiary_id,
            user_id=entity.user_id,
            reason=entity.reason,
            notes=entity.notes,
        )
        return CancellationEntity.from_model(m)

    def list_by_beneficiary(self, beneficiary_id: str) -> list[CancellationEntity]:
        qs = CancellationModel.objects.filter(beneficiary_id=beneficiary_id)
        return [CancellationEntity.from_model(m) for m in qs]
