from medpass_core.core.domain.entities.integration_log_entity import IntegrationLogEntity
from medpass_core.core.domain.repositories.integration_log_repository import (
    IntegrationLogRepository,
)
from plugins.django_interface.models import IntegrationLog as IntegrationLogModel


class IntegrationLogRepoImpl(IntegrationLogRepository):
    def add(self, entry: IntegrationLogEntity) -> IntegrationLogEntity:
        m = IntegrationLogModel.objects.create(
            id=entry.id,
            beneficiary_id=entry.beneficiary_id,
            operation=entry.operation,
            status=entry.status,
            request_data=entry.request_data,
            response_data=entry.response_data,
            error_message=entry.error_message,
            retry_count=entry.retry_count,
        )
        return IntegrationLogEntity.from_model(m)

    def count_for(self, beneficiary_id: str, operation: str) -> int:
        return IntegrationLogModel.objects.filter(beneficiary_id=beneficiary_id, operation=operation).count()
