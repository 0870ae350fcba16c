from __future__ import annotations

from django.db.models import Q
from django.utils import timezone

from medpass_core.adapters.repositories._orm import model_defaults, paginate
from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.commission_entity import CommissionEntity
from medpass_core.core.domain.events.exceptions import NotFoundError
from medpass_core.core.domain.repositories.commission_repository import CommissionRepository
from medpass_core.core.domain.services.validators import only_digits
from plugins.django_interface.models import Commission as CommissionModel


class CommissionRepoImpl(CommissionRepository):
    def find_by_id(self, commission_id: str) -> CommissionEntity | None:
        m = CommissionModel.objects.filter(id=commission_id).first()
        return CommissionEntity.from_model(m) if m else None

    def save(self, entity: CommissionEntity) -> CommissionEntity:
        """
        Idempotente pela chave natural; um webhook reaplicado não duplica comissão.
        """
        existing = CommissionModel.objects.filter(
            beneficiary_id=entity.beneficiary_id,
            reference_month=entity.reference_month,
            commission_type=entity.commission_type,
        ).exclude(id=entity.id).first()
        lookup_id = existing.id if existing else entity.id
        m, _ = CommissionModel.objects.update_or_create(
            id=lookup_id, defaults=model_defaults(entity)
        )
        return CommissionEntity.from_model(m)

    def mark_paid(self, commission_id: str) -> CommissionEntity:
        updated = CommissionModel.objects.filter(id=commission_id).update(
            paid=True, paid_at=timezone.now()
        )
        if not updated:
            raise NotFoundError("Comissão não encontrada", commission_id=str(commission_id))
        return CommissionEntity.from_model(CommissionModel.objects.get(id=commission_id))

    def delete(self, commission_id: str) -> None:
        CommissionModel.objects.filter(id=commission_id).delete()

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[CommissionEntity]:
        filtros = dict(filtros or {})
        search = (filtros.pop("search", "") or "").strip()
        qs = CommissionModel.objects.filter(**filtros)
        if search:
            qs = qs.filter(
                Q(beneficiary__name__icontains=search)
                | Q(beneficiary__cpf__icontains=only_digits(search) or search)
            )
        return paginate(qs.order_by("-reference_month", "-created_at"), CommissionEntity, page, page_size)
