from __future__ import annotations

from django.db.models import Q

from medpass_core.adapters.repositories._orm import model_defaults, paginate
from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.contract_entity import ContractEntity
from medpass_core.core.domain.repositories.contract_repository import ContractRepository
from medpass_core.core.domain.services.validators import only_digits
from plugins.django_interface.models import Contract as ContractModel


class ContractRepoImpl(ContractRepository):
    def find_by_id(self, contract_id: str) -> ContractEntity | None:
        m = ContractModel.objects.filter(id=contract_id).first()
        return ContractEntity.from_model(m) if m else None

    def find_by_document_id(self, document_id: str) -> ContractEntity | None:
        m = ContractModel.objects.filter(document_id=document_id).first()
        return ContractEntity.from_model(m) if m else None

    def save(self, entity: ContractEntity) -> ContractEntity:
        m, _ = ContractModel.objects.update_or_create(id=entity.id, defaults=model_defaults(entity))
        return ContractEntity.from_model(m)

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[ContractEntity]:
        filtros = dict(filtros or {})
        # contratos não têm unidade própria: escopo via beneficiário
        unit_id = filtros.pop("unit_id", None)
        search = (filtros.pop("search", "") or "").strip()
        qs = ContractModel.objects.filter(**filtros)
        if search:
            qs = qs.filter(
                Q(beneficiary__name__icontains=search)
                | Q(beneficiary__cpf__icontains=only_digits(search) or search)
                | Q(document_id__icontains=search)
            )
        if unit_id:
            qs = qs.filter(beneficiary__unit_id=unit_id)
        return paginate(qs.order_by("-created_at"), ContractEntity, page, page_size)
