from __future__ import annotations

from django.db.models import Q

from medpass_core.adapters.repositories._orm import model_defaults, paginate
from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.franchise_entity import FranchiseEntity
from medpass_core.core.domain.repositories.franchise_repository import FranchiseRepository
from plugins.django_interface.models import Franchise as FranchiseModel


class FranchiseRepoImpl(FranchiseRepository):
    def find_by_id(self, franchise_id: str) -> FranchiseEntity | None:
        m = FranchiseModel.objects.filter(id=franchise_id).first()
        return FranchiseEntity.from_model(m) if m else None

    def save(self, entity: FranchiseEntity) -> FranchiseEntity:
        m, _ = FranchiseModel.objects.update_or_create(
            id=entity.id, defaults=model_defaults(entity)
        )
        return FranchiseEntity.from_model(m)

    def deactivate(self, franchise_id: str) -> None:
        FranchiseModel.objects.filter(id=franchise_id).update(active=False)

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[FranchiseEntity]:
        filtros = dict(filtros or {})
        search = (filtros.pop("search", "") or "").strip()
        # franquias não pertencem a uma unidade
        filtros.pop("unit_id", None)
        qs = FranchiseModel.objects.filter(**filtros)
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))
        return paginate(qs.order_by("name"), FranchiseEntity, page, page_size)
