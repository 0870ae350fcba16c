from __future__ import annotations

from django.db.models import Q

from medpass_core.adapters.repositories._orm import model_defaults, paginate
from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.unit_entity import UnitEntity
from medpass_core.core.domain.repositories.unit_repository import UnitRepository
from plugins.django_interface.models import Unit as UnitModel


class UnitRepoImpl(UnitRepository):
    def find_by_id(self, unit_id: str) -> UnitEntity | None:
        m = UnitModel.objects.filter(id=unit_id).first()
        return UnitEntity.from_model(m) if m else None

    def save(self, entity: UnitEntity) -> UnitEntity:
        m, _ = UnitModel.objects.update_or_create(id=entity.id, defaults=model_defaults(entity))
        return UnitEntity.from_model(m)

    def deactivate(self, unit_id: str) -> None:
        UnitModel.objects.filter(id=unit_id).update(active=False)

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[UnitEntity]:
        filtros = dict(filtros or {})
        search = (filtros.pop("search", "") or "").strip()
        # escopo da unidade: o operador só enxerga a própria unidade
        unit_id = filtros.pop("unit_id", None)
        qs = UnitModel.objects.filter(**filtros)
        if unit_id:
            qs = qs.filter(id=unit_id)
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(city__icontains=search) | Q(cnpj__icontains=search))
        return paginate(qs.order_by("name"), UnitEntity, page, page_size)
