from __future__ import annotations

from medpass_core.adapters.repositories._orm import model_defaults, paginate
from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.plan_entity import PlanEntity
from medpass_core.core.domain.repositories.plan_repository import PlanRepository
from plugins.django_interface.models import Plan as PlanModel


class PlanRepoImpl(PlanRepository):
    def find_by_id(self, plan_id: str) -> PlanEntity | None:
        m = PlanModel.objects.filter(id=plan_id).first()
        return PlanEntity.from_model(m) if m else None

    def save(self, entity: PlanEntity) -> PlanEntity:
        m, _ = PlanModel.objects.update_or_create(id=entity.id, defaults=model_defaults(entity))
        return PlanEntity.from_model(m)

    def deactivate(self, plan_id: str) -> None:
        PlanModel.objects.filter(id=plan_id).update(active=False)

    def list_active(self) -> list[PlanEntity]:
        return [PlanEntity.from_model(m) for m in PlanModel.objects.filter(active=True).order_by("price")]

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[PlanEntity]:
        filtros = dict(filtros or {})
        filtros.pop("unit_id", None)
        search = (filtros.pop("search", "") or "").strip()
        qs = PlanModel.objects.filter(**filtros)
        if search:
            qs = qs.filter(name__icontains=search)
        return paginate(qs.order_by("price"), PlanEntity, page, page_size)
