from __future__ import annotations

from typing import Any, TypeVar

from django.db.models import QuerySet

from medpass_core.core.application.cqrs import PagedResult

T = TypeVar("T")

_READ_ONLY = {"created_at", "updated_at"}


def model_defaults(entity: Any, *exclude: str) -> dict[str, Any]:
    """
    Campos da entidade prontos para `update_or_create(defaults=...)`.
    Timestamps gerenciados pelo Django e `id` ficam de fora.
    """
    skip = _READ_ONLY | {"id", *exclude}
    return {k: v for k, v in entity.to_dict().items() if k not in skip}


def paginate(qs: QuerySet, entity_cls: type[T], page: int, page_size: int) -> PagedResult[T]:
    page = max(int(page or 1), 1)
    page_size = max(int(page_size or 1), 1)
    total = qs.count()
    offset = (page - 1) * page_size
    items = [entity_cls.from_model(m) for m in qs[offset : offset + page_size]]  # type: ignore[attr-defined]
    return PagedResult(items=items, total=total, page=page, page_size=page_size)
