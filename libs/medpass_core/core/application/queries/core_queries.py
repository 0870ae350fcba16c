"""
Queries de leitura do núcleo.

`filtros` chega da view já com o escopo aplicado: para usuários de
unidade a view injeta `unit_id`, e o handler do Get confere a posse.
"""
from dataclasses import dataclass

from medpass_core.core.application.cqrs import PaginatedQueryDTO, QueryDTO


# ───────────────────────────────────────────────
# Listagens paginadas
# ───────────────────────────────────────────────
@dataclass(frozen=True)
class ListFranchisesQuery(PaginatedQueryDTO[dict]):
    pass


@dataclass(frozen=True)
class ListUnitsQuery(PaginatedQueryDTO[dict]):
    pass


@dataclass(frozen=True)
class ListPlansQuery(PaginatedQueryDTO[dict]):
    pass


@dataclass(frozen=True)
class ListBeneficiariesQuery(PaginatedQueryDTO[dict]):
    pass


@dataclass(frozen=True)
class ListCommissionsQuery(PaginatedQueryDTO[dict]):
    pass


@dataclass(frozen=True)
class ListContractsQuery(PaginatedQueryDTO[dict]):
    pass


@dataclass(frozen=True)
class ListNotificationsQuery(PaginatedQueryDTO[dict]):
    pass


# ───────────────────────────────────────────────
# Detalhe por ID (filtros: {"id": ..., "unit_id": ...})
# ───────────────────────────────────────────────
@dataclass(frozen=True)
class GetFranchiseQuery(QueryDTO[dict]):
    pass


@dataclass(frozen=True)
class GetUnitQuery(QueryDTO[dict]):
    pass


@dataclass(frozen=True)
class GetPlanQuery(QueryDTO[dict]):
    pass


@dataclass(frozen=True)
class GetBeneficiaryQuery(QueryDTO[dict]):
    pass


@dataclass(frozen=True)
class GetCommissionQuery(QueryDTO[dict]):
    pass


@dataclass(frozen=True)
class GetContractQuery(QueryDTO[dict]):
    pass


@dataclass(frozen=True)
class GetNotificationQuery(QueryDTO[dict]):
    pass
