from typing import Any

from medpass_core.core.application.cqrs import PagedResult, QueryHandler
from medpass_core.core.application.queries.core_queries import (
    GetBeneficiaryQuery,
    GetCommissionQuery,
    GetContractQuery,
    GetFranchiseQuery,
    GetNotificationQuery,
    GetPlanQuery,
    GetUnitQuery,
    ListBeneficiariesQuery,
    ListCommissionsQuery,
    ListContractsQuery,
    ListFranchisesQuery,
    ListNotificationsQuery,
    ListPlansQuery,
    ListUnitsQuery,
)
from medpass_core.core.application.queries.user_queries import GetUserQuery
from medpass_core.core.domain.events.exceptions import NotFoundError, PlanNotFoundError
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.commission_repository import CommissionRepository
from medpass_core.core.domain.repositories.contract_repository import ContractRepository
from medpass_core.core.domain.repositories.franchise_repository import FranchiseRepository
from medpass_core.core.domain.repositories.notification_repository import NotificationRepository
from medpass_core.core.domain.repositories.plan_repository import PlanRepository
from medpass_core.core.domain.repositories.unit_repository import UnitRepository
from medpass_core.core.domain.repositories.user_repository import UserRepository


def _scope(filtros: dict) -> tuple[str, str | None]:
    obj_id = filtros.get("id")
    if not obj_id:
        raise NotFoundError("ID não informado")
    return str(obj_id), filtros.get("unit_id")


def _owned_or_404(entity: Any, owner_unit_id: Any, scope_unit_id: str | None, label: str) -> Any:
    if entity is None or (scope_unit_id and str(owner_unit_id) != str(scope_unit_id)):
        raise NotFoundError(f"{label} não encontrado")
    return entity


# ───────────────────────────────────────────────
# Handlers de listagem (repositório já pagina)
# ───────────────────────────────────────────────
class _ListHandler:
    def __init__(self, repo):
        self.repo = repo

    def handle(self, query) -> PagedResult:
        return self.repo.list(dict(query.filtros or {}), query.page, query.page_size)


class ListFranchisesHandler(_ListHandler, QueryHandler[ListFranchisesQuery, PagedResult]):
    pass


class ListUnitsHandler(_ListHandler, QueryHandler[ListUnitsQuery, PagedResult]):
    pass


class ListPlansHandler(_ListHandler, QueryHandler[ListPlansQuery, PagedResult]):
    pass


class ListBeneficiariesHandler(_ListHandler, QueryHandler[ListBeneficiariesQuery, PagedResult]):
    pass


class ListCommissionsHandler(_ListHandler, QueryHandler[ListCommissionsQuery, PagedResult]):
    pass


class ListContractsHandler(_ListHandler, QueryHandler[ListContractsQuery, PagedResult]):
    pass


class ListNotificationsHandler(_ListHandler, QueryHandler[ListNotificationsQuery, PagedResult]):
    pass


# ───────────────────────────────────────────────
# Handlers de detalhe (conferem escopo da unidade)
# ───────────────────────────────────────────────
class GetFranchiseHandler(QueryHandler[GetFranchiseQuery, object]):
    def __init__(self, repo: FranchiseRepository):
        self.repo = repo

    def handle(self, query: GetFranchiseQuery):
        obj_id, _ = _scope(query.filtros)
        return _owned_or_404(self.repo.find_by_id(obj_id), None, None, "Franquia")


class GetUnitHandler(QueryHandler[GetUnitQuery, object]):
    def __init__(self, repo: UnitRepository):
        self.repo = repo

    def handle(self, query: GetUnitQuery):
        obj_id, unit_id = _scope(query.filtros)
        return _owned_or_404(self.repo.find_by_id(obj_id), obj_id, unit_id, "Unidade")


class GetPlanHandler(QueryHandler[GetPlanQuery, object]):
    def __init__(self, repo: PlanRepository):
        self.repo = repo

    def handle(self, query: GetPlanQuery):
        obj_id, _ = _scope(query.filtros)
        plan = self.repo.find_by_id(obj_id)
        if plan is None:
            raise PlanNotFoundError(plan_id=obj_id)
        return plan


class GetBeneficiaryHandler(QueryHandler[GetBeneficiaryQuery, object]):
    def __init__(self, repo: BeneficiaryRepository):
        self.repo = repo

    def handle(self, query: GetBeneficiaryQuery):
        obj_id, unit_id = _scope(query.filtros)
        ben = self.repo.find_by_id(obj_id)
        return _owned_or_404(ben, getattr(ben, "unit_id", None), unit_id, "Beneficiário")


class GetCommissionHandler(QueryHandler[GetCommissionQuery, object]):
    def __init__(self, repo: CommissionRepository):
        self.repo = repo

    def handle(self, query: GetCommissionQuery):
        obj_id, unit_id = _scope(query.filtros)
        com = self.repo.find_by_id(obj_id)
        return _owned_or_404(com, getattr(com, "unit_id", None), unit_id, "Comissão")


class GetContractHandler(QueryHandler[GetContractQuery, object]):
    def __init__(self, repo: ContractRepository, beneficiary_repo: BeneficiaryRepository):
        self.repo = repo
        self.beneficiary_repo = beneficiary_repo

    def handle(self, query: GetContractQuery):
        obj_id, unit_id = _scope(query.filtros)
        contract = self.repo.find_by_id(obj_id)
        if contract is None:
            raise NotFoundError("Contrato não encontrado")
        if unit_id:
            ben = self.beneficiary_repo.find_by_id(str(contract.beneficiary_id))
            _owned_or_404(ben, getattr(ben, "unit_id", None), unit_id, "Contrato")
        return contract


class GetNotificationHandler(QueryHandler[GetNotificationQuery, object]):
    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def handle(self, query: GetNotificationQuery):
        obj_id, _ = _scope(query.filtros)
        notif = self.repo.find_by_id(obj_id)
        user_id = query.filtros.get("user_id")
        if notif is None or (user_id and str(notif.user_id) != str(user_id)):
            raise NotFoundError("Notificação não encontrada")
        return notif


class GetUserHandler(QueryHandler[GetUserQuery, object]):
    def __init__(self, repo: UserRepository):
        self.repo = repo

    def handle(self, query: GetUserQuery):
        obj_id, _ = _scope(query.filtros)
        user = self.repo.find_by_id(obj_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado")
        return user
