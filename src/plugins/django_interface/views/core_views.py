# ╭────────────────────────────────────────────────────────────────────────────╮
# │  ViewSets REST – rede (franquias, unidades, planos) e beneficiários        │
# │                                                                            │
# │  • Filtro seguro   → só campos conhecidos chegam ao repositório            │
# │  • Escopo          → operador de unidade vê apenas a própria unidade       │
# │  • Cache em LIST   → versão por recurso, invalidada em toda mutação        │
# │  • Métrica         → decorator `track_http`                                │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

from typing import Any, ClassVar

from django.conf import settings
from django.core.cache import cache
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from medpass_core.adapters.config.composition_root import setup_di_container_from_settings
from medpass_core.adapters.observability.decorators import track_http
from medpass_core.core.application.commands.beneficiary_commands import (
    CreateBeneficiaryCommand,
    DeleteBeneficiaryCommand,
    UpdateBeneficiaryCommand,
)
from medpass_core.core.application.commands.commission_commands import (
    CreateCommissionCommand,
    DeleteCommissionCommand,
    MarkCommissionPaidCommand,
    UpdateCommissionCommand,
)
from medpass_core.core.application.commands.contract_commands import (
    CreateContractCommand,
    DeleteContractCommand,
    UpdateContractCommand,
)
from medpass_core.core.application.commands.franchise_commands import (
    CreateFranchiseCommand,
    DeleteFranchiseCommand,
    UpdateFranchiseCommand,
)
from medpass_core.core.application.commands.notification_commands import (
    CreateNotificationCommand,
    DeleteNotificationCommand,
    MarkAllNotificationsReadCommand,
    MarkNotificationReadCommand,
    UpdateNotificationCommand,
)
from medpass_core.core.application.commands.plan_commands import (
    CreatePlanCommand,
    DeletePlanCommand,
    UpdatePlanCommand,
)
from medpass_core.core.application.commands.unit_commands import (
    CreateUnitCommand,
    DeleteUnitCommand,
    UpdateUnitCommand,
)
from medpass_core.core.application.cqrs import CommandBusImpl, PagedResult, QueryBusImpl
from medpass_core.core.application.dtos.beneficiary_dto import BeneficiaryDTO, BeneficiaryUpdateDTO
from medpass_core.core.application.dtos.commission_dto import CommissionDTO, CommissionUpdateDTO
from medpass_core.core.application.dtos.contract_dto import ContractDTO, ContractUpdateDTO
from medpass_core.core.application.dtos.network_dtos import (
    FranchiseDTO,
    FranchiseUpdateDTO,
    UnitDTO,
    UnitUpdateDTO,
)
from medpass_core.core.application.dtos.notification_dto import NotificationDTO, NotificationUpdateDTO
from medpass_core.core.application.dtos.plan_dto import PlanDTO, PlanUpdateDTO
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
from medpass_core.core.domain.events.exceptions import PermissionDeniedError
from plugins.django_interface.list_cache import LIST_TTL, invalidate, list_cache_key
from plugins.django_interface.permissions import (
    ROLE_HEADQUARTERS,
    IsHeadquarters,
    IsNetworkUser,
    ReadOnlyOrHeadquarters,
)

from ..serializers.core_serializers import (
    BeneficiarySerializer,
    CommissionSerializer,
    ContractSerializer,
    FranchiseSerializer,
    NotificationSerializer,
    PlanSerializer,
    UnitSerializer,
)

# ───────────────────────────────  CQRS Buses  ────────────────────────────────
_core_container = setup_di_container_from_settings(settings)
core_command_bus: CommandBusImpl = _core_container.command_bus()
core_query_bus: QueryBusImpl = _core_container.query_bus()

# ───────────────────────────────  Constantes  ────────────────────────────────
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def scope_unit_id(request) -> str | None:
    """`None` para a matriz; o `unit_id` do operador de unidade."""
    user = request.user
    if getattr(user, "role", None) == ROLE_HEADQUARTERS:
        return None
    unit_id = getattr(user, "unit_id", None)
    if not unit_id:
        raise PermissionDeniedError("Usuário sem unidade vinculada")
    return str(unit_id)


def request_body(request) -> dict[str, Any]:
    data = request.data
    return data.dict() if hasattr(data, "dict") else dict(data)


# ╭──────────────────────────────────────────────────────────────────────────╮
# │ Helper mix-in – paginação + filtros                                      │
# ╰──────────────────────────────────────────────────────────────────────────╯
class PaginationFilterMixin:
    """Separa page/page_size e devolve apenas os filtros permitidos."""

    filter_fields: ClassVar[tuple[str, ...]] = ()

    @staticmethod
    def _pagination(request) -> tuple[int, int]:
        try:
            page = max(int(request.query_params.get("page", 1)), 1)
            size = int(request.query_params.get("page_size", DEFAULT_PAGE_SIZE))
        except ValueError:
            return 1, DEFAULT_PAGE_SIZE
        return page, min(max(size, 1), MAX_PAGE_SIZE)

    def _filters(self, request) -> dict[str, Any]:
        clean: dict[str, Any] = {}
        for key in request.query_params:
            base = key.removesuffix("__in")
            if base not in self.filter_fields and key != "search":
                continue
            values = request.query_params.getlist(key)
            if key.endswith("__in"):
                items: list[str] = []
                for v in values:
                    items.extend(v.split(","))        # “a,b,c” → [a,b,c]
                clean[key] = items
            elif key in ("active", "paid", "read"):
                clean[key] = values[0].lower() in ("1", "true", "yes")
            else:
                clean[key] = values[0]
        return clean


# ╭──────────────────────────────────────────────────────────────────────────╮
# │ Base CRUD: List/Get via QueryBus, Create/Update/Delete via CommandBus    │
# ╰──────────────────────────────────────────────────────────────────────────╯
class CrudViewSet(PaginationFilterMixin, viewsets.ViewSet):
    resource: ClassVar[str]
    serializer_class: ClassVar[type]
    list_query: ClassVar[type]
    get_query: ClassVar[type]
    create_command: ClassVar[type]
    update_command: ClassVar[type]
    delete_command: ClassVar[type]
    create_dto: ClassVar[type]
    update_dto: ClassVar[type]
    # recursos afetados pela mutação deste (além dele mesmo)
    invalidates: ClassVar[tuple[str, ...]] = ()
    # False para catálogos globais (planos, franquias)
    unit_scoped: ClassVar[bool] = True

    # ─── ganchos ───────────────────────────────────────────────
    def _scope(self, request) -> str | None:
        return scope_unit_id(request) if self.unit_scoped else None

    def _list_filters(self, request) -> dict[str, Any]:
        filtros = self._filters(request)
        unit_id = self._scope(request)
        if unit_id:
            filtros["unit_id"] = unit_id
        return filtros

    def _get_filters(self, request, pk) -> dict[str, Any]:
        return {"id": str(pk), "unit_id": self._scope(request)}

    def _create_payload(self, request) -> dict[str, Any]:
        return request_body(request)

    def _invalidate(self) -> None:
        invalidate(self.resource, *self.invalidates)

    def _paged_payload(self, res: PagedResult) -> dict[str, Any]:
        return {
            "results": self.serializer_class(res.items, many=True).data,
            "total_items": res.total,
            "page": res.page,
            "page_size": res.page_size,
            "total_pages": res.total_pages,
            "items_on_page": len(res.items),
        }

    # ─── actions ───────────────────────────────────────────────
    @track_http()
    def list(self, request):
        filtros = self._list_filters(request)
        page, page_size = self._pagination(request)

        scope = f"u{filtros.get('unit_id') or filtros.get('user_id') or 'all'}"
        key = list_cache_key(self.resource, scope, {**filtros, "page": page, "page_size": page_size})
        payload = cache.get(key)
        if payload is None:
            res = core_query_bus.dispatch(self.list_query(filtros=filtros, page=page, page_size=page_size))
            payload = self._paged_payload(res)
            cache.set(key, payload, LIST_TTL)
        return Response(payload, status=status.HTTP_200_OK)

    @track_http()
    def retrieve(self, request, pk=None):
        obj = core_query_bus.dispatch(self.get_query(filtros=self._get_filters(request, pk)))
        return Response(self.serializer_class(obj).data)

    @track_http()
    def create(self, request):
        dto = self.create_dto.model_validate(self._create_payload(request))
        obj = core_command_bus.dispatch(
            self.create_command(payload=dto, scope_unit_id=self._scope(request))
        )
        self._invalidate()
        return Response(self.serializer_class(obj).data, status=status.HTTP_201_CREATED)

    @track_http()
    def update(self, request, pk=None):
        dto = self.update_dto.model_validate(request_body(request))
        obj = core_command_bus.dispatch(
            self.update_command(id=str(pk), payload=dto, scope_unit_id=self._scope(request))
        )
        self._invalidate()
        return Response(self.serializer_class(obj).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @track_http()
    def destroy(self, request, pk=None):
        core_command_bus.dispatch(self.delete_command(id=str(pk), scope_unit_id=self._scope(request)))
        self._invalidate()
        return Response(status=status.HTTP_204_NO_CONTENT)


# ╭──────────────────────────────────────────────╮
# │  Rede                                        │
# ╰──────────────────────────────────────────────╯
class FranchiseViewSet(CrudViewSet):
    permission_classes = [ReadOnlyOrHeadquarters]
    resource = "franchises"
    serializer_class = FranchiseSerializer
    list_query, get_query = ListFranchisesQuery, GetFranchiseQuery
    create_command, update_command, delete_command = (
        CreateFranchiseCommand, UpdateFranchiseCommand, DeleteFranchiseCommand,
    )
    create_dto, update_dto = FranchiseDTO, FranchiseUpdateDTO
    filter_fields = ("active", "name")
    unit_scoped = False


class UnitViewSet(CrudViewSet):
    """Operador de unidade lê e edita apenas a própria unidade; criar/excluir é da matriz."""

    resource = "units"
    serializer_class = UnitSerializer
    list_query, get_query = ListUnitsQuery, GetUnitQuery
    create_command, update_command, delete_command = (
        CreateUnitCommand, UpdateUnitCommand, DeleteUnitCommand,
    )
    create_dto, update_dto = UnitDTO, UnitUpdateDTO
    filter_fields = ("active", "franchise_id", "state", "city")

    def get_permissions(self):
        if self.action in ("create", "destroy"):
            return [IsHeadquarters()]
        return [IsNetworkUser()]


class PlanViewSet(CrudViewSet):
    permission_classes = [ReadOnlyOrHeadquarters]
    resource = "plans"
    serializer_class = PlanSerializer
    list_query, get_query = ListPlansQuery, GetPlanQuery
    create_command, update_command, delete_command = (
        CreatePlanCommand, UpdatePlanCommand, DeletePlanCommand,
    )
    create_dto, update_dto = PlanDTO, PlanUpdateDTO
    filter_fields = ("active", "franchise_id")
    unit_scoped = False


# ╭──────────────────────────────────────────────╮
# │  Beneficiários                               │
# ╰──────────────────────────────────────────────╯
class BeneficiaryViewSet(CrudViewSet):
    permission_classes = [IsNetworkUser]
    resource = "beneficiaries"
    serializer_class = BeneficiarySerializer
    list_query, get_query = ListBeneficiariesQuery, GetBeneficiaryQuery
    create_command, update_command, delete_command = (
        CreateBeneficiaryCommand, UpdateBeneficiaryCommand, DeleteBeneficiaryCommand,
    )
    create_dto, update_dto = BeneficiaryDTO, BeneficiaryUpdateDTO
    filter_fields = ("status", "payment_status", "contract_status", "plan_id", "unit_id", "cpf")
    invalidates = ("contracts", "commissions")

    def _create_payload(self, request) -> dict[str, Any]:
        payload = request_body(request)
        payload.setdefault("user_id", str(request.user.id))
        return payload


# ╭──────────────────────────────────────────────╮
# │  Comissões                                   │
# ╰──────────────────────────────────────────────╯
class CommissionViewSet(CrudViewSet):
    """Leitura pela rede (com escopo); escrita e baixa somente pela matriz."""

    resource = "commissions"
    serializer_class = CommissionSerializer
    list_query, get_query = ListCommissionsQuery, GetCommissionQuery
    create_command, update_command, delete_command = (
        CreateCommissionCommand, UpdateCommissionCommand, DeleteCommissionCommand,
    )
    create_dto, update_dto = CommissionDTO, CommissionUpdateDTO
    filter_fields = ("paid", "commission_type", "reference_month", "beneficiary_id", "unit_id")

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [IsNetworkUser()]
        return [IsHeadquarters()]

    @track_http("CommissionViewSet_mark_paid")
    @action(detail=True, methods=["post"], url_path="mark-paid")
    def mark_paid(self, request, pk=None):
        core_command_bus.dispatch(
            MarkCommissionPaidCommand(id=str(pk), requester_role=getattr(request.user, "role", ""))
        )
        self._invalidate()
        obj = core_query_bus.dispatch(GetCommissionQuery(filtros={"id": str(pk)}))
        return Response(self.serializer_class(obj).data)


# ╭──────────────────────────────────────────────╮
# │  Contratos                                   │
# ╰──────────────────────────────────────────────╯
class ContractViewSet(CrudViewSet):
    permission_classes = [IsNetworkUser]
    resource = "contracts"
    serializer_class = ContractSerializer
    list_query, get_query = ListContractsQuery, GetContractQuery
    create_command, update_command, delete_command = (
        CreateContractCommand, UpdateContractCommand, DeleteContractCommand,
    )
    create_dto, update_dto = ContractDTO, ContractUpdateDTO
    filter_fields = ("status", "beneficiary_id", "document_id")
    invalidates = ("beneficiaries",)


# ╭──────────────────────────────────────────────╮
# │  Notificações (sempre do próprio usuário)    │
# ╰──────────────────────────────────────────────╯
class NotificationViewSet(CrudViewSet):
    resource = "notifications"
    serializer_class = NotificationSerializer
    list_query, get_query = ListNotificationsQuery, GetNotificationQuery
    create_command, update_command, delete_command = (
        CreateNotificationCommand, UpdateNotificationCommand, DeleteNotificationCommand,
    )
    create_dto, update_dto = NotificationDTO, NotificationUpdateDTO
    filter_fields = ("read", "kind")
    unit_scoped = False

    def get_permissions(self):
        if self.action == "create":
            return [IsHeadquarters()]
        return [IsNetworkUser()]

    def _list_filters(self, request) -> dict[str, Any]:
        return {**self._filters(request), "user_id": str(request.user.id)}

    def _get_filters(self, request, pk) -> dict[str, Any]:
        return {"id": str(pk), "user_id": str(request.user.id)}

    def _ensure_owner(self, request, pk) -> None:
        core_query_bus.dispatch(self.get_query(filtros=self._get_filters(request, pk)))

    @track_http("NotificationViewSet_update")
    def update(self, request, pk=None):
        self._ensure_owner(request, pk)
        return super().update(request, pk)

    @track_http("NotificationViewSet_destroy")
    def destroy(self, request, pk=None):
        self._ensure_owner(request, pk)
        return super().destroy(request, pk)

    @track_http("NotificationViewSet_mark_read")
    @action(detail=True, methods=["post"], url_path="mark-read")
    def mark_read(self, request, pk=None):
        core_command_bus.dispatch(MarkNotificationReadCommand(id=str(pk), user_id=str(request.user.id)))
        self._invalidate()
        return Response({"id": str(pk), "read": True})

    @track_http("NotificationViewSet_mark_all_read")
    @action(detail=False, methods=["post"], url_path="mark-all-read")
    def mark_all_read(self, request):
        updated = core_command_bus.dispatch(MarkAllNotificationsReadCommand(user_id=str(request.user.id)))
        self._invalidate()
        return Response({"updated": updated})
