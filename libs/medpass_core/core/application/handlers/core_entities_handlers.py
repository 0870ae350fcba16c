import uuid
from typing import Any

import structlog

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
from medpass_core.core.application.commands.user_commands import CreateUserCommand
from medpass_core.core.application.cqrs import CommandHandler
from medpass_core.core.domain.entities.beneficiary_entity import BeneficiaryEntity
from medpass_core.core.domain.entities.commission_entity import CommissionEntity
from medpass_core.core.domain.entities.contract_entity import ContractEntity
from medpass_core.core.domain.entities.franchise_entity import FranchiseEntity
from medpass_core.core.domain.entities.notification_entity import NotificationEntity
from medpass_core.core.domain.entities.plan_entity import PlanEntity
from medpass_core.core.domain.entities.unit_entity import UnitEntity
from medpass_core.core.domain.entities.user_entity import UserEntity
from medpass_core.core.domain.events.events import BeneficiaryCreatedEvent, CommissionPaidEvent
from medpass_core.core.domain.events.exceptions import (
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    PlanNotFoundError,
)
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.commission_repository import CommissionRepository
from medpass_core.core.domain.repositories.contract_repository import ContractRepository
from medpass_core.core.domain.repositories.franchise_repository import FranchiseRepository
from medpass_core.core.domain.repositories.notification_repository import NotificationRepository
from medpass_core.core.domain.repositories.plan_repository import PlanRepository
from medpass_core.core.domain.repositories.unit_repository import UnitRepository
from medpass_core.core.domain.repositories.user_repository import UserRepository
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher

logger = structlog.get_logger(__name__)


def _merge(entity: Any, changes: dict[str, Any]) -> Any:
    """Aplica no entity apenas os campos enviados no PATCH/PUT."""
    for key, value in changes.items():
        if hasattr(entity, key):
            setattr(entity, key, value)
    return entity


def _ensure_owned(entity: Any, owner_unit_id: Any, scope_unit_id: str | None, label: str) -> Any:
    """
    Escopo por unidade: fora da própria unidade o registro "não existe"
    para o operador (404, não 403, para não vazar IDs).
    """
    if entity is None:
        raise NotFoundError(f"{label} não encontrado")
    if scope_unit_id and str(owner_unit_id) != str(scope_unit_id):
        raise NotFoundError(f"{label} não encontrado")
    return entity


# ——— FRANCHISE ——————————————————————————————————————————————

class CreateFranchiseHandler(CommandHandler[CreateFranchiseCommand]):
    def __init__(self, repo: FranchiseRepository):
        self.repo = repo

    def handle(self, command: CreateFranchiseCommand) -> FranchiseEntity:
        data = command.payload.model_dump()
        data["id"] = uuid.uuid4()
        return self.repo.save(FranchiseEntity.from_dict(data))


class UpdateFranchiseHandler(CommandHandler[UpdateFranchiseCommand]):
    def __init__(self, repo: FranchiseRepository):
        self.repo = repo

    def handle(self, command: UpdateFranchiseCommand) -> FranchiseEntity:
        entity = _ensure_owned(self.repo.find_by_id(command.id), None, None, "Franquia")
        return self.repo.save(_merge(entity, command.payload.model_dump(exclude_unset=True)))


class DeleteFranchiseHandler(CommandHandler[DeleteFranchiseCommand]):
    def __init__(self, repo: FranchiseRepository):
        self.repo = repo

    def handle(self, command: DeleteFranchiseCommand) -> None:
        _ensure_owned(self.repo.find_by_id(command.id), None, None, "Franquia")
        self.repo.deactivate(command.id)


# ——— UNIT ———————————————————————————————————————————————————

class CreateUnitHandler(CommandHandler[CreateUnitCommand]):
    def __init__(self, repo: UnitRepository):
        self.repo = repo

    def handle(self, command: CreateUnitCommand) -> UnitEntity:
        data = command.payload.model_dump()
        data["id"] = uuid.uuid4()
        return self.repo.save(UnitEntity.from_dict(data))


class UpdateUnitHandler(CommandHandler[UpdateUnitCommand]):
    def __init__(self, repo: UnitRepository):
        self.repo = repo

    def handle(self, command: UpdateUnitCommand) -> UnitEntity:
        entity = self.repo.find_by_id(command.id)
        _ensure_owned(entity, command.id, command.scope_unit_id, "Unidade")
        return self.repo.save(_merge(entity, command.payload.model_dump(exclude_unset=True)))


class DeleteUnitHandler(CommandHandler[DeleteUnitCommand]):
    def __init__(self, repo: UnitRepository):
        self.repo = repo

    def handle(self, command: DeleteUnitCommand) -> None:
        _ensure_owned(self.repo.find_by_id(command.id), command.id, command.scope_unit_id, "Unidade")
        self.repo.deactivate(command.id)


# ——— PLAN ———————————————————————————————————————————————————

class CreatePlanHandler(CommandHandler[CreatePlanCommand]):
    def __init__(self, repo: PlanRepository):
        self.repo = repo

    def handle(self, command: CreatePlanCommand) -> PlanEntity:
        data = command.payload.model_dump()
        data["id"] = uuid.uuid4()
        return self.repo.save(PlanEntity.from_dict(data))


class UpdatePlanHandler(CommandHandler[UpdatePlanCommand]):
    def __init__(self, repo: PlanRepository):
        self.repo = repo

    def handle(self, command: UpdatePlanCommand) -> PlanEntity:
        entity = self.repo.find_by_id(command.id)
        if entity is None:
            raise PlanNotFoundError(plan_id=command.id)
        return self.repo.save(_merge(entity, command.payload.model_dump(exclude_unset=True)))


class DeletePlanHandler(CommandHandler[DeletePlanCommand]):
    def __init__(self, repo: PlanRepository):
        self.repo = repo

    def handle(self, command: DeletePlanCommand) -> None:
        if self.repo.find_by_id(command.id) is None:
            raise PlanNotFoundError(plan_id=command.id)
        self.repo.deactivate(command.id)


# ——— BENEFICIARY ————————————————————————————————————————————

class CreateBeneficiaryHandler(CommandHandler[CreateBeneficiaryCommand]):
    """
    Cadastra o beneficiário em status `pending`.
    O valor do plano é congelado no cadastro quando não informado.
    """

    def __init__(
        self,
        repo: BeneficiaryRepository,
        plan_repo: PlanRepository,
        dispatcher: EventDispatcher,
    ):
        self.repo = repo
        self.plan_repo = plan_repo
        self.dispatcher = dispatcher

    def handle(self, command: CreateBeneficiaryCommand) -> BeneficiaryEntity:
        data = command.payload.model_dump()
        plan = self.plan_repo.find_by_id(data["plan_id"])
        if plan is None or not plan.active:
            raise PlanNotFoundError(plan_id=data["plan_id"])

        if command.scope_unit_id:
            data["unit_id"] = command.scope_unit_id
        if self.repo.find_by_cpf(data["cpf"]):
            raise DuplicateError("Já existe um beneficiário com este CPF", cpf=data["cpf"])

        data["id"] = uuid.uuid4()
        data["plan_value"] = data.get("plan_value") or plan.price
        entity = self.repo.save(BeneficiaryEntity.from_dict(data))
        logger.info("beneficiary.created", beneficiary_id=str(entity.id), unit_id=str(entity.unit_id))

        self.dispatcher.dispatch(
            BeneficiaryCreatedEvent(
                beneficiary_id=entity.id,
                unit_id=entity.unit_id,
                plan_id=entity.plan_id,
                name=entity.name,
            )
        )
        return entity


class UpdateBeneficiaryHandler(CommandHandler[UpdateBeneficiaryCommand]):
    def __init__(self, repo: BeneficiaryRepository, plan_repo: PlanRepository):
        self.repo = repo
        self.plan_repo = plan_repo

    def handle(self, command: UpdateBeneficiaryCommand) -> BeneficiaryEntity:
        entity = self.repo.find_by_id(command.id)
        _ensure_owned(entity, getattr(entity, "unit_id", None), command.scope_unit_id, "Beneficiário")
        changes = command.payload.model_dump(exclude_unset=True)
        if "plan_id" in changes and self.plan_repo.find_by_id(changes["plan_id"]) is None:
            raise PlanNotFoundError(plan_id=changes["plan_id"])
        return self.repo.save(_merge(entity, changes))


class DeleteBeneficiaryHandler(CommandHandler[DeleteBeneficiaryCommand]):
    def __init__(self, repo: BeneficiaryRepository):
        self.repo = repo

    def handle(self, command: DeleteBeneficiaryCommand) -> None:
        entity = self.repo.find_by_id(command.id)
        _ensure_owned(entity, getattr(entity, "unit_id", None), command.scope_unit_id, "Beneficiário")
        self.repo.deactivate(command.id)


# ——— COMMISSION —————————————————————————————————————————————

class CreateCommissionHandler(CommandHandler[CreateCommissionCommand]):
    def __init__(self, repo: CommissionRepository):
        self.repo = repo

    def handle(self, command: CreateCommissionCommand) -> CommissionEntity:
        data = command.payload.model_dump()
        data["id"] = uuid.uuid4()
        return self.repo.save(CommissionEntity.from_dict(data))


class UpdateCommissionHandler(CommandHandler[UpdateCommissionCommand]):
    def __init__(self, repo: CommissionRepository):
        self.repo = repo

    def handle(self, command: UpdateCommissionCommand) -> CommissionEntity:
        entity = self.repo.find_by_id(command.id)
        _ensure_owned(entity, getattr(entity, "unit_id", None), command.scope_unit_id, "Comissão")
        return self.repo.save(_merge(entity, command.payload.model_dump(exclude_unset=True)))


class DeleteCommissionHandler(CommandHandler[DeleteCommissionCommand]):
    def __init__(self, repo: CommissionRepository):
        self.repo = repo

    def handle(self, command: DeleteCommissionCommand) -> None:
        entity = self.repo.find_by_id(command.id)
        _ensure_owned(entity, getattr(entity, "unit_id", None), command.scope_unit_id, "Comissão")
        self.repo.delete(command.id)


class MarkCommissionPaidHandler(CommandHandler[MarkCommissionPaidCommand]):
    def __init__(self, repo: CommissionRepository):
        self.repo = repo

    def handle(self, command: MarkCommissionPaidCommand) -> CommissionPaidEvent:
        if command.requester_role != "matriz":
            raise PermissionDeniedError("Apenas a matriz pode marcar comissões como pagas")
        if self.repo.find_by_id(command.id) is None:
            raise NotFoundError("Comissão não encontrada")
        entity = self.repo.mark_paid(command.id)
        logger.info("commission.paid", commission_id=str(entity.id), amount=str(entity.amount))
        # o CommandBusImpl publica o evento
        return CommissionPaidEvent(
            commission_id=entity.id, unit_id=entity.unit_id, amount=entity.amount
        )


# ——— CONTRACT ———————————————————————————————————————————————

class CreateContractRecordHandler(CommandHandler[CreateContractCommand]):
    def __init__(self, repo: ContractRepository, beneficiary_repo: BeneficiaryRepository):
        self.repo = repo
        self.beneficiary_repo = beneficiary_repo

    def handle(self, command: CreateContractCommand) -> ContractEntity:
        data = command.payload.model_dump()
        ben = self.beneficiary_repo.find_by_id(data["beneficiary_id"])
        _ensure_owned(ben, getattr(ben, "unit_id", None), command.scope_unit_id, "Beneficiário")
        data["id"] = uuid.uuid4()
        return self.repo.save(ContractEntity.from_dict(data))


class UpdateContractRecordHandler(CommandHandler[UpdateContractCommand]):
    def __init__(self, repo: ContractRepository, beneficiary_repo: BeneficiaryRepository):
        self.repo = repo
        self.beneficiary_repo = beneficiary_repo

    def handle(self, command: UpdateContractCommand) -> ContractEntity:
        entity = self.repo.find_by_id(command.id)
        if entity is None:
            raise NotFoundError("Contrato não encontrado")
        ben = self.beneficiary_repo.find_by_id(str(entity.beneficiary_id))
        _ensure_owned(ben, getattr(ben, "unit_id", None), command.scope_unit_id, "Contrato")
        return self.repo.save(_merge(entity, command.payload.model_dump(exclude_unset=True)))


class DeleteContractRecordHandler(CommandHandler[DeleteContractCommand]):
    """Contratos não têm flag de ativo: a exclusão marca como recusado."""

    def __init__(self, repo: ContractRepository, beneficiary_repo: BeneficiaryRepository):
        self.repo = repo
        self.beneficiary_repo = beneficiary_repo

    def handle(self, command: DeleteContractCommand) -> None:
        entity = self.repo.find_by_id(command.id)
        if entity is None:
            raise NotFoundError("Contrato não encontrado")
        ben = self.beneficiary_repo.find_by_id(str(entity.beneficiary_id))
        _ensure_owned(ben, getattr(ben, "unit_id", None), command.scope_unit_id, "Contrato")
        entity.status = "refused"
        self.repo.save(entity)


# ——— NOTIFICATION ———————————————————————————————————————————

class CreateNotificationHandler(CommandHandler[CreateNotificationCommand]):
    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def handle(self, command: CreateNotificationCommand) -> NotificationEntity:
        data = command.payload.model_dump()
        data["id"] = uuid.uuid4()
        return self.repo.save(NotificationEntity.from_dict(data))


class UpdateNotificationHandler(CommandHandler[UpdateNotificationCommand]):
    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def handle(self, command: UpdateNotificationCommand) -> NotificationEntity:
        entity = self.repo.find_by_id(command.id)
        if entity is None:
            raise NotFoundError("Notificação não encontrada")
        return self.repo.save(_merge(entity, command.payload.model_dump(exclude_unset=True)))


class DeleteNotificationHandler(CommandHandler[DeleteNotificationCommand]):
    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def handle(self, command: DeleteNotificationCommand) -> None:
        self.repo.delete(command.id)


class MarkNotificationReadHandler(CommandHandler[MarkNotificationReadCommand]):
    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def handle(self, command: MarkNotificationReadCommand) -> None:
        entity = self.repo.find_by_id(command.id)
        if entity is None or str(entity.user_id) != str(command.user_id):
            raise NotFoundError("Notificação não encontrada")
        self.repo.mark_read(command.id)


class MarkAllNotificationsReadHandler(CommandHandler[MarkAllNotificationsReadCommand]):
    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def handle(self, command: MarkAllNotificationsReadCommand) -> int:
        return self.repo.mark_all_read(command.user_id)


# ——— USER ———————————————————————————————————————————————————

class CreateUserHandler(CommandHandler[CreateUserCommand]):
    def __init__(self, repo: UserRepository, hash_service):
        self.repo = repo
        self.hash_service = hash_service

    def handle(self, command: CreateUserCommand) -> UserEntity:
        data = command.payload.model_dump()
        if self.repo.find_by_email(data["email"]):
            raise DuplicateError("E-mail já cadastrado", email=data["email"])
        data["id"] = uuid.uuid4()
        data["password_hash"] = self.hash_service.hash_password(data.pop("password"))
        return self.repo.save(UserEntity.from_dict(data))
