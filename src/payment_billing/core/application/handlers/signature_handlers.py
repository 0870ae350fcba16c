from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any

import structlog
from django.db import transaction

from medpass_core.core.application.cqrs import CommandHandler
from medpass_core.core.domain.entities.beneficiary_entity import ContractStatus
from medpass_core.core.domain.entities.contract_entity import ContractEntity
from medpass_core.core.domain.events.exceptions import (
    BusinessRuleError,
    NotFoundError,
    PermissionDeniedError,
    PlanNotFoundError,
    ValidationError,
)
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.contract_repository import ContractRepository
from medpass_core.core.domain.repositories.plan_repository import PlanRepository
from payment_billing.adapters.api_clients.autentique_api_client import AutentiqueAPIClient
from payment_billing.adapters.notifiers.base import BaseNotifier
from payment_billing.core.application.commands.signature_commands import CreateSignatureContractCommand
from payment_billing.core.application.services.document_templates import (
    SIGNATURE_EMAIL_SUBJECT,
    render_contract,
    render_signature_email,
)

logger = structlog.get_logger(__name__)


class CreateSignatureContractHandler(CommandHandler[CreateSignatureContractCommand]):
    """
    Renderiza o contrato, cria o documento no Autentique e guarda o link.
    O e-mail com o link de assinatura é best-effort.
    """

    def __init__(  # noqa: PLR0913
        self,
        beneficiary_repo: BeneficiaryRepository,
        plan_repo: PlanRepository,
        contract_repo: ContractRepository,
        esignature_client_factory: Callable[[], AutentiqueAPIClient],
        email_notifier_factory: Callable[[], BaseNotifier],
    ) -> None:
        self.beneficiary_repo = beneficiary_repo
        self.plan_repo = plan_repo
        self.contract_repo = contract_repo
        self.esignature_client_factory = esignature_client_factory
        self.email_notifier_factory = email_notifier_factory

    def handle(self, command: CreateSignatureContractCommand) -> dict[str, Any]:
        ben = self.beneficiary_repo.find_by_id(command.beneficiary_id)
        if ben is None:
            raise NotFoundError("Beneficiário não encontrado", beneficiary_id=command.beneficiary_id)
        if command.scope_unit_id and str(ben.unit_id) != str(command.scope_unit_id):
            raise PermissionDeniedError("Beneficiário fora da unidade do usuário")
        if ben.contract_status == ContractStatus.SIGNED:
            raise BusinessRuleError("Contrato já assinado", beneficiary_id=str(ben.id))
        if not ben.email:
            raise ValidationError("E-mail do beneficiário é obrigatório para assinatura", field="email")

        plan = self.plan_repo.find_by_id(str(ben.plan_id))
        if plan is None:
            raise PlanNotFoundError(plan_id=str(ben.plan_id))

        document_id, link = self.esignature_client_factory().create_document(
            ben.name, ben.email, render_contract(ben, plan)
        )

        with transaction.atomic():
            contract = self.contract_repo.save(
                ContractEntity(
                    id=uuid.uuid4(),
                    beneficiary_id=ben.id,
                    document_id=document_id,
                    status="pending_signature",
                    signature_link=link,
                )
            )
            ben = self.beneficiary_repo.update_fields(
                str(ben.id),
                contract_status=ContractStatus.PENDING_SIGNATURE,
                autentique_document_id=document_id,
                autentique_signature_link=link,
            )
        logger.info("signature.contract_created", beneficiary_id=str(ben.id), document_id=document_id)

        email_sent = False
        if link:
            try:
                self.email_notifier_factory().send(
                    [ben.email], SIGNATURE_EMAIL_SUBJECT, render_signature_email(ben, plan, link)
                )
                email_sent = True
            except Exception as exc:
                logger.warning("signature.email_failed", beneficiary_id=str(ben.id), error=str(exc))

        return {
            "beneficiary_id": str(ben.id),
            "contract_id": str(contract.id),
            "document_id": document_id,
            "signature_link": link,
            "email_sent": email_sent,
        }
