from __future__ import annotations

import time
import uuid
from collections.abc import Callable
from typing import Any

import structlog
from django.db import transaction

from medpass_core.core.application.cqrs import CommandHandler
from medpass_core.core.domain.entities.beneficiary_entity import (
    BeneficiaryEntity,
    BeneficiaryStatus,
    PaymentStatus,
)
from medpass_core.core.domain.entities.plan_entity import PlanEntity
from medpass_core.core.domain.entities.subscription_entity import SubscriptionEntity
from medpass_core.core.domain.entities.transaction_entity import TransactionEntity, TransactionStatus
from medpass_core.core.domain.events.events import CheckoutCompletedEvent
from medpass_core.core.domain.events.exceptions import (
    ConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    PlanNotFoundError,
    ValidationError,
)
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.plan_repository import PlanRepository
from medpass_core.core.domain.repositories.subscription_repository import SubscriptionRepository
from medpass_core.core.domain.repositories.transaction_repository import TransactionRepository
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher
from medpass_core.core.domain.services.validators import (
    detect_card_brand,
    only_digits,
    validate_cep,
    validate_cpf_with_message,
    validate_email,
)
from payment_billing.adapters.api_clients.vindi_api_client import VindiAPIClient
from payment_billing.adapters.observability.metrics import CHECKOUT_DURATION, CHECKOUT_TOTAL
from payment_billing.core.application.commands.payment_commands import (
    ProcessCheckoutCommand,
    TokenizeCardCommand,
)
from payment_billing.core.application.dtos.vindi_dtos import VindiBill, VindiCustomer
from payment_billing.core.application.services.payment_status_service import PaymentStatusService
from payment_billing.core.application.services.saga import CompensationStack
from payment_billing.core.application.services.vindi_payload_builder import VindiPayloadBuilder
from payment_billing.core.domain.events.exceptions import GatewayError
from payment_billing.core.domain.services.pix_extractor import extract_pix_data

logger = structlog.get_logger(__name__)

REJECTED_CHARGE_STATUSES = {"rejected", "canceled", "failed"}


# ╭──────────────────────────────────────────────╮
# │ 1. Checkout (assinatura + espelho local)     │
# ╰──────────────────────────────────────────────╯
class ProcessCheckoutHandler(CommandHandler[ProcessCheckoutCommand]):
    """
    Cliente → (token → perfil) → assinatura → fatura → persistência local.

    Cada passo remoto registra sua compensação; qualquer falha posterior
    (inclusive no banco) desfaz na ordem inversa e relança o erro original.
    """

    def __init__(  # noqa: PLR0913
        self,
        beneficiary_repo: BeneficiaryRepository,
        plan_repo: PlanRepository,
        subscription_repo: SubscriptionRepository,
        transaction_repo: TransactionRepository,
        payment_status_service: PaymentStatusService,
        vindi_client_factory: Callable[[], VindiAPIClient],
        dispatcher: EventDispatcher,
    ) -> None:
        self.beneficiary_repo = beneficiary_repo
        self.plan_repo = plan_repo
        self.subscription_repo = subscription_repo
        self.transaction_repo = transaction_repo
        self.payment_status_service = payment_status_service
        self.vindi_client_factory = vindi_client_factory
        self.dispatcher = dispatcher

    # ───────────────────────── validações (sem I/O remoto) ─────────────────────────
    def _resolve_plan(self, plan_id: str) -> PlanEntity:
        plan = next((p for p in self.plan_repo.list_active() if str(p.id) == str(plan_id)), None)
        if plan is None:
            raise PlanNotFoundError("Plano não encontrado", plan_id=plan_id)
        if not plan.vindi_plan_id:
            raise ConfigurationError(
                f"Plano '{plan.name}' sem vindi_plan_id configurado", plan_id=str(plan.id)
            )
        return plan

    def _load_beneficiary(self, beneficiary_id: str, scope_unit_id: str | None) -> BeneficiaryEntity:
        ben = self.beneficiary_repo.find_by_id(beneficiary_id)
        if ben is None:
            raise NotFoundError("Beneficiário não encontrado", beneficiary_id=beneficiary_id)
        if scope_unit_id and str(ben.unit_id) != str(scope_unit_id):
            raise PermissionDeniedError("Beneficiário fora da unidade do usuário")
        return ben

    @staticmethod
    def _validate_beneficiary(ben: BeneficiaryEntity) -> None:
        cpf_error = validate_cpf_with_message(ben.cpf)
        if cpf_error:
            raise ValidationError(cpf_error, field="cpf")
        if not ben.email or not validate_email(ben.email):
            raise ValidationError("E-mail do beneficiário inválido", field="email")
        if ben.cep and not validate_cep(ben.cep):
            raise ValidationError("CEP deve ter 8 dígitos", field="cep")

    # ───────────────────────── passos remotos ─────────────────────────
    @staticmethod
    def _search_or_create_customer(
        vindi: VindiAPIClient, builder: VindiPayloadBuilder, cpf: str
    ) -> tuple[VindiCustomer, bool]:
        existing = vindi.find_customer_by_registry_code(cpf)
        if existing is not None:
            logger.info("checkout.customer_found", vindi_customer_id=existing.id)
            return existing, False
        created = vindi.create_customer(builder.customer())
        logger.info("checkout.customer_created", vindi_customer_id=created.id)
        return created, True

    @staticmethod
    def _first_bill(vindi: VindiAPIClient, bill: VindiBill | None, subscription_id: int) -> VindiBill | None:
        if bill is not None:
            return bill
        bills = vindi.list_subscription_bills(subscription_id)
        return bills[0] if bills else None

    @staticmethod
    def _raise_if_rejected(bill: VindiBill | None) -> None:
        charge = bill.first_charge if bill else None
        if charge is None or charge.status not in REJECTED_CHARGE_STATUSES:
            return
        lt = charge.last_transaction or {}
        raise GatewayError(
            lt.get("gateway_message") or "Pagamento recusado pela operadora",
            gateway_code=lt.get("gateway_response_code"),
            charge_id=charge.id,
        )

    # ───────────────────────── persistência ─────────────────────────
    def _persist(  # noqa: PLR0913
        self,
        ben: BeneficiaryEntity,
        plan: PlanEntity,
        payment_method: str,
        installments: int,
        customer_id: int,
        subscription: Any,
        bill: VindiBill | None,
    ) -> str | None:
        charge = bill.first_charge if bill else None
        checkout_link = (bill.url if bill else None) or subscription.url

        with transaction.atomic():
            sub = self.subscription_repo.save(
                SubscriptionEntity(
                    id=uuid.uuid4(),
                    beneficiary_id=ben.id,
                    plan_id=plan.id,
                    customer_name=ben.name,
                    customer_email=ben.email or "",
                    customer_document=only_digits(ben.cpf),
                    payment_method=payment_method,
                    status="pending",
                    vindi_subscription_id=subscription.id,
                    vindi_plan_id=plan.vindi_plan_id,
                    vindi_customer_id=customer_id,
                    checkout_link=checkout_link,
                    metadata={"vindi_status": subscription.status},
                )
            )
            self.transaction_repo.save(
                TransactionEntity(
                    id=uuid.uuid4(),
                    beneficiary_id=ben.id,
                    subscription_id=sub.id,
                    payment_method=payment_method,
                    status=TransactionStatus.PENDING,
                    transaction_type="subscription_charge",
                    vindi_subscription_id=subscription.id,
                    vindi_bill_id=bill.id if bill else None,
                    vindi_charge_id=charge.id if charge else None,
                    customer_name=ben.name,
                    customer_email=ben.email,
                    customer_document=only_digits(ben.cpf),
                    plan_name=plan.name,
                    plan_price=ben.plan_value or plan.price,
                    installments=installments,
                    gateway_response=bill.model_dump(mode="json") if bill else {},
                )
            )
            self.beneficiary_repo.update_fields(
                str(ben.id),
                status=BeneficiaryStatus.PENDING_PAYMENT,
                payment_status=PaymentStatus.PAYMENT_REQUESTED,
                vindi_customer_id=customer_id,
                vindi_subscription_id=subscription.id,
                checkout_link=checkout_link,
            )

            # cartão aprovado na hora: mesma confirmação do webhook
            if charge is not None and charge.status == "paid":
                self.payment_status_service.confirm_payment(
                    vindi_subscription_id=subscription.id,
                    vindi_bill_id=bill.id,
                    amount=bill.amount,
                )

            event = CheckoutCompletedEvent(
                beneficiary_id=ben.id,
                vindi_subscription_id=subscription.id,
                payment_method=payment_method,
            )
            transaction.on_commit(lambda: self.dispatcher.dispatch(event))
        return checkout_link

    # ───────────────────────── entrada ─────────────────────────
    def handle(self, command: ProcessCheckoutCommand) -> dict[str, Any]:
        dto = command.payload
        log = logger.bind(beneficiary_id=dto.beneficiary_id, payment_method=dto.payment_method)
        log.info("checkout.start")

        plan = self._resolve_plan(dto.plan_id)
        ben = self._load_beneficiary(dto.beneficiary_id, command.scope_unit_id)
        self._validate_beneficiary(ben)

        vindi = self.vindi_client_factory()
        builder = VindiPayloadBuilder(ben)
        saga = CompensationStack("checkout")
        start = time.perf_counter()

        try:
            customer, created = self._search_or_create_customer(vindi, builder, only_digits(ben.cpf))
            if created:
                saga.push("delete_customer", lambda: vindi.delete_customer(customer.id))

            profile_id = None
            if dto.payment_method == "credit_card":
                token = vindi.tokenize_card(dto.card.model_dump())
                profile_id = vindi.create_payment_profile(customer.id, token).id
                log.info("checkout.payment_profile_created", payment_profile_id=profile_id)

            envelope = vindi.create_subscription(
                builder.subscription(plan, customer.id, dto.payment_method, profile_id, dto.installments)
            )
            subscription = envelope.subscription
            saga.push("cancel_subscription", lambda: vindi.cancel_subscription(subscription.id))
            log.info("checkout.subscription_created", vindi_subscription_id=subscription.id)

            bill = self._first_bill(vindi, envelope.bill, subscription.id)
            if dto.payment_method == "credit_card":
                self._raise_if_rejected(bill)

            checkout_link = self._persist(
                ben, plan, dto.payment_method, dto.installments, customer.id, subscription, bill
            )
        except Exception as exc:
            compensated = saga.rollback()
            CHECKOUT_TOTAL.labels(dto.payment_method, "error").inc()
            log.error("checkout.failed", error=str(exc), compensated=compensated)
            raise
        finally:
            CHECKOUT_DURATION.labels(dto.payment_method).observe(time.perf_counter() - start)

        CHECKOUT_TOTAL.labels(dto.payment_method, "success").inc()
        log.info("checkout.done", vindi_subscription_id=subscription.id)

        result: dict[str, Any] = {
            "beneficiary_id": str(ben.id),
            "payment_method": dto.payment_method,
            "vindi_customer_id": customer.id,
            "vindi_subscription_id": subscription.id,
            "vindi_bill_id": bill.id if bill else None,
            "bill_status": bill.status if bill else None,
            "checkout_link": checkout_link,
        }
        if dto.payment_method == "pix" and bill is not None:
            result["pix"] = extract_pix_data(bill.model_dump(mode="json")).to_dict()
        if dto.card is not None:
            result["card_last_four"] = dto.card.number[-4:]
        return result


# ╭──────────────────────────────────────────────╮
# │ 2. Tokenização avulsa de cartão              │
# ╰──────────────────────────────────────────────╯
class TokenizeCardHandler(CommandHandler[TokenizeCardCommand]):
    def __init__(self, vindi_client_factory: Callable[[], VindiAPIClient]) -> None:
        self.vindi_client_factory = vindi_client_factory

    def handle(self, command: TokenizeCardCommand) -> dict[str, str]:
        card = command.card
        token = self.vindi_client_factory().tokenize_card(card.model_dump())
        logger.info("card.tokenized", last_four=card.number[-4:])
        return {
            "gateway_token": token,
            "card_brand": detect_card_brand(card.number),
            "card_last_four": card.number[-4:],
        }
