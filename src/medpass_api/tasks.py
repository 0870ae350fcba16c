from __future__ import annotations

import time
from contextlib import contextmanager

import structlog
from celery import Task, shared_task
from django.conf import settings
from django.core.cache import cache
from django.core.management import call_command

from medpass_core.core.domain.events.events import CheckoutCompletedEvent, PaymentConfirmedEvent
from medpass_core.core.domain.events.exceptions import DomainError, NotFoundError
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher
from payment_billing.core.application.commands.registry_commands import NotifyRegistryAdhesionCommand
from payment_billing.core.application.commands.signature_commands import CreateSignatureContractCommand

log = structlog.get_logger(__name__)

# ──────────────────────────────────────────────────────────────────────────
# Constantes de filas e parâmetros
# ──────────────────────────────────────────────────────────────────────────
QUEUE_REGISTRY       = "registry"
QUEUE_SIGNATURE      = "signature"
QUEUE_PAYMENT        = "payment"
BUSY_RETRY_SECONDS   = 30
BENEFICIARY_LOCK_TTL = 5 * 60


# ──────────────────────────────────────────────────────────────────────────
# Base Task com DLQ
# ──────────────────────────────────────────────────────────────────────────
class BaseTaskWithDLQ(Task):
    """
    Envia p/ Dead Letter Queue quando falhar após todas as retentativas.
    Em `task_always_eager` não há broker: apenas loga.
    """
    def on_failure(self, exc, task_id, args, kwargs, einfo):
        if bool(getattr(self.app.conf, "task_always_eager", False)):
            log.critical(
                "task.failed_eager_mode",
                task=self.name, task_id=task_id, error=str(exc),
            )
        else:
            log.critical(
                "task.failed_dlq_redirect",
                task=self.name, task_id=task_id, error=str(exc), queue="dead_letter",
            )
            self.app.send_task(
                self.name, args=args, kwargs=kwargs, queue="dead_letter", routing_key="dead_letter",
            )
        super().on_failure(exc, task_id, args, kwargs, einfo)


# ──────────────────────────────────────────────────────────────────────────
# Lock por beneficiário (mesmo beneficiário nunca em paralelo)
# ──────────────────────────────────────────────────────────────────────────
@contextmanager
def beneficiary_lock(beneficiary_id: str, namespace: str, ttl: int = BENEFICIARY_LOCK_TTL):
    key = f"locks:{namespace}:beneficiary:{beneficiary_id}"
    acquired = cache.add(key, str(time.time()), ttl)
    try:
        yield acquired
    finally:
        if acquired:
            cache.delete(key)


def _command_bus():
    from payment_billing.adapters.config.composition_root import setup_di_container_from_settings

    return setup_di_container_from_settings(settings).command_bus()


# ──────────────────────────────────────────────────────────────────────────
# Efeitos assíncronos disparados por eventos
# ──────────────────────────────────────────────────────────────────────────
@shared_task(
    base=BaseTaskWithDLQ, bind=True, max_retries=3, default_retry_delay=60,
    acks_late=True, queue=QUEUE_REGISTRY
)
def notify_registry_task(self, beneficiary_id: str, codigo_externo: str | None = None):
    """Adesão no RMS após pagamento confirmado."""
    with beneficiary_lock(beneficiary_id, "registry") as acquired:
        if not acquired:
            log.info("registry.task_busy", beneficiary_id=beneficiary_id)
            raise self.retry(countdown=BUSY_RETRY_SECONDS)
        try:
            result = _command_bus().dispatch(
                NotifyRegistryAdhesionCommand(beneficiary_id=beneficiary_id, codigo_externo=codigo_externo)
            )
        except NotFoundError as exc:
            log.warning("registry.task_skipped", beneficiary_id=beneficiary_id, error=exc.message)
            return {"beneficiary_id": beneficiary_id, "status": "skipped"}
        except Exception as exc:
            log.error("registry.task_error", beneficiary_id=beneficiary_id, error=str(exc))
            raise self.retry(exc=exc)  # noqa: B904
    return result


@shared_task(
    base=BaseTaskWithDLQ, bind=True, max_retries=3, default_retry_delay=120,
    acks_late=True, queue=QUEUE_SIGNATURE
)
def create_contract_task(self, beneficiary_id: str):
    """Contrato para assinatura após o checkout. Erro de domínio é só warning."""
    with beneficiary_lock(beneficiary_id, "contract") as acquired:
        if not acquired:
            raise self.retry(countdown=BUSY_RETRY_SECONDS)
        try:
            return _command_bus().dispatch(CreateSignatureContractCommand(beneficiary_id=beneficiary_id))
        except DomainError as exc:
            log.warning("contract.task_not_created", beneficiary_id=beneficiary_id, error=exc.message)
            return {"beneficiary_id": beneficiary_id, "status": "not_created", "error": exc.message}
        except Exception as exc:
            log.error("contract.task_error", beneficiary_id=beneficiary_id, error=str(exc))
            raise self.retry(exc=exc)  # noqa: B904


def register_event_subscribers(dispatcher: EventDispatcher) -> None:
    """Liga os eventos de domínio às tasks. Chamado no `ready()` do app."""

    def enqueue_registry_adhesion(event: PaymentConfirmedEvent) -> None:
        codigo = f"VINDI_{event.vindi_subscription_id}" if event.vindi_subscription_id else None
        notify_registry_task.delay(str(event.beneficiary_id), codigo)

    def enqueue_contract(event: CheckoutCompletedEvent) -> None:
        create_contract_task.delay(str(event.beneficiary_id))

    dispatcher.subscribe(PaymentConfirmedEvent, enqueue_registry_adhesion)
    dispatcher.subscribe(CheckoutCompletedEvent, enqueue_contract)


# ──────────────────────────────────────────────────────────────────────────
# Rotinas periódicas (Celery beat → management commands)
# ──────────────────────────────────────────────────────────────────────────
@shared_task(
    base=BaseTaskWithDLQ, bind=True, max_retries=2, default_retry_delay=300,
    acks_late=True, queue=QUEUE_REGISTRY
)
def retry_registry_adhesions(self):
    try:
        call_command("retry_registry_adhesions", "--max-retries", str(settings.REGISTRY_MAX_RETRIES))
    except Exception as exc:
        log.error("registry.retry_task_error", error=str(exc))
        raise self.retry(exc=exc)  # noqa: B904


@shared_task(
    base=BaseTaskWithDLQ, bind=True, max_retries=2, default_retry_delay=300,
    acks_late=True, queue=QUEUE_PAYMENT
)
def refresh_payment_statuses(self, limit: int = 100):
    try:
        call_command("refresh_payment_statuses", "--limit", str(limit))
    except Exception as exc:
        log.error("refresh.task_error", error=str(exc))
        raise self.retry(exc=exc)  # noqa: B904


@shared_task(
    base=BaseTaskWithDLQ, bind=True, max_retries=2, default_retry_delay=300,
    acks_late=True, queue=QUEUE_PAYMENT
)
def reprocess_webhook_events(self, limit: int = 50):
    try:
        call_command("reprocess_webhook_events", "--limit", str(limit))
    except Exception as exc:
        log.error("webhook.reprocess_task_error", error=str(exc))
        raise self.retry(exc=exc)  # noqa: B904
