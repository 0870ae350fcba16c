"""
Admin site registry
-------------------
Registra todos os modelos de forma dinâmica a partir das opções abaixo.
"""

import structlog
from django.contrib import admin as django_admin

from . import models

logger = structlog.get_logger(__name__)

# ╭──────────────────────────────────────────────╮
# │ Configuração de cada ModelAdmin              │
# ╰──────────────────────────────────────────────╯
MODEL_ADMIN_REGISTRY: dict[type[models.models.Model], dict] = {
    # 1. Auth
    models.User: dict(
        list_display=("email", "name", "role", "unit", "is_active"),
        search_fields=("email", "name"),
        list_filter=("role", "is_active"),
    ),
    # 2. Rede
    models.Franchise: dict(
        list_display=("name", "active", "created_at"),
        list_filter=("active",),
        search_fields=("name",),
    ),
    models.Unit: dict(
        list_display=("name", "franchise", "city", "state", "active"),
        list_filter=("active", "state"),
        search_fields=("name", "cnpj", "city"),
    ),
    models.Plan: dict(
        list_display=("name", "price", "rms_plan_code", "vindi_plan_id", "active"),
        list_filter=("active",),
        search_fields=("name",),
    ),
    # 3. Beneficiários & cobrança
    models.Beneficiary: dict(
        list_display=("name", "cpf", "unit", "plan", "status", "payment_status", "contract_status"),
        list_filter=("status", "payment_status", "contract_status", "unit"),
        search_fields=("name", "cpf", "email"),
    ),
    models.Cancellation: dict(
        list_display=("beneficiary", "reason", "user", "cancelled_at"),
        search_fields=("reason",),
    ),
    models.Subscription: dict(
        list_display=("beneficiary", "plan", "payment_method", "status", "vindi_subscription_id"),
        list_filter=("status", "payment_method"),
    ),
    models.Transaction: dict(
        list_display=("beneficiary", "payment_method", "status", "vindi_bill_id", "plan_price", "created_at"),
        list_filter=("status", "payment_method"),
    ),
    models.Commission: dict(
        list_display=("beneficiary", "unit", "reference_month", "amount", "commission_type", "paid"),
        list_filter=("paid", "commission_type", "unit"),
    ),
    models.Contract: dict(
        list_display=("beneficiary", "document_id", "status", "signed_at"),
        list_filter=("status",),
        search_fields=("document_id",),
    ),
    # 4. Integrações
    models.WebhookEvent: dict(
        list_display=("event_id", "event_type", "source", "processed", "created_at"),
        list_filter=("processed", "source", "event_type"),
        search_fields=("event_id",),
    ),
    models.IntegrationLog: dict(
        list_display=("beneficiary", "operation", "status", "retry_count", "created_at"),
        list_filter=("operation", "status"),
    ),
    models.ApiSetting: dict(
        list_display=("setting_name", "updated_at"),
        search_fields=("setting_name",),
    ),
    # 5. Notificações
    models.Notification: dict(
        list_display=("user", "title", "kind", "read", "created_at"),
        list_filter=("kind", "read"),
    ),
}

# ╭──────────────────────────────────────────────╮
# │ Registro dinâmico                            │
# ╰──────────────────────────────────────────────╯
for model, opts in MODEL_ADMIN_REGISTRY.items():
    admin_class = type(f"{model.__name__}Admin", (django_admin.ModelAdmin,), opts)
    django_admin.site.register(model, admin_class)
    logger.debug("Registered model in admin", model=model.__name__)
