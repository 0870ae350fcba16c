"""
Domínio → ORM do MedPass.

⚑ IDs internos são UUID; IDs do gateway (Vindi) são inteiros
⚑ CPF é persistido somente com dígitos e é único
⚑ Soft-delete via `active=False` (cadastros) ou `status=inactive` (beneficiário)
⚑ Nada de índices específicos de Postgres: a suíte roda em SQLite
"""

from __future__ import annotations

import uuid

from django.db import models
from django.db.models import Index, Q, UniqueConstraint
from django.db.models.functions import Lower


# ╭──────────────────────────────────────────────╮
# │ 1. Autenticação / Acesso                    │
# ╰──────────────────────────────────────────────╯
class User(models.Model):
    class Role(models.TextChoices):
        MATRIZ = "matriz", "Matriz"
        UNIDADE = "unidade", "Unidade"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=128)
    password_hash = models.CharField(max_length=128)
    name = models.CharField(max_length=100)
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.UNIDADE,
        db_index=True,
    )
    unit = models.ForeignKey(
        "Unit",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="operators",
    )
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"
        indexes = [
            Index(Lower("email"), name="user_email_lower_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


# ╭──────────────────────────────────────────────╮
# │ 2. Rede: franquias e unidades               │
# ╰──────────────────────────────────────────────╯
class Franchise(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "franchises"
        ordering = ["name"]
        constraints = [
            UniqueConstraint(Lower("name"), name="uq_franchise_name_lower"),
        ]

    def __str__(self) -> str:
        return self.name


class Unit(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    franchise = models.ForeignKey(
        Franchise,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="units",
    )
    # operador responsável pela unidade
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="operated_units",
    )
    cnpj = models.CharField(max_length=14, blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    state = models.CharField(max_length=2, blank=True, null=True)
    cep = models.CharField(max_length=8, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "units"
        ordering = ["name"]
        indexes = [Index(fields=["franchise", "active"])]

    def __str__(self) -> str:
        return self.name


# ╭──────────────────────────────────────────────╮
# │ 3. Planos                                   │
# ╰──────────────────────────────────────────────╯
class Plan(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120)
    description = models.TextField(blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    cost = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    adhesion_commission_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    recurring_commission_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    franchise = models.ForeignKey(
        Franchise,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="plans",
    )
    active = models.BooleanField(default=True, db_index=True)
    rms_plan_code = models.IntegerField(null=True, blank=True)
    vindi_plan_id = models.IntegerField(null=True, blank=True, db_index=True)
    vindi_product_id = models.IntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "plans"
        ordering = ["price"]
        constraints = [
            models.CheckConstraint(condition=Q(price__gte=0), name="plan_price_gte_0"),
        ]

    def __str__(self) -> str:
        return f"{self.name} (R$ {self.price})"


# ╭──────────────────────────────────────────────╮
# │ 4. Beneficiários                            │
# ╰──────────────────────────────────────────────╯
class Beneficiary(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "active", "Ativo"
        INACTIVE = "inactive", "Inativo"
        PENDING = "pending", "Pendente"
        PENDING_PAYMENT = "pending_payment", "Aguardando pagamento"
        PAYMENT_CONFIRMED = "payment_confirmed", "Pagamento confirmado"
        SENT_TO_REGISTRY = "sent_to_registry", "Enviado ao RMS"
        REGISTRY_FAILED = "registry_failed", "Falha no RMS"

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pendente"
        PAYMENT_REQUESTED = "payment_requested", "Cobrança gerada"
        PROCESSING = "processing", "Processando"
        PAID = "paid", "Pago"
        FAILED = "failed", "Falhou"
        CANCELED = "canceled", "Cancelado"

    class ContractStatus(models.TextChoices):
        NOT_SENT = "not_sent", "Não enviado"
        PENDING_SIGNATURE = "pending_signature", "Aguardando assinatura"
        SIGNED = "signed", "Assinado"
        REFUSED = "refused", "Recusado"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    cpf = models.CharField(max_length=11, unique=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    birth_date = models.DateField(null=True, blank=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    address_number = models.CharField(max_length=20, blank=True, null=True)
    neighborhood = models.CharField(max_length=120, blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    state = models.CharField(max_length=2, blank=True, null=True)
    cep = models.CharField(max_length=8, blank=True, null=True)

    plan = models.ForeignKey(Plan, on_delete=models.PROTECT, related_name="beneficiaries")
    unit = models.ForeignKey(
        Unit,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="beneficiaries",
    )
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="beneficiaries",
    )
    plan_value = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    status = models.CharField(
        max_length=30, choices=Status.choices, default=Status.PENDING, db_index=True
    )
    payment_status = models.CharField(
        max_length=30,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True,
    )

    # gateway
    vindi_customer_id = models.IntegerField(null=True, blank=True)
    vindi_subscription_id = models.IntegerField(null=True, blank=True, db_index=True)
    checkout_link = models.TextField(blank=True, null=True)

    # assinatura eletrônica
    contract_status = models.CharField(
        max_length=30, choices=ContractStatus.choices, default=ContractStatus.NOT_SENT
    )
    autentique_document_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    autentique_signature_link = models.TextField(blank=True, null=True)
    contract_signed_at = models.DateTimeField(null=True, blank=True)

    adhesion_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)

    # RMS
    registry_retry_count = models.PositiveIntegerField(default=0)
    last_registry_error = models.TextField(blank=True, null=True)
    last_registry_attempt_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "beneficiaries"
        ordering = ["-created_at"]
        indexes = [
            Index(fields=["unit", "status"]),
            Index(fields=["status", "registry_retry_count"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"


class Cancellation(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    beneficiary = models.ForeignKey(
        Beneficiary, on_delete=models.CASCADE, related_name="cancellations"
    )
    user = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    reason = models.CharField(max_length=255)
    notes = models.TextField(blank=True, null=True)
    cancelled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "cancellations"
        ordering = ["-cancelled_at"]

    def __str__(self) -> str:
        return f"Cancelamento {self.beneficiary_id} – {self.reason}"


# ╭──────────────────────────────────────────────╮
# │ 5. Comissões                                │
# ╰──────────────────────────────────────────────╯
class Commission(models.Model):
    class Type(models.TextChoices):
        ADESAO = "adesao", "Adesão"
        RECORRENTE = "recorrente", "Recorrente"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    beneficiary = models.ForeignKey(
        Beneficiary, on_delete=models.CASCADE, related_name="commissions"
    )
    unit = models.ForeignKey(Unit, on_delete=models.CASCADE, related_name="commissions")
    user = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    reference_month = models.DateField()
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    percent = models.DecimalField(max_digits=5, decimal_places=2)
    commission_type = models.CharField(max_length=20, choices=Type.choices, default=Type.ADESAO)
    paid = models.BooleanField(default=False, db_index=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "commissions"
        ordering = ["-reference_month"]
        constraints = [
            UniqueConstraint(
                fields=["beneficiary", "reference_month", "commission_type"],
                name="uq_commission_beneficiary_month_type",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.commission_type} {self.reference_month:%m/%Y} – R$ {self.amount}"


# ╭──────────────────────────────────────────────╮
# │ 6. Contratos (assinatura eletrônica)        │
# ╰──────────────────────────────────────────────╯
class Contract(models.Model):
    class Status(models.TextChoices):
        PENDING_SIGNATURE = "pending_signature", "Aguardando assinatura"
        SIGNED = "signed", "Assinado"
        REFUSED = "refused", "Recusado"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    beneficiary = models.ForeignKey(
        Beneficiary, on_delete=models.CASCADE, related_name="contracts"
    )
    document_id = models.CharField(max_length=100, unique=True)
    status = models.CharField(
        max_length=30, choices=Status.choices, default=Status.PENDING_SIGNATURE
    )
    signature_link = models.TextField(blank=True, null=True)
    signed_at = models.DateTimeField(null=True, blank=True)
    provider_payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "contracts"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Contrato {self.document_id} ({self.status})"


# ╭──────────────────────────────────────────────╮
# │ 7. Gateway: assinaturas e transações        │
# ╰──────────────────────────────────────────────╯
class Subscription(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    beneficiary = models.ForeignKey(
        Beneficiary,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="subscriptions",
    )
    plan = models.ForeignKey(
        Plan, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField()
    customer_document = models.CharField(max_length=14)
    payment_method = models.CharField(max_length=30)
    status = models.CharField(max_length=30, default="pending", db_index=True)
    vindi_subscription_id = models.IntegerField(unique=True, null=True, blank=True)
    vindi_plan_id = models.IntegerField(null=True, blank=True)
    vindi_customer_id = models.IntegerField(null=True, blank=True)
    checkout_link = models.TextField(blank=True, null=True)
    next_billing_at = models.DateTimeField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "subscriptions"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Assinatura {self.vindi_subscription_id} ({self.status})"


class Transaction(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    beneficiary = models.ForeignKey(
        Beneficiary,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    subscription = models.ForeignKey(
        Subscription,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    payment_method = models.CharField(max_length=30)
    status = models.CharField(max_length=30, default="pending", db_index=True)
    transaction_type = models.CharField(max_length=40, default="subscription_charge")
    vindi_subscription_id = models.IntegerField(null=True, blank=True, db_index=True)
    vindi_bill_id = models.IntegerField(null=True, blank=True, db_index=True)
    vindi_charge_id = models.IntegerField(null=True, blank=True)
    customer_name = models.CharField(max_length=255, blank=True, null=True)
    customer_email = models.EmailField(blank=True, null=True)
    customer_document = models.CharField(max_length=14, blank=True, null=True)
    plan_name = models.CharField(max_length=120, blank=True, null=True)
    plan_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    installments = models.PositiveSmallIntegerField(default=1)
    gateway_response = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "transactions"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Transação {self.vindi_bill_id} ({self.status})"


class WebhookEvent(models.Model):
    """Log append-only; `event_id` é a chave de idempotência."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_id = models.CharField(max_length=128, unique=True)
    event_type = models.CharField(max_length=60, db_index=True)
    source = models.CharField(max_length=20, default="vindi")
    event_data = models.JSONField(default=dict, blank=True)
    processed = models.BooleanField(default=False, db_index=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    error_message = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "webhook_events"
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.source}:{self.event_type} {self.event_id}"


# ╭──────────────────────────────────────────────╮
# │ 8. Notificações in-app                      │
# ╰──────────────────────────────────────────────╯
class Notification(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="notifications")
    title = models.CharField(max_length=200)
    message = models.TextField()
    kind = models.CharField(max_length=20, default="info")
    read = models.BooleanField(default=False, db_index=True)
    action_url = models.CharField(max_length=255, blank=True, null=True)
    action_label = models.CharField(max_length=60, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at"]
        indexes = [Index(fields=["user", "read"])]

    def __str__(self) -> str:
        return self.title


# ╭──────────────────────────────────────────────╮
# │ 9. Integrações                              │
# ╰──────────────────────────────────────────────╯
class ApiSetting(models.Model):
    setting_name = models.CharField(max_length=100, unique=True)
    setting_value = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "api_settings"

    def __str__(self) -> str:
        return self.setting_name


class IntegrationLog(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    beneficiary = models.ForeignKey(
        Beneficiary,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="integration_logs",
    )
    operation = models.CharField(max_length=40, db_index=True)
    status = models.CharField(max_length=20)
    request_data = models.JSONField(default=dict, blank=True)
    response_data = models.JSONField(default=dict, blank=True)
    error_message = models.TextField(blank=True, null=True)
    retry_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "integration_logs"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.operation} {self.status}"
