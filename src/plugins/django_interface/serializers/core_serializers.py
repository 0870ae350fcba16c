# =========================================================
# Serializers de saída compatíveis com as *entities* (e não
# com os modelos Django): os ViewSets recebem dataclasses do
# QueryBus/CommandBus e só precisam projetá-las em JSON.
# =========================================================
from rest_framework import serializers


# ───────────────────────────────────────────────
# Usuários
# ───────────────────────────────────────────────
class UserSerializer(serializers.Serializer):
    id         = serializers.UUIDField()
    email      = serializers.EmailField()
    name       = serializers.CharField()
    role       = serializers.CharField()
    unit_id    = serializers.UUIDField(allow_null=True)
    is_active  = serializers.BooleanField()
    created_at = serializers.DateTimeField(allow_null=True)


# ───────────────────────────────────────────────
# Rede: franquias & unidades
# ───────────────────────────────────────────────
class FranchiseSerializer(serializers.Serializer):
    id          = serializers.UUIDField()
    name        = serializers.CharField()
    description = serializers.CharField(allow_blank=True, allow_null=True)
    active      = serializers.BooleanField()
    created_at  = serializers.DateTimeField(allow_null=True)
    updated_at  = serializers.DateTimeField(allow_null=True)


class UnitSerializer(serializers.Serializer):
    id           = serializers.UUIDField()
    name         = serializers.CharField()
    franchise_id = serializers.UUIDField(allow_null=True)
    user_id      = serializers.UUIDField(allow_null=True)
    cnpj         = serializers.CharField(allow_blank=True, allow_null=True)
    address      = serializers.CharField(allow_blank=True, allow_null=True)
    city         = serializers.CharField(allow_blank=True, allow_null=True)
    state        = serializers.CharField(allow_blank=True, allow_null=True)
    cep          = serializers.CharField(allow_blank=True, allow_null=True)
    phone        = serializers.CharField(allow_blank=True, allow_null=True)
    email        = serializers.EmailField(allow_blank=True, allow_null=True)
    active       = serializers.BooleanField()
    created_at   = serializers.DateTimeField(allow_null=True)
    updated_at   = serializers.DateTimeField(allow_null=True)


# ───────────────────────────────────────────────
# Planos
# ───────────────────────────────────────────────
class PlanSerializer(serializers.Serializer):
    id                           = serializers.UUIDField()
    name                         = serializers.CharField()
    price                        = serializers.DecimalField(max_digits=10, decimal_places=2)
    cost                         = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    adhesion_commission_percent  = serializers.DecimalField(max_digits=5, decimal_places=2)
    recurring_commission_percent = serializers.DecimalField(max_digits=5, decimal_places=2)
    franchise_id                 = serializers.UUIDField(allow_null=True)
    description                  = serializers.CharField(allow_blank=True, allow_null=True)
    active                       = serializers.BooleanField()
    rms_plan_code                = serializers.IntegerField(allow_null=True)
    vindi_plan_id                = serializers.IntegerField(allow_null=True)
    vindi_product_id             = serializers.IntegerField(allow_null=True)
    created_at                   = serializers.DateTimeField(allow_null=True)
    updated_at                   = serializers.DateTimeField(allow_null=True)


# ───────────────────────────────────────────────
# Beneficiários
# ───────────────────────────────────────────────
class BeneficiarySerializer(serializers.Serializer):
    id                        = serializers.UUIDField()
    name                      = serializers.CharField()
    cpf                       = serializers.CharField()
    email                     = serializers.EmailField(allow_blank=True, allow_null=True)
    phone                     = serializers.CharField(allow_blank=True, allow_null=True)
    birth_date                = serializers.DateField(allow_null=True)
    address                   = serializers.CharField(allow_blank=True, allow_null=True)
    address_number            = serializers.CharField(allow_blank=True, allow_null=True)
    neighborhood              = serializers.CharField(allow_blank=True, allow_null=True)
    city                      = serializers.CharField(allow_blank=True, allow_null=True)
    state                     = serializers.CharField(allow_blank=True, allow_null=True)
    cep                       = serializers.CharField(allow_blank=True, allow_null=True)
    plan_id                   = serializers.UUIDField()
    unit_id                   = serializers.UUIDField(allow_null=True)
    user_id                   = serializers.UUIDField(allow_null=True)
    plan_value                = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    status                    = serializers.CharField()
    payment_status            = serializers.CharField()
    vindi_customer_id         = serializers.IntegerField(allow_null=True)
    vindi_subscription_id     = serializers.IntegerField(allow_null=True)
    checkout_link             = serializers.CharField(allow_blank=True, allow_null=True)
    contract_status           = serializers.CharField()
    autentique_document_id    = serializers.CharField(allow_blank=True, allow_null=True)
    autentique_signature_link = serializers.CharField(allow_blank=True, allow_null=True)
    contract_signed_at        = serializers.DateTimeField(allow_null=True)
    adhesion_date             = serializers.DateField(allow_null=True)
    notes                     = serializers.CharField(allow_blank=True, allow_null=True)
    registry_retry_count      = serializers.IntegerField()
    last_registry_error       = serializers.CharField(allow_blank=True, allow_null=True)
    last_registry_attempt_at  = serializers.DateTimeField(allow_null=True)
    created_at                = serializers.DateTimeField(allow_null=True)
    updated_at                = serializers.DateTimeField(allow_null=True)


# ───────────────────────────────────────────────
# Comissões & contratos
# ───────────────────────────────────────────────
class CommissionSerializer(serializers.Serializer):
    id              = serializers.UUIDField()
    beneficiary_id  = serializers.UUIDField()
    unit_id         = serializers.UUIDField()
    user_id         = serializers.UUIDField(allow_null=True)
    reference_month = serializers.DateField()
    amount          = serializers.DecimalField(max_digits=10, decimal_places=2)
    percent         = serializers.DecimalField(max_digits=5, decimal_places=2)
    commission_type = serializers.CharField()
    paid            = serializers.BooleanField()
    paid_at         = serializers.DateTimeField(allow_null=True)
    created_at      = serializers.DateTimeField(allow_null=True)


class ContractSerializer(serializers.Serializer):
    id             = serializers.UUIDField()
    beneficiary_id = serializers.UUIDField()
    document_id    = serializers.CharField()
    status         = serializers.CharField()
    signature_link = serializers.CharField(allow_blank=True, allow_null=True)
    signed_at      = serializers.DateTimeField(allow_null=True)
    created_at     = serializers.DateTimeField(allow_null=True)
    updated_at     = serializers.DateTimeField(allow_null=True)


# ───────────────────────────────────────────────
# Notificações
# ───────────────────────────────────────────────
class NotificationSerializer(serializers.Serializer):
    id           = serializers.UUIDField()
    user_id      = serializers.UUIDField()
    title        = serializers.CharField()
    message      = serializers.CharField()
    kind         = serializers.CharField()
    read         = serializers.BooleanField()
    action_url   = serializers.CharField(allow_blank=True, allow_null=True)
    action_label = serializers.CharField(allow_blank=True, allow_null=True)
    created_at   = serializers.DateTimeField(allow_null=True)
