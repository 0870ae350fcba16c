"""
Montagem dos payloads de adesão e cancelamento do RMS.

Funções puras sobre as entidades; `idCliente` e `idClienteContrato` são
acrescentados pelo cliente HTTP a partir da configuração.
"""
from __future__ import annotations

from typing import Any

from medpass_core.core.domain.entities.beneficiary_entity import BeneficiaryEntity
from medpass_core.core.domain.entities.plan_entity import PlanEntity
from medpass_core.core.domain.events.exceptions import ValidationError
from medpass_core.core.domain.services.validators import only_digits

DEFAULT_BIRTH_DATE = "01011990"
BENEFICIARY_TYPE_HOLDER = 1
BENEFICIARY_TYPE_DEPENDENT = 3

# valores aceitos pelo RMS quando o cadastro local está incompleto
DEFAULT_PHONE = "11999999999"
DEFAULT_CEP = "01234567"
DEFAULT_NUMBER = "123"
DEFAULT_UF = "SP"


def adhesion_external_code(ben: BeneficiaryEntity) -> str:
    """`VINDI_{assinatura}` quando há assinatura no gateway, senão `BEN{id[:8]}`."""
    if ben.vindi_subscription_id:
        return f"VINDI_{ben.vindi_subscription_id}"
    return cancellation_external_code(ben)


def cancellation_external_code(ben: BeneficiaryEntity) -> str:
    return f"BEN{str(ben.id)[:8]}"


def build_adhesion_payload(
    ben: BeneficiaryEntity,
    plan: PlanEntity,
    codigo_externo: str | None = None,
    *,
    beneficiary_type: int = BENEFICIARY_TYPE_HOLDER,
    holder_cpf: str | None = None,
) -> dict[str, Any]:
    if beneficiary_type == BENEFICIARY_TYPE_DEPENDENT and not holder_cpf:
        raise ValidationError("Dependente exige o CPF do titular", field="cpf_titular")
    if not ben.email:
        raise ValidationError("E-mail do beneficiário é obrigatório para o RMS", field="email")

    payload: dict[str, Any] = {
        "idBeneficiarioTipo": beneficiary_type,
        "nome": ben.name.strip(),
        "codigoExterno": (codigo_externo or adhesion_external_code(ben)).strip(),
        "cpf": only_digits(ben.cpf),
        "dataNascimento": ben.birth_date.strftime("%d%m%Y") if ben.birth_date else DEFAULT_BIRTH_DATE,
        "celular": only_digits(ben.phone) or DEFAULT_PHONE,
        "email": ben.email.strip(),
        "cep": only_digits(ben.cep) or DEFAULT_CEP,
        "numero": (ben.address_number or DEFAULT_NUMBER).strip(),
        "uf": (ben.state or DEFAULT_UF).upper(),
        "tipoPlano": plan.registry_plan_code(),
    }
    if beneficiary_type == BENEFICIARY_TYPE_DEPENDENT:
        payload["cpfTitular"] = only_digits(holder_cpf)
    return payload


def build_cancellation_payload(ben: BeneficiaryEntity) -> dict[str, Any]:
    return {
        "cpf": only_digits(ben.cpf),
        "codigoExterno": cancellation_external_code(ben),
    }
