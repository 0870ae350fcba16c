"""
DTOs de entrada do beneficiário.

Os validadores rodam antes de qualquer I/O: CPF, e-mail, CEP e telefone
chegam ao repositório já normalizados (somente dígitos).
"""
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, EmailStr, field_validator

from medpass_core.adapters.utils.phone_utils import normalize_phone
from medpass_core.core.domain.services.validators import (
    only_digits,
    validate_cep,
    validate_cpf_with_message,
)


def _clean_cpf(v: str | None) -> str | None:
    if v is None:
        return None
    msg = validate_cpf_with_message(v)
    if msg:
        raise ValueError(msg)
    return only_digits(v)


def _clean_cep(v: str | None) -> str | None:
    if not v:
        return None
    if not validate_cep(v):
        raise ValueError("CEP deve ter 8 dígitos")
    return only_digits(v)


def _clean_phone(v: str | None) -> str | None:
    if not v:
        return None
    normalized = normalize_phone(v)
    if not normalized:
        raise ValueError("Telefone inválido")
    return normalized


class BeneficiaryDTO(BaseModel):
    name: str
    cpf: str
    plan_id: str
    email: EmailStr | None = None
    phone: str | None = None
    birth_date: date | None = None
    address: str | None = None
    address_number: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    cep: str | None = None
    unit_id: str | None = None
    user_id: str | None = None
    plan_value: Decimal | None = None
    adhesion_date: date | None = None
    notes: str | None = None

    @field_validator("cpf")
    @classmethod
    def check_cpf(cls, v: str | None) -> str | None:
        return _clean_cpf(v)

    @field_validator("cep")
    @classmethod
    def check_cep(cls, v: str | None) -> str | None:
        return _clean_cep(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str | None) -> str | None:
        return _clean_phone(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Nome é obrigatório")
        return v


class BeneficiaryUpdateDTO(BaseModel):
    """Atualização parcial: apenas os campos enviados são aplicados."""
    name: str | None = None
    cpf: str | None = None
    plan_id: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    birth_date: date | None = None
    address: str | None = None
    address_number: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    cep: str | None = None
    plan_value: Decimal | None = None
    adhesion_date: date | None = None
    notes: str | None = None
    status: str | None = None

    @field_validator("cpf")
    @classmethod
    def check_cpf(cls, v: str | None) -> str | None:
        return _clean_cpf(v)

    @field_validator("cep")
    @classmethod
    def check_cep(cls, v: str | None) -> str | None:
        return _clean_cep(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str | None) -> str | None:
        return _clean_phone(v)
