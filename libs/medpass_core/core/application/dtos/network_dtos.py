from pydantic import BaseModel, EmailStr, field_validator

from medpass_core.core.domain.services.validators import only_digits, validate_cep, validate_cnpj


class FranchiseDTO(BaseModel):
    name: str
    description: str | None = None
    active: bool = True


class FranchiseUpdateDTO(BaseModel):
    name: str | None = None
    description: str | None = None
    active: bool | None = None


class UnitDTO(BaseModel):
    name: str
    franchise_id: str | None = None
    user_id: str | None = None
    cnpj: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    cep: str | None = None
    phone: str | None = None
    email: EmailStr | None = None
    active: bool = True

    @field_validator("cnpj")
    @classmethod
    def check_cnpj(cls, v: str | None) -> str | None:
        if not v:
            return None
        if not validate_cnpj(v):
            raise ValueError("CNPJ inválido")
        return only_digits(v)

    @field_validator("cep")
    @classmethod
    def check_cep(cls, v: str | None) -> str | None:
        if not v:
            return None
        if not validate_cep(v):
            raise ValueError("CEP deve ter 8 dígitos")
        return only_digits(v)

    @field_validator("state")
    @classmethod
    def check_state(cls, v: str | None) -> str | None:
        return v.strip().upper()[:2] if v else None


class UnitUpdateDTO(UnitDTO):
    name: str | None = None  # type: ignore[assignment]
    active: bool | None = None  # type: ignore[assignment]
