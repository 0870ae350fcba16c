"""
DTOs de entrada do checkout.

Os dados do cartão só existem em memória durante a tokenização; nenhum
modelo persiste número ou CVV.
"""
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator

from medpass_core.core.domain.services.validators import only_digits, validate_credit_card


class CardDataDTO(BaseModel):
    number: str
    cvv: str
    holder_name: str
    expiry_month: str
    expiry_year: str

    @field_validator("number")
    @classmethod
    def check_number(cls, v: str) -> str:
        if not validate_credit_card(v):
            raise ValueError("Número do cartão inválido")
        return only_digits(v)

    @field_validator("cvv")
    @classmethod
    def check_cvv(cls, v: str) -> str:
        digits = only_digits(v)
        if len(digits) not in (3, 4):
            raise ValueError("CVV deve ter 3 ou 4 dígitos")
        return digits

    @field_validator("expiry_month")
    @classmethod
    def check_month(cls, v: str) -> str:
        digits = only_digits(v)
        if not digits or not 1 <= int(digits) <= 12:  # noqa: PLR2004
            raise ValueError("Mês de validade inválido")
        return digits.zfill(2)

    @field_validator("expiry_year")
    @classmethod
    def check_year(cls, v: str) -> str:
        digits = only_digits(v)
        if len(digits) == 2:  # noqa: PLR2004
            digits = f"20{digits}"
        if len(digits) != 4:  # noqa: PLR2004
            raise ValueError("Ano de validade inválido")
        return digits

    @field_validator("holder_name")
    @classmethod
    def check_holder(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Nome do titular é obrigatório")
        return v.strip().upper()

    def masked(self) -> dict:
        return {"last_four": self.number[-4:], "holder_name": self.holder_name}


class CheckoutDTO(BaseModel):
    beneficiary_id: str
    plan_id: str
    payment_method: Literal["pix", "credit_card"]
    card: CardDataDTO | None = None
    installments: int = 1

    @model_validator(mode="after")
    def check_card(self) -> "CheckoutDTO":
        if self.payment_method == "credit_card" and self.card is None:
            raise ValueError("Dados do cartão são obrigatórios para cartão de crédito")
        return self
