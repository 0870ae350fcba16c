from __future__ import annotations

from typing import Any

from medpass_core.adapters.utils.phone_utils import normalize_phone
from medpass_core.core.domain.entities.beneficiary_entity import BeneficiaryEntity
from medpass_core.core.domain.entities.plan_entity import PlanEntity
from medpass_core.core.domain.services.validators import only_digits


class VindiPayloadBuilder:
    """Corpo JSON de cliente e assinatura para a API Vindi."""

    # o gateway (Yapay) recusa cliente sem endereço completo
    DEFAULT_ADDRESS = {
        "street": "Rua Consolação",
        "number": "100",
        "neighborhood": "Consolação",
        "city": "São Paulo",
        "state": "SP",
        "zipcode": "01302000",
    }

    def __init__(self, beneficiary: BeneficiaryEntity) -> None:
        self.ben = beneficiary

    def _address(self) -> dict[str, Any]:
        cep = only_digits(self.ben.cep)
        return {
            "street":       self.ben.address or self.DEFAULT_ADDRESS["street"],
            "number":       self.ben.address_number or self.DEFAULT_ADDRESS["number"],
            "neighborhood": self.ben.neighborhood or self.DEFAULT_ADDRESS["neighborhood"],
            "city":         self.ben.city or self.DEFAULT_ADDRESS["city"],
            "state":        (self.ben.state or self.DEFAULT_ADDRESS["state"]).upper(),
            "zipcode":      cep if len(cep) == 8 else self.DEFAULT_ADDRESS["zipcode"],  # noqa: PLR2004
            "country":      "BR",
        }

    def customer(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name":          self.ben.name,
            "email":         self.ben.email,
            "registry_code": only_digits(self.ben.cpf),
            "code":          f"BEN{str(self.ben.id)[:8]}",
            "address":       self._address(),
        }
        phone = normalize_phone(self.ben.phone, with_country=True) if self.ben.phone else None
        if phone:
            payload["phones"] = [{"phone_type": "mobile", "number": phone}]
        return payload

    def subscription(
        self,
        plan: PlanEntity,
        customer_id: int,
        payment_method: str,
        payment_profile_id: int | None = None,
        installments: int = 1,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "plan_id":             plan.vindi_plan_id,
            "customer_id":         customer_id,
            "payment_method_code": payment_method,
            "installments":        1 if payment_method == "pix" else installments,
            "code":                str(self.ben.id),
            "metadata":            {"beneficiary_id": str(self.ben.id), "plan_id": str(plan.id)},
        }
        if plan.vindi_product_id and self.ben.plan_value is not None:
            payload["product_items"] = [
                {
                    "product_id": plan.vindi_product_id,
                    "pricing_schema": {"price": str(self.ben.plan_value), "schema_type": "flat"},
                }
            ]
        if payment_profile_id:
            payload["payment_profile"] = {"id": payment_profile_id}
        return payload
