from __future__ import annotations

from typing import Any

import requests
import structlog
from django.conf import settings

from medpass_core.adapters.api_clients.base_api_client import BaseAPIClient
from medpass_core.core.domain.events.exceptions import ConfigurationError
from payment_billing.core.application.dtos.vindi_dtos import (
    BillEnvelope,
    BillListEnvelope,
    ChargeEnvelope,
    CustomerEnvelope,
    CustomerListEnvelope,
    PaymentProfileEnvelope,
    SubscriptionEnvelope,
    VindiBill,
    VindiCharge,
    VindiCustomer,
    VindiPaymentProfile,
)
from payment_billing.core.domain.events.exceptions import GatewayError

logger = structlog.get_logger(__name__)

VINDI_API_URLS = {
    "sandbox": "https://sandbox-app.vindi.com.br/api/v1",
    "production": "https://app.vindi.com.br/api/v1",
}


class VindiAPIClient(BaseAPIClient):
    """
    Wrapper da API Vindi v1 (Basic auth `api_key:`).

    Qualquer resposta não-2xx ou falha de transporte vira `GatewayError`
    já com o erro mapeado para exibição.
    """

    def __init__(
        self,
        api_key: str | None = None,
        environment: str | None = None,
        timeout: float | None = None,
    ) -> None:
        api_key = api_key if api_key is not None else settings.VINDI_API_KEY
        if not api_key:
            raise ConfigurationError("VINDI_API_KEY não configurada", setting="VINDI_API_KEY")

        self.environment = (environment or settings.VINDI_ENVIRONMENT or "production").lower()
        base_url = VINDI_API_URLS.get(self.environment, VINDI_API_URLS["production"])
        super().__init__(
            base_url=base_url,
            default_headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "MedPass-Gestao/1.0",
            },
            timeout=timeout or settings.VINDI_TIMEOUT,
            auth=(api_key, ""),
        )
        logger.debug("VindiAPIClient inicializado", environment=self.environment)

    # ─────────────────────────── erros ──────────────────────────
    def _on_error(self, resp: requests.Response, body: Any) -> None:
        message = f"Vindi retornou status {resp.status_code}"
        if isinstance(body, dict) and body.get("errors"):
            first = body["errors"][0]
            message = first.get("message") or message
            if first.get("parameter"):
                message = f"{first['parameter']}: {message}"
        raise GatewayError(message, status_code=resp.status_code, response=body)

    def _on_transport_error(self, exc: requests.RequestException) -> None:
        kind = "timeout" if isinstance(exc, requests.Timeout) else "connection error"
        raise GatewayError(f"Vindi {kind}: {exc}") from exc

    # ─────────────────────────── clientes ──────────────────────────
    def find_customer_by_registry_code(self, cpf: str) -> VindiCustomer | None:
        env = self._get(
            "customers",
            params={"query": f"registry_code:{cpf}"},
            response_model=CustomerListEnvelope,
        )
        return env.customers[0] if env.customers else None

    def create_customer(self, payload: dict[str, Any]) -> VindiCustomer:
        body = self._post("customers", json_body=payload)
        return CustomerEnvelope.model_validate(body).customer

    def update_customer(self, customer_id: int, payload: dict[str, Any]) -> VindiCustomer:
        body = self._put(f"customers/{customer_id}", json_body=payload)
        return CustomerEnvelope.model_validate(body).customer

    def delete_customer(self, customer_id: int) -> None:
        self._delete(f"customers/{customer_id}")

    # ─────────────────────────── cartão ──────────────────────────
    def tokenize_card(self, card: dict[str, Any]) -> str:
        """
        Tokeniza o cartão no endpoint hospedado e devolve o `gateway_token`.
        Os dados do cartão só trafegam nesta chamada.
        """
        body = self._post(
            "hosted/payment_profile_search/create_unique",
            json_body={
                "holder_name": card["holder_name"],
                "card_number": card["number"],
                "card_expiration": f"{card['expiry_month']}/{card['expiry_year']}",
                "card_cvv": card["cvv"],
                "allow_as_fallback": False,
            },
        )
        token = body.get("gateway_token") if isinstance(body, dict) else None
        if not token:
            raise GatewayError("Gateway token não retornado na tokenização")
        return token

    def create_payment_profile(self, customer_id: int, gateway_token: str) -> VindiPaymentProfile:
        body = self._post(
            "payment_profiles",
            json_body={
                "gateway_token": gateway_token,
                "customer_id": customer_id,
                "payment_method_code": "credit_card",
            },
        )
        return PaymentProfileEnvelope.model_validate(body).payment_profile

    # ─────────────────────────── assinaturas ──────────────────────────
    def create_subscription(self, payload: dict[str, Any]) -> SubscriptionEnvelope:
        body = self._post("subscriptions", json_body=payload)
        return SubscriptionEnvelope.model_validate(body)

    def cancel_subscription(self, subscription_id: int) -> None:
        self._delete(f"subscriptions/{subscription_id}", params={"cancel_bills": "true"})

    # ─────────────────────────── faturas / cobranças ──────────────────────────
    def list_subscription_bills(self, subscription_id: int) -> list[VindiBill]:
        env = self._get(
            "bills",
            params={"query": f"subscription_id:{subscription_id}", "sort_order": "desc"},
            response_model=BillListEnvelope,
        )
        return env.bills

    def get_bill(self, bill_id: int) -> VindiBill:
        return self._get(f"bills/{bill_id}", response_model=BillEnvelope).bill

    def get_charge(self, charge_id: int) -> VindiCharge:
        return self._get(f"charges/{charge_id}", response_model=ChargeEnvelope).charge
