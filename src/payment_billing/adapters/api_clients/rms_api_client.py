from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

import requests
import structlog
from django.conf import settings

from medpass_core.adapters.api_clients.base_api_client import BaseAPIClient
from medpass_core.core.domain.events.exceptions import ConfigurationError
from medpass_core.core.domain.repositories.api_setting_repository import ApiSettingRepository
from payment_billing.core.application.dtos.rms_dtos import RmsBeneficiaryPage, RmsResponse
from payment_billing.core.domain.events.exceptions import (
    RegistryAuthError,
    RegistryBusinessError,
    RegistryTemporaryError,
)

logger = structlog.get_logger(__name__)

# chave em ApiSetting → fallback em settings
_SETTING_KEYS: dict[str, str] = {
    "EXTERNAL_API_KEY": "RMS_API_KEY",
    "EXTERNAL_API_ADESAO_URL": "RMS_ADESAO_URL",
    "EXTERNAL_API_CANCELAMENTO_URL": "RMS_CANCELAMENTO_URL",
    "EXTERNAL_API_CONSULTA_BENEFICIARIOS_URL": "RMS_CONSULTA_BENEFICIARIOS_URL",
    "ID_CLIENTE": "RMS_ID_CLIENTE",
    "ID_CLIENTE_CONTRATO": "RMS_ID_CLIENTE_CONTRATO",
}

RMS_ERROR_MESSAGES: dict[int, str] = {
    1000: "Campo obrigatório não informado",
    1003: "Cliente inativo no RMS",
    1005: "Contrato inativo no RMS",
    1010: "CPF inválido",
    1034: "Data inválida",
    1063: "Beneficiário não localizado no RMS",
}
CODE_NOT_FOUND = 1063


@dataclass(frozen=True)
class RmsConfig:
    api_key: str
    adesao_url: str
    cancelamento_url: str
    consulta_url: str | None
    id_cliente: int
    id_cliente_contrato: int


class RmsAPIClient(BaseAPIClient):
    """
    Cliente da API de registro de beneficiários (RMS).

    As credenciais são lidas a cada chamada da tabela `ApiSetting`, com
    fallback nas settings do Django, para que a troca de chave pelo painel
    tenha efeito sem reiniciar os workers.
    """

    def __init__(self, settings_repo: ApiSettingRepository, timeout: float | None = None) -> None:
        super().__init__(
            base_url="/",  # URLs absolutas vêm da configuração
            default_headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=timeout or settings.RMS_TIMEOUT,
            # POST (adesão/cancelamento) fica fora do retry de transporte
            retry_methods=frozenset({"GET"}),
        )
        self.settings_repo = settings_repo

    # ─────────────────────────── configuração ──────────────────────────
    def load_config(self) -> RmsConfig:
        stored = self.settings_repo.get_many(list(_SETTING_KEYS))
        values = {
            key: stored.get(key) or getattr(settings, fallback, None) or None
            for key, fallback in _SETTING_KEYS.items()
        }
        required = (
            "EXTERNAL_API_KEY", "EXTERNAL_API_ADESAO_URL", "EXTERNAL_API_CANCELAMENTO_URL",
            "ID_CLIENTE", "ID_CLIENTE_CONTRATO",
        )
        missing = [k for k in required if not values[k]]
        if missing:
            raise ConfigurationError(
                f"Configuração do RMS ausente: {', '.join(missing)}", missing=missing
            )
        return RmsConfig(
            api_key=values["EXTERNAL_API_KEY"],
            adesao_url=values["EXTERNAL_API_ADESAO_URL"],
            cancelamento_url=values["EXTERNAL_API_CANCELAMENTO_URL"],
            consulta_url=values["EXTERNAL_API_CONSULTA_BENEFICIARIOS_URL"],
            id_cliente=int(values["ID_CLIENTE"]),
            id_cliente_contrato=int(values["ID_CLIENTE_CONTRATO"]),
        )

    # ─────────────────────────── erros ──────────────────────────
    def _on_error(self, resp: requests.Response, body: Any) -> None:
        parsed = RmsResponse.model_validate(body) if isinstance(body, dict) else RmsResponse()
        if resp.status_code in (401, 403):
            logger.error("rms.auth_failed", status=resp.status_code)
            raise RegistryAuthError(
                f"RMS recusou a credencial (status {resp.status_code})", codigo=parsed.codigo
            )
        if resp.status_code >= 500:  # noqa: PLR2004
            raise RegistryTemporaryError(
                f"RMS retornou status {resp.status_code}", codigo=parsed.codigo
            )
        raise RegistryBusinessError(self._business_message(parsed), codigo=parsed.codigo)

    def _on_transport_error(self, exc: requests.RequestException) -> None:
        raise RegistryTemporaryError(f"Falha de comunicação com o RMS: {exc}") from exc

    @staticmethod
    def _business_message(parsed: RmsResponse) -> str:
        known = RMS_ERROR_MESSAGES.get(parsed.codigo or 0)
        if known and parsed.mensagem:
            return f"{known}: {parsed.mensagem}"
        return known or parsed.mensagem or "Erro de negócio no RMS"

    @staticmethod
    def _headers(cfg: RmsConfig) -> dict[str, str]:
        return {"x-api-key": cfg.api_key}

    # ─────────────────────────── operações ──────────────────────────
    def send_adhesion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Envia a adesão; sucesso exige `mensagem` contendo "sucesso"."""
        cfg = self.load_config()
        body = {"idClienteContrato": cfg.id_cliente_contrato, "idCliente": cfg.id_cliente, **payload}
        resp = self._post(cfg.adesao_url, json_body=body, headers=self._headers(cfg))
        parsed = RmsResponse.model_validate(resp) if isinstance(resp, dict) else RmsResponse()

        if "sucesso" not in (parsed.mensagem or "").lower():
            message = (
                self._business_message(parsed) if parsed.mensagem
                else "Resposta do RMS sem confirmação de adesão"
            )
            raise RegistryBusinessError(message, codigo=parsed.codigo)
        logger.info("rms.adhesion_ok", codigo_externo=payload.get("codigoExterno"))
        return resp

    def send_cancellation(self, payload: dict[str, Any]) -> dict[str, Any]:
        cfg = self.load_config()
        body = {"idClienteContrato": cfg.id_cliente_contrato, "idCliente": cfg.id_cliente, **payload}
        resp = self._post(cfg.cancelamento_url, json_body=body, headers=self._headers(cfg))
        parsed = RmsResponse.model_validate(resp) if isinstance(resp, dict) else RmsResponse()
        mensagem = (parsed.mensagem or "").lower()

        if parsed.codigo == CODE_NOT_FOUND or "não localizado" in mensagem:
            raise RegistryBusinessError(self._business_message(parsed), codigo=parsed.codigo)
        if not any(p in mensagem for p in ("cancelado com sucesso", "cancelamento realizado", "sucesso")):
            raise RegistryBusinessError(
                "Resposta do RMS sem confirmação de cancelamento", codigo=parsed.codigo
            )
        logger.info("rms.cancellation_ok", codigo_externo=payload.get("codigoExterno"))
        return resp

    def query_beneficiaries(
        self,
        start: date,
        end: date,
        offset: int = 0,
        cpf: str | None = None,
    ) -> RmsBeneficiaryPage:
        cfg = self.load_config()
        if not cfg.consulta_url:
            raise ConfigurationError(
                "EXTERNAL_API_CONSULTA_BENEFICIARIOS_URL não configurada",
                missing=["EXTERNAL_API_CONSULTA_BENEFICIARIOS_URL"],
            )
        params: dict[str, Any] = {
            "idCliente": cfg.id_cliente,
            "idClienteContrato": cfg.id_cliente_contrato,
            "dataInicial": start.strftime("%d/%m/%Y"),
            "dataFinal": end.strftime("%d/%m/%Y"),
            "offset": offset,
        }
        if cpf:
            params["cpf"] = cpf

        payload = self._request("GET", cfg.consulta_url, params=params, headers=self._headers(cfg))
        if isinstance(payload, dict) and payload.get("codigo") in RMS_ERROR_MESSAGES:
            raise RegistryBusinessError(
                self._business_message(RmsResponse.model_validate(payload)),
                codigo=payload["codigo"],
            )
        return RmsBeneficiaryPage.model_validate(payload)
