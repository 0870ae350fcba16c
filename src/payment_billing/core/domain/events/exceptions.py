from __future__ import annotations

from typing import TYPE_CHECKING

from medpass_core.core.domain.events.exceptions import DomainError

if TYPE_CHECKING:
    from payment_billing.core.domain.services.gateway_error_mapper import MappedGatewayError


class IntegrationError(DomainError):
    """Falha em provedor externo (gateway, registro, assinatura eletrônica)."""
    default_message = "Falha na integração externa."


# ───────────────────────────────────────────────
# Gateway de pagamento (Vindi)
# ───────────────────────────────────────────────
class GatewayError(IntegrationError):
    default_message = "Erro no gateway de pagamento."

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        gateway_code: str | None = None,
        mapped: MappedGatewayError | None = None,
        **details,
    ) -> None:
        super().__init__(message, **details)
        from payment_billing.core.domain.services.gateway_error_mapper import map_gateway_error

        self.status_code = status_code
        self.gateway_code = gateway_code
        self.mapped = mapped or map_gateway_error(self.message, gateway_code)


# ───────────────────────────────────────────────
# Registro de beneficiários (RMS)
# ───────────────────────────────────────────────
class RegistryError(IntegrationError):
    default_message = "Erro na API de registro de beneficiários."

    def __init__(self, message: str | None = None, *, codigo: int | None = None, **details) -> None:
        super().__init__(message, **details)
        self.codigo = codigo


class RegistryAuthError(RegistryError):
    """401/403: credencial inválida. Nunca é re-tentado."""
    default_message = "Credencial do RMS recusada."


class RegistryBusinessError(RegistryError):
    """Erro de regra retornado pelo RMS (CPF inválido, contrato inativo...)."""
    default_message = "RMS recusou a operação."


class RegistryTemporaryError(RegistryError):
    """Falha de transporte ou 5xx após as retentativas."""
    default_message = "RMS indisponível."


# ───────────────────────────────────────────────
# Assinatura eletrônica (Autentique)
# ───────────────────────────────────────────────
class ESignatureError(IntegrationError):
    default_message = "Erro no provedor de assinatura eletrônica."
