"""
Tradução de exceções de domínio em respostas HTTP.

Registrado em `REST_FRAMEWORK["EXCEPTION_HANDLER"]`; as views de função
(`billing_views`) usam `http_status_for` / `error_body` para montar o
envelope `{success, error}`.
"""
from __future__ import annotations

from typing import Any

import pydantic
import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from medpass_core.core.domain.events.exceptions import (
    BusinessRuleError,
    ConfigurationError,
    DomainError,
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from payment_billing.core.domain.events.exceptions import (
    ESignatureError,
    GatewayError,
    RegistryError,
)
from payment_billing.core.domain.services.gateway_error_mapper import action_button_text

logger = structlog.get_logger(__name__)

# ordem importa: subclasses antes das bases
_STATUS_MAP: list[tuple[type[Exception], int]] = [
    (ValidationError,       status.HTTP_400_BAD_REQUEST),
    (NotFoundError,         status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (DuplicateError,        status.HTTP_409_CONFLICT),
    (BusinessRuleError,     status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ConfigurationError,    status.HTTP_503_SERVICE_UNAVAILABLE),
    (RegistryError,         status.HTTP_502_BAD_GATEWAY),
    (ESignatureError,       status.HTTP_502_BAD_GATEWAY),
]
_PROVIDER_FAILURE_KEYS = frozenset({"timeout", "network_error"})


def http_status_for(exc: Exception) -> int:
    if isinstance(exc, pydantic.ValidationError | DjangoValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, GatewayError):
        # falha do provedor → 502; recusa/dados do cartão → 402
        if exc.mapped.category == "system" or exc.mapped.key in _PROVIDER_FAILURE_KEYS:
            return status.HTTP_502_BAD_GATEWAY
        return status.HTTP_402_PAYMENT_REQUIRED
    for exc_type, code in _STATUS_MAP:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _pydantic_message(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()))
        msg = str(err.get("msg", "")).removeprefix("Value error, ")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts)


def error_body(exc: Exception) -> dict[str, Any]:
    """Corpo de erro: mensagem + campos extras por tipo."""
    if isinstance(exc, pydantic.ValidationError):
        return {"error": _pydantic_message(exc)}
    if isinstance(exc, DjangoValidationError):
        return {"error": "; ".join(exc.messages)}
    if not isinstance(exc, DomainError):
        return {"error": "Erro interno do servidor."}

    body: dict[str, Any] = {"error": exc.message}
    if isinstance(exc, GatewayError):
        mapped = exc.mapped
        body.update(
            {
                "error": mapped.user_friendly,
                "error_key": mapped.key,
                "error_title": mapped.title,
                "category": mapped.category,
                "suggested_action": mapped.suggested_action,
                "action_label": action_button_text(mapped.suggested_action),
                "can_retry": mapped.can_retry,
                "gateway_message": exc.message,
                "gateway_code": exc.gateway_code,
            }
        )
    elif isinstance(exc, ValidationError) and exc.details.get("field"):
        body["field"] = exc.details["field"]
    return body


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """Handler do DRF: trata exceções nativas e depois as de domínio."""
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, DomainError | pydantic.ValidationError | DjangoValidationError):
        code = http_status_for(exc)
        view = context.get("view")
        logger.info(
            "http.domain_error",
            view=type(view).__name__ if view else None,
            error_type=type(exc).__name__,
            status=code,
        )
        body = error_body(exc)
        return Response({"detail": body.pop("error"), **body}, status=code)

    # inesperado: deixa o Django gerar o 500 com traceback no log
    return None
