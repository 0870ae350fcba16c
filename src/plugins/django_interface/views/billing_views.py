# ╭────────────────────────────────────────────────────────────────────────────╮
# │  Endpoints de função (checkout, cartão, cancelamento…) e webhooks          │
# │                                                                            │
# │  Todos respondem no envelope `{success, data}` / `{success: false, error}` │
# │  com o status HTTP derivado da exceção de domínio.                         │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

import hmac
from collections.abc import Callable
from typing import Any

import structlog
from django.conf import settings
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from medpass_core.adapters.observability.decorators import track_http
from medpass_core.core.domain.events.exceptions import DomainError
from payment_billing.adapters.config.composition_root import setup_di_container_from_settings
from payment_billing.core.application.commands.cancellation_commands import CancelBeneficiaryCommand
from payment_billing.core.application.commands.payment_commands import (
    ProcessCheckoutCommand,
    RefreshPaymentStatusesCommand,
    TokenizeCardCommand,
)
from payment_billing.core.application.commands.signature_commands import CreateSignatureContractCommand
from payment_billing.core.application.commands.webhook_commands import (
    IngestGatewayWebhookCommand,
    IngestSignatureWebhookCommand,
)
from payment_billing.core.application.dtos.checkout_dto import CardDataDTO, CheckoutDTO
from payment_billing.core.application.queries.registry_queries import QueryRegistryBeneficiariesQuery
from plugins.django_interface.exception_handler import error_body, http_status_for
from plugins.django_interface.list_cache import invalidate
from plugins.django_interface.permissions import IsHeadquarters, IsNetworkUser
from plugins.django_interface.serializers.billing_serializers import (
    CancelBeneficiaryRequestSerializer,
    CreateContractRequestSerializer,
    RefreshPaymentStatusesRequestSerializer,
    RegistryBeneficiariesRequestSerializer,
)
from plugins.django_interface.views.core_views import request_body, scope_unit_id

logger = structlog.get_logger(__name__)

# ───────────────────────────────  CQRS Buses  ────────────────────────────────
_billing_container = setup_di_container_from_settings(settings)
billing_command_bus = _billing_container.command_bus()
billing_query_bus = _billing_container.query_bus()

# listas afetadas por checkout, webhook, cancelamento e contrato
BILLING_RESOURCES = ("beneficiaries", "contracts", "commissions", "notifications")


def envelope(
    fn: Callable[[], Any],
    *,
    event: str,
    success_status: int = status.HTTP_200_OK,
    failure_status: int | None = None,
) -> Response:
    """
    Executa `fn` e devolve `{success, data}` ou `{success: false, error…}`.
    `failure_status` fixa o código de erro (webhook do gateway sempre 500).
    """
    try:
        data = fn()
    except DomainError as exc:
        code = failure_status or http_status_for(exc)
        logger.info(event + ".rejected", error_type=type(exc).__name__, status=code, error=exc.message)
        return Response({"success": False, **error_body(exc)}, status=code)
    except Exception as exc:
        code = failure_status or http_status_for(exc)
        if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.exception(event + ".failed")
        return Response({"success": False, **error_body(exc)}, status=code)
    return Response({"success": True, "data": data}, status=success_status)


def _validated(serializer_class, request) -> dict[str, Any]:
    ser = serializer_class(data=request.data)
    ser.is_valid(raise_exception=True)
    return ser.validated_data


# ╭──────────────────────────────────────────────╮
# │ 1. Pagamento                                 │
# ╰──────────────────────────────────────────────╯
class ProcessCheckoutView(APIView):
    """Cria cliente + assinatura no gateway e devolve PIX ou status do cartão."""

    permission_classes = [IsNetworkUser]

    @track_http("ProcessCheckoutView_post")
    def post(self, request):
        def run():
            dto = CheckoutDTO.model_validate(request_body(request))
            result = billing_command_bus.dispatch(
                ProcessCheckoutCommand(payload=dto, scope_unit_id=scope_unit_id(request))
            )
            invalidate(*BILLING_RESOURCES)
            return result

        return envelope(run, event="checkout")


class TokenizeCardView(APIView):
    permission_classes = [IsNetworkUser]

    @track_http("TokenizeCardView_post")
    def post(self, request):
        def run():
            card = CardDataDTO.model_validate(request_body(request))
            return billing_command_bus.dispatch(TokenizeCardCommand(card=card))

        return envelope(run, event="tokenize")


class RefreshPaymentStatusesView(APIView):
    permission_classes = [IsHeadquarters]

    @track_http("RefreshPaymentStatusesView_post")
    def post(self, request):
        data = _validated(RefreshPaymentStatusesRequestSerializer, request)

        def run():
            result = billing_command_bus.dispatch(RefreshPaymentStatusesCommand(limit=data["limit"]))
            if result["updated"]:
                invalidate(*BILLING_RESOURCES)
            return result

        return envelope(run, event="payment_refresh")


# ╭──────────────────────────────────────────────╮
# │ 2. Ciclo de vida do beneficiário             │
# ╰──────────────────────────────────────────────╯
class CancelBeneficiaryView(APIView):
    permission_classes = [IsNetworkUser]

    @track_http("CancelBeneficiaryView_post")
    def post(self, request):
        data = _validated(CancelBeneficiaryRequestSerializer, request)

        def run():
            result = billing_command_bus.dispatch(
                CancelBeneficiaryCommand(
                    beneficiary_id=str(data["beneficiary_id"]),
                    reason=data.get("reason", ""),
                    user_id=str(request.user.id),
                    notes=data.get("notes") or None,
                    scope_unit_id=scope_unit_id(request),
                )
            )
            invalidate(*BILLING_RESOURCES)
            return result

        return envelope(run, event="cancellation")


class CreateContractView(APIView):
    permission_classes = [IsNetworkUser]

    @track_http("CreateContractView_post")
    def post(self, request):
        data = _validated(CreateContractRequestSerializer, request)

        def run():
            result = billing_command_bus.dispatch(
                CreateSignatureContractCommand(
                    beneficiary_id=str(data["beneficiary_id"]),
                    scope_unit_id=scope_unit_id(request),
                )
            )
            invalidate(*BILLING_RESOURCES)
            return result

        return envelope(run, success_status=status.HTTP_201_CREATED, event="signature")


class RegistryBeneficiariesView(APIView):
    """Consulta no RMS os beneficiários enviados em um período."""

    permission_classes = [IsHeadquarters]

    @track_http("RegistryBeneficiariesView_post")
    def post(self, request):
        data = _validated(RegistryBeneficiariesRequestSerializer, request)
        return envelope(
            lambda: billing_query_bus.dispatch(
                QueryRegistryBeneficiariesQuery(
                    start=data["start"],
                    end=data["end"],
                    offset=data.get("offset", 0),
                    cpf=data.get("cpf") or None,
                )
            ),
            event="registry_query",
        )


# ╭──────────────────────────────────────────────╮
# │ 3. Webhooks (sem autenticação JWT)           │
# ╰──────────────────────────────────────────────╯
class VindiWebhookView(APIView):
    """
    Recebe eventos do gateway. O segredo compartilhado (quando configurado)
    vem no header `X-Webhook-Secret` ou no parâmetro `secret`.
    Falha ao aplicar o evento responde 500 para o gateway reenviar.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def _secret_ok(self, request) -> bool:
        expected = getattr(settings, "VINDI_WEBHOOK_SECRET", "")
        if not expected:
            return True
        received = request.headers.get("X-Webhook-Secret") or request.query_params.get("secret", "")
        return hmac.compare_digest(str(received), str(expected))

    @track_http("VindiWebhookView_post")
    def post(self, request):
        if not self._secret_ok(request):
            logger.warning("webhook.invalid_secret", source="vindi")
            return Response({"success": False, "error": "Segredo inválido."}, status=status.HTTP_401_UNAUTHORIZED)

        raw_body = request.body
        body = request_body(request)

        def run():
            result = billing_command_bus.dispatch(
                IngestGatewayWebhookCommand(
                    body=body,
                    event_id=request.headers.get("X-Event-Id"),
                    raw_body=raw_body,
                )
            )
            if result["status"] == "processed":
                invalidate(*BILLING_RESOURCES)
            return result

        return envelope(run, event="webhook", failure_status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class AutentiqueWebhookView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @track_http("AutentiqueWebhookView_post")
    def post(self, request):
        body = request_body(request)

        def run():
            result = billing_command_bus.dispatch(IngestSignatureWebhookCommand(body=body))
            invalidate(*BILLING_RESOURCES)
            return result

        return envelope(run, event="signature_webhook")
