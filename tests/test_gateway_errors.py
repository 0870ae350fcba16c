"""Mapeamento de erros do gateway e status HTTP derivado."""

from django.test import SimpleTestCase

from payment_billing.core.domain.events.exceptions import GatewayError
from payment_billing.core.domain.services.gateway_error_mapper import (
    action_button_text,
    map_gateway_error,
)
from plugins.django_interface.exception_handler import error_body, http_status_for


class GatewayErrorMapperTests(SimpleTestCase):
    def test_timeout_wins_over_code(self) -> None:
        self.assertEqual(map_gateway_error("Request timeout", "05").key, "timeout")

    def test_network_before_code(self) -> None:
        self.assertEqual(map_gateway_error("connection reset").key, "network_error")

    def test_gateway_codes(self) -> None:
        cases = {
            "05": "card_declined",
            "51": "insufficient_funds",
            "54": "expired_card",
            "59": "fraud_suspected",
            "14": "invalid_card_number",
            "N7": "invalid_cvv",
            "91": "api_error",
            "57": "restricted_card",
        }
        for code, key in cases.items():
            self.assertEqual(map_gateway_error("falha", code).key, key, code)

    def test_text_patterns(self) -> None:
        self.assertEqual(map_gateway_error("Transação negada").key, "card_declined")
        self.assertEqual(map_gateway_error("CVV inválido").key, "invalid_cvv")
        self.assertEqual(map_gateway_error("Cartão expirado").key, "expired_card")
        self.assertEqual(map_gateway_error("Erro ao criar assinatura").key, "subscription_error")
        self.assertEqual(map_gateway_error("payment_profile inválido").key, "payment_profile_error")

    def test_unknown(self) -> None:
        mapped = map_gateway_error("algo estranho")
        self.assertEqual(mapped.key, "unknown_error")
        self.assertEqual(mapped.category, "system")
        self.assertTrue(mapped.can_retry)

    def test_action_labels(self) -> None:
        self.assertEqual(action_button_text("use_another_card"), "Usar Outro Cartão")
        self.assertEqual(action_button_text("inexistente"), "Voltar")


class GatewayErrorHttpTests(SimpleTestCase):
    def test_card_decline_is_payment_required(self) -> None:
        exc = GatewayError("Transação negada", gateway_code="05")
        self.assertEqual(http_status_for(exc), 402)
        body = error_body(exc)
        self.assertEqual(body["error_key"], "card_declined")
        self.assertEqual(body["suggested_action"], "use_another_card")
        self.assertFalse(body["can_retry"])
        self.assertEqual(body["gateway_message"], "Transação negada")

    def test_provider_failure_is_bad_gateway(self) -> None:
        self.assertEqual(http_status_for(GatewayError("timeout ao chamar a Vindi")), 502)
        self.assertEqual(http_status_for(GatewayError("Erro ao criar assinatura")), 502)
