"""
Tradução de erros do gateway (Vindi/Cielo/Rede) para mensagens de usuário.

A ordem de verificação é relevante: timeout e rede primeiro, depois o
código de resposta da adquirente (padrão ABECS) e por fim padrões de texto.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal

ErrorCategory = Literal["reversible", "irreversible", "user_action", "system"]
ErrorAction = Literal["retry", "use_another_card", "fix_data", "contact_bank", "use_another_method"]


@dataclass(frozen=True)
class MappedGatewayError:
    key: str
    title: str
    message: str
    category: ErrorCategory
    suggested_action: ErrorAction
    can_retry: bool
    user_friendly: str

    def to_dict(self) -> dict:
        return asdict(self)


def _m(key, title, message, category, action, can_retry, user_friendly) -> MappedGatewayError:
    return MappedGatewayError(key, title, message, category, action, can_retry, user_friendly)


ERROR_MAPPINGS: dict[str, MappedGatewayError] = {
    # ─── tokenização / transporte ───
    "timeout": _m(
        "timeout", "Tempo esgotado", "A validação do cartão demorou muito tempo.",
        "reversible", "retry", True, "⏱️ Tempo esgotado. Por favor, tente novamente.",
    ),
    "network_error": _m(
        "network_error", "Erro de conexão", "Não foi possível conectar ao servidor de pagamento.",
        "reversible", "retry", True, "🌐 Erro de conexão. Verifique sua internet e tente novamente.",
    ),
    # ─── dados do cartão ───
    "invalid_card_number": _m(
        "invalid_card_number", "Número do cartão inválido", "O número do cartão informado é inválido.",
        "user_action", "fix_data", False,
        "💳 Número do cartão inválido. Verifique os dados e tente novamente.",
    ),
    "invalid_cvv": _m(
        "invalid_cvv", "CVV incorreto", "O código de segurança (CVV) está incorreto.",
        "user_action", "fix_data", False,
        "🔐 CVV incorreto. Verifique o código de segurança no verso do cartão.",
    ),
    "expired_card": _m(
        "expired_card", "Cartão expirado", "O cartão informado está vencido.",
        "irreversible", "use_another_card", False, "📅 Cartão vencido. Por favor, use outro cartão.",
    ),
    # ─── transação negada ───
    "card_declined": _m(
        "card_declined", "Cartão recusado", "A operadora do cartão recusou a transação.",
        "irreversible", "use_another_card", False,
        "❌ Cartão recusado pela operadora. Tente outro cartão ou método de pagamento.",
    ),
    "insufficient_funds": _m(
        "insufficient_funds", "Saldo insuficiente",
        "O cartão não possui limite disponível para esta transação.",
        "reversible", "contact_bank", False,
        "💰 Saldo insuficiente. Verifique o limite do seu cartão ou use outro método.",
    ),
    "restricted_card": _m(
        "restricted_card", "Cartão bloqueado", "O cartão está bloqueado ou com restrições.",
        "irreversible", "contact_bank", False, "🚫 Cartão bloqueado. Entre em contato com seu banco.",
    ),
    "fraud_suspected": _m(
        "fraud_suspected", "Suspeita de fraude", "A transação foi bloqueada por suspeita de fraude.",
        "irreversible", "contact_bank", False,
        "🛡️ Transação bloqueada por segurança. Entre em contato com seu banco.",
    ),
    # ─── sistema ───
    "configuration_missing": _m(
        "configuration_missing", "Pagamento indisponível",
        "A integração com o gateway de pagamento não está configurada.",
        "system", "use_another_method", False,
        "⚙️ Pagamento temporariamente indisponível. Contate o suporte.",
    ),
    "api_error": _m(
        "api_error", "Erro no processamento", "Ocorreu um erro ao processar o pagamento.",
        "system", "retry", True, "⚠️ Erro no processamento. Por favor, tente novamente.",
    ),
    "payment_profile_error": _m(
        "payment_profile_error", "Erro ao salvar cartão", "Não foi possível salvar os dados do cartão.",
        "system", "retry", True, "💾 Erro ao processar dados do cartão. Tente novamente.",
    ),
    "subscription_error": _m(
        "subscription_error", "Erro ao criar assinatura", "Não foi possível criar a assinatura.",
        "system", "retry", True, "📋 Erro ao criar assinatura. Por favor, tente novamente.",
    ),
    "unknown_error": _m(
        "unknown_error", "Erro desconhecido", "Ocorreu um erro inesperado.",
        "system", "use_another_method", True,
        "❓ Erro inesperado. Tente novamente ou use outro método de pagamento.",
    ),
}

# códigos de resposta da adquirente (Vindi/Cielo/Rede)
GATEWAY_CODE_MAPPINGS: dict[str, str] = {
    "00": "success", "4": "success", "6": "success",
    "05": "card_declined", "51": "insufficient_funds", "65": "card_declined",
    "75": "card_declined", "91": "api_error", "96": "api_error",
    "04": "restricted_card", "07": "restricted_card", "14": "invalid_card_number",
    "41": "restricted_card", "43": "restricted_card", "54": "expired_card",
    "57": "restricted_card", "59": "fraud_suspected", "62": "restricted_card",
    "63": "restricted_card",
    "82": "invalid_cvv", "83": "invalid_cvv", "N7": "invalid_cvv",
}

# (chave, padrões) avaliados em ordem
_TEXT_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("invalid_card_number", ("card_number", "número do cartão")),
    ("invalid_cvv", ("cvv", "código de segurança")),
    ("expired_card", ("expirado", "expired", "validade")),
    ("card_declined", ("recusad", "declined", "negad")),
    ("insufficient_funds", ("saldo", "insufficient", "limite")),
    ("restricted_card", ("bloqueado", "blocked", "restricted")),
    ("fraud_suspected", ("fraude", "fraud")),
    ("payment_profile_error", ("payment profile", "payment_profile")),
    ("subscription_error", ("subscription", "assinatura")),
    ("payment_profile_error", ("tokeniza", "gateway_token")),
)

_ACTION_TEXTS: dict[str, str] = {
    "retry": "Tentar Novamente",
    "use_another_card": "Usar Outro Cartão",
    "fix_data": "Corrigir Dados",
    "contact_bank": "Entendi",
    "use_another_method": "Usar Outro Método",
}


def map_gateway_error(error: BaseException | str, gateway_code: str | None = None) -> MappedGatewayError:
    """Mapeia erro do gateway (exceção ou texto) para a estrutura de exibição."""
    text = (error if isinstance(error, str) else str(error)).lower()

    if "timeout" in text or "aborted" in text:
        return ERROR_MAPPINGS["timeout"]

    if "network" in text or "fetch" in text or "connection" in text:
        return ERROR_MAPPINGS["network_error"]

    if gateway_code:
        mapped = GATEWAY_CODE_MAPPINGS.get(str(gateway_code).strip())
        if mapped in ERROR_MAPPINGS:
            return ERROR_MAPPINGS[mapped]

    for key, patterns in _TEXT_PATTERNS:
        if any(p in text for p in patterns):
            return ERROR_MAPPINGS[key]

    return ERROR_MAPPINGS["unknown_error"]


def action_button_text(action: str) -> str:
    return _ACTION_TEXTS.get(action, "Voltar")
