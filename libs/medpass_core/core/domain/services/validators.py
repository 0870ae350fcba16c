"""
Validadores puros de documentos e contatos brasileiros.

Todas as funções aceitam a string crua (com ou sem pontuação) e removem
os caracteres não numéricos antes de validar. Nenhuma faz I/O.
"""
from __future__ import annotations

import re

CPF_LENGTH = 11
CNPJ_LENGTH = 14
CEP_LENGTH = 8
CARD_MIN_LENGTH = 13
CARD_MAX_LENGTH = 19

CNPJ_WEIGHTS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Ordem importa: prefixos Elo/Hipercard colidem com Visa e Discover.
_CARD_BRANDS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("elo",        re.compile(r"^(4011|4312|4389|4514|4573|6277|6362|6363)")),
    ("hipercard",  re.compile(r"^(3841|6062)")),
    ("visa",       re.compile(r"^4")),
    ("mastercard", re.compile(r"^(5[1-5]|2[2-7])")),
    ("amex",       re.compile(r"^3[47]")),
    ("diners",     re.compile(r"^3[0689]")),
    ("discover",   re.compile(r"^6")),
)


def only_digits(value: str | None) -> str:
    return re.sub(r"\D", "", value or "")


def _all_same(digits: str) -> bool:
    return len(set(digits)) == 1


# ───────────────────────────────────────────────
# CPF
# ───────────────────────────────────────────────
def _cpf_check_digit(digits: str, weight_start: int) -> int:
    total = sum(int(d) * w for d, w in zip(digits, range(weight_start, 1, -1), strict=True))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder  # noqa: PLR2004


def validate_cpf(cpf: str | None) -> bool:
    digits = only_digits(cpf)
    if len(digits) != CPF_LENGTH or _all_same(digits):
        return False
    if _cpf_check_digit(digits[:9], 10) != int(digits[9]):
        return False
    return _cpf_check_digit(digits[:10], 11) == int(digits[10])


def validate_cpf_with_message(cpf: str | None) -> str | None:
    """Retorna a mensagem de erro para exibir no formulário, ou None se válido."""
    if not cpf or not cpf.strip():
        return "CPF é obrigatório"
    digits = only_digits(cpf)
    if len(digits) != CPF_LENGTH:
        return "CPF deve ter 11 dígitos"
    if _all_same(digits):
        return "CPF não pode ter todos os dígitos iguais"
    if not validate_cpf(digits):
        return "CPF inválido"
    return None


def format_cpf(cpf: str) -> str:
    digits = only_digits(cpf)
    if len(digits) != CPF_LENGTH:
        return cpf
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


# ───────────────────────────────────────────────
# CNPJ
# ───────────────────────────────────────────────
def _cnpj_check_digit(digits: str, weights: tuple[int, ...]) -> int:
    remainder = sum(int(d) * w for d, w in zip(digits, weights, strict=True)) % 11
    return 0 if remainder < 2 else 11 - remainder  # noqa: PLR2004


def validate_cnpj(cnpj: str | None) -> bool:
    digits = only_digits(cnpj)
    if len(digits) != CNPJ_LENGTH or _all_same(digits):
        return False
    if _cnpj_check_digit(digits[:12], CNPJ_WEIGHTS_1) != int(digits[12]):
        return False
    return _cnpj_check_digit(digits[:13], CNPJ_WEIGHTS_2) == int(digits[13])


# ───────────────────────────────────────────────
# Cartão de crédito
# ───────────────────────────────────────────────
def validate_credit_card(number: str | None) -> bool:
    """Luhn sobre 13 a 19 dígitos."""
    digits = only_digits(number)
    if not CARD_MIN_LENGTH <= len(digits) <= CARD_MAX_LENGTH:
        return False
    total = 0
    for idx, ch in enumerate(reversed(digits)):
        d = int(ch)
        if idx % 2 == 1:
            d *= 2
            if d > 9:  # noqa: PLR2004
                d -= 9
        total += d
    return total % 10 == 0


def detect_card_brand(number: str | None) -> str:
    digits = only_digits(number)
    for brand, pattern in _CARD_BRANDS:
        if pattern.match(digits):
            return brand
    return "unknown"


# ───────────────────────────────────────────────
# Contato
# ───────────────────────────────────────────────
def validate_email(email: str | None) -> bool:
    return bool(email) and bool(_EMAIL_RE.match(email))


def validate_phone(phone: str | None) -> bool:
    return 10 <= len(only_digits(phone)) <= 11  # noqa: PLR2004


def validate_cep(cep: str | None) -> bool:
    return len(only_digits(cep)) == CEP_LENGTH
