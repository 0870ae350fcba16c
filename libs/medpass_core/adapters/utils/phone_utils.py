from __future__ import annotations

import phonenumbers
from phonenumbers import NumberParseException

from medpass_core.core.domain.services.validators import only_digits


def normalize_phone(raw: str | None, default_region: str = "BR", with_country: bool = False) -> str | None:
    """
    Normaliza um telefone brasileiro.

    - with_country=False => '11987654321' (DDD + número, formato gravado no banco)
    - with_country=True  => '5511987654321'
    Retorna None quando o número não é válido para a região.
    """
    if not raw or not only_digits(raw):
        return None

    try:
        num = phonenumbers.parse(raw, default_region)
    except NumberParseException:
        return None

    if not phonenumbers.is_valid_number(num):
        return None

    national = str(num.national_number)
    if with_country:
        return f"{num.country_code}{national}"
    return national
