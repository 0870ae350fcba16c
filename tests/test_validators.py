"""Validadores de documento, cartão e contato."""

from django.test import SimpleTestCase

from medpass_core.adapters.utils.phone_utils import normalize_phone
from medpass_core.core.domain.services.validators import (
    detect_card_brand,
    format_cpf,
    validate_cep,
    validate_cnpj,
    validate_cpf,
    validate_cpf_with_message,
    validate_credit_card,
    validate_email,
)


class CpfTests(SimpleTestCase):
    def test_known_valid_cpf(self) -> None:
        self.assertTrue(validate_cpf("08600756995"))
        self.assertTrue(validate_cpf("086.007.569-95"))

    def test_repeated_digits_are_invalid(self) -> None:
        for d in "0123456789":
            self.assertFalse(validate_cpf(d * 11), d)

    def test_wrong_length_is_invalid(self) -> None:
        self.assertFalse(validate_cpf("0860075699"))
        self.assertFalse(validate_cpf("086007569950"))
        self.assertFalse(validate_cpf(None))

    def test_wrong_check_digit(self) -> None:
        self.assertFalse(validate_cpf("08600756994"))

    def test_messages(self) -> None:
        self.assertEqual(validate_cpf_with_message(""), "CPF é obrigatório")
        self.assertEqual(validate_cpf_with_message("123"), "CPF deve ter 11 dígitos")
        self.assertEqual(validate_cpf_with_message("111.111.111-11"), "CPF não pode ter todos os dígitos iguais")
        self.assertEqual(validate_cpf_with_message("08600756994"), "CPF inválido")
        self.assertIsNone(validate_cpf_with_message("08600756995"))

    def test_format(self) -> None:
        self.assertEqual(format_cpf("08600756995"), "086.007.569-95")


class CardTests(SimpleTestCase):
    def test_luhn_valid_number(self) -> None:
        self.assertTrue(validate_credit_card("4111 1111 1111 1111"))
        self.assertTrue(validate_credit_card("5555555555554444"))

    def test_luhn_single_digit_change_fails(self) -> None:
        self.assertFalse(validate_credit_card("4111111111111112"))

    def test_length_bounds(self) -> None:
        self.assertFalse(validate_credit_card("4111"))
        self.assertFalse(validate_credit_card("4" * 20))

    def test_brand_detection(self) -> None:
        self.assertEqual(detect_card_brand("4111111111111111"), "visa")
        self.assertEqual(detect_card_brand("5555555555554444"), "mastercard")
        self.assertEqual(detect_card_brand("6362970000457013"), "elo")
        self.assertEqual(detect_card_brand("378282246310005"), "amex")
        self.assertEqual(detect_card_brand("9999"), "unknown")


class ContactTests(SimpleTestCase):
    def test_cep(self) -> None:
        self.assertTrue(validate_cep("80010-000"))
        self.assertFalse(validate_cep("8001000"))

    def test_email(self) -> None:
        self.assertTrue(validate_email("maria@medpass.com.br"))
        self.assertFalse(validate_email("maria@"))
        self.assertFalse(validate_email(None))

    def test_cnpj(self) -> None:
        self.assertTrue(validate_cnpj("11.222.333/0001-81"))
        self.assertFalse(validate_cnpj("11222333000182"))

    def test_phone_normalization(self) -> None:
        self.assertEqual(normalize_phone("(41) 98765-4321"), "41987654321")
        self.assertEqual(normalize_phone("41987654321", with_country=True), "5541987654321")
        self.assertIsNone(normalize_phone("123"))
