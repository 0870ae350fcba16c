from __future__ import annotations

from django.conf import settings
from django.test import TestCase
from rest_framework.test import APIClient

from medpass_core.adapters.security.jwt_service import JWTService
from tests.helpers.builders import PASSWORD, api_client_for, make_unit, make_user


class LoginTests(TestCase):
    def setUp(self) -> None:
        self.unit = make_unit()
        self.user = make_user("unidade", self.unit, email="operador@medpass.com.br")
        self.client = APIClient()

    def test_login_sets_cookie_and_token_claims(self) -> None:
        resp = self.client.post(
            "/api/login", {"email": "operador@medpass.com.br", "password": PASSWORD}, format="json"
        )

        self.assertEqual(resp.status_code, 200, resp.content)
        body = resp.json()
        self.assertEqual(body["user"]["email"], "operador@medpass.com.br")
        self.assertNotIn("password_hash", body["user"])

        claims = JWTService.decode_token(body["access_token"])
        self.assertEqual(claims["sub"], str(self.user.id))
        self.assertEqual(claims["role"], "unidade")
        self.assertEqual(claims["unit_id"], str(self.unit.id))

        cookie = resp.cookies[settings.AUTH_COOKIE_NAME]
        self.assertEqual(cookie.value, body["access_token"])
        self.assertTrue(cookie["httponly"])

    def test_cookie_authenticates_following_requests(self) -> None:
        self.client.post("/api/login", {"email": "operador@medpass.com.br", "password": PASSWORD}, format="json")

        resp = self.client.get("/api/me")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["id"], str(self.user.id))

    def test_wrong_password(self) -> None:
        resp = self.client.post(
            "/api/login", {"email": "operador@medpass.com.br", "password": "errada"}, format="json"
        )

        self.assertEqual(resp.status_code, 401)

    def test_inactive_user_cannot_login(self) -> None:
        self.user.is_active = False
        self.user.save()

        resp = self.client.post(
            "/api/login", {"email": "operador@medpass.com.br", "password": PASSWORD}, format="json"
        )

        self.assertEqual(resp.status_code, 401)

    def test_missing_fields(self) -> None:
        self.assertEqual(self.client.post("/api/login", {}, format="json").status_code, 400)


class SessionTests(TestCase):
    def test_me_returns_role_and_unit(self) -> None:
        unit = make_unit()
        user = make_user("unidade", unit)

        resp = api_client_for(user).get("/api/me")

        self.assertEqual(resp.json()["role"], "unidade")
        self.assertEqual(resp.json()["unit_id"], str(unit.id))

    def test_invalid_token_is_rejected(self) -> None:
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION="Bearer nao-e-um-jwt")

        self.assertEqual(client.get("/api/me").status_code, 401)

    def test_logout_clears_cookie(self) -> None:
        resp = api_client_for(make_user("matriz")).post("/api/logout")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.cookies[settings.AUTH_COOKIE_NAME].value, "")

    def test_healthz_is_public(self) -> None:
        resp = APIClient().get("/api/healthz")

        self.assertEqual(resp.json(), {"status": "ok"})
