import jwt
from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from medpass_core.adapters.repositories.user_repo_impl import UserRepoImpl
from medpass_core.adapters.security.jwt_service import JWTService


class SimpleUser:
    """
    Usuário mínimo compatível com DRF: id, role, unit_id e is_authenticated.
    O papel e a unidade vêm do banco, nunca apenas do token.
    """
    def __init__(self, id: str, role: str | None = None, unit_id: str | None = None, email: str | None = None):
        self.id = id
        self.role = role
        self.unit_id = unit_id
        self.email = email
        self.is_authenticated = True

    @property
    def is_headquarters(self) -> bool:
        return self.role == "matriz"

    def __str__(self):
        return f"<SimpleUser id={self.id} role={self.role} unit_id={self.unit_id}>"


def _user_from_token(token: str) -> SimpleUser:
    try:
        payload = JWTService.decode_token(token)
    except jwt.PyJWTError as e:
        raise exceptions.AuthenticationFailed(f"Token inválido: {e}") from e

    user_id = payload.get("sub")
    if not user_id:
        raise exceptions.AuthenticationFailed("Token não contém o claim 'sub'.")

    domain_user = UserRepoImpl().find_by_id(user_id)
    if not domain_user or not domain_user.is_active:
        raise exceptions.AuthenticationFailed("Usuário não encontrado.")

    return SimpleUser(
        id=str(domain_user.id),
        role=domain_user.role,
        unit_id=str(domain_user.unit_id) if domain_user.unit_id else None,
        email=domain_user.email,
    )


class JWTAuthentication(BaseAuthentication):
    """
    Lê o header Authorization: Bearer <token> e retorna (user, token).
    """
    def authenticate(self, request):
        header = request.headers.get("Authorization", "")
        parts = header.split()

        if not header or parts[0].lower() != "bearer" or len(parts) != 2:  # noqa: PLR2004
            return None

        token = parts[1]
        return (_user_from_token(token), token)

    def authenticate_header(self, request):
        return "Bearer"


class CookieJWTAuthentication(BaseAuthentication):
    """
    Busca o token no cookie `settings.AUTH_COOKIE_NAME`.
    """
    def authenticate(self, request):
        token = request.COOKIES.get(settings.AUTH_COOKIE_NAME)
        if not token:
            return None
        return (_user_from_token(token), token)
