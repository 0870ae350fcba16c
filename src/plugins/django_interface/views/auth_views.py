import structlog
from django.conf import settings
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from medpass_core.adapters.observability.decorators import track_http
from medpass_core.adapters.repositories.user_repo_impl import UserRepoImpl
from medpass_core.adapters.security.hash_service import HashService
from medpass_core.adapters.security.jwt_service import JWTService
from medpass_core.core.application.queries.user_queries import GetUserQuery
from plugins.django_interface.serializers.core_serializers import UserSerializer
from plugins.django_interface.views.core_views import core_query_bus

logger = structlog.get_logger(__name__)


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @track_http("LoginView_post")
    def post(self, request):
        email = request.data.get("email")
        password = request.data.get("password")
        if not email or not password:
            return Response({"detail": "Credenciais incompletas."},
                            status=status.HTTP_400_BAD_REQUEST)

        user = UserRepoImpl().find_by_email(email)
        if not user or not user.is_active or not HashService.verify(password, user.password_hash or ""):
            logger.info("auth.login_failed", email=email)
            return Response({"detail": "E-mail ou senha inválidos."},
                            status=status.HTTP_401_UNAUTHORIZED)

        # Gera JWT
        token = JWTService.create_token(
            subject=str(user.id),
            expires_in=settings.JWT_EXPIRES_IN,
            role=user.role,
            unit_id=str(user.unit_id) if user.unit_id else None,
        )
        resp = Response(
            {
                "message": "Autenticado com sucesso.",
                "access_token": token,
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )
        # Configura cookie seguro
        resp.set_cookie(
            settings.AUTH_COOKIE_NAME,
            token,
            secure=settings.AUTH_COOKIE_SECURE,
            httponly=settings.AUTH_COOKIE_HTTPONLY,
            samesite=settings.AUTH_COOKIE_SAMESITE,
            expires=timezone.now() + timezone.timedelta(seconds=settings.JWT_EXPIRES_IN),
        )
        logger.info("auth.login", user_id=str(user.id), role=user.role)
        return resp


class LogoutView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        resp = Response({"message": "Logout realizado."}, status=status.HTTP_200_OK)
        # Destroi cookie
        resp.delete_cookie(settings.AUTH_COOKIE_NAME)
        return resp


class MeView(APIView):
    """Dados do usuário autenticado (papel e unidade vêm do banco, não do token)."""

    permission_classes = [permissions.IsAuthenticated]

    @track_http("MeView_get")
    def get(self, request):
        user = core_query_bus.dispatch(GetUserQuery(filtros={"id": str(request.user.id)}))
        return Response(UserSerializer(user).data)


class HealthCheckView(APIView):
    """
    Rota GET /api/healthz — retorna status 200 se a API estiver viva.
    """
    permission_classes = []
    authentication_classes = []

    def get(self, request):
        return Response({"status": "ok"}, status=status.HTTP_200_OK)
