from rest_framework.permissions import SAFE_METHODS, BasePermission

ROLE_HEADQUARTERS = "matriz"
ROLE_UNIT = "unidade"


class IsHeadquarters(BasePermission):
    """Acesso apenas para usuários da matriz."""

    def has_permission(self, request, view):
        return bool(request.user and getattr(request.user, "role", None) == ROLE_HEADQUARTERS)


class IsNetworkUser(BasePermission):
    """Matriz ou operador de unidade (o escopo da unidade é aplicado na view)."""

    def has_permission(self, request, view):
        return bool(
            request.user
            and getattr(request.user, "role", None) in (ROLE_HEADQUARTERS, ROLE_UNIT)
        )


class ReadOnlyOrHeadquarters(BasePermission):
    """Leitura para a rede; escrita somente pela matriz (catálogo de planos, franquias)."""

    def has_permission(self, request, view):
        role = getattr(request.user, "role", None) if request.user else None
        if request.method in SAFE_METHODS:
            return role in (ROLE_HEADQUARTERS, ROLE_UNIT)
        return role == ROLE_HEADQUARTERS
