from django.conf import settings
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from .routers import build_router
from .views.auth_views import HealthCheckView, LoginView, LogoutView, MeView
from .views.billing_views import (
    AutentiqueWebhookView,
    CancelBeneficiaryView,
    CreateContractView,
    ProcessCheckoutView,
    RefreshPaymentStatusesView,
    RegistryBeneficiariesView,
    TokenizeCardView,
    VindiWebhookView,
)

swagger_permissions = [permissions.IsAdminUser] if not settings.DEBUG else [permissions.AllowAny]

schema_view = get_schema_view(
    openapi.Info(
        title="MedPass Gestão",
        default_version="v1",
        description="Rede de franquias, beneficiários, cobrança recorrente e registro RMS",
        contact=openapi.Contact(email="suporte@medpass.com.br"),
        license=openapi.License(name="BSD License"),
    ),
    public=settings.DEBUG,
    permission_classes=swagger_permissions,
)

router = build_router()

urlpatterns = [
    path("login",   LoginView.as_view(),       name="login"),
    path("logout",  LogoutView.as_view(),      name="logout"),
    path("healthz", HealthCheckView.as_view(), name="healthz"),
    path("me",      MeView.as_view(),          name="me"),

    # funções (envelope {success, data|error})
    path("functions/process-checkout",         ProcessCheckoutView.as_view(),        name="process-checkout"),
    path("functions/tokenize-card",            TokenizeCardView.as_view(),           name="tokenize-card"),
    path("functions/cancel-beneficiary",       CancelBeneficiaryView.as_view(),      name="cancel-beneficiary"),
    path("functions/refresh-payment-statuses", RefreshPaymentStatusesView.as_view(), name="refresh-payment-statuses"),
    path("functions/registry-beneficiaries",   RegistryBeneficiariesView.as_view(),  name="registry-beneficiaries"),
    path("functions/create-contract",          CreateContractView.as_view(),         name="create-contract"),
    path("webhooks/vindi",                     VindiWebhookView.as_view(),           name="webhook-vindi"),
    path("webhooks/autentique",                AutentiqueWebhookView.as_view(),      name="webhook-autentique"),

    path("swagger/",     schema_view.with_ui("swagger", cache_timeout=0), name="swagger-ui"),
    path("swagger.json", schema_view.without_ui(cache_timeout=0),         name="swagger-json"),
    path("redoc/",       schema_view.with_ui("redoc",   cache_timeout=0), name="redoc-ui"),

    # rotas CRUD
    path("", include(router.urls)),
]
