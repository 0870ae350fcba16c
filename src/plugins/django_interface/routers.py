from rest_framework.routers import DefaultRouter

from .views.core_views import (
    BeneficiaryViewSet,
    CommissionViewSet,
    ContractViewSet,
    FranchiseViewSet,
    NotificationViewSet,
    PlanViewSet,
    UnitViewSet,
)

# lista de (rota, ViewSet)
RESOURCES = [
    ("franchises",     FranchiseViewSet),
    ("units",          UnitViewSet),
    ("plans",          PlanViewSet),
    ("beneficiaries",  BeneficiaryViewSet),
    ("commissions",    CommissionViewSet),
    ("contracts",      ContractViewSet),
    ("notifications",  NotificationViewSet),
]


def build_router() -> DefaultRouter:
    router = DefaultRouter(trailing_slash=False)
    # Registra todos os CRUDs
    for prefix, viewset in RESOURCES:
        router.register(prefix, viewset, basename=prefix.replace("-", "_"))
    return router
