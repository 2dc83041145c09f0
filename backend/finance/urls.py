"""
URL configuration for the ledger API, mounted under ``/api/``.
"""

import logging

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

# Get structured logger for this module
logger = logging.getLogger(__name__)

router = DefaultRouter()

# Income and expense records
router.register(r"transactions", views.TransactionViewSet, basename="transaction")

# Computed balance and summaries
router.register(r"ledger", views.LedgerViewSet, basename="ledger")

# Budget plans (POST upserts by category)
router.register(
    r"budget-allocations", views.BudgetAllocationViewSet, basename="budget-allocation"
)

router.register(r"goals", views.GoalViewSet, basename="goal")
router.register(r"projects", views.ProjectViewSet, basename="project")
router.register(r"debts", views.DebtViewSet, basename="debt")

urlpatterns = [
    path("", include(router.urls)),
    path("settings/", views.UserSettingsView.as_view(), name="user-settings"),
]

logger.debug(
    "Ledger API URLs configured",
    extra={
        "registered_viewsets": [prefix for prefix, _, _ in router.registry],
        "total_routes": len(router.urls) + len(urlpatterns) - 1,
        "action": "url_configuration_loaded",
        "component": "urls",
    },
)
