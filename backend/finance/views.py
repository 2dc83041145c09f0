"""
API views for the personal ledger.

ViewSets stay thin: querysets are always scoped to ``request.user`` and every
computation is delegated to the services through
``ServiceExceptionHandlerMixin.handle_service_call``.
"""

import logging

from django.utils.dateparse import parse_date
from rest_framework import generics, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .mixins.service_exception_handler import ServiceExceptionHandlerMixin
from .models import BudgetAllocation, Debt, Goal, Project, Transaction, UserSettings
from .serializers import (BudgetAllocationRequestSerializer,
                          BudgetAllocationSerializer, CategorySummaryQuerySerializer,
                          CategorySummarySerializer, DebtSerializer,
                          DebtTotalsSerializer, GoalSerializer,
                          LedgerBalanceSerializer, MonthlyTotalsSerializer,
                          PeriodSummaryQuerySerializer, PeriodSummarySerializer,
                          ProjectSerializer, TransactionSerializer,
                          UserSettingsSerializer)
from .services.budget_service import BudgetService
from .services.debt_service import DebtService
from .services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# OWNED RESOURCES
# -------------------------------------------------------------------


class OwnedModelViewSet(viewsets.ModelViewSet):
    """
    CRUD over records owned by the requesting user.

    Foreign ids resolve to 404 because the queryset never contains them.
    """

    model = None
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return self.model.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        instance = serializer.save(user=self.request.user)
        logger.info(
            f"{self.model.__name__} created",
            extra={
                "user_id": self.request.user.id,
                "object_id": instance.id,
                "action": f"{self.model._meta.model_name}_created",
                "component": self.__class__.__name__,
            },
        )

    def perform_destroy(self, instance):
        object_id = instance.id
        instance.delete()
        logger.info(
            f"{self.model.__name__} deleted",
            extra={
                "user_id": self.request.user.id,
                "object_id": object_id,
                "action": f"{self.model._meta.model_name}_deleted",
                "component": self.__class__.__name__,
            },
        )


class TransactionViewSet(OwnedModelViewSet):
    """
    Income and expense records.

    Query filters: ``type``, ``category`` (exact), ``date_from``, ``date_to``
    (inclusive, ISO dates).
    """

    model = Transaction
    serializer_class = TransactionSerializer

    def _date_param(self, name):
        raw = self.request.query_params.get(name)
        if not raw:
            return None
        value = parse_date(raw)
        if value is None:
            raise ValidationError({name: "Invalid date, use YYYY-MM-DD."})
        return value

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        tx_type = params.get("type")
        if tx_type in ["income", "expense"]:
            qs = qs.filter(type=tx_type)
        category = params.get("category")
        if category:
            qs = qs.filter(category=category)

        date_from = self._date_param("date_from")
        date_to = self._date_param("date_to")
        if date_from:
            qs = qs.filter(date__gte=date_from)
        if date_to:
            qs = qs.filter(date__lte=date_to)

        logger.debug(
            "Transactions queryset prepared",
            extra={
                "user_id": self.request.user.id,
                "filters": {key: params.get(key) for key in params},
                "action": "transactions_queryset_prepared",
                "component": "TransactionViewSet",
            },
        )
        return qs


class GoalViewSet(OwnedModelViewSet):
    model = Goal
    serializer_class = GoalSerializer


class ProjectViewSet(OwnedModelViewSet):
    model = Project
    serializer_class = ProjectSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs


class DebtViewSet(ServiceExceptionHandlerMixin, OwnedModelViewSet):
    model = Debt
    serializer_class = DebtSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        for field in ("type", "status"):
            value = self.request.query_params.get(field)
            if value:
                qs = qs.filter(**{field: value})
        return qs

    @action(detail=False, methods=["get"])
    def totals(self, request):
        """Pending totals lent out and borrowed."""
        totals = self.handle_service_call(DebtService.pending_totals, request.user)
        return Response(DebtTotalsSerializer(totals).data)


# -------------------------------------------------------------------
# LEDGER
# -------------------------------------------------------------------


class LedgerViewSet(ServiceExceptionHandlerMixin, viewsets.ViewSet):
    """Computed views of the caller's ledger. Nothing here is stored."""

    permission_classes = [IsAuthenticated]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.ledger_service = LedgerService()

    @action(detail=False, methods=["get"])
    def balance(self, request):
        result = self.handle_service_call(self.ledger_service.get_balance, request.user)
        return Response(LedgerBalanceSerializer(result).data)

    @action(detail=False, methods=["get"], url_path="category-summary")
    def category_summary(self, request):
        query = CategorySummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = self.handle_service_call(
            self.ledger_service.get_category_summary,
            request.user,
            query.validated_data["type"],
        )
        return Response(CategorySummarySerializer(result).data)

    @action(detail=False, methods=["get"], url_path="period-summary")
    def period_summary(self, request):
        query = PeriodSummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = self.handle_service_call(
            self.ledger_service.get_period_summary,
            request.user,
            query.validated_data["start_date"],
            query.validated_data["end_date"],
        )
        return Response(PeriodSummarySerializer(result).data)

    @action(detail=False, methods=["get"], url_path="monthly-totals")
    def monthly_totals(self, request):
        result = self.handle_service_call(
            self.ledger_service.get_monthly_totals, request.user
        )
        return Response(MonthlyTotalsSerializer(result).data)


# -------------------------------------------------------------------
# BUDGET ALLOCATIONS
# -------------------------------------------------------------------


class BudgetAllocationViewSet(
    ServiceExceptionHandlerMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Budget plans. ``POST`` is an upsert keyed on category and answers 200
    with the stored row.
    """

    serializer_class = BudgetAllocationSerializer
    permission_classes = [IsAuthenticated]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.budget_service = BudgetService()

    def get_queryset(self):
        return BudgetAllocation.objects.filter(user=self.request.user)

    def create(self, request, *args, **kwargs):
        payload = BudgetAllocationRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        allocation = self.handle_service_call(
            self.budget_service.save_allocation,
            request.user,
            data["total_amount"],
            data["percentages"],
            category=data["category"],
            period=data["period"],
            ai_recommendation=data.get("ai_recommendation"),
        )
        return Response(
            BudgetAllocationSerializer(allocation).data, status=status.HTTP_200_OK
        )

    @action(detail=False, methods=["get"])
    def current(self, request):
        """Allocation of ``?category=`` (default ``plan``), or null."""
        category = request.query_params.get("category", "plan")
        allocation = self.handle_service_call(
            self.budget_service.get_current, request.user, category
        )
        if allocation is None:
            return Response(None)
        return Response(BudgetAllocationSerializer(allocation).data)


# -------------------------------------------------------------------
# USER SETTINGS
# -------------------------------------------------------------------


class UserSettingsView(generics.RetrieveUpdateAPIView):
    """The caller's settings; created with defaults when missing."""

    serializer_class = UserSettingsSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "patch", "head", "options"]

    def get_object(self):
        user_settings, created = UserSettings.objects.get_or_create(user=self.request.user)
        if created:
            logger.warning(
                "User settings were missing and have been created",
                extra={
                    "user_id": self.request.user.id,
                    "action": "user_settings_backfilled",
                    "component": "UserSettingsView",
                    "severity": "low",
                },
            )
        return user_settings

    def perform_update(self, serializer):
        serializer.save()
        logger.info(
            "User settings updated",
            extra={
                "user_id": self.request.user.id,
                "updated_fields": list(serializer.validated_data.keys()),
                "action": "user_settings_updated",
                "component": "UserSettingsView",
            },
        )
