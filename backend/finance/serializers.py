"""
Serializers for the ledger API.

Model serializers validate input at the API edge (amounts are non-negative
magnitudes with at most 2 decimal places); business rules live in the
services. The owner is never accepted from the client: views attach
``request.user`` on save.
"""

import logging
from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from .models import BudgetAllocation, Debt, Goal, Project, Transaction, UserSettings

logger = logging.getLogger(__name__)


def money_serializer_field(**kwargs):
    return serializers.DecimalField(max_digits=12, decimal_places=2, **kwargs)


class NonNegativeAmountMixin:
    """Shared ``validate_amount`` rejecting negative magnitudes with a log entry."""

    def validate_amount(self, value):
        if value < 0:
            logger.warning(
                "Negative amount rejected",
                extra={
                    "amount": str(value),
                    "action": "amount_validation_failed",
                    "component": self.__class__.__name__,
                    "severity": "low",
                },
            )
            raise serializers.ValidationError(
                "Amount cannot be negative. Use the transaction type for the sign."
            )
        return value


# -------------------------------------------------------------------
# USER SETTINGS SERIALIZER
# -------------------------------------------------------------------


class UserSettingsSerializer(serializers.ModelSerializer):

    class Meta:
        model = UserSettings
        fields = ["id", "currency", "language", "updated_at"]
        read_only_fields = ["id", "updated_at"]

    def validate_language(self, value):
        """Validate language code against configured settings."""
        valid_languages = [lang[0] for lang in getattr(settings, "LANGUAGES", [])]

        if value not in valid_languages:
            logger.warning(
                "Invalid language code provided",
                extra={
                    "provided_language": value,
                    "valid_languages": valid_languages,
                    "action": "language_validation_failed",
                    "component": "UserSettingsSerializer",
                    "severity": "low",
                },
            )
            raise serializers.ValidationError(
                f"Unsupported language. Choose from: {', '.join(valid_languages)}"
            )
        return value

    def validate_currency(self, value):
        value = value.strip().upper()
        if len(value) != 3 or not value.isalpha():
            raise serializers.ValidationError("Currency must be a 3-letter code.")
        return value


# -------------------------------------------------------------------
# TRANSACTION SERIALIZER
# -------------------------------------------------------------------


class TransactionSerializer(NonNegativeAmountMixin, serializers.ModelSerializer):
    """
    Income or expense record.

    ``amount`` must be a non-negative magnitude with at most 2 decimal places;
    the ``type`` carries the sign.
    """

    amount = money_serializer_field()

    class Meta:
        model = Transaction
        fields = [
            "id",
            "type",
            "amount",
            "category",
            "date",
            "name",
            "description",
            "account_type",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_category(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category cannot be empty.")
        return value


# -------------------------------------------------------------------
# BUDGET ALLOCATION SERIALIZERS
# -------------------------------------------------------------------


class BudgetAllocationSerializer(serializers.ModelSerializer):
    """Stored allocation as returned by the API."""

    percentages = serializers.SerializerMethodField()

    class Meta:
        model = BudgetAllocation
        fields = [
            "id",
            "category",
            "amount",
            "period",
            "savings",
            "necessities",
            "wants",
            "investments",
            "percentages",
            "ai_recommendation",
            "generated_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_percentages(self, obj):
        return {key: f"{value:.2f}" for key, value in obj.percentages.items()}


class BudgetAllocationRequestSerializer(serializers.Serializer):
    """
    Input of ``POST /api/budget-allocations/``.

    Only the shape is checked here; percentage policy and total constraints
    are enforced by the allocator so every caller gets the same rules.
    """

    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentages = serializers.DictField()
    category = serializers.CharField(max_length=100, required=False, default="plan")
    period = serializers.ChoiceField(
        choices=BudgetAllocation.PERIOD_CHOICES, required=False, default="monthly"
    )
    ai_recommendation = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )


# -------------------------------------------------------------------
# LEDGER QUERY SERIALIZERS
# -------------------------------------------------------------------


class CategorySummaryQuerySerializer(serializers.Serializer):
    type = serializers.CharField()


class PeriodSummaryQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()


# -------------------------------------------------------------------
# LEDGER RESULT SERIALIZERS
# -------------------------------------------------------------------
# Render computed Decimals as fixed 2-digit strings


def total_field():
    return serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)


class LedgerBalanceSerializer(serializers.Serializer):
    balance = total_field()


class CategorySummarySerializer(serializers.Serializer):
    type = serializers.CharField(read_only=True)
    categories = serializers.DictField(
        child=serializers.DecimalField(max_digits=20, decimal_places=2), read_only=True
    )


class PeriodTotalsSerializer(serializers.Serializer):
    total_income = total_field()
    total_expense = total_field()
    net = total_field()


class PeriodSummarySerializer(PeriodTotalsSerializer):
    start_date = serializers.DateField(read_only=True)
    end_date = serializers.DateField(read_only=True)


class MonthlyTotalsSerializer(PeriodTotalsSerializer):
    month = serializers.CharField(read_only=True)


class DebtTotalsSerializer(serializers.Serializer):
    total_given = total_field()
    total_received = total_field()


# -------------------------------------------------------------------
# GOALS, PROJECTS, DEBTS
# -------------------------------------------------------------------


class GoalSerializer(serializers.ModelSerializer):
    target = money_serializer_field(min_value=Decimal("0.00"))
    current = money_serializer_field(min_value=Decimal("0.00"), required=False)
    progress_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, read_only=True
    )

    class Meta:
        model = Goal
        fields = [
            "id",
            "name",
            "title",
            "type",
            "description",
            "target",
            "current",
            "deadline",
            "progress_percent",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "progress_percent", "created_at", "updated_at"]


class ProjectSerializer(serializers.ModelSerializer):
    expected_earnings = money_serializer_field(min_value=Decimal("0.00"), required=False)

    class Meta:
        model = Project
        fields = [
            "id",
            "name",
            "client",
            "description",
            "status",
            "expected_earnings",
            "hours_spent",
            "start_date",
            "end_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, data):
        data = super().validate(data)
        start_date = data.get("start_date", getattr(self.instance, "start_date", None))
        end_date = data.get("end_date", getattr(self.instance, "end_date", None))
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError(
                {"end_date": "End date cannot precede start date."}
            )
        return data


class DebtSerializer(NonNegativeAmountMixin, serializers.ModelSerializer):
    amount = money_serializer_field()

    class Meta:
        model = Debt
        fields = [
            "id",
            "type",
            "amount",
            "person_name",
            "description",
            "date",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
