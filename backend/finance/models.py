"""
Database models for the personal ledger.

This module defines the ledger (income and expense transactions), budget
allocations, goals, freelance projects, debts and per-user settings. Every
record is owned by exactly one user.
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

# Get structured logger for this module
logger = logging.getLogger(__name__)

MONEY_MAX_DIGITS = 12
MONEY_DECIMAL_PLACES = 2


def money_field(**kwargs):
    kwargs.setdefault("validators", [MinValueValidator(Decimal("0.00"))])
    return models.DecimalField(
        max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES, **kwargs
    )


# -------------------------------------------------------------------
# USER SETTINGS
# -------------------------------------------------------------------
# User-specific preferences, created automatically with the user


class UserSettings(models.Model):
    """
    User-specific settings and preferences.

    Stores the display currency and interface language of a user.
    """

    LANGUAGE_CHOICES = settings.LANGUAGES

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="settings"
    )
    currency = models.CharField(max_length=3, default="DZD")
    language = models.CharField(max_length=2, choices=LANGUAGE_CHOICES, default="en")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "User settings"

    def __str__(self):
        return f"{self.user.email} settings"

    def clean(self):
        super().clean()

        if not self.currency or len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError({"currency": "Currency must be a 3-letter code."})

        logger.debug(
            "UserSettings validation completed",
            extra={
                "user_id": self.user_id,
                "language": self.language,
                "currency": self.currency,
                "action": "user_settings_validation",
                "component": "UserSettings",
            },
        )


# -------------------------------------------------------------------
# TRANSACTIONS
# -------------------------------------------------------------------
# Income and expense records, the input of every ledger computation


class Transaction(models.Model):
    """
    Single income or expense record.

    ``amount`` is always a non-negative magnitude; the ``type`` decides its
    sign in the balance.
    """

    INCOME = "income"
    EXPENSE = "expense"
    TRANSACTION_TYPES = [
        (INCOME, "Income"),
        (EXPENSE, "Expense"),
    ]

    ACCOUNT_TYPES = [
        ("ccp", "CCP"),
        ("cash", "Cash"),
        ("creditcard", "Credit card"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="transactions"
    )
    type = models.CharField(max_length=10, choices=TRANSACTION_TYPES)
    amount = money_field()
    category = models.CharField(max_length=100)
    date = models.DateField()
    name = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    account_type = models.CharField(
        max_length=20, choices=ACCOUNT_TYPES, blank=True, default=""
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="transaction_amount_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "date"], name="idx_transaction_user_date"),
            models.Index(fields=["user", "type"], name="idx_transaction_user_type"),
            models.Index(fields=["user", "category"], name="idx_transaction_user_category"),
        ]
        ordering = ["-date", "-created_at"]

    def clean(self):
        super().clean()

        if self.amount is not None and self.amount < 0:
            logger.warning(
                "Transaction validation failed - negative amount",
                extra={
                    "transaction_id": self.id if self.id else "new",
                    "amount": str(self.amount),
                    "action": "transaction_validation_failed",
                    "component": "Transaction",
                    "severity": "medium",
                },
            )
            raise ValidationError({"amount": "Amount cannot be negative."})

        if not (self.category or "").strip():
            raise ValidationError({"category": "Category cannot be empty."})

    def __str__(self):
        return f"{self.user} | {self.type} | {self.amount} | {self.category}"


# -------------------------------------------------------------------
# BUDGET ALLOCATIONS
# -------------------------------------------------------------------
# A total budget split into savings / necessities / wants / investments,
# one row per (user, category)


class BudgetAllocation(models.Model):
    """
    Persisted budget plan for one category of a user.

    The four sub-amounts always add up exactly to ``amount``. Saving a new plan
    for the same category replaces the existing row in place.
    """

    PERIOD_CHOICES = [
        ("weekly", "Weekly"),
        ("monthly", "Monthly"),
        ("yearly", "Yearly"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="budget_allocations",
    )
    category = models.CharField(max_length=100, default="plan")
    amount = money_field()
    period = models.CharField(max_length=10, choices=PERIOD_CHOICES, default="monthly")

    savings = money_field(default=Decimal("0.00"))
    necessities = money_field(default=Decimal("0.00"))
    wants = money_field(default=Decimal("0.00"))
    investments = money_field(default=Decimal("0.00"))

    savings_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    necessities_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    wants_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    investments_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)

    ai_recommendation = models.TextField(blank=True, default="")
    generated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "category"], name="unique_budget_category_per_user"
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="budget_amount_non_negative",
            ),
        ]
        ordering = ["category"]

    @property
    def percentages(self):
        return {
            "savings": self.savings_percent,
            "necessities": self.necessities_percent,
            "wants": self.wants_percent,
            "investments": self.investments_percent,
        }

    def __str__(self):
        return f"{self.user} | {self.category} | {self.amount} ({self.period})"


# -------------------------------------------------------------------
# GOALS
# -------------------------------------------------------------------


class Goal(models.Model):
    """Financial or personal goal with a target amount and optional deadline."""

    GOAL_TYPES = [
        ("financial", "Financial"),
        ("personal", "Personal"),
        ("savings", "Savings"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="goals"
    )
    name = models.CharField(max_length=255)
    title = models.CharField(max_length=255, blank=True, default="")
    type = models.CharField(max_length=20, choices=GOAL_TYPES, default="financial")
    description = models.TextField(blank=True, default="")
    target = money_field(default=Decimal("0.00"))
    current = money_field(default=Decimal("0.00"))
    deadline = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["deadline", "-created_at"]

    @property
    def progress_percent(self):
        if not self.target:
            return Decimal("0.00")
        progress = (self.current / self.target * 100).quantize(Decimal("0.01"))
        return min(progress, Decimal("100.00"))

    def __str__(self):
        return f"{self.user} | {self.name}"


# -------------------------------------------------------------------
# PROJECTS
# -------------------------------------------------------------------


class Project(models.Model):
    """Freelance or side project tracked with expected earnings."""

    STATUS_CHOICES = [
        ("ongoing", "Ongoing"),
        ("completed", "Completed"),
        ("paused", "Paused"),
        ("cancelled", "Cancelled"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="projects"
    )
    name = models.CharField(max_length=255)
    client = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="ongoing")
    expected_earnings = money_field(default=Decimal("0.00"))
    hours_spent = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        super().clean()
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "End date cannot precede start date."})

    def __str__(self):
        return f"{self.user} | {self.name} ({self.status})"


# -------------------------------------------------------------------
# DEBTS
# -------------------------------------------------------------------
# Money lent to ("given") or borrowed from ("received") another person


class Debt(models.Model):
    DEBT_TYPES = [
        ("given", "Given"),
        ("received", "Received"),
    ]
    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("paid", "Paid"),
        ("received", "Received"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="debts"
    )
    type = models.CharField(max_length=10, choices=DEBT_TYPES)
    amount = money_field()
    person_name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    date = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="pending")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="debt_amount_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "type", "status"], name="idx_debt_user_type_status"),
        ]
        ordering = ["-date", "-created_at"]

    def __str__(self):
        return f"{self.user} | {self.type} | {self.person_name} | {self.amount}"
