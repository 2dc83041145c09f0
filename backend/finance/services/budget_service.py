"""
Service for saving budget allocations.

Validation and allocation happen before any write; the write itself is a
single conflict-resolving upsert, so a failed request never leaves a partial
allocation behind.
"""

import logging

from django.core.exceptions import ValidationError
from django.utils import timezone

from ..models import BudgetAllocation
from .budget_allocator import BudgetAllocator
from .repositories import BudgetAllocationRepository

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "plan"
DEFAULT_PERIOD = "monthly"
PERIODS = [choice for choice, _ in BudgetAllocation.PERIOD_CHOICES]


class BudgetService:
    """
    Validates, allocates and persists budget plans.

    Usage:
        service = BudgetService()
        allocation = service.save_allocation(
            user, "1000.00", {"savings": 20, "necessities": 50, "wants": 20, "investments": 10}
        )
    """

    def __init__(self, repository=None):
        self.repository = repository or BudgetAllocationRepository()

    @staticmethod
    def _validate_category(category):
        category = (category or "").strip() if isinstance(category, str) else category
        if not category or not isinstance(category, str):
            raise ValidationError({"category": "Category cannot be empty."})
        return category

    @staticmethod
    def _validate_period(period):
        if period not in PERIODS:
            raise ValidationError(
                {"period": f"Period must be one of: {', '.join(PERIODS)}."}
            )
        return period

    def upsert(self, user, category, allocation, period=DEFAULT_PERIOD, ai_recommendation=None):
        """
        Persist a computed ``allocation`` for ``category``, replacing any
        existing row of that category in place.
        """
        category = self._validate_category(category)
        period = self._validate_period(period)

        percentages = allocation["percentages"]
        values = {
            "amount": allocation["amount"],
            "period": period,
            "savings": allocation["savings"],
            "necessities": allocation["necessities"],
            "wants": allocation["wants"],
            "investments": allocation["investments"],
            "savings_percent": percentages["savings"],
            "necessities_percent": percentages["necessities"],
            "wants_percent": percentages["wants"],
            "investments_percent": percentages["investments"],
            "ai_recommendation": ai_recommendation or "",
            "generated_at": timezone.now(),
        }
        return self.repository.upsert(user, category, values)

    def save_allocation(
        self,
        user,
        total_amount,
        percentages,
        category=DEFAULT_CATEGORY,
        period=DEFAULT_PERIOD,
        ai_recommendation=None,
    ):
        """
        Validate → allocate → upsert.

        Raises:
            ValidationError: bad category, period, total or percentages
            StorageUnavailableError: the database could not be reached
        """
        category = self._validate_category(category)
        period = self._validate_period(period)

        try:
            allocation = BudgetAllocator.allocate(total_amount, percentages)
        except ValidationError as e:
            logger.warning(
                "Budget allocation rejected",
                extra={
                    "user_id": user.id,
                    "category": category,
                    "errors": e.message_dict if hasattr(e, "error_dict") else e.messages,
                    "action": "budget_allocation_rejected",
                    "component": "BudgetService",
                    "severity": "low",
                },
            )
            raise

        record = self.upsert(
            user, category, allocation, period=period, ai_recommendation=ai_recommendation
        )

        logger.info(
            "Budget allocation saved",
            extra={
                "user_id": user.id,
                "allocation_id": record.id,
                "category": category,
                "period": period,
                "amount": str(record.amount),
                "action": "budget_allocation_saved",
                "component": "BudgetService",
            },
        )
        return record

    def get_current(self, user, category=DEFAULT_CATEGORY):
        category = self._validate_category(category)
        return self.repository.get_for_category(user, category)
