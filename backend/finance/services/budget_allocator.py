"""
Budget allocation: split a total across savings, necessities, wants and
investments by percentage, with exact cent reconciliation.
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError

from ..utils.money_utils import CENT, ZERO, fractional_digits, quantize_money, to_decimal

logger = logging.getLogger(__name__)

# Fixed order, also the tie-break order for receiving the rounding residual
ALLOCATION_KEYS = ("savings", "necessities", "wants", "investments")

PERCENT_TOTAL = Decimal("100")
PERCENT_TOLERANCE = Decimal("0.01")


class BudgetAllocator:

    @staticmethod
    def validate_total(total_amount):
        total = to_decimal(total_amount)
        if total is None:
            raise ValidationError({"total_amount": "Total amount must be a number."})
        if total < 0:
            raise ValidationError({"total_amount": "Total amount cannot be negative."})
        if fractional_digits(total) > 2:
            raise ValidationError(
                {"total_amount": "Total amount cannot have more than 2 decimal places."}
            )
        return quantize_money(total)

    @staticmethod
    def validate_percentages(percentages):
        """
        Check the percentage policy and return it as Decimals.

        Raises:
            ValidationError: keyed on ``percentages`` and naming the failed
                constraint (missing/unknown key, negative or non-numeric
                value, more than 2 decimal places, sum outside 100 ± 0.01)
        """
        if not isinstance(percentages, dict):
            raise ValidationError(
                {"percentages": "Percentages must be an object keyed by category."}
            )

        missing = [key for key in ALLOCATION_KEYS if key not in percentages]
        if missing:
            raise ValidationError(
                {"percentages": f"Missing percentages for: {', '.join(missing)}."}
            )
        unknown = sorted(set(percentages) - set(ALLOCATION_KEYS))
        if unknown:
            raise ValidationError(
                {"percentages": f"Unknown percentage keys: {', '.join(unknown)}."}
            )

        values = {}
        for key in ALLOCATION_KEYS:
            value = to_decimal(percentages[key])
            if value is None:
                raise ValidationError({"percentages": f"{key} must be a number."})
            if value < 0:
                raise ValidationError({"percentages": f"{key} cannot be negative."})
            if fractional_digits(value) > 2:
                raise ValidationError(
                    {"percentages": f"{key} cannot have more than 2 decimal places."}
                )
            values[key] = value

        total = sum(values.values(), ZERO)
        if abs(total - PERCENT_TOTAL) > PERCENT_TOLERANCE:
            raise ValidationError(
                {"percentages": f"Percentages must sum to 100 (got {total})."}
            )
        return values

    @staticmethod
    def _reconcile(amounts, percentages, residual):
        """Apply the rounding residual, largest percentage first."""
        order = sorted(
            ALLOCATION_KEYS,
            key=lambda key: (-percentages[key], ALLOCATION_KEYS.index(key)),
        )
        if residual >= 0:
            amounts[order[0]] += residual
            return amounts

        # A negative residual must never push a share below zero
        remaining = -residual
        for key in order:
            taken = min(amounts[key], remaining)
            amounts[key] -= taken
            remaining -= taken
            if remaining == 0:
                break
        return amounts

    @staticmethod
    def allocate(total_amount, percentages):
        """
        Distribute ``total_amount`` by ``percentages``.

        Each share is ``total * pct / 100`` rounded half-up to cents; the
        residual cents go to the category with the largest percentage (ties in
        the order savings, necessities, wants, investments), so the shares add
        up to the total exactly.

        Returns:
            dict: ``amount``, one entry per category, and ``percentages``
        """
        total = BudgetAllocator.validate_total(total_amount)
        pct = BudgetAllocator.validate_percentages(percentages)

        amounts = {
            key: quantize_money(total * pct[key] / PERCENT_TOTAL) for key in ALLOCATION_KEYS
        }
        residual = total - sum(amounts.values(), ZERO)
        if residual:
            amounts = BudgetAllocator._reconcile(amounts, pct, residual)
            logger.debug(
                "Allocation rounding residual reconciled",
                extra={
                    "residual": str(residual),
                    "residual_cents": int(residual / CENT),
                    "action": "allocation_residual_reconciled",
                    "component": "BudgetAllocator",
                },
            )

        return {
            "amount": total,
            **amounts,
            "percentages": {key: quantize_money(pct[key]) for key in ALLOCATION_KEYS},
        }
