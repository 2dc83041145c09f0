"""
Pure ledger computations over a sequence of transactions.

The aggregator performs no I/O: callers pass any iterable of objects exposing
``amount``, ``type``, ``category`` and ``date`` (model instances, unsaved
instances or plain namespaces). Records that break the ledger invariants are
reported with ``DataIntegrityError`` and never coerced.
"""

import logging
from datetime import date, datetime
from decimal import Decimal

from django.core.exceptions import ValidationError

from ..exceptions import DataIntegrityError
from ..models import Transaction
from ..utils.money_utils import ZERO, fractional_digits, quantize_money

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = (Transaction.INCOME, Transaction.EXPENSE)


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


class LedgerAggregator:
    """Balance, per-category and per-period totals with exact Decimal arithmetic."""

    @staticmethod
    def _record_id(transaction):
        return getattr(transaction, "id", None) or getattr(transaction, "pk", None)

    @staticmethod
    def _integrity_error(transaction, message, code):
        record_id = LedgerAggregator._record_id(transaction)
        logger.error(
            "Ledger record failed integrity check",
            extra={
                "transaction_id": record_id,
                "error_code": code,
                "error_message": message,
                "action": "ledger_integrity_violation",
                "component": "LedgerAggregator",
                "severity": "high",
            },
        )
        return DataIntegrityError(
            message,
            code=code,
            hint=f"Transaction {record_id} must be corrected before the ledger can be computed."
            if record_id
            else None,
            record_id=record_id,
        )

    @staticmethod
    def validate_record(transaction):
        """
        Check one transaction against the ledger invariants.

        Returns:
            Decimal: the validated amount

        Raises:
            DataIntegrityError: non-numeric, non-finite, negative or
                over-precise amount, or unknown type
        """
        amount = transaction.amount

        if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
            raise LedgerAggregator._integrity_error(
                transaction,
                f"Amount {amount!r} is not a decimal number.",
                "non_numeric_amount",
            )

        amount = Decimal(amount)
        if not amount.is_finite():
            raise LedgerAggregator._integrity_error(
                transaction, f"Amount {amount} is not finite.", "non_numeric_amount"
            )
        if amount < 0:
            raise LedgerAggregator._integrity_error(
                transaction,
                f"Amount {amount} is negative; amounts are stored as magnitudes.",
                "negative_amount",
            )
        if fractional_digits(amount) > 2:
            raise LedgerAggregator._integrity_error(
                transaction,
                f"Amount {amount} has more than 2 fractional digits.",
                "excess_precision",
            )
        if transaction.type not in TRANSACTION_TYPES:
            raise LedgerAggregator._integrity_error(
                transaction,
                f"Unknown transaction type {transaction.type!r}.",
                "unknown_type",
            )
        return amount

    @staticmethod
    def compute_balance(transactions) -> Decimal:
        """Total income minus total expense; ``0.00`` for an empty ledger."""
        balance = ZERO
        for transaction in transactions:
            amount = LedgerAggregator.validate_record(transaction)
            if transaction.type == Transaction.INCOME:
                balance += amount
            else:
                balance -= amount
        return quantize_money(balance)

    @staticmethod
    def summarize_by_category(transactions, transaction_type):
        """
        Totals per category for one transaction type.

        Categories are grouped by exact, case-sensitive label. Categories with
        no transaction of the requested type are absent from the result.
        """
        if transaction_type not in TRANSACTION_TYPES:
            raise ValidationError(
                {"type": f"Type must be one of: {', '.join(TRANSACTION_TYPES)}."}
            )

        totals = {}
        for transaction in transactions:
            amount = LedgerAggregator.validate_record(transaction)
            if transaction.type != transaction_type:
                continue
            totals[transaction.category] = totals.get(transaction.category, ZERO) + amount

        return {category: quantize_money(total) for category, total in totals.items()}

    @staticmethod
    def summarize_by_period(transactions, start_date, end_date):
        """
        Income, expense and net for transactions dated within
        ``[start_date, end_date]``, both bounds inclusive.
        """
        start_date = _as_date(start_date)
        end_date = _as_date(end_date)

        if not isinstance(start_date, date) or not isinstance(end_date, date):
            raise ValidationError({"start_date": "Start and end dates are required."})
        if start_date > end_date:
            raise ValidationError({"start_date": "Start date must not be after end date."})

        total_income = ZERO
        total_expense = ZERO
        for transaction in transactions:
            amount = LedgerAggregator.validate_record(transaction)
            tx_date = _as_date(transaction.date)
            if tx_date is None or not start_date <= tx_date <= end_date:
                continue
            if transaction.type == Transaction.INCOME:
                total_income += amount
            else:
                total_expense += amount

        return {
            "total_income": quantize_money(total_income),
            "total_expense": quantize_money(total_expense),
            "net": quantize_money(total_income - total_expense),
        }

    @staticmethod
    def month_bounds(reference_date):
        reference_date = _as_date(reference_date)
        first_day = reference_date.replace(day=1)
        if first_day.month == 12:
            next_month = first_day.replace(year=first_day.year + 1, month=1)
        else:
            next_month = first_day.replace(month=first_day.month + 1)
        return first_day, date.fromordinal(next_month.toordinal() - 1)

    @staticmethod
    def monthly_totals(transactions, reference_date):
        """Period summary for the calendar month containing ``reference_date``."""
        first_day, last_day = LedgerAggregator.month_bounds(reference_date)
        summary = LedgerAggregator.summarize_by_period(transactions, first_day, last_day)
        return {"month": first_day.strftime("%Y-%m"), **summary}
