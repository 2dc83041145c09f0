"""
Read-side ledger service: fetches a snapshot through the injected repository
and hands it to the pure aggregator.
"""

import logging

from django.utils import timezone

from .ledger_aggregator import LedgerAggregator
from .repositories import TransactionRepository

logger = logging.getLogger(__name__)


class LedgerService:

    def __init__(self, repository=None):
        self.repository = repository or TransactionRepository()

    def get_balance(self, user):
        transactions = self.repository.list_for_user(user)
        balance = LedgerAggregator.compute_balance(transactions)

        logger.info(
            "Ledger balance computed",
            extra={
                "user_id": user.id,
                "transaction_count": len(transactions),
                "action": "ledger_balance_computed",
                "component": "LedgerService",
            },
        )
        return {"balance": balance}

    def get_category_summary(self, user, transaction_type):
        # Reject a bad type before touching storage
        LedgerAggregator.summarize_by_category([], transaction_type)

        transactions = self.repository.list_for_user(user)
        categories = LedgerAggregator.summarize_by_category(transactions, transaction_type)

        logger.info(
            "Ledger category summary computed",
            extra={
                "user_id": user.id,
                "transaction_type": transaction_type,
                "category_count": len(categories),
                "action": "ledger_category_summary_computed",
                "component": "LedgerService",
            },
        )
        return {"type": transaction_type, "categories": categories}

    def get_period_summary(self, user, start_date, end_date):
        LedgerAggregator.summarize_by_period([], start_date, end_date)

        transactions = self.repository.list_for_user(
            user, start_date=start_date, end_date=end_date
        )
        summary = LedgerAggregator.summarize_by_period(transactions, start_date, end_date)

        logger.info(
            "Ledger period summary computed",
            extra={
                "user_id": user.id,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "transaction_count": len(transactions),
                "action": "ledger_period_summary_computed",
                "component": "LedgerService",
            },
        )
        return {"start_date": start_date, "end_date": end_date, **summary}

    def get_monthly_totals(self, user, reference_date=None):
        reference_date = reference_date or timezone.localdate()
        first_day, last_day = LedgerAggregator.month_bounds(reference_date)

        transactions = self.repository.list_for_user(
            user, start_date=first_day, end_date=last_day
        )
        return LedgerAggregator.monthly_totals(transactions, reference_date)
