"""
Storage handles for the ledger services.

Repositories are constructed explicitly and injected into the services, which
lets tests substitute in-memory fakes. Connection handling stays with the ORM;
database failures are reported as ``StorageUnavailableError``.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError
from django.db import transaction as db_transaction

from ..exceptions import StorageUnavailableError
from ..models import BudgetAllocation, Transaction

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(component, operation, user=None):
    """Translate database failures inside the block to StorageUnavailableError."""
    try:
        yield
    except IntegrityError:
        raise
    except DatabaseError as e:
        logger.error(
            "Storage operation failed",
            extra={
                "user_id": getattr(user, "id", None),
                "operation": operation,
                "error_type": type(e).__name__,
                "error_message": str(e),
                "action": "storage_unavailable",
                "component": component,
                "severity": "high",
            },
        )
        raise StorageUnavailableError(
            f"Could not complete '{operation}': the database is unavailable."
        ) from e


class TransactionRepository:
    """Read access to a user's ledger snapshot."""

    def list_for_user(self, user, start_date=None, end_date=None):
        """
        Transactions of ``user`` ordered by date, optionally restricted to an
        inclusive date range.
        """
        with storage_errors("TransactionRepository", "list_transactions", user):
            queryset = Transaction.objects.filter(user=user)
            if start_date is not None:
                queryset = queryset.filter(date__gte=start_date)
            if end_date is not None:
                queryset = queryset.filter(date__lte=end_date)
            return list(queryset.order_by("date", "id"))


class BudgetAllocationRepository:
    """Per-category budget allocations with an atomic insert-or-update."""

    UPDATE_FIELDS = [
        "amount",
        "period",
        "savings",
        "necessities",
        "wants",
        "investments",
        "savings_percent",
        "necessities_percent",
        "wants_percent",
        "investments_percent",
        "ai_recommendation",
        "generated_at",
        "updated_at",
    ]

    def upsert(self, user, category, values):
        """
        Insert the allocation or replace the existing row for
        ``(user, category)`` with one ``INSERT ... ON CONFLICT DO UPDATE``.

        Returns:
            BudgetAllocation: the row as stored after the write
        """
        with storage_errors("BudgetAllocationRepository", "upsert_allocation", user):
            with db_transaction.atomic():
                BudgetAllocation.objects.bulk_create(
                    [BudgetAllocation(user=user, category=category, **values)],
                    update_conflicts=True,
                    unique_fields=["user", "category"],
                    update_fields=self.UPDATE_FIELDS,
                )
                return BudgetAllocation.objects.get(user=user, category=category)

    def get_for_category(self, user, category):
        with storage_errors("BudgetAllocationRepository", "get_allocation", user):
            return BudgetAllocation.objects.filter(user=user, category=category).first()

    def list_for_user(self, user):
        with storage_errors("BudgetAllocationRepository", "list_allocations", user):
            return list(BudgetAllocation.objects.filter(user=user).order_by("category"))
