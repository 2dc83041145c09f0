import logging

from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from ..models import Debt
from ..utils.money_utils import ZERO, quantize_money
from .repositories import storage_errors

logger = logging.getLogger(__name__)


class DebtService:

    @staticmethod
    def pending_totals(user):
        """Sum of pending debts lent out (given) and borrowed (received)."""
        zero = Value(ZERO, output_field=DecimalField(max_digits=12, decimal_places=2))

        with storage_errors("DebtService", "pending_debt_totals", user):
            totals = Debt.objects.filter(user=user, status="pending").aggregate(
                total_given=Coalesce(Sum("amount", filter=Q(type="given")), zero),
                total_received=Coalesce(Sum("amount", filter=Q(type="received")), zero),
            )

        logger.debug(
            "Pending debt totals computed",
            extra={
                "user_id": user.id,
                "action": "debt_totals_computed",
                "component": "DebtService",
            },
        )
        return {
            "total_given": quantize_money(totals["total_given"]),
            "total_received": quantize_money(totals["total_received"]),
        }
