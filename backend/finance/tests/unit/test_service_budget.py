"""
Tests for BudgetService and the budget allocation upsert.
"""

from decimal import Decimal
from unittest.mock import Mock, patch

import pytest
from django.core.exceptions import ValidationError
from django.db import OperationalError, connection
from django.test.utils import CaptureQueriesContext

from finance.exceptions import StorageUnavailableError
from finance.models import BudgetAllocation
from finance.services.budget_allocator import BudgetAllocator
from finance.services.budget_service import BudgetService
from finance.tests.factories import BudgetAllocationFactory

EVEN_SPLIT = {"savings": 25, "necessities": 25, "wants": 25, "investments": 25}
PLAN = {"savings": 20, "necessities": 50, "wants": 20, "investments": 10}


@pytest.mark.django_db
class TestSaveAllocation:

    def setup_method(self):
        self.service = BudgetService()

    def test_creates_allocation(self, test_user):
        record = self.service.save_allocation(test_user, Decimal("1000.00"), PLAN)

        assert record.category == "plan"
        assert record.period == "monthly"
        assert record.savings == Decimal("200.00")
        assert record.necessities == Decimal("500.00")
        assert record.wants == Decimal("200.00")
        assert record.investments == Decimal("100.00")
        assert record.necessities_percent == Decimal("50.00")
        assert record.generated_at is not None

    def test_second_save_replaces_first(self, test_user):
        first = self.service.save_allocation(test_user, Decimal("1000.00"), PLAN)
        second = self.service.save_allocation(
            test_user, Decimal("2000.00"), EVEN_SPLIT, period="yearly"
        )

        assert BudgetAllocation.objects.filter(user=test_user).count() == 1
        assert second.id == first.id
        stored = BudgetAllocation.objects.get(user=test_user, category="plan")
        assert stored.amount == Decimal("2000.00")
        assert stored.savings == Decimal("500.00")
        assert stored.period == "yearly"

    def test_categories_are_kept_apart(self, test_user):
        self.service.save_allocation(test_user, "100.00", PLAN, category="plan")
        self.service.save_allocation(test_user, "300.00", PLAN, category="holiday")

        assert BudgetAllocation.objects.filter(user=test_user).count() == 2

    def test_users_are_kept_apart(self, test_user, test_user2):
        self.service.save_allocation(test_user, "100.00", PLAN)
        self.service.save_allocation(test_user2, "300.00", PLAN)

        assert BudgetAllocation.objects.get(user=test_user).amount == Decimal("100.00")
        assert BudgetAllocation.objects.get(user=test_user2).amount == Decimal("300.00")

    def test_invalid_percentages_write_nothing(self, test_user):
        with pytest.raises(ValidationError):
            self.service.save_allocation(test_user, "1000.00", {**PLAN, "wants": 19})

        assert not BudgetAllocation.objects.filter(user=test_user).exists()

    def test_invalid_percentages_keep_previous_row(self, test_user):
        BudgetAllocationFactory(user=test_user)

        with pytest.raises(ValidationError):
            self.service.save_allocation(test_user, "5.00", {**PLAN, "wants": 30})

        assert BudgetAllocation.objects.get(user=test_user).amount == Decimal("1000.00")

    @pytest.mark.parametrize("category", ["", "   ", None])
    def test_empty_category_rejected(self, test_user, category):
        with pytest.raises(ValidationError) as exc_info:
            self.service.save_allocation(test_user, "10.00", PLAN, category=category)

        assert "category" in exc_info.value.message_dict

    def test_unknown_period_rejected(self, test_user):
        with pytest.raises(ValidationError) as exc_info:
            self.service.save_allocation(test_user, "10.00", PLAN, period="daily")

        assert "period" in exc_info.value.message_dict

    @patch("finance.services.budget_service.logger")
    def test_rejection_is_logged(self, mock_logger, test_user):
        with pytest.raises(ValidationError):
            self.service.save_allocation(test_user, "-1.00", PLAN)

        mock_logger.warning.assert_called_once()
        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["action"] == "budget_allocation_rejected"
        assert "total_amount" in extra["errors"]

    @patch("finance.services.budget_service.logger")
    def test_success_is_logged(self, mock_logger, test_user):
        record = self.service.save_allocation(test_user, "10.00", PLAN)

        extra = mock_logger.info.call_args[1]["extra"]
        assert extra["action"] == "budget_allocation_saved"
        assert extra["allocation_id"] == record.id
        assert extra["amount"] == "10.00"


@pytest.mark.django_db
class TestUpsertConcurrency:

    def test_write_is_a_single_conflict_resolving_insert(self, test_user):
        service = BudgetService()

        with CaptureQueriesContext(connection) as ctx:
            service.save_allocation(test_user, "1000.00", PLAN)

        budget_queries = [
            q["sql"].upper() for q in ctx.captured_queries
            if "FINANCE_BUDGETALLOCATION" in q["sql"].upper()
        ]
        assert budget_queries[0].startswith("INSERT")
        assert "ON CONFLICT" in budget_queries[0]

    def test_competing_write_between_allocate_and_upsert(self, test_user):
        """A row committed by another request after validation is replaced, not duplicated."""
        real_allocate = BudgetAllocator.allocate

        def allocate_then_compete(total_amount, percentages):
            result = real_allocate(total_amount, percentages)
            BudgetAllocationFactory(user=test_user, amount=Decimal("50.00"))
            return result

        with patch(
            "finance.services.budget_service.BudgetAllocator.allocate",
            side_effect=allocate_then_compete,
        ):
            record = BudgetService().save_allocation(test_user, "800.00", PLAN)

        rows = BudgetAllocation.objects.filter(user=test_user, category="plan")
        assert rows.count() == 1
        assert rows.get().id == record.id
        assert record.amount == Decimal("800.00")
        assert record.necessities == Decimal("400.00")

    def test_interleaved_saves_keep_last_committed(self, test_user):
        first_service = BudgetService()
        second_service = BudgetService()

        first_service.save_allocation(test_user, "100.00", PLAN)
        second_service.save_allocation(test_user, "200.00", EVEN_SPLIT)
        first_service.save_allocation(test_user, "300.00", PLAN)

        stored = BudgetAllocation.objects.get(user=test_user, category="plan")
        assert stored.amount == Decimal("300.00")
        assert stored.savings_percent == Decimal("20.00")


class TestInjectedRepository:

    def test_upsert_goes_through_repository(self):
        repository = Mock()
        user = Mock(id=5)
        service = BudgetService(repository=repository)

        service.save_allocation(user, "100.00", PLAN, category="holiday")

        repository.upsert.assert_called_once()
        called_user, category, values = repository.upsert.call_args[0]
        assert called_user is user
        assert category == "holiday"
        assert values["amount"] == Decimal("100.00")
        assert values["investments_percent"] == Decimal("10.00")
        assert values["ai_recommendation"] == ""

    def test_validation_happens_before_storage(self):
        repository = Mock()

        with pytest.raises(ValidationError):
            BudgetService(repository=repository).save_allocation(
                Mock(id=5), "100.00", {**PLAN, "savings": 90}
            )

        repository.upsert.assert_not_called()

    def test_get_current_reads_repository(self):
        repository = Mock()
        repository.get_for_category.return_value = None
        user = Mock(id=5)

        assert BudgetService(repository=repository).get_current(user) is None
        repository.get_for_category.assert_called_once_with(user, "plan")


@pytest.mark.django_db
class TestStorageFailure:

    def test_database_error_becomes_storage_unavailable(self, test_user):
        with patch(
            "finance.services.repositories.BudgetAllocation.objects.bulk_create",
            side_effect=OperationalError("connection refused"),
        ):
            with pytest.raises(StorageUnavailableError):
                BudgetService().save_allocation(test_user, "100.00", PLAN)

        assert not BudgetAllocation.objects.filter(user=test_user).exists()
