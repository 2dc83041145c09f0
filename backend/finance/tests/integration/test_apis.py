"""
Integration tests for the ledger API endpoints.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

from django.db import OperationalError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from finance.models import BudgetAllocation, Transaction, UserSettings

from ..factories import (
    BudgetAllocationFactory,
    DebtFactory,
    GoalFactory,
    ProjectFactory,
    TransactionFactory,
    UserFactory,
)

# =============================================================================
# URL ENDPOINT CONSTANTS
# =============================================================================

# Router-generated endpoints
TRANSACTION_LIST = "transaction-list"
TRANSACTION_DETAIL = "transaction-detail"
BUDGET_ALLOCATION_LIST = "budget-allocation-list"
GOAL_LIST = "goal-list"
GOAL_DETAIL = "goal-detail"
PROJECT_LIST = "project-list"
DEBT_LIST = "debt-list"

# Custom action endpoints
LEDGER_BALANCE = "ledger-balance"
LEDGER_CATEGORY_SUMMARY = "ledger-category-summary"
LEDGER_PERIOD_SUMMARY = "ledger-period-summary"
LEDGER_MONTHLY_TOTALS = "ledger-monthly-totals"
BUDGET_ALLOCATION_CURRENT = "budget-allocation-current"
DEBT_TOTALS = "debt-totals"
USER_SETTINGS = "user-settings"

PLAN = {"savings": 20, "necessities": 50, "wants": 20, "investments": 10}


class BaseAPITestCase(APITestCase):
    """Two users; the client is authenticated as the first one."""

    def setUp(self):
        super().setUp()
        self.user = UserFactory(email="owner@example.com")
        self.other_user = UserFactory(email="other@example.com")
        self.client.force_authenticate(user=self.user)

    def _create_sample_ledger(self, user=None):
        user = user or self.user
        TransactionFactory(
            user=user, type="income", amount=Decimal("100.00"),
            category="salary", date=date(2024, 1, 1),
        )
        TransactionFactory(
            user=user, type="expense", amount=Decimal("30.00"),
            category="food", date=date(2024, 1, 2),
        )
        TransactionFactory(
            user=user, type="income", amount=Decimal("50.00"),
            category="freelance", date=date(2024, 2, 1),
        )


class LedgerAPITests(BaseAPITestCase):

    def test_balance(self):
        self._create_sample_ledger()
        self._create_sample_ledger(user=self.other_user)
        TransactionFactory(user=self.other_user, type="income", amount=Decimal("999.00"))

        response = self.client.get(reverse(LEDGER_BALANCE))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"balance": "120.00"})

    def test_balance_of_empty_ledger(self):
        response = self.client.get(reverse(LEDGER_BALANCE))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["balance"], "0.00")

    def test_category_summary(self):
        self._create_sample_ledger()

        response = self.client.get(reverse(LEDGER_CATEGORY_SUMMARY), {"type": "income"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["type"], "income")
        self.assertEqual(
            dict(response.data["categories"]),
            {"salary": "100.00", "freelance": "50.00"},
        )

    def test_category_summary_rejects_unknown_type(self):
        response = self.client.get(reverse(LEDGER_CATEGORY_SUMMARY), {"type": "transfer"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("type", response.data)

    def test_category_summary_requires_type(self):
        response = self.client.get(reverse(LEDGER_CATEGORY_SUMMARY))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("type", response.data)

    def test_period_summary(self):
        self._create_sample_ledger()

        response = self.client.get(
            reverse(LEDGER_PERIOD_SUMMARY),
            {"start_date": "2024-01-01", "end_date": "2024-01-31"},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_income"], "100.00")
        self.assertEqual(response.data["total_expense"], "30.00")
        self.assertEqual(response.data["net"], "70.00")
        self.assertEqual(response.data["start_date"], "2024-01-01")
        self.assertEqual(response.data["end_date"], "2024-01-31")

    def test_period_summary_start_after_end(self):
        response = self.client.get(
            reverse(LEDGER_PERIOD_SUMMARY),
            {"start_date": "2024-02-01", "end_date": "2024-01-01"},
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("start_date", response.data)

    def test_period_summary_invalid_date(self):
        response = self.client.get(
            reverse(LEDGER_PERIOD_SUMMARY),
            {"start_date": "January", "end_date": "2024-01-31"},
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("start_date", response.data)

    def test_monthly_totals(self):
        today = timezone.localdate()
        TransactionFactory(user=self.user, type="income", amount=Decimal("40.00"), date=today)
        TransactionFactory(user=self.user, type="expense", amount=Decimal("15.50"), date=today)
        TransactionFactory(
            user=self.user, type="income", amount=Decimal("1000.00"),
            date=date(today.year - 1, today.month, 1),
        )

        response = self.client.get(reverse(LEDGER_MONTHLY_TOTALS))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["month"], today.strftime("%Y-%m"))
        self.assertEqual(response.data["total_income"], "40.00")
        self.assertEqual(response.data["total_expense"], "15.50")
        self.assertEqual(response.data["net"], "24.50")

    @patch("finance.services.repositories.Transaction.objects.filter")
    def test_storage_unavailable(self, mock_filter):
        mock_filter.side_effect = OperationalError("could not connect to server")

        response = self.client.get(reverse(LEDGER_BALANCE))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["error"], "storage_unavailable")
        self.assertEqual(response.data["code"], "storage_unavailable")
        self.assertTrue(response.data["hint"])

    @patch("finance.services.repositories.TransactionRepository.list_for_user")
    def test_corrupt_record_reported(self, mock_list):
        mock_list.return_value = [
            SimpleNamespace(
                id=41, type="expense", amount=Decimal("-5.00"),
                category="food", date=date(2024, 1, 1),
            )
        ]

        response = self.client.get(reverse(LEDGER_BALANCE))

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["error"], "data_integrity_error")
        self.assertEqual(response.data["code"], "negative_amount")
        self.assertIn("41", response.data["hint"])

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.get(reverse(LEDGER_BALANCE))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_jwt_authentication(self):
        self.client.force_authenticate(user=None)
        access_token = str(RefreshToken.for_user(self.user).access_token)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token}")

        response = self.client.get(reverse(LEDGER_BALANCE))

        self.assertEqual(response.status_code, status.HTTP_200_OK)


class TransactionAPITests(BaseAPITestCase):

    def setUp(self):
        super().setUp()
        self.list_url = reverse(TRANSACTION_LIST)
        self.transaction = TransactionFactory(
            user=self.user, type="expense", amount=Decimal("12.00"),
            category="food", date=date(2024, 3, 10),
        )

    def test_create_transaction(self):
        data = {
            "type": "income",
            "amount": "250.75",
            "category": "salary",
            "date": "2024-03-01",
            "name": "March salary",
        }

        response = self.client.post(self.list_url, data, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        created = Transaction.objects.get(id=response.data["id"])
        self.assertEqual(created.user, self.user)
        self.assertEqual(created.amount, Decimal("250.75"))

    def test_owner_cannot_be_set_by_client(self):
        data = {
            "type": "income", "amount": "1.00", "category": "gift",
            "date": "2024-03-01", "user": self.other_user.id,
        }

        response = self.client.post(self.list_url, data, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Transaction.objects.get(id=response.data["id"]).user, self.user)

    def test_negative_amount_rejected(self):
        data = {"type": "expense", "amount": "-5.00", "category": "food", "date": "2024-03-01"}

        response = self.client.post(self.list_url, data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("amount", response.data)

    def test_excess_precision_rejected(self):
        data = {"type": "expense", "amount": "5.001", "category": "food", "date": "2024-03-01"}

        response = self.client.post(self.list_url, data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("amount", response.data)

    def test_unknown_type_rejected(self):
        data = {"type": "transfer", "amount": "5.00", "category": "food", "date": "2024-03-01"}

        response = self.client.post(self.list_url, data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("type", response.data)

    def test_list_is_scoped_to_owner(self):
        TransactionFactory(user=self.other_user)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([tx["id"] for tx in response.data], [self.transaction.id])

    def test_filters(self):
        TransactionFactory(user=self.user, type="income", category="salary", date=date(2024, 1, 5))

        by_type = self.client.get(self.list_url, {"type": "expense"})
        by_category = self.client.get(self.list_url, {"category": "salary"})
        by_range = self.client.get(
            self.list_url, {"date_from": "2024-03-01", "date_to": "2024-03-31"}
        )

        self.assertEqual([tx["id"] for tx in by_type.data], [self.transaction.id])
        self.assertEqual(len(by_category.data), 1)
        self.assertEqual([tx["id"] for tx in by_range.data], [self.transaction.id])

    def test_invalid_date_filter(self):
        response = self.client.get(self.list_url, {"date_from": "not-a-date"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("date_from", response.data)

    def test_update_and_delete(self):
        detail_url = reverse(TRANSACTION_DETAIL, kwargs={"pk": self.transaction.pk})

        response = self.client.patch(detail_url, {"amount": "13.50"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["amount"], "13.50")

        response = self.client.delete(detail_url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Transaction.objects.filter(pk=self.transaction.pk).exists())

    def test_foreign_transaction_is_not_found(self):
        foreign = TransactionFactory(user=self.other_user)
        detail_url = reverse(TRANSACTION_DETAIL, kwargs={"pk": foreign.pk})

        self.assertEqual(self.client.get(detail_url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(
            self.client.patch(detail_url, {"amount": "1.00"}, format="json").status_code,
            status.HTTP_404_NOT_FOUND,
        )
        self.assertEqual(self.client.delete(detail_url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Transaction.objects.filter(pk=foreign.pk).exists())

    @patch("finance.views.Transaction.objects.filter")
    def test_database_outage_outside_services(self, mock_filter):
        mock_filter.side_effect = OperationalError("connection reset")

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["error"], "storage_unavailable")


class BudgetAllocationAPITests(BaseAPITestCase):

    def setUp(self):
        super().setUp()
        self.list_url = reverse(BUDGET_ALLOCATION_LIST)
        self.current_url = reverse(BUDGET_ALLOCATION_CURRENT)

    def test_save_allocation(self):
        data = {
            "total_amount": "1000.00",
            "percentages": {"savings": 33.33, "necessities": 33.33, "wants": 33.34, "investments": 0},
        }

        response = self.client.post(self.list_url, data, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["amount"], "1000.00")
        self.assertEqual(response.data["savings"], "333.30")
        self.assertEqual(response.data["necessities"], "333.30")
        self.assertEqual(response.data["wants"], "333.40")
        self.assertEqual(response.data["investments"], "0.00")
        self.assertEqual(response.data["percentages"]["wants"], "33.34")
        self.assertEqual(response.data["category"], "plan")

    def test_second_save_replaces_first(self):
        self.client.post(self.list_url, {"total_amount": "100.00", "percentages": PLAN}, format="json")
        response = self.client.post(
            self.list_url,
            {"total_amount": "500.00", "percentages": PLAN, "period": "weekly"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(BudgetAllocation.objects.filter(user=self.user).count(), 1)
        stored = BudgetAllocation.objects.get(user=self.user)
        self.assertEqual(stored.amount, Decimal("500.00"))
        self.assertEqual(stored.period, "weekly")

    def test_percentages_must_sum_to_hundred(self):
        for wants in (19.5, 20.5):
            data = {"total_amount": "100.00", "percentages": {**PLAN, "wants": wants}}

            response = self.client.post(self.list_url, data, format="json")

            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn("percentages", response.data)
        self.assertFalse(BudgetAllocation.objects.filter(user=self.user).exists())

    def test_missing_percentage_key(self):
        data = {"total_amount": "100.00", "percentages": {"savings": 50, "necessities": 50}}

        response = self.client.post(self.list_url, data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("percentages", response.data)

    def test_negative_total_rejected(self):
        data = {"total_amount": "-10.00", "percentages": PLAN}

        response = self.client.post(self.list_url, data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("total_amount", response.data)

    def test_current_allocation(self):
        response = self.client.get(self.current_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data)

        BudgetAllocationFactory(user=self.user)
        BudgetAllocationFactory(user=self.other_user, amount=Decimal("7.00"))

        response = self.client.get(self.current_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["amount"], "1000.00")

    def test_current_allocation_by_category(self):
        BudgetAllocationFactory(user=self.user, category="holiday", amount=Decimal("300.00"))

        response = self.client.get(self.current_url, {"category": "holiday"})

        self.assertEqual(response.data["amount"], "300.00")

    def test_list_is_scoped_to_owner(self):
        BudgetAllocationFactory(user=self.user)
        BudgetAllocationFactory(user=self.other_user)

        response = self.client.get(self.list_url)

        self.assertEqual(len(response.data), 1)


class DebtGoalProjectAPITests(BaseAPITestCase):

    def test_debt_totals(self):
        DebtFactory(user=self.user, type="given", amount=Decimal("100.00"))
        DebtFactory(user=self.user, type="given", amount=Decimal("25.50"))
        DebtFactory(user=self.user, type="received", amount=Decimal("40.00"))
        DebtFactory(user=self.user, type="given", amount=Decimal("500.00"), status="paid")
        DebtFactory(user=self.other_user, type="received", amount=Decimal("900.00"))

        response = self.client.get(reverse(DEBT_TOTALS))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"total_given": "125.50", "total_received": "40.00"})

    def test_debt_totals_empty(self):
        response = self.client.get(reverse(DEBT_TOTALS))

        self.assertEqual(response.data, {"total_given": "0.00", "total_received": "0.00"})

    def test_negative_debt_rejected(self):
        data = {"type": "given", "amount": "-1.00", "person_name": "Karim", "date": "2024-01-01"}

        response = self.client.post(reverse(DEBT_LIST), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("amount", response.data)

    def test_goal_progress(self):
        goal = GoalFactory(user=self.user, target=Decimal("200.00"), current=Decimal("50.00"))

        response = self.client.get(reverse(GOAL_DETAIL, kwargs={"pk": goal.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["progress_percent"], "25.00")

    def test_create_goal(self):
        data = {"name": "Emergency fund", "type": "savings", "target": "3000.00"}

        response = self.client.post(reverse(GOAL_LIST), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["current"], "0.00")

    def test_project_dates_validated(self):
        data = {"name": "Website", "start_date": "2024-05-01", "end_date": "2024-04-01"}

        response = self.client.post(reverse(PROJECT_LIST), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("end_date", response.data)

    def test_project_status_filter(self):
        ProjectFactory(user=self.user, status="ongoing")
        ProjectFactory(user=self.user, status="completed")

        response = self.client.get(reverse(PROJECT_LIST), {"status": "completed"})

        self.assertEqual([p["status"] for p in response.data], ["completed"])


class UserSettingsAPITests(BaseAPITestCase):

    def test_get_defaults(self):
        response = self.client.get(reverse(USER_SETTINGS))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["currency"], "DZD")
        self.assertEqual(response.data["language"], "en")

    def test_update_language_and_currency(self):
        response = self.client.patch(
            reverse(USER_SETTINGS), {"language": "ar", "currency": "eur"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user_settings = UserSettings.objects.get(user=self.user)
        self.assertEqual(user_settings.language, "ar")
        self.assertEqual(user_settings.currency, "EUR")

    def test_unsupported_language(self):
        response = self.client.patch(reverse(USER_SETTINGS), {"language": "de"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("language", response.data)

    def test_missing_settings_are_recreated(self):
        UserSettings.objects.filter(user=self.user).delete()

        response = self.client.get(reverse(USER_SETTINGS))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(UserSettings.objects.filter(user=self.user).exists())

    def test_put_not_allowed(self):
        response = self.client.put(
            reverse(USER_SETTINGS), {"language": "fr", "currency": "DZD"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)


class HealthCheckAPITests(APITestCase):

    def test_health_ok_without_authentication(self):
        response = self.client.get(reverse("health"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"status": "ok", "database": "ok"})

    @patch("core.views.connection")
    def test_health_reports_database_outage(self, mock_connection):
        mock_connection.cursor.side_effect = OperationalError("connection refused")

        response = self.client.get(reverse("health"))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["database"], "unavailable")
