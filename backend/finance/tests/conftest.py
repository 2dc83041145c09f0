# finance/tests/conftest.py
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from finance.models import Transaction

from .factories import ledger_entry

User = get_user_model()

# =============================================================================
# USER FIXTURES
# =============================================================================


@pytest.fixture
def test_user(db):
    """Basic test user"""
    return User.objects.create_user(
        username="testuser", email="test@example.com", password="testpass123"
    )


@pytest.fixture
def test_user2(db):
    """Second user, used to check ownership scoping"""
    return User.objects.create_user(
        username="testuser2", email="test2@example.com", password="testpass123"
    )


# =============================================================================
# LEDGER FIXTURES
# =============================================================================


@pytest.fixture
def sample_ledger():
    """Income 100.00 and expense 30.00 in January, income 50.00 in February"""
    return [
        ledger_entry("income", "100.00", date(2024, 1, 1), "salary", 1),
        ledger_entry("expense", "30.00", date(2024, 1, 2), "food", 2),
        ledger_entry("income", "50.00", date(2024, 2, 1), "freelance", 3),
    ]


@pytest.fixture
def stored_ledger(test_user):
    """The sample ledger persisted for test_user"""
    return [
        Transaction.objects.create(
            user=test_user, type="income", amount=Decimal("100.00"),
            category="salary", date=date(2024, 1, 1),
        ),
        Transaction.objects.create(
            user=test_user, type="expense", amount=Decimal("30.00"),
            category="food", date=date(2024, 1, 2),
        ),
        Transaction.objects.create(
            user=test_user, type="income", amount=Decimal("50.00"),
            category="freelance", date=date(2024, 2, 1),
        ),
    ]
