"""
Shared fixtures.

Test strategy:
1. Unit tests for the pure engine (splits, balances, settlement plans)
2. Store and route tests against mongomock (no real MongoDB)
"""
from datetime import datetime, timedelta
from decimal import Decimal

import mongomock
import pytest
from flask_jwt_extended import create_access_token

from fintrack import create_app
from fintrack.config import Config
from fintrack.extensions import get_db
from fintrack.shared_expenses.models import Participant, SharedExpense
from fintrack.utils.enums import SplitType


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    MONGO_URI = "mongodb://localhost:27017/fintrack_test"
    EXPENSE_GROUPS = (("family", "Family"), ("trip", "Goa Trip"))
    LOG_LEVEL = "WARNING"


@pytest.fixture
def app():
    client = mongomock.MongoClient(TestingConfig.MONGO_URI)
    app = create_app(TestingConfig, mongo_client=client)
    yield app
    client.drop_database(get_db().name)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _headers(user_id="alice"):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def make_expense():
    """Build an in-memory SharedExpense from ``(user_id, amount, has_paid)`` tuples."""
    counter = {"n": 0}

    def _make(paid_by, shares, group_id="family", split_type=SplitType.CUSTOM):
        counter["n"] += 1
        participants = [
            Participant(
                user_id=user_id,
                user_name=user_id.title(),
                amount_owed=Decimal(str(amount)),
                has_paid=has_paid,
            )
            for user_id, amount, has_paid in shares
        ]
        return SharedExpense(
            group_id=group_id,
            group_name=group_id.title(),
            created_by=paid_by,
            paid_by=paid_by,
            paid_by_name=paid_by.title(),
            total_amount=sum((p.amount_owed for p in participants), Decimal("0")),
            split_type=split_type,
            participants=participants,
            date=datetime(2024, 1, 1) + timedelta(days=counter["n"]),
        )
    return _make
