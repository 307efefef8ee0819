# tests/test_seed.py
import re

from faker import Faker

from dashboard_api.processing import REVENUE_CATEGORY
from dashboard_api.repository import TransactionRepository
from dashboard_api.seed import EXPENSE_CATEGORIES, STATUSES, generate_transactions, seed_transactions


def test_generate_transactions_shape():
    records = generate_transactions(20, start_id=5, fake=Faker())

    assert [record["id"] for record in records] == list(range(5, 25))
    for record in records:
        assert record["category"] in [REVENUE_CATEGORY] + EXPENSE_CATEGORIES
        assert record["status"] in STATUSES
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", record["date"])
        assert 5.0 <= record["amount"] <= 5000.0
        assert record["user"]

def test_seed_transactions_continues_after_max_id(db_session, session_factory):
    assert seed_transactions(3, session_factory=session_factory) == 3
    assert seed_transactions(2, session_factory=session_factory) == 2

    repo = TransactionRepository(db_session)
    assert sorted(txn["id"] for txn in repo.list_all()) == [1, 2, 3, 4, 5]
