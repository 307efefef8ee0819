# dashboard_api/seed.py
import argparse
import random
from typing import List, Optional

from faker import Faker

from .database import SessionLocal, init_db
from .logger import logger
from .processing import REVENUE_CATEGORY
from .repository import TransactionRepository

EXPENSE_CATEGORIES = ["Marketing", "Payroll", "Software", "Travel", "Utilities"]
STATUSES = ["pending", "completed", "failed"]


def generate_transactions(rows: int, start_id: int = 1, fake: Optional[Faker] = None) -> List[dict]:
    """
    Builds dummy transaction records with consecutive ids starting at ``start_id``.
    Roughly a third of them fall in the Revenue category.
    """
    fake = fake or Faker()
    categories = [REVENUE_CATEGORY] * 2 + EXPENSE_CATEGORIES
    records = []
    for offset in range(rows):
        records.append({
            "id": start_id + offset,
            "user": fake.name(),
            "amount": round(random.uniform(5.0, 5000.0), 2),  # nosec B311
            "category": random.choice(categories),  # nosec B311
            "status": random.choice(STATUSES),  # nosec B311
            "date": fake.date_between(start_date="-1y", end_date="today").isoformat(),
        })
    return records


def seed_transactions(rows: int, session_factory=SessionLocal) -> int:
    """Appends ``rows`` dummy transactions after the highest existing id."""
    db = session_factory()
    try:
        repo = TransactionRepository(db)
        records = generate_transactions(rows, start_id=repo.max_id() + 1)
        return repo.add_many(records)
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Load dummy transactions into the store.")
    parser.add_argument("--rows", type=int, default=100, help="Number of rows to generate")
    args = parser.parse_args(argv)

    init_db()
    inserted = seed_transactions(args.rows)
    logger.info(f"Inserted {inserted} dummy transactions")
    return inserted


if __name__ == "__main__":
    main()
