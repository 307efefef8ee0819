# dashboard_api/repository.py
import math
from typing import Iterable, List, Optional

from sqlalchemy import String, and_, cast, distinct, func, or_, select, true
from sqlalchemy.orm import Session

from .models import Transaction
from .schemas import ExportFilters

DISTINCT_FIELDS = ("category", "status", "user")


def _parse_amount(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid amount filter: {value!r}")
    if math.isnan(amount):
        raise ValueError(f"Invalid amount filter: {value!r}")
    return amount


def build_filter_clause(filters: ExportFilters):
    """
    Translates export filters into a single SQL predicate.

    Distinct keys are AND-ed together; ``search`` is OR-ed across
    user, category, status and id. Text matching is a literal,
    case-insensitive substring match.

    Raises:
        ValueError: If an amount bound is not a number
    """
    conditions = []

    if filters.search:
        conditions.append(or_(
            Transaction.user.icontains(filters.search, autoescape=True),
            Transaction.category.icontains(filters.search, autoescape=True),
            Transaction.status.icontains(filters.search, autoescape=True),
            cast(Transaction.id, String).icontains(filters.search, autoescape=True),
        ))

    if filters.category:
        conditions.append(Transaction.category.icontains(filters.category, autoescape=True))
    if filters.status:
        conditions.append(Transaction.status.icontains(filters.status, autoescape=True))
    if filters.user:
        conditions.append(Transaction.user.icontains(filters.user, autoescape=True))

    # Dates are YYYY-MM-DD strings, so string order is date order
    if filters.date_from:
        conditions.append(Transaction.date >= filters.date_from)
    if filters.date_to:
        conditions.append(Transaction.date <= filters.date_to)

    amount_from = _parse_amount(filters.amount_from)
    amount_to = _parse_amount(filters.amount_to)
    if amount_from is not None:
        conditions.append(Transaction.amount >= amount_from)
    if amount_to is not None:
        conditions.append(Transaction.amount <= amount_to)

    return and_(true(), *conditions)


class TransactionRepository:
    """Reads and writes transaction records; every record leaves as a plain dict."""

    def __init__(self, db: Session):
        self.db = db

    def _first(self, transaction_id: int) -> Optional[Transaction]:
        # ids are not unique in the table; operate on the first match
        query = (
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .order_by(Transaction.pk)
            .limit(1)
        )
        return self.db.scalars(query).first()

    def list_all(self) -> List[dict]:
        query = select(Transaction).order_by(Transaction.pk)
        return [txn.to_dict() for txn in self.db.scalars(query)]

    def find(self, filters: ExportFilters) -> List[dict]:
        query = select(Transaction).where(build_filter_clause(filters)).order_by(Transaction.pk)
        return [txn.to_dict() for txn in self.db.scalars(query)]

    def get_by_id(self, transaction_id: int) -> Optional[dict]:
        txn = self._first(transaction_id)
        return txn.to_dict() if txn else None

    def update_by_id(self, transaction_id: int, fields: dict) -> Optional[dict]:
        """
        Applies a merge-patch: only the given fields change. A supplied
        ``id`` is dropped so records can never be re-keyed.
        """
        txn = self._first(transaction_id)
        if txn is None:
            return None
        changes = {key: value for key, value in fields.items() if key != "id"}
        for key, value in changes.items():
            setattr(txn, key, value)
        self.db.commit()
        self.db.refresh(txn)
        return txn.to_dict()

    def delete_by_id(self, transaction_id: int) -> bool:
        txn = self._first(transaction_id)
        if txn is None:
            return False
        self.db.delete(txn)
        self.db.commit()
        return True

    def distinct_values(self, field: str) -> List[str]:
        if field not in DISTINCT_FIELDS:
            raise ValueError(f"Unsupported distinct field: {field}")
        column = getattr(Transaction, field)
        values = self.db.scalars(select(distinct(column))).all()
        return sorted(value for value in values if value is not None)

    def max_id(self) -> int:
        return self.db.scalar(select(func.max(Transaction.id))) or 0

    def add_many(self, records: Iterable[dict]) -> int:
        rows = [Transaction(**record) for record in records]
        self.db.add_all(rows)
        self.db.commit()
        return len(rows)
