# dashboard_api/models.py
from sqlalchemy import Column, Float, Integer, String

from .database import Base

TRANSACTION_FIELDS = ("id", "user", "amount", "category", "status", "date")


class Transaction(Base):
    """
    One financial transaction record.

    ``id`` is the public identifier used by the API. It is indexed but not
    unique: uniqueness is a convention of whoever loads the data, so the
    table carries its own surrogate key.
    """
    __tablename__ = "transactions"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Integer, index=True)
    user = Column(String)
    amount = Column(Float)
    category = Column(String, index=True)
    status = Column(String)
    date = Column(String(10))  # YYYY-MM-DD

    def to_dict(self):
        return {field: getattr(self, field) for field in TRANSACTION_FIELDS}
