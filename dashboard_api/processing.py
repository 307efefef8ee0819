# dashboard_api/processing.py
import math
from typing import Iterable, List, Sequence

import pandas as pd

from .models import TRANSACTION_FIELDS

REVENUE_CATEGORY = "Revenue"
# Breakdown key used for records whose category or status is missing
MISSING_KEY = "null"


def _empty_analytics() -> dict:
    return {
        "summary": {
            "totalRevenue": 0.0,
            "totalExpenses": 0.0,
            "netProfit": 0.0,
            "totalTransactions": 0,
        },
        "categoryBreakdown": {},
        "statusBreakdown": {},
        "monthlyTrends": {},
    }


def to_frame(records: Sequence[dict]) -> pd.DataFrame:
    """
    Loads transaction records into a DataFrame with one column per field.

    Amounts are coerced to numbers (missing or malformed amounts become NaN
    and are skipped by the sums), grouping keys get MISSING_KEY for nulls.
    """
    df = pd.DataFrame.from_records(list(records), columns=list(TRANSACTION_FIELDS))
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
    df["category"] = df["category"].fillna(MISSING_KEY).astype(str)
    df["status"] = df["status"].fillna(MISSING_KEY).astype(str)
    df["month"] = df["date"].astype("string").str.slice(0, 7)
    df["is_revenue"] = df["category"] == REVENUE_CATEGORY
    df["revenue"] = df["amount"].where(df["is_revenue"], 0.0)
    df["expenses"] = df["amount"].where(~df["is_revenue"], 0.0)
    return df


def summarize(df: pd.DataFrame) -> dict:
    total_revenue = float(df["revenue"].sum())
    total_expenses = float(df["expenses"].sum())
    return {
        "totalRevenue": total_revenue,
        "totalExpenses": total_expenses,
        "netProfit": total_revenue - total_expenses,
        "totalTransactions": int(len(df)),
    }


def category_breakdown(df: pd.DataFrame) -> dict:
    totals = df.groupby("category", sort=False)["amount"].sum()
    return {str(category): float(total) for category, total in totals.items()}


def status_breakdown(df: pd.DataFrame) -> dict:
    counts = df.groupby("status", sort=False).size()
    return {str(status): int(count) for status, count in counts.items()}


def monthly_trends(df: pd.DataFrame) -> dict:
    dated = df.dropna(subset=["month"])
    totals = dated.groupby("month", sort=False)[["revenue", "expenses"]].sum()
    return {
        str(month): {"revenue": float(row["revenue"]), "expenses": float(row["expenses"])}
        for month, row in totals.iterrows()
    }


def build_analytics(records: Sequence[dict]) -> dict:
    """
    Computes the dashboard figures over the full set of transactions.

    Anything in the "Revenue" category counts as revenue, every other
    category as expense. Each figure is a separate reduction over the same
    frame, so any of them can later be pushed down to the store without
    changing the response shape.

    Args:
        records: Transaction dicts as returned by the repository

    Returns:
        dict: summary, categoryBreakdown, statusBreakdown and monthlyTrends
    """
    if not records:
        return _empty_analytics()

    df = to_frame(records)
    return {
        "summary": summarize(df),
        "categoryBreakdown": category_breakdown(df),
        "statusBreakdown": status_breakdown(df),
        "monthlyTrends": monthly_trends(df),
    }


def format_csv_value(value) -> str:
    # Strings with a comma are quoted; embedded quotes are NOT escaped
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str) and "," in value:
        return f'"{value}"'
    return str(value)


def serialize_csv(records: Iterable[dict], columns: List[str]) -> str:
    """
    Renders records as comma-separated text: a header row with the column
    names, then one row per record. Rows are joined by a bare newline with
    no trailing newline.
    """
    lines = [",".join(columns)]
    for record in records:
        lines.append(",".join(format_csv_value(record.get(column)) for column in columns))
    return "\n".join(lines)
