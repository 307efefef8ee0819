# dashboard_api/schemas.py
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EXPORT_COLUMNS = ["id", "user", "amount", "category", "status", "date"]


class LoginRequest(BaseModel):
    # Missing or non-string values are kept and fail verification with a 401
    email: Any = None
    password: Any = None

class TokenResponse(BaseModel):
    token: str

class MessageResponse(BaseModel):
    message: str

class TransactionOut(BaseModel):
    id: Optional[int] = None
    user: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    status: Optional[str] = None
    date: Optional[str] = None

class TransactionUpdate(BaseModel):
    """Partial update body: only the fields sent are applied."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None  # accepted but never applied
    user: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    status: Optional[str] = None
    date: Optional[str] = None

    def changes(self) -> dict:
        fields = self.model_dump(exclude_unset=True)
        fields.pop("id", None)
        return fields

class FilterOptions(BaseModel):
    categories: List[str]
    statuses: List[str]
    users: List[str]

class ExportFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    user: Optional[str] = None
    date_from: Optional[str] = Field(None, alias="dateFrom")
    date_to: Optional[str] = Field(None, alias="dateTo")
    # Amount bounds arrive as form strings; numbers are accepted as well
    amount_from: Optional[Union[str, float]] = Field(None, alias="amountFrom")
    amount_to: Optional[Union[str, float]] = Field(None, alias="amountTo")

class ExportRequest(BaseModel):
    columns: List[str] = Field(default_factory=lambda: list(DEFAULT_EXPORT_COLUMNS))
    filters: ExportFilters = Field(default_factory=ExportFilters)

class AnalyticsSummary(BaseModel):
    totalRevenue: float
    totalExpenses: float
    netProfit: float
    totalTransactions: int

class MonthlyTrend(BaseModel):
    revenue: float
    expenses: float

class AnalyticsResponse(BaseModel):
    summary: AnalyticsSummary
    categoryBreakdown: Dict[str, float]
    statusBreakdown: Dict[str, int]
    monthlyTrends: Dict[str, MonthlyTrend]
