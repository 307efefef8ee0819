# dashboard_api/main.py
import time
from contextlib import asynccontextmanager
from typing import List

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import (
    AuthenticationError,
    CredentialProvider,
    authenticate,
    create_access_token,
    get_credential_provider,
)
from .config import settings
from .database import SessionLocal, init_db
from .logger import logger
from .processing import build_analytics, serialize_csv
from .repository import TransactionRepository
from .schemas import (
    AnalyticsResponse,
    ExportRequest,
    FilterOptions,
    LoginRequest,
    MessageResponse,
    TokenResponse,
    TransactionOut,
    TransactionUpdate,
)

NOT_FOUND = "Transaction not found"

@asynccontextmanager
async def lifespan(app: FastAPI):
    # A store that is down at startup is logged, not fatal; requests will
    # then fail with 500 until it comes back.
    try:
        init_db()
        logger.info("Connected to the transaction store")
    except SQLAlchemyError as e:
        logger.error(f"Transaction store connection failed: {e}")
    yield

app = FastAPI(
    title="Transaction Dashboard API",
    description="API for browsing, editing, exporting and summarising transaction records.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return Response(status_code=exc.status_code)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=422, content={"message": f"Invalid request: {problems}"})

# Dependency function for database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_repository(db: Session = Depends(get_db)) -> TransactionRepository:
    return TransactionRepository(db)

public_router = APIRouter(prefix="/api")
router = APIRouter(prefix="/api", dependencies=[Depends(authenticate)])

@public_router.post("/login", response_model=TokenResponse)
def login(
    credentials: LoginRequest,
    provider: CredentialProvider = Depends(get_credential_provider),
):
    logger.info(f"Login attempt with email: {credentials.email}")
    if not provider.verify(credentials.email, credentials.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"token": create_access_token(credentials.email)}

@public_router.post("/logout", response_model=MessageResponse)
def logout():
    # Stateless: the token is not revoked and stays valid until it expires
    return {"message": "Logout successful"}

@router.get("/transactions", response_model=List[TransactionOut])
def list_transactions(repo: TransactionRepository = Depends(get_repository)):
    try:
        transactions = repo.list_all()
    except SQLAlchemyError:
        logger.exception("Error fetching transactions")
        raise HTTPException(status_code=500, detail="Failed to fetch transactions from DB")
    logger.info(f"Fetched {len(transactions)} transactions")
    return transactions

@router.get("/filters", response_model=FilterOptions)
def get_filter_options(repo: TransactionRepository = Depends(get_repository)):
    """
    Returns the distinct categories, statuses and users, each sorted,
    for populating filter dropdowns.
    """
    try:
        return {
            "categories": repo.distinct_values("category"),
            "statuses": repo.distinct_values("status"),
            "users": repo.distinct_values("user"),
        }
    except SQLAlchemyError:
        logger.exception("Error fetching filter options")
        raise HTTPException(status_code=500, detail="Failed to fetch filter options")

@router.post("/export/csv")
def export_csv(
    export: ExportRequest,
    repo: TransactionRepository = Depends(get_repository),
):
    """
    Exports the transactions matching the filters as a CSV download.
    - **columns**: Fields to include, in order
    - **filters**: search, category, status, user, dateFrom/dateTo, amountFrom/amountTo
    """
    try:
        transactions = repo.find(export.filters)
    except ValueError as e:
        # Non-numeric amount bounds
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error generating CSV")
        raise HTTPException(status_code=500, detail="Failed to generate CSV export")

    content = serialize_csv(transactions, export.columns)
    filename = f"transactions_{int(time.time() * 1000)}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

@router.get("/dashboard/analytics", response_model=AnalyticsResponse)
def get_analytics(repo: TransactionRepository = Depends(get_repository)):
    """
    Returns revenue/expense totals, category and status breakdowns and
    monthly trends computed over every transaction.
    """
    try:
        transactions = repo.list_all()
    except SQLAlchemyError:
        logger.exception("Error fetching analytics")
        raise HTTPException(status_code=500, detail="Failed to fetch analytics data")
    return build_analytics(transactions)

@router.get("/transactions/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: int, repo: TransactionRepository = Depends(get_repository)):
    try:
        transaction = repo.get_by_id(transaction_id)
    except SQLAlchemyError:
        logger.exception("Error fetching transaction")
        raise HTTPException(status_code=500, detail="Failed to fetch transaction")
    if transaction is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return transaction

@router.put("/transactions/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: int,
    update: TransactionUpdate,
    repo: TransactionRepository = Depends(get_repository),
):
    """
    Updates only the fields present in the body. An ``id`` in the body is ignored.
    """
    try:
        transaction = repo.update_by_id(transaction_id, update.changes())
    except SQLAlchemyError:
        logger.exception("Error updating transaction")
        raise HTTPException(status_code=500, detail="Failed to update transaction")
    if transaction is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return transaction

@router.delete("/transactions/{transaction_id}", response_model=MessageResponse)
def delete_transaction(transaction_id: int, repo: TransactionRepository = Depends(get_repository)):
    try:
        deleted = repo.delete_by_id(transaction_id)
    except SQLAlchemyError:
        logger.exception("Error deleting transaction")
        raise HTTPException(status_code=500, detail="Failed to delete transaction")
    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"message": "Transaction deleted successfully"}

app.include_router(public_router)
app.include_router(router)

def run():
    import uvicorn

    logger.info(f"Server starting on port {settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)  # nosec B104

if __name__ == "__main__":
    run()
