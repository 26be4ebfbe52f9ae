from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import text
from sqlalchemy.orm import Session

import crud
from aggregator import expense_stats, list_expenses
from auth import get_current_user
from config import get_settings
from database import get_db, User
from logging_config import get_logger
from periods import isoformat_z, resolve_period, utcnow
from schemas import CategoryCreate, CategoryOut, ExpenseCreate, ExpenseOut, StatsOut

router = APIRouter()
logger = get_logger(__name__)


def get_now() -> datetime:
    return utcnow()


# ---------------- Categories ----------------
@router.get("/categories", response_model=List[CategoryOut])
def get_categories(
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return crud.list_categories(db, current_user.id)


@router.post("/categories", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.create_category(db, current_user.id, category.name)


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    crud.delete_category(db, current_user.id, category_id)
    return {"message": "Category deleted successfully"}


# ---------------- Expenses ----------------
@router.get("/expenses", response_model=List[ExpenseOut])
def get_expenses(
    period: Optional[str] = None,
    from_date: Optional[str] = Query(default=None, alias="from"),
    to_date: Optional[str] = Query(default=None, alias="to"),
    search: Optional[str] = None,
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    date_range = resolve_period(period, from_date, to_date, now=now)
    return list_expenses(db, current_user.id, date_range, search)


@router.post("/expenses", response_model=ExpenseOut)
def create_expense(
    expense: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.create_expense(db, current_user.id, expense)


@router.get("/expenses/{expense_id}", response_model=ExpenseOut)
def get_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.get_expense(db, current_user.id, expense_id)


@router.delete("/expenses/{expense_id}")
def delete_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    crud.delete_expense(db, current_user.id, expense_id)
    return {"message": "Expense deleted successfully"}


# ---------------- Stats ----------------
@router.get("/stats", response_model=StatsOut)
def get_stats(
    period: Optional[str] = None,
    from_date: Optional[str] = Query(default=None, alias="from"),
    to_date: Optional[str] = Query(default=None, alias="to"),
    search: Optional[str] = None,
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Totals over the resolved range; unknown periods fall back to the month."""
    period = period or "month"
    date_range = resolve_period(period, from_date, to_date, now=now)
    if date_range is None:
        date_range = resolve_period("month", now=now)

    stats = expense_stats(db, current_user.id, date_range, search)
    return StatsOut(
        total=stats["total"],
        by_category=stats["by_category"],
        period=period,
        start_date=isoformat_z(date_range.start),
        end_date=isoformat_z(date_range.end),
    )


# ---------------- Health ----------------
@router.get("/health-check")
def health_check(db: Session = Depends(get_db)):
    db_status, db_error = "connected", None
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        logger.exception("Database connection error")
        db_status, db_error = "error", str(exc)

    return {
        "status": "ok",
        "timestamp": isoformat_z(utcnow()),
        "environment": get_settings().environment,
        "database": {"status": db_status, "error": db_error},
    }
