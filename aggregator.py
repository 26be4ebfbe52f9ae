# aggregator.py
"""Read-only expense queries: filtered listings and period statistics."""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from database import Category, Expense
from periods import DateRange


def _filtered(query, user_id: str, date_range: Optional[DateRange], search: Optional[str]):
    query = query.filter(Expense.user_id == user_id)
    if date_range is not None:
        query = query.filter(Expense.date >= date_range.start, Expense.date <= date_range.end)
    if search:
        query = query.filter(
            func.lower(Expense.description).contains(search.lower(), autoescape=True)
        )
    return query


def list_expenses(
    db: Session,
    user_id: str,
    date_range: Optional[DateRange] = None,
    search: Optional[str] = None,
) -> List[Expense]:
    """Newest first; equal dates are ordered by id descending."""
    query = _filtered(db.query(Expense), user_id, date_range, search)
    return query.order_by(Expense.date.desc(), Expense.id.desc()).all()


def expense_stats(
    db: Session,
    user_id: str,
    date_range: Optional[DateRange] = None,
    search: Optional[str] = None,
) -> dict:
    total = _filtered(
        db.query(func.coalesce(func.sum(Expense.amount), 0.0)).select_from(Expense),
        user_id,
        date_range,
        search,
    ).scalar()

    rows = (
        _filtered(
            db.query(Category.name, func.sum(Expense.amount).label("amount"))
            .select_from(Expense)
            .join(Category, Category.id == Expense.category_id),
            user_id,
            date_range,
            search,
        )
        .group_by(Category.id, Category.name)
        .order_by(Category.name)
        .all()
    )

    return {
        "total": float(total or 0.0),
        "by_category": [{"category": name, "amount": float(amount)} for name, amount in rows],
    }
