# crud.py
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import Category, Expense, User
from errors import CategoryInUse, Conflict, NotFound, ValidationError
from logging_config import get_logger
from schemas import ExpenseCreate, SignupRequest
from security import hash_password, verify_password

logger = get_logger(__name__)

DEFAULT_CATEGORIES = ["Bills", "Food", "Transportation", "Entertainment", "Shopping"]


# --------- Users ----------
def _user_with_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, data: SignupRequest) -> User:
    """Create the user and its default categories in one transaction."""
    if _user_with_email(db, data.email):
        raise Conflict("User with this email already exists")

    user = User(name=data.name, email=data.email, password=hash_password(data.password))
    db.add(user)
    try:
        db.flush()
        for name in DEFAULT_CATEGORIES:
            db.add(Category(name=name, user_id=user.id))
        db.commit()
    except IntegrityError:
        db.rollback()
        # a concurrent signup won the unique email
        if _user_with_email(db, data.email):
            raise Conflict("User with this email already exists")
        raise
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("User signed up", extra={"user_id": user.id})
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = _user_with_email(db, email)
    if user is None or not verify_password(user.password, password):
        return None
    return user


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


# --------- Categories ----------
def list_categories(db: Session, user_id: str) -> List[Category]:
    return db.query(Category).filter(Category.user_id == user_id).order_by(Category.name).all()


def _category_named(db: Session, user_id: str, name: str) -> Optional[Category]:
    return db.query(Category).filter(Category.user_id == user_id, Category.name == name).first()


def create_category(db: Session, user_id: str, name: str) -> Category:
    if _category_named(db, user_id, name):
        raise Conflict("A category with this name already exists")

    category = Category(name=name, user_id=user_id)
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("A category with this name already exists")
    db.refresh(category)
    logger.info("Category created", extra={"user_id": user_id, "category_id": category.id})
    return category


def get_category(db: Session, user_id: str, category_id: str) -> Category:
    category = (
        db.query(Category)
        .filter(Category.id == category_id, Category.user_id == user_id)
        .first()
    )
    if category is None:
        raise NotFound("Category not found")
    return category


def delete_category(db: Session, user_id: str, category_id: str) -> None:
    """Refuse to delete a category that any expense still references."""
    category = get_category(db, user_id, category_id)

    in_use = db.query(Expense).filter(Expense.category_id == category.id).count()
    if in_use > 0:
        logger.info(
            "Refused to delete category in use",
            extra={"category_id": category.id, "count": in_use},
        )
        raise CategoryInUse(in_use)

    db.delete(category)
    db.commit()
    logger.info("Category deleted", extra={"user_id": user_id, "category_id": category_id})


# --------- Expenses ----------
def create_expense(db: Session, user_id: str, data: ExpenseCreate) -> Expense:
    category = (
        db.query(Category)
        .filter(Category.id == data.category_id, Category.user_id == user_id)
        .first()
    )
    if category is None:
        raise ValidationError("Invalid category")

    expense = Expense(
        amount=data.amount,
        description=data.description,
        date=data.date,
        category_id=category.id,
        user_id=user_id,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("Expense created", extra={"user_id": user_id, "expense_id": expense.id})
    return expense


def get_expense(db: Session, user_id: str, expense_id: str) -> Expense:
    expense = (
        db.query(Expense).filter(Expense.id == expense_id, Expense.user_id == user_id).first()
    )
    if expense is None:
        raise NotFound("Expense not found")
    return expense


def delete_expense(db: Session, user_id: str, expense_id: str) -> None:
    expense = get_expense(db, user_id, expense_id)
    db.delete(expense)
    db.commit()
    logger.info("Expense deleted", extra={"user_id": user_id, "expense_id": expense_id})
