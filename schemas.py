# schemas.py
import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

import errors
from periods import isoformat_z, parse_instant, to_naive_utc


def _required_text(value: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{field} must not be blank")
    return value


class SignupRequest(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name", "email")
    @classmethod
    def not_blank(cls, value, info):
        return _required_text(value, info.field_name)

    @field_validator("password")
    @classmethod
    def password_present(cls, value):
        if not value:
            raise ValueError("password must not be blank")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    created_at: datetime = Field(serialization_alias="createdAt")

    class Config:
        from_attributes = True

    @field_serializer("created_at")
    def render_created_at(self, value: datetime) -> str:
        return isoformat_z(value)


class CategoryCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def not_blank(cls, value):
        return _required_text(value, "name")


class CategoryOut(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class ExpenseCreate(BaseModel):
    amount: float
    date: datetime
    category_id: str = Field(alias="categoryId")
    description: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value):
        if isinstance(value, bool) or value is None:
            raise ValueError("amount must be a number")
        try:
            amount = float(value)
        except (TypeError, ValueError):
            raise ValueError("amount must be a number")
        if not math.isfinite(amount):
            raise ValueError("amount must be finite")
        if amount <= 0:
            raise ValueError("amount must be greater than zero")
        return amount

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        if isinstance(value, datetime):
            return to_naive_utc(value)
        if not isinstance(value, str):
            raise ValueError("date must be an ISO-8601 string")
        try:
            return parse_instant(value)
        except errors.ValidationError as exc:
            raise ValueError(exc.message)

    @field_validator("category_id")
    @classmethod
    def category_present(cls, value):
        return _required_text(value, "categoryId")

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value):
        if value is None:
            return None
        return value.strip() or None


class ExpenseOut(BaseModel):
    id: str
    amount: float
    description: Optional[str] = None
    date: datetime
    category_id: str = Field(serialization_alias="categoryId")
    user_id: str = Field(serialization_alias="userId")
    created_at: datetime = Field(serialization_alias="createdAt")
    category: CategoryOut

    class Config:
        from_attributes = True

    @field_serializer("date", "created_at")
    def render_instant(self, value: datetime) -> str:
        return isoformat_z(value)


class CategoryTotal(BaseModel):
    category: str
    amount: float


class StatsOut(BaseModel):
    total: float
    by_category: List[CategoryTotal] = Field(serialization_alias="byCategory")
    period: str
    start_date: str = Field(serialization_alias="startDate")
    end_date: str = Field(serialization_alias="endDate")
