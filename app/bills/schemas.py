import re
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field, computed_field, field_validator

from app.bills import status as bill_status
from app.schemas import CamelModel


# at most 8 integer digits, the width of the Numeric(10, 2) column
AMOUNT_PATTERN = re.compile(r"^\d{1,8}(\.\d{1,2})?$")

StoredStatus = Literal["paid", "unpaid", "overdue"]


def check_amount(v: str) -> str:
    if not AMOUNT_PATTERN.fullmatch(v):
        raise ValueError("Amount must be a valid number with up to 2 decimal places")
    return v


def check_due_date(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Due date is required")
    try:
        bill_status.parse_due_date(v)
    except ValueError:
        raise ValueError("Due date must be an ISO date (YYYY-MM-DD)") from None
    return v


# =========================
# Create
# =========================
class BillCreate(CamelModel):
    name: str = Field(..., min_length=1)
    amount: str
    due_date: str
    category_id: Optional[int] = None
    category: Optional[str] = None  # legacy label
    company: Optional[str] = None
    notes: Optional[str] = None
    status: StoredStatus = "unpaid"
    recurring: bool = False
    image_url: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        return check_amount(v)

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v):
        return check_due_date(v)


# =========================
# Update
# =========================
class BillUpdate(CamelModel):
    """Partial patch: only the fields that were sent are validated and applied."""

    name: Optional[str] = Field(None, min_length=1)
    amount: Optional[str] = None
    due_date: Optional[str] = None
    category_id: Optional[int] = None
    category: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[StoredStatus] = None
    recurring: Optional[bool] = None
    image_url: Optional[str] = None

    @field_validator("name", "amount", "due_date", "status", "recurring", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        return check_amount(v)

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v):
        return check_due_date(v)


class BillStatusUpdate(CamelModel):
    status: Literal["paid", "unpaid"]


# =========================
# Output
# =========================
class BillOut(CamelModel):
    id: int
    user_id: str
    name: str
    amount: str
    due_date: str
    category_id: Optional[int] = None
    category: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None
    status: str
    recurring: bool = False
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def format_amount(cls, v):
        if isinstance(v, (Decimal, float, int)):
            return f"{Decimal(str(v)):.2f}"
        return v

    @field_validator("recurring", mode="before")
    @classmethod
    def default_recurring(cls, v):
        return bool(v)

    @computed_field(alias="displayStatus")
    @property
    def display_status(self) -> str:
        return bill_status.display_status(self.status, self.due_date)


class BillStats(CamelModel):
    total_bills: int
    due_this_week: int
    overdue: int
    total_amount: str
    unpaid_amount: str
    upcoming_bills: List[BillOut]


class UploadResponse(CamelModel):
    message: str
    image_url: str
    bill: BillOut
