import os
import random
import re
import time
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.bills import status as bill_status
from app.categories import service as category_service
from app.config import settings
from . import models, schemas


ALLOWED_UPLOAD_TYPES = re.compile(r"jpeg|jpg|png|gif|pdf")

UPLOAD_SUBDIR = "bills"


# =========================
# Helper: category reference
# =========================
def resolve_category(db: Session, data: dict, user_id: str) -> dict:
    """
    ``category_id`` is authoritative. When it is set it must point at one of
    the caller's categories and the legacy label is overwritten with its name.
    """
    category_id = data.get("category_id")
    if category_id is None:
        return data

    category = category_service.get_category(db, category_id, user_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category not found",
        )

    data["category"] = category.name
    return data


def check_supplied_status(supplied: str, due_date: str, today: date) -> None:
    """A caller may only send ``overdue`` for a bill that is already past due."""
    if supplied != bill_status.OVERDUE:
        return
    if bill_status.display_status(supplied, due_date, today) != bill_status.OVERDUE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only past-due bills can be marked overdue",
        )


# =========================
# Read
# =========================
def get_bill(db: Session, bill_id: int, user_id: str) -> Optional[models.Bill]:
    return (
        db.query(models.Bill)
        .filter(
            models.Bill.id == bill_id,
            models.Bill.user_id == user_id,
        )
        .first()
    )


def get_all_bills(db: Session, user_id: str) -> List[models.Bill]:
    return (
        db.query(models.Bill)
        .filter(models.Bill.user_id == user_id)
        .order_by(models.Bill.due_date, models.Bill.id)
        .all()
    )


def list_bills(
    db: Session,
    user_id: str,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    status_filter: Optional[str] = None,
) -> List[models.Bill]:
    query = db.query(models.Bill).filter(models.Bill.user_id == user_id)

    if search:
        # literal substring match; % and _ are not wildcards
        term = search.strip().lower()
        query = query.filter(
            or_(
                func.lower(models.Bill.name).contains(term, autoescape=True),
                func.lower(models.Bill.company).contains(term, autoescape=True),
            )
        )

    if category_id is not None:
        query = query.filter(models.Bill.category_id == category_id)

    if status_filter in (bill_status.PAID, bill_status.UNPAID):
        query = query.filter(models.Bill.status == status_filter)

    bills = query.order_by(models.Bill.due_date, models.Bill.id).all()

    if status_filter == bill_status.OVERDUE:
        today = bill_status.local_today()
        bills = [
            b for b in bills
            if bill_status.display_status(b.status, b.due_date, today) == bill_status.OVERDUE
        ]

    return bills


# =========================
# Create
# =========================
def create_bill(db: Session, bill: schemas.BillCreate, user_id: str) -> models.Bill:
    data = resolve_category(db, bill.model_dump(), user_id)
    data["amount"] = Decimal(data["amount"])

    today = bill_status.local_today()
    check_supplied_status(data["status"], data["due_date"], today)
    data["status"] = bill_status.persisted_status(data["status"], data["due_date"], today)

    new_bill = models.Bill(**data, user_id=user_id)

    db.add(new_bill)
    db.commit()
    db.refresh(new_bill)
    return new_bill


# =========================
# Update
# =========================
def update_bill(
    db: Session,
    bill_id: int,
    bill_data: schemas.BillUpdate,
    user_id: str,
) -> Optional[models.Bill]:
    # the owner is part of the row match; a stranger's id matches nothing
    bill = get_bill(db, bill_id, user_id)
    if not bill:
        return None

    data = resolve_category(db, bill_data.model_dump(exclude_unset=True), user_id)

    if "amount" in data:
        data["amount"] = Decimal(data["amount"])

    if "due_date" in data or "status" in data:
        today = bill_status.local_today()
        due_date = data.get("due_date", bill.due_date)
        if "status" in data:
            check_supplied_status(data["status"], due_date, today)
        data["status"] = bill_status.persisted_status(
            data.get("status", bill.status), due_date, today
        )

    for field, value in data.items():
        setattr(bill, field, value)
    bill.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(bill)
    return bill


# =========================
# Delete
# =========================
def delete_bill(db: Session, bill_id: int, user_id: str) -> bool:
    deleted = (
        db.query(models.Bill)
        .filter(
            models.Bill.id == bill_id,
            models.Bill.user_id == user_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


# =========================
# Dashboard
# =========================
def get_bill_stats(db: Session, user_id: str) -> dict:
    bills = get_all_bills(db, user_id)
    today = bill_status.local_today()

    due_this_week = 0
    overdue = 0
    total_amount = Decimal("0")
    unpaid_amount = Decimal("0")
    upcoming_bills = []

    for bill in bills:
        amount = Decimal(bill.amount)
        total_amount += amount

        shown = bill_status.display_status(bill.status, bill.due_date, today)
        if shown == bill_status.PAID:
            continue

        unpaid_amount += amount
        if shown == bill_status.OVERDUE:
            overdue += 1
        elif shown == bill_status.DUE_SOON:
            due_this_week += 1

        if shown in (bill_status.OVERDUE, bill_status.DUE_SOON):
            upcoming_bills.append(bill)

    return {
        "total_bills": len(bills),
        "due_this_week": due_this_week,
        "overdue": overdue,
        "total_amount": f"{total_amount:.2f}",
        "unpaid_amount": f"{unpaid_amount:.2f}",
        "upcoming_bills": upcoming_bills[:3],
    }


# =========================
# Attachments
# =========================
def save_bill_attachment(file: UploadFile) -> str:
    """Write an uploaded bill image/PDF to disk and return its public URL."""
    filename = file.filename or ""
    ext = os.path.splitext(filename)[1].lower()

    if not (ALLOWED_UPLOAD_TYPES.search(ext) and ALLOWED_UPLOAD_TYPES.search(file.content_type or "")):
        raise HTTPException(
            status_code=400,
            detail="Only image files and PDFs are allowed",
        )

    content = file.file.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
        )

    target_dir = os.path.join(settings.UPLOAD_DIR, UPLOAD_SUBDIR)
    os.makedirs(target_dir, exist_ok=True)

    stored_name = f"bill-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"
    with open(os.path.join(target_dir, stored_name), "wb") as f:
        f.write(content)

    return f"/uploads/{UPLOAD_SUBDIR}/{stored_name}"
