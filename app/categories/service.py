from typing import List, Optional

from sqlalchemy.orm import Session

from app.bills.models import Bill

from . import models, schemas


# Seeded for every new user; not deletable by the owner
DEFAULT_CATEGORIES = [
    ("Utilities", "⚡", "#f59e0b"),
    ("Rent", "🏠", "#3b82f6"),
    ("Credit Cards", "💳", "#ef4444"),
    ("Insurance", "🛡️", "#10b981"),
    ("Subscriptions", "📱", "#8b5cf6"),
    ("Other", models.DEFAULT_ICON, models.DEFAULT_COLOR),
]


def seed_default_categories(db: Session, user_id: str) -> None:
    """Add the default categories to the session; the caller commits."""
    for name, icon, color in DEFAULT_CATEGORIES:
        db.add(
            models.Category(
                user_id=user_id,
                name=name,
                icon=icon,
                color=color,
                is_default=True,
            )
        )


# ================= LIST =================
def get_user_categories(db: Session, user_id: str) -> List[models.Category]:
    return (
        db.query(models.Category)
        .filter(models.Category.user_id == user_id)
        .order_by(models.Category.name)
        .all()
    )


def get_category(db: Session, category_id: int, user_id: str) -> Optional[models.Category]:
    return (
        db.query(models.Category)
        .filter(
            models.Category.id == category_id,
            models.Category.user_id == user_id,
        )
        .first()
    )


# ================= CREATE =================
def create_category(db: Session, category: schemas.CategoryCreate, user_id: str) -> models.Category:
    db_category = models.Category(
        user_id=user_id,
        name=category.name,
        icon=category.icon,
        color=category.color,
        is_default=False,
    )

    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


# ================= UPDATE =================
def update_category(
    db: Session,
    category_id: int,
    category: schemas.CategoryUpdate,
    user_id: str,
) -> Optional[models.Category]:
    db_category = get_category(db, category_id, user_id)
    if not db_category:
        return None

    for field, value in category.model_dump(exclude_unset=True).items():
        setattr(db_category, field, value)

    db.commit()
    db.refresh(db_category)
    return db_category


# ================= DELETE =================
def delete_category(db: Session, category_id: int, user_id: str) -> bool:
    db_category = get_category(db, category_id, user_id)
    if not db_category or db_category.is_default:
        return False

    # bills keep their legacy label and lose the reference
    db.query(Bill).filter(
        Bill.category_id == category_id,
        Bill.user_id == user_id,
    ).update({Bill.category_id: None}, synchronize_session=False)

    db.delete(db_category)
    db.commit()
    return True
