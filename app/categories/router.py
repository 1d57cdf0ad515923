from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.models import User
from . import schemas, service


router = APIRouter()


# ================= LIST =================
@router.get("", response_model=List[schemas.CategoryOut])
def list_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_user_categories(db, current_user.id)


# ================= CREATE =================
@router.post(
    "",
    response_model=schemas.CategoryOut,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_category = service.create_category(db, category, current_user.id)
    logger.info(f"Category {db_category.id} created by {current_user.id}")
    return db_category


# ================= UPDATE =================
@router.put("/{category_id}", response_model=schemas.CategoryOut)
def update_category(
    category_id: int,
    category: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = service.update_category(db, category_id, category, current_user.id)
    if not updated:
        logger.warning(f"Category not found: {category_id} (user {current_user.id})")
        raise HTTPException(status_code=404, detail="Category not found")
    return updated


# ================= DELETE =================
@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_category = service.get_category(db, category_id, current_user.id)
    if db_category and db_category.is_default:
        raise HTTPException(status_code=400, detail="Default categories cannot be deleted")

    if not service.delete_category(db, category_id, current_user.id):
        logger.warning(f"Category not found: {category_id} (user {current_user.id})")
        raise HTTPException(status_code=404, detail="Category not found")

    logger.info(f"Category {category_id} deleted by {current_user.id}")
    return {"message": "Category deleted successfully"}
