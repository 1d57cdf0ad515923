from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from loguru import logger
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.models import User
from . import schemas, service


router = APIRouter()


@router.get("", response_model=List[schemas.BillOut])
def list_bills(
    search: Optional[str] = None,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    status_filter: Optional[Literal["paid", "unpaid", "overdue"]] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if search is None and category_id is None and status_filter is None:
        return service.get_all_bills(db, current_user.id)

    return service.list_bills(
        db,
        current_user.id,
        search=search,
        category_id=category_id,
        status_filter=status_filter,
    )


@router.get("/stats", response_model=schemas.BillStats)
def bill_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_bill_stats(db, current_user.id)


@router.get("/{bill_id}", response_model=schemas.BillOut)
def get_bill(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bill = service.get_bill(db, bill_id, current_user.id)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@router.post("", response_model=schemas.BillOut, status_code=status.HTTP_201_CREATED)
def create_bill(
    bill: schemas.BillCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    new_bill = service.create_bill(db, bill, current_user.id)
    logger.info(f"Bill {new_bill.id} created by {current_user.id} with status {new_bill.status}")
    return new_bill


@router.put("/{bill_id}", response_model=schemas.BillOut)
def update_bill(
    bill_id: int,
    bill: schemas.BillUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = service.update_bill(db, bill_id, bill, current_user.id)
    if not updated:
        logger.warning(f"Bill not found: {bill_id} (user {current_user.id})")
        raise HTTPException(status_code=404, detail="Bill not found")

    logger.info(f"Bill {bill_id} updated by {current_user.id}")
    return updated


@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bill(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not service.delete_bill(db, bill_id, current_user.id):
        logger.warning(f"Bill not found: {bill_id} (user {current_user.id})")
        raise HTTPException(status_code=404, detail="Bill not found")

    logger.info(f"Bill {bill_id} deleted by {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{bill_id}/status", response_model=schemas.BillOut)
def update_bill_status(
    bill_id: int,
    payload: schemas.BillStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bill = service.update_bill(
        db, bill_id, schemas.BillUpdate(status=payload.status), current_user.id
    )
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")

    logger.info(f"Bill {bill_id} marked {bill.status} by {current_user.id}")
    return bill


@router.post("/{bill_id}/upload", response_model=schemas.UploadResponse)
def upload_bill_image(
    bill_id: int,
    bill_image: UploadFile = File(..., alias="billImage"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # check ownership before anything touches the disk
    if not service.get_bill(db, bill_id, current_user.id):
        raise HTTPException(status_code=404, detail="Bill not found")

    image_url = service.save_bill_attachment(bill_image)
    bill = service.update_bill(
        db, bill_id, schemas.BillUpdate(image_url=image_url), current_user.id
    )
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")

    logger.info(f"Attachment {image_url} stored for bill {bill_id}")
    return {"message": "Image uploaded successfully", "image_url": image_url, "bill": bill}
