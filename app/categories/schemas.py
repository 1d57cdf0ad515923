from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.categories.models import DEFAULT_COLOR, DEFAULT_ICON
from app.schemas import CamelModel


HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


# ================= CREATE =================
class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1)
    icon: str = DEFAULT_ICON
    color: str = Field(DEFAULT_COLOR, pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


# ================= UPDATE =================
class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            raise ValueError("Category name is required")
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v

    @field_validator("icon", "color", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v


# ================= RESPONSE =================
class CategoryOut(CamelModel):
    id: int
    user_id: str
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    is_default: bool = False
    created_at: Optional[datetime] = None
