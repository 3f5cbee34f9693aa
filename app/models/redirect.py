"""
Redirect models
"""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class RedirectType(str, Enum):
    PRODUCT = "product"
    CATEGORY = "category"
    POST = "post"
    PAGE = "page"
    OTHER = "other"


class RedirectCreate(BaseModel):
    model_config = {"use_enum_values": True}

    old_path: str = Field(..., min_length=1)
    new_path: str = Field(..., min_length=1)
    is_active: bool = True
    status_code: int = Field(301)
    type: RedirectType = RedirectType.OTHER


class RedirectUpdate(BaseModel):
    model_config = {"use_enum_values": True}

    old_path: Optional[str] = None
    new_path: Optional[str] = None
    is_active: Optional[bool] = None
    status_code: Optional[int] = None
    type: Optional[RedirectType] = None


class RedirectBulkCreate(BaseModel):
    redirects: List[RedirectCreate]
