"""
Content models: pages, site information, banners, contact messages, reviews and catalogue filters
"""
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class PageCreate(BaseModel):
    title: str = Field(..., min_length=1)
    slug: Optional[str] = None
    content: str = ""
    is_published: bool = True


class PageUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = None
    content: Optional[str] = None
    is_published: Optional[bool] = None


class InfoWebsiteCreate(BaseModel):
    name: str = Field(..., min_length=1)
    company_name: Optional[str] = None
    tax_code: Optional[str] = None
    logo: Optional[str] = None
    favicon: Optional[str] = None
    google_map: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    socials: Dict[str, str] = Field(default_factory=dict)
    is_active: bool = False


class InfoWebsiteUpdate(BaseModel):
    name: Optional[str] = None
    company_name: Optional[str] = None
    tax_code: Optional[str] = None
    logo: Optional[str] = None
    favicon: Optional[str] = None
    google_map: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    socials: Optional[Dict[str, str]] = None
    is_active: Optional[bool] = None


class ReviewCreate(BaseModel):
    product_slug: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    images: List[str] = Field(default_factory=list)
    attributes: Dict[str, Any] = Field(default_factory=dict)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    images: Optional[List[str]] = None
    is_active: Optional[bool] = None


class FilterType(str, Enum):
    CHECKBOX = "checkbox"
    RADIO = "radio"
    RANGE = "range"
    SELECT = "select"


class RangeOption(BaseModel):
    label: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None


class FilterCreate(BaseModel):
    model_config = {"use_enum_values": True}

    name: str = Field(..., min_length=1)
    type: FilterType = FilterType.CHECKBOX
    categories: List[str] = Field(default_factory=list)
    options: List[str] = Field(default_factory=list)
    range_options: List[RangeOption] = Field(default_factory=list)
    is_active: bool = True


class FilterUpdate(BaseModel):
    model_config = {"use_enum_values": True}

    name: Optional[str] = Field(None, min_length=1)
    type: Optional[FilterType] = None
    categories: Optional[List[str]] = None
    options: Optional[List[str]] = None
    range_options: Optional[List[RangeOption]] = None
    is_active: Optional[bool] = None


class BannerCreate(BaseModel):
    title: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    link: Optional[str] = None
    description: Optional[str] = None
    type: str = Field("home", min_length=1)
    order: int = Field(0, ge=0)
    is_active: bool = True


class BannerUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, min_length=1)
    link: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = Field(None, min_length=1)
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class BannerOrderUpdate(BaseModel):
    order: int = Field(..., ge=0)


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    customer_email: Optional[str] = None
    subject: Optional[str] = None
    message: str = Field(..., min_length=1)
