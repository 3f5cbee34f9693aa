"""
Product models for the storefront catalog
Includes create/update payloads and the variant sub-documents
"""
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, validator
from typing import Optional, Dict, Any, List


class ProductStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    OUT_OF_STOCK = "outOfStock"
    COMING_SOON = "comingSoon"


class ProductCategory(BaseModel):
    main: Optional[str] = None
    sub: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class VariantAttribute(BaseModel):
    name: str
    values: List[str] = Field(default_factory=list)


class ProductVariant(BaseModel):
    variant_name: Optional[str] = None
    combination: Dict[str, str] = Field(default_factory=dict)
    sku: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    stock: int = 0
    thumbnail: Optional[str] = None


class ProductBase(BaseModel):
    """Product attributes shared by create and update payloads"""
    model_config = {"use_enum_values": True}

    sku: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    import_price: Optional[float] = Field(None, ge=0)
    current_price: Optional[float] = Field(None, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    thumbnail: Optional[str] = None
    gallery: List[str] = Field(default_factory=list)
    is_featured: bool = False
    is_visible: bool = True
    status: ProductStatus = ProductStatus.DRAFT
    category: ProductCategory = Field(default_factory=ProductCategory)
    variant_attributes: List[VariantAttribute] = Field(default_factory=list)
    variants: List[ProductVariant] = Field(default_factory=list)
    stock: int = Field(0, ge=0)
    published_at: Optional[datetime] = None


class ProductCreate(ProductBase):
    name: str = ""
    base_price: float = 0

    @validator("base_price")
    def round_price(cls, v):
        return round(v, 2)


class ProductUpdate(BaseModel):
    model_config = {"use_enum_values": True}

    name: Optional[str] = Field(None, min_length=1, max_length=300)
    slug: Optional[str] = None
    sku: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    base_price: Optional[float] = Field(None, gt=0)
    import_price: Optional[float] = Field(None, ge=0)
    current_price: Optional[float] = Field(None, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    thumbnail: Optional[str] = None
    gallery: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_visible: Optional[bool] = None
    status: Optional[ProductStatus] = None
    category: Optional[ProductCategory] = None
    variant_attributes: Optional[List[VariantAttribute]] = None
    stock: Optional[int] = Field(None, ge=0)


class ProductNameUpdate(BaseModel):
    name: str = Field(..., min_length=1)


class ProductSlugUpdate(BaseModel):
    slug: str


class ProductVariantsUpdate(BaseModel):
    variants: List[ProductVariant]
