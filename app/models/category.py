"""
Category models
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    """Payload for creating a category, optionally with nested children"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    parent_category: Optional[str] = None
    filterable_attributes: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    sub_categories: List["CategoryCreate"] = Field(default_factory=list)


class CategoryUpdate(BaseModel):
    """Partial update; an explicit null parent_category moves the category to the root"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    parent_category: Optional[str] = None
    filterable_attributes: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class CategoryFilters(BaseModel):
    filters: Dict[str, Any] = Field(default_factory=dict)


CategoryCreate.model_rebuild()
