"""
Blog post and post category models
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class PostStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PostMeta(BaseModel):
    views: int = Field(0, ge=0)
    likes: int = Field(0, ge=0)
    shares: int = Field(0, ge=0)
    bookmarks: int = Field(0, ge=0)


class PostCategoryPaths(BaseModel):
    main: List[str] = Field(default_factory=list)
    sub: List[str] = Field(default_factory=list)


class PostCreate(BaseModel):
    model_config = {"use_enum_values": True}

    name: str = Field(..., min_length=1)
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    post_data: Optional[str] = None
    cover_video: Optional[str] = None
    thumbnail: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    meta: PostMeta = Field(default_factory=PostMeta)
    category: PostCategoryPaths = Field(default_factory=PostCategoryPaths)
    tags: List[str] = Field(default_factory=list)
    status: PostStatus = PostStatus.DRAFT
    published_date: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    related_post_slugs: List[str] = Field(default_factory=list)
    is_featured: bool = False
    is_pinned: bool = False
    is_visible: bool = True


class PostUpdate(BaseModel):
    model_config = {"use_enum_values": True}

    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    post_data: Optional[str] = None
    cover_video: Optional[str] = None
    thumbnail: Optional[List[str]] = None
    images: Optional[List[str]] = None
    meta: Optional[PostMeta] = None
    category: Optional[PostCategoryPaths] = None
    tags: Optional[List[str]] = None
    published_date: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    related_post_slugs: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_pinned: Optional[bool] = None


class PostSlugUpdate(BaseModel):
    new_slug: str = Field(..., min_length=1)


class PostVisibilityUpdate(BaseModel):
    is_visible: bool


class PostStatusUpdate(BaseModel):
    model_config = {"use_enum_values": True}

    status: PostStatus


class PostTransfer(BaseModel):
    from_user_id: str = Field(..., min_length=1)
    to_user_id: str = Field(..., min_length=1)
    post_ids: Optional[List[str]] = None


class PostCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    parent: Optional[str] = None
    sort_order: int = 0


class PostCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = None
    parent: Optional[str] = None
    sort_order: Optional[int] = None
