# Fichier : langobridge_admin/schemas/content_schema.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BLOG_CATEGORIES: tuple[str, ...] = (
    "grammar",
    "vocabulary",
    "eps_topik",
    "study_tips",
    "culture",
    "work_life",
    "news",
)


class ResourceIn(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    tags: str = ""
    file_path: str = Field(..., min_length=1)
    thumbnail_path: str = ""


class ResourceOut(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    category: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    file_path: str
    thumbnail_path: Optional[str] = None
    file_size: Optional[int] = None
    created_at: Optional[datetime] = None
    download_url: Optional[str] = None


class BlogIn(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = ""
    content: str = Field(..., min_length=1)
    thumbnail_url: str = ""
    category: str = ""
    tags: str = ""

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        if value and value not in BLOG_CATEGORIES:
            raise ValueError("unknown_category")
        return value


class BlogOut(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    slug: str
    content: str
    thumbnail_url: Optional[str] = None
    category: Optional[str] = None
    category_label: Optional[str] = None
    tags: Optional[List[str]] = None
    published_at: Optional[datetime] = None
    view_count: int = 0


class ContentPage(BaseModel):
    items: list
    total: int
    window: Optional[Dict[str, int]] = None


class CategoryOut(BaseModel):
    key: str
    label: str
