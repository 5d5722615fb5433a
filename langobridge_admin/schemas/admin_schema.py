# Fichier : langobridge_admin/schemas/admin_schema.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class LoginIn(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class SessionOut(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"
    user_email: Optional[str] = None


class ActivityOut(BaseModel):
    id: Union[int, str]
    type: str
    title: str
    subtitle: Optional[str] = None
    date: Optional[str] = None


class DashboardOut(BaseModel):
    vocabulary: int
    resources: int
    blogs: int
    incomplete: int
    recent_activity: List[ActivityOut]


class ApiKeyIn(BaseModel):
    api_key: str = Field(..., min_length=1)


class ApiKeyOut(BaseModel):
    configured: bool
    masked_key: Optional[str] = None


class PracticeTypeOut(BaseModel):
    key: str
    title: str
    description: str
    coming_soon: bool = True


class ImageOut(BaseModel):
    url: str


class BulkPreviewOut(BaseModel):
    items: List[dict]
    invalid_count: int
    warning: Optional[str] = None


class BulkUploadIn(BaseModel):
    items: List[dict]


class BulkUploadOut(BaseModel):
    inserted: int
