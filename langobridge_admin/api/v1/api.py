# Fichier: langobridge_admin/api/v1/api.py
from fastapi import APIRouter, Depends

from .dependencies import get_session_token
from .endpoints import (
    auth_router,
    blog_router,
    bulk_upload_router,
    dashboard_router,
    image_router,
    resource_router,
    settings_router,
    studio_router,
    vocabulary_router,
)

api_router = APIRouter()

api_router.include_router(auth_router.router, prefix="/auth", tags=["Auth"])
api_router.include_router(dashboard_router.router, tags=["Dashboard"])
api_router.include_router(vocabulary_router.router, prefix="/vocabulary", tags=["Vocabulary"])
api_router.include_router(bulk_upload_router.router, prefix="/bulk-upload", tags=["Vocabulary"])
api_router.include_router(resource_router.router, prefix="/resources", tags=["Resources"])
api_router.include_router(blog_router.router, prefix="/blogs", tags=["Blogs"])
api_router.include_router(image_router.router, prefix="/images", tags=["Images"])
api_router.include_router(
    settings_router.router,
    prefix="/settings",
    tags=["Settings"],
    dependencies=[Depends(get_session_token)],
)
api_router.include_router(
    studio_router.router,
    prefix="/studio",
    tags=["AI Studio"],
    dependencies=[Depends(get_session_token)],
)
