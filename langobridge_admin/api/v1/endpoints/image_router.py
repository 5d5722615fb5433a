from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile, status

from langobridge_admin.api.v1.dependencies import DOMAIN_ERRORS, get_session_token, http_error
from langobridge_admin.schemas.admin_schema import ImageOut
from langobridge_admin.services.image_host import upload_image

router = APIRouter()


@router.post("", response_model=ImageOut, status_code=status.HTTP_201_CREATED)
async def upload(file: UploadFile = File(...), _token: str = Depends(get_session_token)):
    content = await file.read()
    try:
        url = upload_image(file.filename or "image", content, file.content_type)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return ImageOut(url=url)
