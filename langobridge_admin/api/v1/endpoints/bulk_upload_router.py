from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import PlainTextResponse

from langobridge_admin.api.v1.dependencies import DOMAIN_ERRORS, get_record_store, http_error
from langobridge_admin.schemas.admin_schema import BulkPreviewOut, BulkUploadIn, BulkUploadOut
from langobridge_admin.services import bulk_upload_service
from langobridge_admin.services.content_service import vocabulary_service
from langobridge_admin.services.record_store import SupabaseRecordStore

router = APIRouter()

_MEDIA_TYPES = {"csv": "text/csv", "json": "application/json"}


@router.post("/parse", response_model=BulkPreviewOut)
async def parse_bulk_input(
    file: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
):
    try:
        if file is not None:
            preview = bulk_upload_service.parse_upload(file.filename or "", await file.read())
        elif text and text.strip():
            preview = bulk_upload_service.parse_json_text(text)
        else:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="empty_input")
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc

    return BulkPreviewOut(
        items=preview.items,
        invalid_count=preview.invalid_count,
        warning=preview.warning,
    )


@router.post("", response_model=BulkUploadOut, status_code=status.HTTP_201_CREATED)
def upload_vocabulary(payload: BulkUploadIn, store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        inserted = bulk_upload_service.upload(vocabulary_service(store), payload.items)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return BulkUploadOut(inserted=inserted)


@router.get("/template/{kind}")
def download_template(kind: str):
    template = bulk_upload_service.TEMPLATES.get(kind)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="unknown_template")
    return PlainTextResponse(
        template,
        media_type=_MEDIA_TYPES[kind],
        headers={"Content-Disposition": f'attachment; filename="vocabulary_template.{kind}"'},
    )
