from __future__ import annotations

from fastapi import APIRouter

from langobridge_admin.api.v1.dependencies import DOMAIN_ERRORS, http_error
from langobridge_admin.schemas.admin_schema import LoginIn, SessionOut
from langobridge_admin.services.record_store import sign_in_with_password

router = APIRouter()


@router.post("/login", response_model=SessionOut)
def login(payload: LoginIn):
    try:
        session = sign_in_with_password(payload.email, payload.password)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return SessionOut(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user_email=session.user_email,
    )
