from __future__ import annotations

from fastapi import APIRouter, Depends

from langobridge_admin.api.v1.dependencies import DOMAIN_ERRORS, get_record_store, http_error
from langobridge_admin.schemas.admin_schema import DashboardOut, PracticeTypeOut
from langobridge_admin.services.dashboard_service import DashboardService
from langobridge_admin.services.record_store import SupabaseRecordStore

router = APIRouter()

PRACTICE_TYPES = [
    PracticeTypeOut(
        key="speaking",
        title="Speaking Test",
        description="Practice pronunciation with audio playback and recording",
    ),
    PracticeTypeOut(
        key="writing",
        title="Writing Test",
        description="Practice writing Korean characters and sentences",
    ),
    PracticeTypeOut(
        key="dialog",
        title="Dialog Test",
        description="Practice conversational Korean with simulated dialogs",
    ),
    PracticeTypeOut(
        key="color_blind",
        title="Color Blind Test",
        description="Ishihara color blindness test for EPS requirements",
    ),
]


@router.get("/dashboard", response_model=DashboardOut)
def get_dashboard(store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        return DashboardService(store).build_stats()
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc


@router.get("/practice", response_model=list[PracticeTypeOut])
def list_practice_types():
    return PRACTICE_TYPES
