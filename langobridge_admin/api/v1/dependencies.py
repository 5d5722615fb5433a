import logging
import re
from urllib.parse import unquote

from fastapi import HTTPException, Request, status

from langobridge_admin.core.ai_service import EnrichmentError
from langobridge_admin.core.local_store import LocalKeyValueStore
from langobridge_admin.services.bulk_upload_service import BulkUploadError
from langobridge_admin.services.image_host import ImageUploadError
from langobridge_admin.services.record_store import AuthError, RecordStoreError, SupabaseRecordStore

DOMAIN_ERRORS = (RecordStoreError, AuthError, EnrichmentError, ImageUploadError, BulkUploadError)

log = logging.getLogger(__name__)


def _normalize_token_value(raw_token: str | None) -> str | None:
    """Return a clean session token extracted from various transport formats.

    Tokens may reach the API through cookies, headers, or query parameters.
    Browsers can percent-encode cookie values (``Bearer%20…``) and some
    frontends send quoted strings. We normalise those cases and also accept
    case-insensitive ``Bearer`` prefixes.
    """

    if raw_token is None:
        return None

    token = raw_token.strip().strip('"').strip("'")
    if not token:
        return None

    token = unquote(token)

    match = re.match(r"^(bearer|token)[\s,:]+(.+)$", token, flags=re.IGNORECASE)
    if match:
        token = match.group(2)
    else:
        parts = token.split()
        if len(parts) >= 2 and parts[0].lower().rstrip(",") in {"bearer", "token"}:
            token = parts[1]

    token = token.strip()
    return token or None


def get_session_token(request: Request) -> str:
    token_sources = (
        request.headers.get("Authorization"),
        request.cookies.get("access_token"),
        request.headers.get("X-Access-Token"),
        request.query_params.get("access_token"),
    )

    for candidate in token_sources:
        token = _normalize_token_value(candidate)
        if token:
            return token

    log.warning("Validation échouée: Pas de token fourni.")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
    )


def get_record_store(request: Request) -> SupabaseRecordStore:
    """Record store acting with the caller's Supabase session.

    Token expiry is not checked here: Supabase rejects the first call with a
    401, which the routers forward unchanged.
    """

    return SupabaseRecordStore(access_token=get_session_token(request))


def get_key_store() -> LocalKeyValueStore:
    return LocalKeyValueStore()


def http_error(exc: Exception) -> HTTPException:
    """Map a domain exception (``code`` + ``status_code``) onto an HTTP error."""

    status_code = getattr(exc, "status_code", status.HTTP_502_BAD_GATEWAY)
    code = getattr(exc, "code", "unexpected_error")
    return HTTPException(status_code=status_code, detail=code)
