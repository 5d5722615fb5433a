"""Thin client over the Supabase REST (PostgREST) and auth endpoints.

All three managed tables (``vocabulary``, ``resources``, ``blogs``) live in the
hosted Supabase project; this module only issues HTTP calls and translates
failures into :class:`RecordStoreError` so routers can surface them. Rows are
returned as plain dictionaries, exactly as PostgREST serialises them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests

from langobridge_admin.core.config import settings

logger = logging.getLogger(__name__)

VOCABULARY_TABLE = "vocabulary"
RESOURCES_TABLE = "resources"
BLOGS_TABLE = "blogs"
TABLES = (VOCABULARY_TABLE, RESOURCES_TABLE, BLOGS_TABLE)


@dataclass(slots=True)
class RecordStoreError(Exception):
    """Raised when the store is unreachable or rejects a request."""

    code: str
    status_code: int = 502
    message: str | None = None

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.message or self.code


@dataclass(slots=True)
class AuthError(Exception):
    code: str = "invalid_credentials"
    status_code: int = 401
    message: str | None = None

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.message or self.code


@dataclass(slots=True)
class AuthSession:
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    user_email: Optional[str] = None


def _error_from_response(response: requests.Response) -> RecordStoreError:
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    code = str(payload.get("code") or payload.get("error_code") or payload.get("error") or "store_rejected")
    message = (
        payload.get("message")
        or payload.get("msg")
        or payload.get("error_description")
        or response.text
        or None
    )
    return RecordStoreError(code=code, status_code=response.status_code, message=message)


def _parse_content_range(value: str | None) -> int:
    """``0-24/3573`` or ``*/0`` -> total row count."""
    if not value or "/" not in value:
        return 0
    total = value.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else 0


class SupabaseRecordStore:
    """Table-scoped select/insert/update/delete against PostgREST."""

    def __init__(
        self,
        access_token: str | None = None,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        page_size: int | None = None,
        timeout: int | None = None,
    ):
        self.base_url = (base_url or settings.supabase_base_url).rstrip("/")
        self.api_key = api_key or settings.SUPABASE_ANON_KEY
        self.access_token = access_token or self.api_key
        self.page_size = max(1, int(page_size or settings.RECORD_PAGE_SIZE))
        self.timeout = timeout or settings.RECORD_STORE_TIMEOUT_S

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _headers(self, extra: Mapping[str, str] | None = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _table_url(self, table: str) -> str:
        if table not in TABLES:
            raise ValueError(f"unknown_table: {table}")
        return f"{self.base_url}/rest/v1/{table}"

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> requests.Response:
        url = self._table_url(table)
        logger.info("Supabase %s /%s", method, table)
        try:
            response = requests.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(headers),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Erreur de connexion à Supabase (%s %s): %s", method, table, exc)
            raise RecordStoreError("record_store_unreachable", 502, str(exc)) from exc

        if response.status_code >= 400:
            error = _error_from_response(response)
            logger.error(
                "Requête Supabase rejetée (%s %s, %s): %s",
                method,
                table,
                response.status_code,
                error.message,
            )
            raise error
        return response

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        order_by: str | None = None,
        ascending: bool = False,
        offset: int | None = None,
        limit: int | None = None,
        filters: Mapping[str, Any] | None = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"select": columns}
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        if offset is not None:
            params["offset"] = offset
        if limit is not None:
            params["limit"] = limit
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"

        response = self._request("GET", table, params=params)
        return response.json() or []

    def count(self, table: str) -> int:
        response = self._request(
            "HEAD",
            table,
            params={"select": "*"},
            headers={"Prefer": "count=exact", "Range": "0-0"},
        )
        return _parse_content_range(response.headers.get("Content-Range"))

    def insert(self, table: str, rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        payload = [dict(row) for row in rows]
        logger.info("Insertion de %s ligne(s) dans '%s'", len(payload), table)
        response = self._request(
            "POST", table, json=payload, headers={"Prefer": "return=representation"}
        )
        return response.json() or []

    def update(self, table: str, record_id: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        response = self._request(
            "PATCH",
            table,
            params={"id": f"eq.{record_id}"},
            json=dict(data),
            headers={"Prefer": "return=representation"},
        )
        rows = response.json() or []
        if not rows:
            raise RecordStoreError("record_not_found", 404, f"{table} #{record_id} introuvable")
        return rows[0]

    def delete(self, table: str, record_id: Any) -> None:
        self._request("DELETE", table, params={"id": f"eq.{record_id}"})

    def fetch_all(
        self,
        table: str,
        *,
        order_by: str | None = "id",
        ascending: bool = False,
        columns: str = "*",
    ) -> List[Dict[str, Any]]:
        """Accumulate fixed-size offset pages until a short page comes back.

        Offsets are not stable under concurrent writes: a row inserted or
        deleted mid-fetch can be skipped or returned twice.
        """

        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page = self.select(
                table,
                columns,
                order_by=order_by,
                ascending=ascending,
                offset=offset,
                limit=self.page_size,
            )
            if not page:
                break
            rows.extend(page)
            if len(page) < self.page_size:
                break
            offset += self.page_size

        logger.info("%s ligne(s) chargées depuis '%s'", len(rows), table)
        return rows


def sign_in_with_password(email: str, password: str) -> AuthSession:
    """Exchange email/password for a Supabase session token."""

    url = f"{settings.supabase_base_url}/auth/v1/token"
    logger.info("Connexion Supabase pour %s", email)
    headers = {"apikey": settings.SUPABASE_ANON_KEY, "Content-Type": "application/json"}
    try:
        response = requests.post(
            url,
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers=headers,
            timeout=settings.RECORD_STORE_TIMEOUT_S,
        )
    except requests.RequestException as exc:
        logger.error("Erreur de connexion à Supabase Auth: %s", exc)
        raise RecordStoreError("record_store_unreachable", 502, str(exc)) from exc

    if response.status_code >= 400:
        error = _error_from_response(response)
        logger.warning("Connexion refusée pour %s: %s", email, error.message)
        raise AuthError(message=error.message)

    payload = response.json()
    user = payload.get("user") or {}
    return AuthSession(
        access_token=payload["access_token"],
        refresh_token=payload.get("refresh_token"),
        expires_in=payload.get("expires_in"),
        user_email=user.get("email", email),
    )
