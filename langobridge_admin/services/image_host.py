"""Upload des vignettes (ressources, blogs) vers ImgBB."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from langobridge_admin.core.config import settings

logger = logging.getLogger(__name__)

IMGBB_UPLOAD_URL = "https://api.imgbb.com/1/upload"


@dataclass(slots=True)
class ImageUploadError(Exception):
    code: str
    status_code: int = 502
    message: str | None = None

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.message or self.code


def upload_image(filename: str, content: bytes, content_type: str | None = None) -> str:
    """Send the file as multipart ``image`` field and return its public URL."""

    api_key = settings.IMGBB_API_KEY
    if not api_key:
        raise ImageUploadError("missing_api_key", 400, "ImgBB API Key is missing")

    files = {"image": (filename, content, content_type or "application/octet-stream")}
    logger.info("Upload de '%s' vers ImgBB", filename)
    try:
        response = requests.post(IMGBB_UPLOAD_URL, params={"key": api_key}, files=files, timeout=60)
        data = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Error uploading to ImgBB: %s", exc)
        raise ImageUploadError("upload_failed", 502, str(exc)) from exc

    if data.get("success"):
        url = data["data"]["url"]
        logger.info("Image '%s' hébergée: %s", filename, url)
        return url

    message = (data.get("error") or {}).get("message") or "Upload failed"
    logger.error("ImgBB a refusé '%s': %s", filename, message)
    raise ImageUploadError("upload_failed", 502, message)
