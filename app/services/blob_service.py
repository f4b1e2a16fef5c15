"""
Stockage des images uploadées (bannières).

Les fichiers sont écrits dans UPLOAD_DIR et servis en statique sous /uploads.
"""

import logging
import os
import re
import time
from typing import BinaryIO, Optional
from app.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp", "image/svg+xml"}


class UploadError(Exception):
    pass


def safe_filename(owner_id: int, filename: str, now_ms: Optional[int] = None) -> str:
    """<owner>-<timestamp ms>-<nom nettoyé>"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    cleaned = re.sub(r"[^a-zA-Z0-9.-]", "", filename or "") or "image"
    return f"{owner_id}-{now_ms}-{cleaned}"


def upload_image(owner_id: int, filename: str, content_type: Optional[str], stream: BinaryIO) -> str:
    """Enregistre l'image et retourne son URL publique"""
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadError(f"Unsupported file type: {content_type}")

    # lecture bornée: un octet de plus que la limite suffit à refuser, rien n'est écrit
    data = stream.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        logger.warning(f"Rejected upload over {settings.MAX_UPLOAD_BYTES} bytes for user {owner_id}")
        raise UploadError("File too large")

    name = safe_filename(owner_id, filename)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    path = os.path.join(settings.UPLOAD_DIR, name)

    try:
        with open(path, "wb") as target:
            target.write(data)
    except OSError as e:
        logger.error(f"Error uploading file: {e}")
        raise UploadError("Failed to upload image") from e

    logger.info(f"Uploaded image {name} for user {owner_id}")
    return f"{settings.PUBLIC_BASE_URL}/uploads/{name}"
