import logging
import random
import time
from pathlib import Path
from typing import Dict, Optional

from fastapi import UploadFile

from ..config import Settings
from ..errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
CHUNK_SIZE = 64 * 1024


def _new_filename(original_name: Optional[str]) -> str:
    ext = Path(original_name or "").suffix
    return f"logo-{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}{ext}"


def save_image(settings: Settings, upload: Optional[UploadFile]) -> Dict:
    """Store an uploaded image under ``upload_dir`` and describe where it is served."""
    if upload is None or not upload.filename:
        raise ValidationError("Please choose an image file to upload")
    if upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError("Only image files are allowed (JPEG, PNG, GIF, WebP)")

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    filename = _new_filename(upload.filename)
    target = upload_dir / filename

    size = 0
    with target.open("wb") as out:
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > settings.max_file_size:
                break
            out.write(chunk)
    if size > settings.max_file_size:
        target.unlink()
        raise ValidationError(f"File too large, the limit is {settings.max_file_size} bytes")

    url = f"/uploads/{filename}"
    logger.info(f"Stored upload {upload.filename} as {filename} ({size} bytes)")
    return {
        "filename": filename,
        "originalName": upload.filename,
        "size": size,
        "url": url,
        "fullUrl": f"{settings.host}{url}",
    }


def delete_image(settings: Settings, url: Optional[str]) -> None:
    """Remove a stored upload. Only the basename of ``url`` is used."""
    if not url:
        raise ValidationError("Missing file url")
    name = Path(url).name
    target = Path(settings.upload_dir) / name
    if not name or not target.is_file():
        raise NotFoundError("File not found")
    target.unlink()
    logger.info(f"Deleted upload {name}")
