import os
import uuid
from pathlib import Path
from typing import Optional
from fastapi import UploadFile
from core.config import settings
from core.exceptions import ValidationFailed
from core.logging import logger

UPLOAD_CATEGORIES = ("receipts", "catches", "layouts", "banners", "payment-details")
ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
PUBLIC_PREFIX = "/uploads"

CHUNK_SIZE = 1024 * 1024


def upload_root() -> Path:
    return Path(settings.upload_dir)


def init_storage():
    """Provision upload directories. Called once at startup, before serving requests."""
    root = upload_root()
    for category in UPLOAD_CATEGORIES:
        (root / category).mkdir(parents=True, exist_ok=True)
    logger.info(f"Upload storage ready at {root.resolve()}")


def _validate_image(file: UploadFile) -> str:
    extension = os.path.splitext(file.filename or "")[1].lower()
    content_type = (file.content_type or "").lower()
    if extension not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationFailed("Only image files are allowed (jpeg, jpg, png, gif, webp)")
    return extension


def save_upload(file: UploadFile, category: str) -> str:
    """Store an uploaded image and return its public reference, e.g. /uploads/receipts/<uuid>.png"""
    if category not in UPLOAD_CATEGORIES:
        raise ValueError(f"Unknown upload category: {category}")

    extension = _validate_image(file)
    filename = f"{uuid.uuid4().hex}{extension}"
    target = upload_root() / category / filename
    max_mb = settings.max_file_size // (1024 * 1024)

    written = 0
    try:
        with open(target, "wb") as out:
            while True:
                chunk = file.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > settings.max_file_size:
                    raise ValidationFailed(f"File too large. Maximum size is {max_mb}MB.")
                out.write(chunk)
    except Exception:
        target.unlink(missing_ok=True)
        raise

    return f"{PUBLIC_PREFIX}/{category}/{filename}"


def save_optional_upload(file: Optional[UploadFile], category: str) -> Optional[str]:
    if file is None or not file.filename:
        return None
    return save_upload(file, category)


def discard_upload(reference: Optional[str]):
    """Remove a stored file by its public reference; unknown references are ignored"""
    if not reference or not reference.startswith(PUBLIC_PREFIX + "/"):
        return
    relative = reference[len(PUBLIC_PREFIX) + 1:]
    path = upload_root() / relative
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove upload {reference}: {e}")
