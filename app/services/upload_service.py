import logging
import os
import time
import uuid

from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".webp"}
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}
UPLOAD_URL_PREFIX = "/uploads"


def save_contest_image(upload: UploadFile) -> str:
    """Store an uploaded banner image and return the URL it is served from."""
    extension = os.path.splitext(upload.filename or "")[1].lower()
    if extension not in ALLOWED_IMAGE_EXTENSIONS or upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Only image files are allowed!")

    content = upload.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError("Image exceeds the upload size limit")

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{extension}"
    with open(os.path.join(settings.UPLOAD_DIR, filename), "wb") as f:
        f.write(content)
    logger.info("Stored contest image %s (%d bytes)", filename, len(content))
    return f"{UPLOAD_URL_PREFIX}/{filename}"


def remove_contest_image(image_url: str) -> None:
    """Delete a banner stored by ``save_contest_image``; other URLs are left alone."""
    prefix = f"{UPLOAD_URL_PREFIX}/"
    if not image_url or not image_url.startswith(prefix):
        return
    path = os.path.join(settings.UPLOAD_DIR, os.path.basename(image_url[len(prefix):]))
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    logger.info("Removed contest image %s", os.path.basename(path))
