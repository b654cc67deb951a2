import logging
import os
import time

from flask import current_app
from werkzeug.utils import secure_filename

from src.services.errors import StorageError


logger = logging.getLogger("hospital_admin.storage")

PHOTO_PREFIX = "hospitals"


def _root() -> str:
    return os.path.abspath(current_app.config["UPLOAD_FOLDER"])


def allowed_image(filename: str) -> bool:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return ext in current_app.config.get("ALLOWED_IMAGE_EXTENSIONS", set())


def photo_path(key: str) -> str:
    """Resolve a storage key to an absolute path inside UPLOAD_FOLDER."""
    root = _root()
    path = os.path.abspath(os.path.join(root, key or ""))
    if not key or os.path.commonpath([root, path]) != root:
        raise StorageError("Invalid photo reference")
    return path


def upload_photo(file) -> str:
    """
    Store an uploaded hospital photo and return its key,
    e.g. ``hospitals/1718000000000_front.jpg``.
    """
    safe_name = secure_filename(file.filename or "")
    if not safe_name or not allowed_image(safe_name):
        raise StorageError("Unsupported image type")

    key = f"{PHOTO_PREFIX}/{int(time.time() * 1000)}_{safe_name}"
    path = photo_path(key)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    try:
        file.save(path)
    except OSError as e:
        logger.exception(f"[upload_photo] Failed to write {key}: {e}")
        raise StorageError("Failed to upload photo")

    logger.info(f"[upload_photo] Stored {key}")
    return key


def delete_photo(key: str) -> bool:
    """Best-effort removal; a missing or unreadable file only logs a warning."""
    if not key:
        return False
    try:
        os.remove(photo_path(key))
        return True
    except (OSError, StorageError) as e:
        logger.warning(f"[delete_photo] Could not delete {key}: {e}")
        return False
