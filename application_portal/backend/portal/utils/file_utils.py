# File: backend/portal/utils/file_utils.py
import hashlib
import os
import re
import uuid
from dataclasses import dataclass
from typing import Optional

from portal.core.constants import FILE_UPLOAD_CONFIG, ERROR_MESSAGES

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
MAX_STEM_LENGTH = 100


@dataclass
class FileValidationResult:
    is_valid: bool
    error: Optional[str] = None


def validate_file(filename: Optional[str], content_type: Optional[str], size: int) -> FileValidationResult:
    """Check an upload against the size, MIME type and extension limits."""
    if size <= 0:
        return FileValidationResult(False, ERROR_MESSAGES["FILE_EMPTY"])

    if size > FILE_UPLOAD_CONFIG["MAX_FILE_SIZE"]:
        return FileValidationResult(False, ERROR_MESSAGES["FILE_TOO_LARGE"])

    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in FILE_UPLOAD_CONFIG["ALLOWED_MIME_TYPES"]:
        return FileValidationResult(False, ERROR_MESSAGES["INVALID_FILE_TYPE"])

    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in FILE_UPLOAD_CONFIG["ALLOWED_EXTENSIONS"]:
        return FileValidationResult(False, ERROR_MESSAGES["INVALID_FILE_TYPE"])

    return FileValidationResult(True)


def generate_safe_file_name(original_name: Optional[str]) -> str:
    """
    Build a unique on-disk name: "<uuid hex>_<sanitized stem>.pdf".
    Directory components of the client-supplied name are discarded.
    """
    base = os.path.basename((original_name or "").replace("\\", "/"))
    stem = os.path.splitext(base)[0]
    stem = _UNSAFE_CHARS.sub("_", stem).strip("._")[:MAX_STEM_LENGTH]
    if not stem:
        stem = "document"
    return f"{uuid.uuid4().hex}_{stem}.pdf"


def get_file_checksum(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def safe_download_name(first_name: str, last_name: str) -> str:
    clean_first = re.sub(r"[^a-zA-Z0-9]", "_", first_name)
    clean_last = re.sub(r"[^a-zA-Z0-9]", "_", last_name)
    return f"application-{clean_first}-{clean_last}.pdf"
