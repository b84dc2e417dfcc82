"""
Local file storage: uploaded documents and generated summary PDFs.
All file I/O for submissions goes through this module.
"""

import os
import logging

from portal.core.config import settings
from portal.core.errors import ApplicationError
from portal.core.constants import ERROR_MESSAGES
from portal.utils.file_utils import generate_safe_file_name

logger = logging.getLogger(__name__)


def ensure_directories() -> None:
    """Create the upload and generated-PDF directories if they don't exist."""
    for directory in (settings.UPLOAD_DIR, settings.GENERATED_DIR):
        os.makedirs(directory, exist_ok=True)


def generated_pdf_path(submission_id: str) -> str:
    return os.path.join(settings.GENERATED_DIR, f"application-{submission_id}.pdf")


async def save_upload(file_bytes: bytes, original_name: str) -> str:
    """Write an uploaded file under a generated safe name. Returns the absolute path."""
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    file_path = os.path.abspath(os.path.join(settings.UPLOAD_DIR, generate_safe_file_name(original_name)))
    try:
        with open(file_path, "wb") as f:
            f.write(file_bytes)
    except OSError as e:
        logger.error(f"Failed to write upload {file_path}: {e}")
        raise ApplicationError(ERROR_MESSAGES["FILE_UPLOAD_FAILED"], 500)

    logger.info(f"Saved {len(file_bytes)} bytes to {file_path}")
    return file_path


async def save_generated_pdf(submission_id: str, pdf_bytes: bytes) -> str:
    """Write a generated PDF and verify it landed on disk intact."""
    os.makedirs(settings.GENERATED_DIR, exist_ok=True)
    pdf_path = os.path.abspath(generated_pdf_path(submission_id))
    with open(pdf_path, "wb") as f:
        f.write(pdf_bytes)

    try:
        if len(read_file(pdf_path)) == 0:
            raise ApplicationError("Saved PDF file is empty", 500)
    except (OSError, ApplicationError) as e:
        logger.error(f"PDF verification failed for {pdf_path}: {e}")
        raise ApplicationError("PDF file verification failed", 500)

    logger.info(f"Saved generated PDF {pdf_path} ({len(pdf_bytes)} bytes)")
    return pdf_path


def read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def file_exists(path: str) -> bool:
    return bool(path) and os.path.isfile(path)


def delete_file(path: str) -> None:
    """Delete a stored file. A file that is already gone is not an error."""
    try:
        os.unlink(path)
        logger.info(f"Deleted {path}")
    except FileNotFoundError:
        pass
