"""
Signed download links for generated PDFs.
Tokens are short-lived HS256 JWTs bound to a single submission id.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from portal.core.config import settings
from portal.core.constants import ERROR_MESSAGES
from portal.core.errors import ApplicationError

logger = logging.getLogger(__name__)

DOWNLOAD_SCOPE = "pdf_download"


def create_download_token(submission_id: str, expires_minutes: Optional[int] = None) -> str:
    if expires_minutes is None:
        expires_minutes = settings.DOWNLOAD_TOKEN_EXPIRE_MINUTES
    now = datetime.now(timezone.utc)
    payload = {
        "sub": submission_id,
        "scope": DOWNLOAD_SCOPE,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_download_token(token: Optional[str], submission_id: str) -> dict:
    """Decode a download token and check it was issued for this submission."""
    if not token:
        raise ApplicationError(ERROR_MESSAGES["INVALID_DOWNLOAD_TOKEN"], 403)

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning(f"Expired download token for submission {submission_id}")
        raise ApplicationError(ERROR_MESSAGES["INVALID_DOWNLOAD_TOKEN"], 403)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid download token for submission {submission_id}: {e}")
        raise ApplicationError(ERROR_MESSAGES["INVALID_DOWNLOAD_TOKEN"], 403)

    if payload.get("scope") != DOWNLOAD_SCOPE or payload.get("sub") != submission_id:
        logger.warning(f"Download token does not match submission {submission_id}")
        raise ApplicationError(ERROR_MESSAGES["INVALID_DOWNLOAD_TOKEN"], 403)

    return payload


def build_pdf_url(submission_id: str) -> str:
    if not settings.REQUIRE_SIGNED_DOWNLOADS:
        return f"/api/pdf/{submission_id}"
    return f"/api/pdf/{submission_id}?token={create_download_token(submission_id)}"
