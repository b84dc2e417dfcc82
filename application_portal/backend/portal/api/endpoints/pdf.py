# File: backend/portal/api/endpoints/pdf.py
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session
from datetime import timezone
from email.utils import format_datetime
from typing import Optional
import logging

from portal.db.database import get_db
from portal.db.models import SubmissionStatus
from portal.core.config import settings
from portal.core.constants import ERROR_MESSAGES
from portal.core.errors import ApplicationError, handle_api_error
from portal.core.security import verify_download_token
from portal.services.submissions import get_submission
from portal.services.storage import file_exists, read_file
from portal.utils.file_utils import safe_download_name

router = APIRouter()
logger = logging.getLogger(__name__)

MIN_ID_LENGTH = 10


@router.get("/pdf/{submission_id}")
async def download_pdf(
    submission_id: str,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Serve the generated summary PDF for a completed submission."""
    try:
        if not submission_id or len(submission_id) < MIN_ID_LENGTH:
            raise ApplicationError(ERROR_MESSAGES["INVALID_SUBMISSION_ID"], 400)

        if settings.REQUIRE_SIGNED_DOWNLOADS:
            verify_download_token(token, submission_id)

        submission = get_submission(db, submission_id)
        if not submission:
            raise ApplicationError(ERROR_MESSAGES["SUBMISSION_NOT_FOUND"], 404)

        if submission.status in (SubmissionStatus.PENDING.value, SubmissionStatus.PROCESSING.value):
            raise ApplicationError("PDF is still being generated. Please try again in a moment.", 202)

        if submission.status == SubmissionStatus.FAILED.value:
            raise ApplicationError("PDF generation failed. Please contact support.", 500)

        if not submission.generated_pdf_path:
            raise ApplicationError("PDF not available", 404)

        if not file_exists(submission.generated_pdf_path):
            logger.error(f"PDF file not found: {submission.generated_pdf_path}")
            raise ApplicationError("PDF file not found on server", 404)

        pdf_bytes = read_file(submission.generated_pdf_path)
        if len(pdf_bytes) == 0:
            raise ApplicationError("PDF file is empty", 500)

        headers = {
            "Content-Disposition": f'attachment; filename="{safe_download_name(submission.first_name, submission.last_name)}"',
            "Content-Length": str(len(pdf_bytes)),
            "Cache-Control": "public, max-age=3600",
        }
        if submission.created_at is not None:
            created_at = submission.created_at
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
            headers["Last-Modified"] = format_datetime(created_at.astimezone(timezone.utc), usegmt=True)

        logger.info(f"PDF downloaded: {submission.id} ({len(pdf_bytes)} bytes)")
        return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)

    except Exception as e:
        message, status_code = handle_api_error(e)
        return JSONResponse(status_code=status_code, content={"error": message})
