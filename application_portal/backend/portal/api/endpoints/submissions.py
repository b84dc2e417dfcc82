# File: backend/portal/api/endpoints/submissions.py
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import Any, Optional

from portal.db.database import get_db
from portal.db.models import SubmissionStatus
from portal.core.config import settings
from portal.core.constants import ERROR_MESSAGES
from portal.core.errors import ApplicationError
from portal.core.security import build_pdf_url, verify_download_token
from portal.schemas.submission import SubmissionStatusResponse
from portal.services.submissions import get_submission

router = APIRouter()


@router.get("/{submission_id}", response_model=SubmissionStatusResponse)
def read_submission(
    submission_id: str,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db)
) -> Any:
    """
    Lifecycle status of a submission, with a fresh download link once completed.
    With signed downloads on, the caller must hold a token for this submission.
    """
    if settings.REQUIRE_SIGNED_DOWNLOADS:
        try:
            verify_download_token(token, submission_id)
        except ApplicationError as e:
            return JSONResponse(status_code=e.status_code, content={"error": e.message})

    submission = get_submission(db, submission_id)
    if not submission:
        return JSONResponse(status_code=404, content={"error": ERROR_MESSAGES["SUBMISSION_NOT_FOUND"]})

    response = SubmissionStatusResponse.model_validate(submission)
    if submission.status == SubmissionStatus.COMPLETED.value:
        response.pdf_url = build_pdf_url(submission.id)
    return response
