# File: backend/portal/api/endpoints/submit.py
from fastapi import APIRouter, Depends, UploadFile, File, Form
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import Any, Optional
import logging
import os
import time

from portal.db.database import get_db
from portal.core.constants import FILE_UPLOAD_CONFIG, ERROR_MESSAGES, STATUS_MESSAGES
from portal.core.errors import ApplicationError, handle_api_error
from portal.core.rate_limit import enforce_submission_cooldown
from portal.core.security import build_pdf_url
from portal.schemas.submission import ApplicationFormData, SubmitResponse
from portal.services import submissions
from portal.services.pdf_renderer import generate_pdf
from portal.services.storage import save_upload, delete_file
from portal.utils.file_utils import validate_file, get_file_checksum

router = APIRouter()
logger = logging.getLogger(__name__)

PDF_FAILURE_PREFIX = "PDF generation failed"


@router.post("/submit", response_model=SubmitResponse)
async def submit_application(
    first_name: Optional[str] = Form(None),
    last_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    job_description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db)
) -> Any:
    """Accept an application form with a PDF attachment and generate its summary PDF."""
    start_time = time.perf_counter()

    try:
        form = ApplicationFormData(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            job_description=job_description,
        )

        if file is None or not file.filename:
            raise ApplicationError(ERROR_MESSAGES["NO_FILE"], 400)

        # Read one byte past the limit so oversized uploads are detectable without reading them fully
        file_bytes = await file.read(FILE_UPLOAD_CONFIG["MAX_FILE_SIZE"] + 1)
        validation = validate_file(file.filename, file.content_type, len(file_bytes))
        if not validation.is_valid:
            raise ApplicationError(validation.error or ERROR_MESSAGES["INVALID_FILE_TYPE"], 400)

        enforce_submission_cooldown(db, form.email)

        original_name = os.path.basename(file.filename.replace("\\", "/"))
        stored_path = await save_upload(file_bytes, original_name)
        upload = submissions.StoredUpload(
            path=stored_path,
            original_name=original_name,
            checksum=get_file_checksum(file_bytes),
            size=len(file_bytes),
        )

        try:
            submission = submissions.create_submission(db, form, upload)
        except ApplicationError:
            delete_file(stored_path)
            raise

        try:
            submissions.mark_processing(db, submission)
        except ApplicationError as processing_error:
            logger.error(f"Could not start processing submission {submission.id}: {processing_error.message}")
            try:
                submissions.mark_failed(db, submission, processing_error.message)
            except ApplicationError as e:
                logger.error(f"Could not mark submission {submission.id} as failed: {e.message}")
            raise
        logger.info(f"{STATUS_MESSAGES['GENERATING_PDF']} submission={submission.id}")

        try:
            pdf_path = await generate_pdf(submission)
        except Exception as pdf_error:
            message, _ = handle_api_error(pdf_error)
            if not message.startswith(PDF_FAILURE_PREFIX):
                message = f"{PDF_FAILURE_PREFIX}: {message}"
            logger.error(f"PDF generation failed for submission {submission.id}: {message}")
            submissions.mark_failed(db, submission, message)
            raise ApplicationError(message, 500)

        submissions.mark_completed(db, submission, pdf_path)

        processing_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(f"{STATUS_MESSAGES['COMPLETED']} Submission {submission.id} processed in {processing_ms}ms")

        return SubmitResponse(
            success=True,
            submission_id=submission.id,
            pdf_url=build_pdf_url(submission.id),
        )

    except Exception as e:
        message, status_code = handle_api_error(e)
        return JSONResponse(
            status_code=status_code,
            content=SubmitResponse(success=False, error=message).model_dump(),
        )
