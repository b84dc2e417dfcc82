"""
Submission persistence: create records and drive the status lifecycle.
pending -> processing -> completed | failed
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.constants import ERROR_MESSAGES
from portal.core.errors import ApplicationError
from portal.db import models
from portal.db.models import SubmissionStatus, STATUS_TRANSITIONS
from portal.schemas.submission import ApplicationFormData

logger = logging.getLogger(__name__)


class InvalidStatusTransition(ApplicationError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move submission from {current} to {target}", 409)
        self.current = current
        self.target = target


@dataclass
class StoredUpload:
    """An uploaded document already written to storage."""
    path: str
    original_name: str
    checksum: str
    size: int


def _commit(db: Session, submission: models.UserSubmission) -> models.UserSubmission:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error on submission {submission.id}: {e}")
        raise ApplicationError(ERROR_MESSAGES["DATABASE_ERROR"], 500)
    db.refresh(submission)
    return submission


def create_submission(
    db: Session,
    form: ApplicationFormData,
    upload: Optional[StoredUpload] = None,
) -> models.UserSubmission:
    """Insert a new submission in the pending state."""
    submission = models.UserSubmission(
        id=models.generate_submission_id(),
        first_name=form.first_name,
        last_name=form.last_name,
        email=form.email,
        phone=form.phone,
        job_description=form.job_description,
        uploaded_file_path=upload.path if upload else None,
        uploaded_file_name=upload.original_name if upload else None,
        uploaded_file_checksum=upload.checksum if upload else None,
        uploaded_file_size=upload.size if upload else None,
        status=SubmissionStatus.PENDING.value,
    )
    db.add(submission)
    _commit(db, submission)
    logger.info(f"Created submission {submission.id} for {submission.email}")
    return submission


def transition(
    db: Session,
    submission: models.UserSubmission,
    target: SubmissionStatus,
    **fields,
) -> models.UserSubmission:
    """Move a submission to `target`, updating any extra columns in the same commit."""
    current = SubmissionStatus(submission.status)
    if target not in STATUS_TRANSITIONS[current]:
        raise InvalidStatusTransition(current.value, target.value)

    submission.status = target.value
    for key, value in fields.items():
        setattr(submission, key, value)
    _commit(db, submission)
    logger.info(f"Submission {submission.id}: {current.value} -> {target.value}")
    return submission


def mark_processing(db: Session, submission: models.UserSubmission) -> models.UserSubmission:
    return transition(db, submission, SubmissionStatus.PROCESSING)


def mark_completed(db: Session, submission: models.UserSubmission, pdf_path: str) -> models.UserSubmission:
    return transition(db, submission, SubmissionStatus.COMPLETED, generated_pdf_path=pdf_path, error_message=None)


def mark_failed(db: Session, submission: models.UserSubmission, reason: str) -> models.UserSubmission:
    return transition(db, submission, SubmissionStatus.FAILED, error_message=reason)


def get_submission(db: Session, submission_id: str) -> Optional[models.UserSubmission]:
    return db.query(models.UserSubmission).filter(models.UserSubmission.id == submission_id).first()


def find_recent_submission(db: Session, email: str, window_minutes: int) -> Optional[models.UserSubmission]:
    """Most recent submission from `email` created within the last `window_minutes`."""
    # SQLite stores CURRENT_TIMESTAMP without tzinfo, so compare in naive UTC
    cutoff = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=window_minutes)
    return db.query(models.UserSubmission).filter(
        models.UserSubmission.email == email.lower(),
        models.UserSubmission.created_at >= cutoff,
    ).order_by(desc(models.UserSubmission.created_at)).first()
