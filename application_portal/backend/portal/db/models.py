# File: backend/portal/db/models.py
import uuid
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from portal.db.database import Base


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# Allowed lifecycle moves; completed and failed are terminal
STATUS_TRANSITIONS = {
    SubmissionStatus.PENDING: {SubmissionStatus.PROCESSING, SubmissionStatus.FAILED},
    SubmissionStatus.PROCESSING: {SubmissionStatus.COMPLETED, SubmissionStatus.FAILED},
    SubmissionStatus.COMPLETED: set(),
    SubmissionStatus.FAILED: set(),
}


def generate_submission_id() -> str:
    return uuid.uuid4().hex


class UserSubmission(Base):
    __tablename__ = "user_submissions"

    id = Column(String(32), primary_key=True, default=generate_submission_id)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String, nullable=True)
    job_description = Column(Text, nullable=False)

    # Uploaded document (local path under UPLOAD_DIR)
    uploaded_file_path = Column(String, nullable=True)
    uploaded_file_name = Column(String, nullable=True)
    uploaded_file_checksum = Column(String(64), nullable=True)  # sha256 hex
    uploaded_file_size = Column(Integer, nullable=True)

    generated_pdf_path = Column(String, nullable=True)
    status = Column(String, nullable=False, default=SubmissionStatus.PENDING.value)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
