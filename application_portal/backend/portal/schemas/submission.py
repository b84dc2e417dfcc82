import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from portal.core.constants import FORM_CONSTRAINTS

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_REGEX = re.compile(FORM_CONSTRAINTS["PHONE_REGEX"])


class ApplicationFormData(BaseModel):
    first_name: str = Field(
        min_length=FORM_CONSTRAINTS["NAME_MIN_LENGTH"],
        max_length=FORM_CONSTRAINTS["NAME_MAX_LENGTH"],
    )
    last_name: str = Field(
        min_length=FORM_CONSTRAINTS["NAME_MIN_LENGTH"],
        max_length=FORM_CONSTRAINTS["NAME_MAX_LENGTH"],
    )
    email: str = Field(max_length=FORM_CONSTRAINTS["EMAIL_MAX_LENGTH"])
    phone: Optional[str] = None
    job_description: str = Field(
        min_length=FORM_CONSTRAINTS["JOB_DESCRIPTION_MIN_LENGTH"],
        max_length=FORM_CONSTRAINTS["JOB_DESCRIPTION_MAX_LENGTH"],
    )

    @field_validator("first_name", "last_name", "job_description", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            if not EMAIL_REGEX.match(value):
                raise ValueError("Invalid email address")
        return value

    @field_validator("phone", mode="before")
    @classmethod
    def normalize_phone(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            if not PHONE_REGEX.match(value):
                raise ValueError("Phone number may only contain digits, spaces, and + - ( )")
        return value


class SubmitResponse(BaseModel):
    success: bool
    submission_id: Optional[str] = None
    pdf_url: Optional[str] = None
    error: Optional[str] = None


class SubmissionStatusResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    status: str
    uploaded_file_name: Optional[str] = None
    error_message: Optional[str] = None
    pdf_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
