# File: backend/portal/core/constants.py
"""Fixed limits, layout metrics and user-facing messages."""

# File upload constraints
FILE_UPLOAD_CONFIG = {
    "MAX_FILE_SIZE": 10 * 1024 * 1024,  # 10MB in bytes
    "ALLOWED_MIME_TYPES": ("application/pdf",),
    "ALLOWED_EXTENSIONS": (".pdf",),
}

# Form validation constraints
FORM_CONSTRAINTS = {
    "NAME_MIN_LENGTH": 1,
    "NAME_MAX_LENGTH": 50,
    "JOB_DESCRIPTION_MIN_LENGTH": 10,
    "JOB_DESCRIPTION_MAX_LENGTH": 2000,
    "EMAIL_MAX_LENGTH": 255,
    "PHONE_REGEX": r"^[\d\s\-\+\(\)]+$",
}

# PDF generation settings (points)
PDF_CONFIG = {
    "PAGE_WIDTH": 595.28,  # A4
    "PAGE_HEIGHT": 841.89,
    "MARGIN": 50,
    "TITLE_SIZE": 24,
    "HEADING_SIZE": 16,
    "TEXT_SIZE": 12,
    "LINE_HEIGHT": 18,
    "TITLE_GAP": 20,
    "HEADING_GAP": 10,
    "SECTION_SPACING": 20,
    "SECTION_BREAK_SPACE": 100,
    "LINE_BREAK_SPACE": 20,
}

ERROR_MESSAGES = {
    "FILE_TOO_LARGE": "File size exceeds 10MB limit",
    "FILE_EMPTY": "Uploaded file is empty",
    "INVALID_FILE_TYPE": "Only PDF files are allowed",
    "FILE_UPLOAD_FAILED": "Failed to upload file",
    "NO_FILE": "No file uploaded",
    "PDF_GENERATION_FAILED": "Failed to generate PDF",
    "DATABASE_ERROR": "Database operation failed",
    "VALIDATION_ERROR": "Invalid form data",
    "SUBMISSION_NOT_FOUND": "Submission not found",
    "INVALID_SUBMISSION_ID": "Invalid submission ID",
    "INVALID_DOWNLOAD_TOKEN": "Invalid or expired download link",
    "RATE_LIMITED": "Please wait before submitting again",
    "SERVER_ERROR": "Internal server error",
}

STATUS_MESSAGES = {
    "UPLOADING": "Uploading file...",
    "PROCESSING": "Processing your application...",
    "GENERATING_PDF": "Generating PDF...",
    "COMPLETED": "Application submitted successfully!",
}
