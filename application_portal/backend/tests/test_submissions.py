import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from portal.core.config import settings
from portal.core.errors import ApplicationError
from portal.core.rate_limit import enforce_submission_cooldown
from portal.db.models import SubmissionStatus
from portal.schemas.submission import ApplicationFormData
from portal.services import submissions
from portal.services.submissions import InvalidStatusTransition, StoredUpload


@pytest.fixture
def form(form_fields):
    return ApplicationFormData(**form_fields)


@pytest.fixture
def upload():
    return StoredUpload(path="/tmp/uploads/abc_cv.pdf", original_name="cv.pdf", checksum="0" * 64, size=2048)


class TestCreate:

    def test_new_submission_is_pending(self, db_session, form, upload):
        submission = submissions.create_submission(db_session, form, upload)

        assert len(submission.id) == 32
        assert submission.status == SubmissionStatus.PENDING.value
        assert submission.email == "ada@example.com"
        assert submission.uploaded_file_name == "cv.pdf"
        assert submission.uploaded_file_size == 2048
        assert submission.created_at is not None
        assert submissions.get_submission(db_session, submission.id) is submission

    def test_without_upload(self, db_session, form):
        submission = submissions.create_submission(db_session, form)
        assert submission.uploaded_file_path is None

    def test_unknown_id(self, db_session):
        assert submissions.get_submission(db_session, "f" * 32) is None


class TestLifecycle:

    def test_happy_path(self, db_session, form, upload):
        submission = submissions.create_submission(db_session, form, upload)
        submissions.mark_processing(db_session, submission)
        submissions.mark_completed(db_session, submission, "/tmp/generated/application.pdf")

        stored = submissions.get_submission(db_session, submission.id)
        assert stored.status == SubmissionStatus.COMPLETED.value
        assert stored.generated_pdf_path == "/tmp/generated/application.pdf"
        assert stored.error_message is None

    def test_failure_records_reason(self, db_session, form, upload):
        submission = submissions.create_submission(db_session, form, upload)
        submissions.mark_processing(db_session, submission)
        submissions.mark_failed(db_session, submission, "PDF generation failed: boom")

        assert submission.status == SubmissionStatus.FAILED.value
        assert submission.error_message == "PDF generation failed: boom"

    def test_pending_may_fail_directly(self, db_session, form):
        submission = submissions.create_submission(db_session, form)
        submissions.mark_failed(db_session, submission, "upload vanished")
        assert submission.status == SubmissionStatus.FAILED.value

    def test_cannot_complete_from_pending(self, db_session, form):
        submission = submissions.create_submission(db_session, form)
        with pytest.raises(InvalidStatusTransition) as exc_info:
            submissions.mark_completed(db_session, submission, "/tmp/x.pdf")
        assert exc_info.value.status_code == 409
        assert submission.status == SubmissionStatus.PENDING.value

    @pytest.mark.parametrize("terminal", ["completed", "failed"])
    def test_terminal_states_are_final(self, db_session, form, terminal):
        submission = submissions.create_submission(db_session, form)
        submissions.mark_processing(db_session, submission)
        if terminal == "completed":
            submissions.mark_completed(db_session, submission, "/tmp/x.pdf")
        else:
            submissions.mark_failed(db_session, submission, "boom")

        for move in (
            lambda: submissions.mark_processing(db_session, submission),
            lambda: submissions.mark_completed(db_session, submission, "/tmp/y.pdf"),
            lambda: submissions.mark_failed(db_session, submission, "again"),
        ):
            with pytest.raises(InvalidStatusTransition):
                move()
        assert submission.status == terminal


class TestCooldown:

    def test_recent_submission_found(self, db_session, form):
        submission = submissions.create_submission(db_session, form)
        recent = submissions.find_recent_submission(db_session, "ADA@example.com", 5)
        assert recent is not None and recent.id == submission.id

    def test_other_email_not_found(self, db_session, form):
        submissions.create_submission(db_session, form)
        assert submissions.find_recent_submission(db_session, "someone@example.com", 5) is None

    def test_disabled_by_default(self, db_session, form):
        submissions.create_submission(db_session, form)
        enforce_submission_cooldown(db_session, form.email)

    def test_enforced_when_configured(self, db_session, form, monkeypatch):
        monkeypatch.setattr(settings, "SUBMISSION_COOLDOWN_MINUTES", 5)
        enforce_submission_cooldown(db_session, form.email)

        submissions.create_submission(db_session, form)
        with pytest.raises(ApplicationError) as exc_info:
            enforce_submission_cooldown(db_session, form.email)
        assert exc_info.value.status_code == 429
