"""
Per-email submission cooldown.
Pure DB approach, no Redis needed.
"""
import logging
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.constants import ERROR_MESSAGES
from portal.core.errors import ApplicationError
from portal.services.submissions import find_recent_submission

logger = logging.getLogger(__name__)


def enforce_submission_cooldown(db: Session, email: str) -> None:
    """
    Raise 429 if `email` already submitted within SUBMISSION_COOLDOWN_MINUTES.
    A cooldown of 0 disables the check.
    """
    window = settings.SUBMISSION_COOLDOWN_MINUTES
    if window <= 0:
        return

    recent = find_recent_submission(db, email, window)
    if recent is not None:
        logger.warning(f"Cooldown hit: {email} submitted {recent.id} within the last {window} minutes")
        raise ApplicationError(
            f"{ERROR_MESSAGES['RATE_LIMITED']} ({window} minute cooldown)",
            429,
        )
