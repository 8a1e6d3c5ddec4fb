"""
State machine for job applications.
ALL status changes must go through this module.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import settings
from jobboard.errors import InternalError, InvalidTransitionError
from jobboard.models.application import Application, ApplicationStatus

# Configure logger
logger = logging.getLogger(__name__)

_UNSET = object()


# Define allowed status transitions
ALLOWED_TRANSITIONS: Dict[ApplicationStatus, list[ApplicationStatus]] = {
    ApplicationStatus.PENDING: [
        ApplicationStatus.REVIEWED,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    ],
    ApplicationStatus.REVIEWED: [
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.OFFERED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    ],
    ApplicationStatus.SHORTLISTED: [
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.OFFERED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    ],
    ApplicationStatus.INTERVIEW: [
        ApplicationStatus.SHORTLISTED,  # Second round after a first interview
        ApplicationStatus.OFFERED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    ],
    ApplicationStatus.OFFERED: [],  # Terminal state
    ApplicationStatus.REJECTED: [],  # Terminal state
    ApplicationStatus.WITHDRAWN: [],  # Terminal state (applicant pulled out)
}


def can_transition(from_status: ApplicationStatus, to_status: ApplicationStatus) -> bool:
    """Check if a transition is allowed without modifying the database"""
    if from_status == to_status:
        return True
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


def validate_transition(from_status: ApplicationStatus, to_status: ApplicationStatus) -> None:
    """Raise InvalidTransitionError unless the move is allowed (or checks are disabled)."""
    if not settings.enforce_status_transitions:
        return
    if not can_transition(from_status, to_status):
        raise InvalidTransitionError(
            f"Invalid transition from {from_status.value} to {to_status.value}"
        )


async def transition_application(
    db: AsyncSession,
    application: Application,
    to_status: ApplicationStatus,
    notes: Any = _UNSET,
    force: bool = False,
    metadata: Optional[Dict[str, Any]] = None
) -> Application:
    """
    Move an application to a new status with validation.

    Args:
        db: Database session
        application: Loaded application to transition
        to_status: Target status
        notes: New recruiter notes; left untouched when not passed
        force: Skip the transition table (used by withdraw)
        metadata: Optional context for the transition log line

    Returns:
        The updated Application

    Raises:
        InvalidTransitionError: If transition is not allowed
        InternalError: If the update could not be committed
    """
    application_id = application.id
    from_status = ApplicationStatus(application.status)

    if not force:
        validate_transition(from_status, to_status)

    application.status = to_status
    if notes is not _UNSET:
        application.recruiter_notes = notes
    # updated_at moves even when the status itself is unchanged
    application.updated_at = datetime.utcnow()

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update application {application_id}: {e}", exc_info=True)
        raise InternalError("Failed to update application") from e

    # Log transition with metadata
    log_data = {
        "application_id": str(application_id),
        "from_status": from_status.value,
        "to_status": to_status.value,
        "forced": force,
    }
    if metadata:
        log_data["metadata"] = metadata

    logger.info(f"Application status transition: {from_status.value} → {to_status.value}", extra=log_data)

    return application
