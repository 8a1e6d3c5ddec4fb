"""
Tests for the application status state machine.

Validates:
- The transition table (forward moves, terminal states)
- Same-status updates are idempotent apart from updated_at
- Invalid transitions raise InvalidTransitionError
- Forced transitions and the enforcement switch
"""
import pytest
import pytest_asyncio
from sqlalchemy import select

from jobboard.config import settings
from jobboard.errors import InvalidTransitionError
from jobboard.models import Application, ApplicationStatus
from jobboard.services.state_machine import (
    ALLOWED_TRANSITIONS,
    can_transition,
    transition_application,
)


@pytest_asyncio.fixture
async def application(db, seeker, job):
    """Create a PENDING application"""
    application = Application(job_post_id=job.id, applicant_id=seeker.id)
    db.add(application)
    await db.commit()
    return application


# =============================================================================
# Transition table
# =============================================================================

def test_every_status_has_an_entry():
    assert set(ALLOWED_TRANSITIONS) == set(ApplicationStatus)


@pytest.mark.parametrize("status", [
    ApplicationStatus.OFFERED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
])
def test_terminal_states_have_no_exits(status):
    assert ALLOWED_TRANSITIONS[status] == []
    assert not can_transition(status, ApplicationStatus.PENDING)


@pytest.mark.parametrize("from_status,to_status", [
    (ApplicationStatus.PENDING, ApplicationStatus.REVIEWED),
    (ApplicationStatus.REVIEWED, ApplicationStatus.SHORTLISTED),
    (ApplicationStatus.SHORTLISTED, ApplicationStatus.INTERVIEW),
    (ApplicationStatus.INTERVIEW, ApplicationStatus.OFFERED),
    (ApplicationStatus.INTERVIEW, ApplicationStatus.SHORTLISTED),
    (ApplicationStatus.PENDING, ApplicationStatus.WITHDRAWN),
])
def test_allowed_transitions(from_status, to_status):
    assert can_transition(from_status, to_status)


@pytest.mark.parametrize("from_status,to_status", [
    (ApplicationStatus.PENDING, ApplicationStatus.OFFERED),
    (ApplicationStatus.REVIEWED, ApplicationStatus.PENDING),
    (ApplicationStatus.REJECTED, ApplicationStatus.OFFERED),
    (ApplicationStatus.WITHDRAWN, ApplicationStatus.REVIEWED),
])
def test_disallowed_transitions(from_status, to_status):
    assert not can_transition(from_status, to_status)


def test_same_status_is_always_allowed():
    for status in ApplicationStatus:
        assert can_transition(status, status)


def test_applied_is_read_as_pending():
    assert ApplicationStatus("APPLIED") is ApplicationStatus.PENDING


# =============================================================================
# transition_application
# =============================================================================

@pytest.mark.asyncio
async def test_transition_updates_status_and_keeps_notes(db, application):
    application.recruiter_notes = "Strong portfolio"
    await db.commit()

    result = await transition_application(db, application, ApplicationStatus.REVIEWED)

    assert result.status == ApplicationStatus.REVIEWED
    assert result.recruiter_notes == "Strong portfolio"


@pytest.mark.asyncio
async def test_same_status_twice_only_moves_updated_at(db, application):
    first = await transition_application(db, application, ApplicationStatus.REVIEWED, notes="ok")
    first_updated = first.updated_at

    second = await transition_application(db, application, ApplicationStatus.REVIEWED)

    assert second.status == ApplicationStatus.REVIEWED
    assert second.recruiter_notes == "ok"
    assert second.updated_at >= first_updated


@pytest.mark.asyncio
async def test_invalid_transition_raises_and_leaves_row_untouched(db, application):
    application_id = application.id

    with pytest.raises(InvalidTransitionError) as exc_info:
        await transition_application(db, application, ApplicationStatus.OFFERED)

    assert exc_info.value.status_code == 409
    assert "PENDING to OFFERED" in exc_info.value.message

    await db.rollback()
    result = await db.execute(
        select(Application.status).where(Application.id == application_id)
    )
    assert result.scalar_one() == ApplicationStatus.PENDING


@pytest.mark.asyncio
async def test_forced_transition_skips_the_table(db, application):
    application.status = ApplicationStatus.REJECTED
    await db.commit()

    result = await transition_application(db, application, ApplicationStatus.WITHDRAWN, force=True)

    assert result.status == ApplicationStatus.WITHDRAWN


@pytest.mark.asyncio
async def test_enforcement_can_be_switched_off(db, application, monkeypatch):
    monkeypatch.setattr(settings, "enforce_status_transitions", False)

    result = await transition_application(db, application, ApplicationStatus.OFFERED)

    assert result.status == ApplicationStatus.OFFERED
