"""
Meeting date lifecycle: proposing dates, voting, picking the final date
and attendance.

Callers are expected to have checked ownership or access already. Each
operation here performs its reads and writes in one session transaction
and commits exactly once.
"""

from datetime import datetime, timezone
from flask import current_app

from scheduler import db
from scheduler.models import MeetingDate, ProjectUser, Vote
from scheduler.services.membership import ensure_membership
from scheduler.services.transaction import commit_or_conflict


def parse_date_payload(payload):
    """
    Parse one date object from a request body.

    Expects a dict with an ISO 8601 'date' string, e.g.
    {"date": "2026-11-03T18:30:00"}. Timezone-aware values are stored as
    naive UTC.

    Raises:
        ValueError: if the payload is not a date object
    """
    if not isinstance(payload, dict):
        raise ValueError('Date entries must be JSON objects')

    value = payload.get('date')
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Missing 'date'")

    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def add_dates(project, payloads):
    """Validate every payload, then store them all as candidate dates of the project."""
    parsed = [parse_date_payload(p) for p in payloads]

    meeting_dates = []
    for value in parsed:
        meeting_date = MeetingDate(project_id=project.id, date=value)
        db.session.add(meeting_date)
        meeting_dates.append(meeting_date)

    db.session.commit()
    current_app.logger.info(f"Added {len(meeting_dates)} date(s) to project {project.id}")
    return meeting_dates


def pick_date(project, meeting_date):
    """
    Finalize the project's meeting date.

    The owner is enrolled as an attending, accepted member at this point
    if they have no membership row yet.
    """
    project.meeting_date_id = meeting_date.id

    membership = ensure_membership(project.user_id, project.id, attending=True, accepted=True)
    membership.attending = True

    commit_or_conflict()
    current_app.logger.info(f"Project {project.id} meeting date set to {meeting_date.id}")
    return project


def cast_vote(user, meeting_date):
    """
    Replace the user's vote within the date's project with a vote for this date.

    Returns:
        int: the vote count for the date afterwards
    """
    project = meeting_date.project
    date_ids = [d.id for d in project.meeting_dates.all()]

    # A user holds one vote per project, so clear any vote on a sibling date
    Vote.query.filter(
        Vote.user_id == user.id,
        Vote.meeting_date_id.in_(date_ids)
    ).delete(synchronize_session=False)

    db.session.add(Vote(user_id=user.id, meeting_date_id=meeting_date.id, project_id=project.id))
    commit_or_conflict()

    votes = meeting_date.votes()
    current_app.logger.info(f"User {user.id} voted for date {meeting_date.id} (votes={votes})")
    return votes


def set_attendance(user, project, attending):
    """
    Set the attending flag on the user's existing membership.

    Returns:
        ProjectUser or None: None when the user has no membership row
    """
    membership = ProjectUser.find(user.id, project.id)
    if membership is None:
        return None

    membership.attending = attending
    db.session.commit()
    current_app.logger.info(f"User {user.id} attending={attending} for project {project.id}")
    return membership
