"""Lookup-or-create helper for project memberships."""

from flask import current_app

from scheduler import db
from scheduler.models import ProjectUser


def ensure_membership(user_id, project_id, attending=False, accepted=False):
    """
    Return the membership for (user, project), creating it if missing.

    The flags only apply to a newly created row; callers update an existing
    row themselves. Nothing is committed here; the caller commits. A racing
    duplicate insert fails the unique constraint on (user_id, project_id) at
    commit time.
    """
    membership = ProjectUser.find(user_id, project_id)
    if membership is None:
        membership = ProjectUser(
            user_id=user_id,
            project_id=project_id,
            attending=attending,
            accepted=accepted
        )
        db.session.add(membership)
        current_app.logger.info(
            f"Created membership: user={user_id}, project={project_id}, "
            f"attending={attending}, accepted={accepted}"
        )
    return membership
