"""
Access control for projects.

A user's access to a project resolves to a single tier:
admin (owner) > accepted > pending > none.

The tiers are checked in order with separate queries; the first match wins.
"""

ADMIN = 'admin'
ACCEPTED = 'accepted'
PENDING = 'pending'


def access_tier(user, project):
    """Return the best access tier the user holds on the project, or None."""
    if user is None or project is None or project.id is None:
        return None

    if user.admin_projects.filter_by(id=project.id).count() != 0:
        return ADMIN

    if project.id in [p.id for p in user.accepted_projects()]:
        return ACCEPTED

    # Pending invitees can see the project before accepting
    if project.id in [p.id for p in user.pending_projects()]:
        return PENDING

    return None


def user_can_access(user, project):
    return access_tier(user, project) is not None


def is_owner(user, project):
    return user is not None and project is not None and project.user_id == user.id
