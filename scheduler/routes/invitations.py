"""
Invitation routes.

The project owner invites users by email, creating a pending membership.
Invitees accept to move the project from their pending to accepted list.
"""

from flask import Blueprint, jsonify, current_app, abort

from scheduler import db
from scheduler.models import Project, ProjectUser, User
from scheduler.routes.auth import login_required, get_current_user, get_json_object, get_string_field
from scheduler.services.access import is_owner
from scheduler.services.membership import ensure_membership
from scheduler.services.transaction import commit_or_conflict

invitations_bp = Blueprint('invitations', __name__, url_prefix='/api/v1')


@invitations_bp.route('/project/<int:project_id>/invite', methods=['POST'])
@login_required
def invite(project_id):
    """Invite a registered user to the project (owner only)."""
    user = get_current_user()
    project = db.get_or_404(Project, project_id)
    if not is_owner(user, project):
        abort(404)

    data = get_json_object()
    email = get_string_field(data, 'email')
    if not email:
        abort(400, description='email is required')

    invitee = User.find_by_email(email)
    if not invitee:
        abort(404, description='No user with that email')
    if invitee.id == project.user_id:
        abort(400, description='The project owner cannot be invited')

    membership = ensure_membership(invitee.id, project.id)
    commit_or_conflict()

    current_app.logger.info(f"User {user.id} invited user {invitee.id} to project {project.id}")
    return jsonify(membership.to_dict())


@invitations_bp.route('/project/<int:project_id>/accept', methods=['PATCH'])
@login_required
def accept(project_id):
    """Accept a pending invitation."""
    user = get_current_user()
    project = db.get_or_404(Project, project_id)

    membership = ProjectUser.find(user.id, project.id)
    if membership is None:
        abort(400, description='No invitation for this project')

    membership.accepted = True
    db.session.commit()

    current_app.logger.info(f"User {user.id} accepted invitation to project {project.id}")
    return jsonify(membership.to_dict())


@invitations_bp.route('/invitations')
@login_required
def list_invitations():
    """Projects the caller has been invited to but not yet accepted."""
    user = get_current_user()
    return jsonify([p.to_dict() for p in user.pending_projects()])
