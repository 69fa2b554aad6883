"""
Project routes.

Includes:
- Listing the caller's projects by access tier
- Reading a single project with its candidate dates
- Creating a project
"""

from flask import Blueprint, jsonify, current_app, abort

from scheduler import db
from scheduler.models import Project
from scheduler.routes.auth import login_required, get_current_user, get_json_object
from scheduler.services.access import user_can_access

projects_bp = Blueprint('projects', __name__, url_prefix='/api/v1')


@projects_bp.route('/projects')
@login_required
def list_projects():
    """Projects the caller owns, has accepted, and has pending invitations to."""
    user = get_current_user()
    admin = user.admin_projects.order_by(Project.id.desc()).all()

    return jsonify({
        'admin': [p.to_dict() for p in admin],
        'accepted': [p.to_dict() for p in user.accepted_projects()],
        'pending': [p.to_dict() for p in user.pending_projects()],
    })


@projects_bp.route('/projects/attending')
@login_required
def attending_projects():
    user = get_current_user()
    return jsonify([p.to_dict() for p in user.attending_projects()])


@projects_bp.route('/project/<int:project_id>')
@login_required
def get_project(project_id):
    """Get one project. Projects the caller cannot access look missing."""
    project = db.get_or_404(Project, project_id)
    if not user_can_access(get_current_user(), project):
        abort(404)
    return jsonify(project.to_dict(include_dates=True))


@projects_bp.route('/project', methods=['POST'])
@login_required
def create_project():
    """Create a project owned by the caller."""
    user = get_current_user()
    data = get_json_object()
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        abort(400, description='name is required')

    # Ownership always comes from the session, never the body
    project = Project(name=name.strip(), user_id=user.id)
    db.session.add(project)
    db.session.commit()

    current_app.logger.info(f"User {user.id} created project {project.id}")
    return jsonify(project.to_dict())
