"""
Meeting date routes: proposing dates, voting, picking the final date and
attendance.

Ownership and access failures on these endpoints answer 404 rather than
403 so callers cannot probe for projects they are not part of. The
attendance endpoints answer 400 instead.
"""

from flask import Blueprint, request, jsonify, abort

from scheduler import db
from scheduler.models import Project, MeetingDate
from scheduler.routes.auth import login_required, get_current_user, get_json_object
from scheduler.services.access import is_owner, user_can_access
from scheduler.services.meeting_dates import (
    add_dates,
    pick_date as pick_meeting_date,
    cast_vote,
    set_attendance,
)

meeting_dates_bp = Blueprint('meeting_dates', __name__, url_prefix='/api/v1')


def get_owned_project_or_404(project_id):
    project = db.get_or_404(Project, project_id)
    if not is_owner(get_current_user(), project):
        abort(404)
    return project


# ============== DATE PROPOSALS ==============

@meeting_dates_bp.route('/project/<int:project_id>/dates', methods=['POST'])
@login_required
def add_dates_to_project(project_id):
    """
    Propose several candidate dates at once.

    Body: [{"date": "2026-11-03T18:30:00"}, ...]
    """
    project = get_owned_project_or_404(project_id)

    payloads = request.get_json(silent=True)
    if not isinstance(payloads, list):
        abort(400, description='Expected a JSON array of dates')

    try:
        meeting_dates = add_dates(project, payloads)
    except ValueError as e:
        abort(400, description=str(e))

    return jsonify({'success': True, 'meeting_dates': [d.to_dict() for d in meeting_dates]})


@meeting_dates_bp.route('/project/<int:project_id>/date', methods=['POST'])
@login_required
def add_date_to_project(project_id):
    """Propose one candidate date. Body: {"date": "2026-11-03T18:30:00"}"""
    project = get_owned_project_or_404(project_id)
    payload = get_json_object()

    try:
        meeting_date, = add_dates(project, [payload])
    except ValueError as e:
        abort(400, description=str(e))

    return jsonify({'success': True, 'meeting_date': meeting_date.to_dict()})


@meeting_dates_bp.route('/project/<int:project_id>/date/<int:meeting_date_id>', methods=['PATCH'])
@login_required
def pick_date(project_id, meeting_date_id):
    """Finalize the project's meeting date (owner only)."""
    project = get_owned_project_or_404(project_id)
    meeting_date = db.get_or_404(MeetingDate, meeting_date_id)

    # The chosen date must be one of this project's candidates
    if meeting_date.project_id != project.id:
        abort(404)

    pick_meeting_date(project, meeting_date)
    return jsonify({'success': True, 'project': project.to_dict()})


# ============== VOTING ==============

@meeting_dates_bp.route('/vote/<int:meeting_date_id>', methods=['POST'])
@login_required
def vote(meeting_date_id):
    """Vote for a date, replacing any earlier vote in the same project."""
    user = get_current_user()
    meeting_date = db.get_or_404(MeetingDate, meeting_date_id)

    project = meeting_date.project
    # Only reachable for an orphaned row whose project was removed outside the API
    if project is None:
        abort(400, description='Meeting date has no project')
    if not user_can_access(user, project):
        abort(404)

    votes = cast_vote(user, meeting_date)
    return jsonify({'meeting_date_id': meeting_date.id, 'votes': votes})


# ============== ATTENDANCE ==============

def _update_attendance(project_id, attending):
    user = get_current_user()
    project = db.get_or_404(Project, project_id)
    if not user_can_access(user, project):
        abort(400, description='No access to this project')

    membership = set_attendance(user, project, attending)
    if membership is None:
        abort(400, description='Not a member of this project')

    return jsonify({'success': True, 'membership': membership.to_dict()})


@meeting_dates_bp.route('/project/<int:project_id>/attend', methods=['PATCH'])
@login_required
def will_attend(project_id):
    return _update_attendance(project_id, True)


@meeting_dates_bp.route('/project/<int:project_id>/notAttend', methods=['PATCH'])
@login_required
def will_not_attend(project_id):
    return _update_attendance(project_id, False)
