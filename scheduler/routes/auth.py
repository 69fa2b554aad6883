"""
Authentication routes and the guard used by every API blueprint.

Requests authenticate with a bearer token (``Authorization: Bearer <token>``)
or, for browser clients, the session cookie set at login.
"""

from functools import wraps
from email_validator import EmailNotValidError
from flask import Blueprint, request, jsonify, session, current_app, g, abort

from scheduler import db
from scheduler.models import User, Token
from scheduler.services.transaction import commit_or_conflict

auth_bp = Blueprint('auth', __name__, url_prefix='/api/v1')


# ============== AUTHENTICATION ==============

def _user_from_bearer_token():
    header = request.headers.get('Authorization', '')
    scheme, _, value = header.partition(' ')
    if scheme.lower() != 'bearer' or not value.strip():
        return None
    token = Token.query.filter_by(token=value.strip()).first()
    return token.user if token else None


def _user_from_session():
    user_id = session.get('user_id')
    if user_id:
        return db.session.get(User, user_id)
    return None


def login_required(f):
    """Decorator to require an authenticated user (bearer token or session)."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = _user_from_bearer_token() or _user_from_session()
        if user is None:
            current_app.logger.warning(f"Unauthenticated request to {request.path}")
            abort(401, description='Authentication required')
        g.current_user = user
        return f(*args, **kwargs)
    return decorated_function


def get_current_user():
    """Get the user authenticated for this request."""
    return g.get('current_user')


def set_user_session(user):
    """Set session variables for a logged-in user."""
    session['user_id'] = user.id
    session.permanent = True


def get_json_object():
    """Request body as a JSON object, or 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description='Expected a JSON object body')
    return data


def get_string_field(data, key, strip=True):
    """A string field from a JSON body, '' when absent, or 400 for any other type."""
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        abort(400, description=f'{key} must be a string')
    return value.strip() if strip else value


# ============== ENDPOINTS ==============

@auth_bp.route('/register', methods=['POST'])
def register():
    """Create a user, issue their token and log them in."""
    data = get_json_object()
    name = get_string_field(data, 'name')
    email = get_string_field(data, 'email')
    password = get_string_field(data, 'password', strip=False)

    if not name or not email or not password:
        abort(400, description='name, email and password are required')

    try:
        user = User(name=name, email=email, admin=False)
    except EmailNotValidError as e:
        abort(400, description=f'Invalid email: {e}')

    if User.query.filter_by(email=user.email).first():
        abort(409, description='Email is already registered')

    user.set_password(password)
    db.session.add(user)
    db.session.flush()
    Token.issue(user)
    commit_or_conflict('Email is already registered')

    set_user_session(user)
    current_app.logger.info(f"Registered user {user.id} ({user.email})")
    return jsonify(user.to_dict())


@auth_bp.route('/login', methods=['POST'])
def login():
    """Check credentials and return the user with their token."""
    data = get_json_object()
    email = get_string_field(data, 'email')
    password = get_string_field(data, 'password', strip=False)

    user = User.find_by_email(email) if email else None
    if not user or not user.check_password(password):
        current_app.logger.warning(f"Failed login for {email or '<blank>'}")
        abort(401, description='Invalid email or password')

    # One token per user: reuse it if it exists
    if user.token() is None:
        Token.issue(user)
        db.session.commit()

    set_user_session(user)
    current_app.logger.info(f"User {user.id} logged in")
    return jsonify(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Log out the session user."""
    session.pop('user_id', None)
    return jsonify({'success': True})


@auth_bp.route('/me')
@login_required
def me():
    return jsonify(get_current_user().to_dict())
