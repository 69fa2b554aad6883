from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import Conflict

from scheduler import db


def commit_or_conflict(description='Conflicting update, please retry'):
    """Commit the session; a uniqueness violation rolls back and becomes a 409."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.warning(f"Commit rejected by constraint: {e.orig}")
        raise Conflict(description)
