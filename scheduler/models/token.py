import secrets
from datetime import datetime
from scheduler import db


class Token(db.Model):
    """Bearer token used to authenticate API requests."""
    __tablename__ = 'tokens'

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @classmethod
    def issue(cls, user):
        """Create (but do not commit) a new random token for the user."""
        token = cls(token=secrets.token_urlsafe(32), user_id=user.id)
        db.session.add(token)
        return token

    def __repr__(self):
        return f'<Token user={self.user_id}>'
