from datetime import datetime
from email_validator import validate_email, EmailNotValidError
from sqlalchemy.orm import validates
from werkzeug.security import generate_password_hash, check_password_hash
from scheduler import db


class User(db.Model):
    """Registered user. Owns projects and joins others through memberships."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)  # werkzeug hash, never the raw password
    admin = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    admin_projects = db.relationship('Project', backref='owner', lazy='dynamic')
    memberships = db.relationship('ProjectUser', backref='user', lazy='dynamic')
    tokens = db.relationship('Token', backref='user', lazy='dynamic')
    votes = db.relationship('Vote', backref='user', lazy='dynamic')

    def __repr__(self):
        return f'<User {self.email}>'

    @staticmethod
    def normalize_email(value):
        """Canonical stored form of an address. Raises EmailNotValidError if malformed."""
        result = validate_email(value or '', check_deliverability=False)
        return result.normalized.lower()

    @classmethod
    def find_by_email(cls, value):
        """Look up a user by an address as typed, normalized the same way as on save."""
        try:
            email = cls.normalize_email(value)
        except EmailNotValidError:
            email = (value or '').strip().lower()
        return cls.query.filter_by(email=email).first()

    @validates('email')
    def validate_email_address(self, key, value):
        return self.normalize_email(value)

    def set_password(self, raw_password):
        self.password = generate_password_hash(raw_password)

    def check_password(self, raw_password):
        return check_password_hash(self.password, raw_password)

    def token(self):
        """The user's auth token, if one has been issued."""
        from scheduler.models.token import Token
        return self.tokens.order_by(Token.id).first()

    # ============== DERIVED PROJECT QUERIES ==============

    def _invited_projects(self):
        from scheduler.models.project import Project
        from scheduler.models.project_user import ProjectUser
        return Project.query.join(
            ProjectUser, ProjectUser.project_id == Project.id
        ).filter(ProjectUser.user_id == self.id)

    def accepted_projects(self):
        """Accepted invitations, excluding projects this user owns. Newest membership first."""
        from scheduler.models.project import Project
        from scheduler.models.project_user import ProjectUser
        return self._invited_projects().filter(
            ProjectUser.accepted.is_(True),
            Project.user_id != self.id
        ).order_by(ProjectUser.id.desc()).all()

    def pending_projects(self):
        """Invitations not yet accepted, excluding projects this user owns. Newest first."""
        from scheduler.models.project import Project
        from scheduler.models.project_user import ProjectUser
        return self._invited_projects().filter(
            ProjectUser.accepted.is_(False),
            Project.user_id != self.id
        ).order_by(ProjectUser.id.desc()).all()

    def attending_projects(self):
        from scheduler.models.project_user import ProjectUser
        return self._invited_projects().filter(ProjectUser.attending.is_(True)).all()

    def to_dict(self):
        token = self.token()
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'admin': self.admin,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'token': token.token if token else None,
        }
