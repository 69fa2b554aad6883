from datetime import datetime
from scheduler import db


class ProjectUser(db.Model):
    """Membership of a user in a project: invitation acceptance and attendance."""
    __tablename__ = 'project_users'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    attending = db.Column(db.Boolean, default=False, nullable=False)
    accepted = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Unique constraint: one membership per user per project
    __table_args__ = (
        db.UniqueConstraint('user_id', 'project_id', name='unique_project_user'),
    )

    def __repr__(self):
        return f'<ProjectUser project={self.project_id} user={self.user_id}>'

    @classmethod
    def find(cls, user_id, project_id):
        return cls.query.filter_by(user_id=user_id, project_id=project_id).first()

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'project_id': self.project_id,
            'attending': self.attending,
            'accepted': self.accepted,
        }
