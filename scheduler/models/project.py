from datetime import datetime
from scheduler import db


class Project(db.Model):
    """A schedulable event owned by one user."""
    __tablename__ = 'projects'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    # Finalized date, null until the owner picks one
    meeting_date_id = db.Column(
        db.Integer,
        db.ForeignKey('meeting_dates.id', use_alter=True, name='fk_projects_meeting_date_id'),
        nullable=True
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    meeting_dates = db.relationship(
        'MeetingDate',
        backref='project',
        lazy='dynamic',
        foreign_keys='MeetingDate.project_id'
    )
    memberships = db.relationship('ProjectUser', backref='project', lazy='dynamic')

    def __repr__(self):
        return f'<Project {self.name}>'

    def to_dict(self, include_dates=False):
        data = {
            'id': self.id,
            'name': self.name,
            'user_id': self.user_id,
            'meeting_date_id': self.meeting_date_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_dates:
            from scheduler.models.meeting_date import MeetingDate
            dates = self.meeting_dates.order_by(MeetingDate.date).all()
            data['meeting_dates'] = [d.to_dict() for d in dates]
        return data
