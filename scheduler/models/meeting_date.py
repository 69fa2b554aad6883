from datetime import datetime
from scheduler import db


class MeetingDate(db.Model):
    """Candidate date/time proposed for a project."""
    __tablename__ = 'meeting_dates'

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False, index=True)
    date = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    vote_rows = db.relationship('Vote', backref='meeting_date', lazy='dynamic')

    def __repr__(self):
        return f'<MeetingDate {self.date} project={self.project_id}>'

    def votes(self):
        """Number of users currently voting for this date."""
        return self.vote_rows.count()

    def to_dict(self):
        return {
            'id': self.id,
            'project_id': self.project_id,
            'date': self.date.isoformat() if self.date else None,
            'votes': self.votes(),
        }


class Vote(db.Model):
    """A user's vote for one of a project's candidate dates."""
    __tablename__ = 'votes'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    meeting_date_id = db.Column(db.Integer, db.ForeignKey('meeting_dates.id'), nullable=False, index=True)
    # Copy of the meeting date's project_id, backs the one-vote-per-project constraint
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'project_id', name='unique_project_vote'),
    )

    def __repr__(self):
        return f'<Vote user={self.user_id} meeting_date={self.meeting_date_id}>'
