# Import all models here so they're registered with SQLAlchemy
from scheduler.models.user import User
from scheduler.models.token import Token
from scheduler.models.project import Project
from scheduler.models.project_user import ProjectUser
from scheduler.models.meeting_date import MeetingDate, Vote

__all__ = ['User', 'Token', 'Project', 'ProjectUser', 'MeetingDate', 'Vote']
