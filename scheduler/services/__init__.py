# Business logic services
from scheduler.services.access import access_tier, user_can_access, is_owner
from scheduler.services.membership import ensure_membership
from scheduler.services.meeting_dates import (
    parse_date_payload,
    add_dates,
    pick_date,
    cast_vote,
    set_attendance,
)

__all__ = [
    'access_tier',
    'user_can_access',
    'is_owner',
    'ensure_membership',
    'parse_date_payload',
    'add_dates',
    'pick_date',
    'cast_vote',
    'set_attendance',
]
