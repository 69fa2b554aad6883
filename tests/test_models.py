"""Model tests: user derived queries, tokens, passwords and membership bootstrapping."""

from datetime import datetime

import pytest
from email_validator import EmailNotValidError
from werkzeug.exceptions import Conflict

from scheduler import db
from scheduler.models import User, Token, Project, ProjectUser, MeetingDate, Vote
from scheduler.services.membership import ensure_membership
from scheduler.services.transaction import commit_or_conflict


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


def make_user(email):
    user = User(name=email.split('@')[0], email=email)
    user.set_password('secret123')
    db.session.add(user)
    db.session.commit()
    return user


def make_project(owner, name='Project'):
    project = Project(name=name, user_id=owner.id)
    db.session.add(project)
    db.session.commit()
    return project


def test_password_is_hashed(ctx):
    user = make_user('alice@mail.com')

    assert user.password != 'secret123'
    assert user.check_password('secret123')
    assert not user.check_password('secret124')


def test_invalid_email_is_rejected(ctx):
    with pytest.raises(EmailNotValidError):
        User(name='Bob', email='bob-at-nowhere')


def test_token_is_first_issued(ctx):
    user = make_user('alice@mail.com')
    assert user.token() is None

    first = Token.issue(user)
    db.session.commit()

    assert user.token().id == first.id
    assert user.to_dict()['token'] == first.token


def test_accepted_and_pending_projects_exclude_owned(ctx):
    alice = make_user('alice@mail.com')
    bob = make_user('bob@mail.com')
    own = make_project(alice, 'Own')
    accepted = make_project(bob, 'Accepted')
    pending = make_project(bob, 'Pending')

    # A stray membership on their own project must not list it
    db.session.add(ProjectUser(user_id=alice.id, project_id=own.id, accepted=True))
    db.session.add(ProjectUser(user_id=alice.id, project_id=accepted.id, accepted=True))
    db.session.add(ProjectUser(user_id=alice.id, project_id=pending.id, accepted=False))
    db.session.commit()

    assert [p.id for p in alice.accepted_projects()] == [accepted.id]
    assert [p.id for p in alice.pending_projects()] == [pending.id]


def test_accepted_projects_newest_membership_first(ctx):
    alice = make_user('alice@mail.com')
    bob = make_user('bob@mail.com')
    older = make_project(bob, 'Older')
    newer = make_project(bob, 'Newer')

    # Membership order, not project order, drives the listing
    db.session.add(ProjectUser(user_id=alice.id, project_id=newer.id, accepted=True))
    db.session.commit()
    db.session.add(ProjectUser(user_id=alice.id, project_id=older.id, accepted=True))
    db.session.commit()

    assert [p.name for p in alice.accepted_projects()] == ['Older', 'Newer']


def test_attending_projects_includes_owned(ctx):
    alice = make_user('alice@mail.com')
    bob = make_user('bob@mail.com')
    own = make_project(alice, 'Own')
    other = make_project(bob, 'Other')
    skipped = make_project(bob, 'Skipped')
    db.session.add(ProjectUser(user_id=alice.id, project_id=own.id, accepted=True, attending=True))
    db.session.add(ProjectUser(user_id=alice.id, project_id=other.id, accepted=False, attending=True))
    db.session.add(ProjectUser(user_id=alice.id, project_id=skipped.id, accepted=True, attending=False))
    db.session.commit()

    assert sorted(p.name for p in alice.attending_projects()) == ['Other', 'Own']


def test_ensure_membership_is_idempotent(ctx):
    alice = make_user('alice@mail.com')
    project = make_project(alice)

    first = ensure_membership(alice.id, project.id, attending=True, accepted=True)
    db.session.commit()
    second = ensure_membership(alice.id, project.id)
    db.session.commit()

    assert first.id == second.id
    assert second.accepted is True
    assert ProjectUser.query.filter_by(user_id=alice.id, project_id=project.id).count() == 1


def test_find_by_email_normalizes_input(ctx):
    alice = make_user('Alice@Mail.com')

    assert User.find_by_email('  alice@MAIL.com ').id == alice.id
    assert User.find_by_email('not-an-email') is None


def test_duplicate_membership_commit_conflicts_and_rolls_back(ctx):
    alice = make_user('alice@mail.com')
    project = make_project(alice)
    db.session.add(ProjectUser(user_id=alice.id, project_id=project.id, accepted=True))
    db.session.commit()

    # A second insert for the same pair, as a racing request would make
    db.session.add(ProjectUser(user_id=alice.id, project_id=project.id))
    with pytest.raises(Conflict):
        commit_or_conflict()

    assert ProjectUser.query.filter_by(user_id=alice.id, project_id=project.id).count() == 1


def test_duplicate_vote_commit_conflicts_and_rolls_back(ctx):
    alice = make_user('alice@mail.com')
    project = make_project(alice)
    first = MeetingDate(project_id=project.id, date=datetime(2026, 11, 3))
    second = MeetingDate(project_id=project.id, date=datetime(2026, 11, 4))
    db.session.add_all([first, second])
    db.session.commit()
    db.session.add(Vote(user_id=alice.id, meeting_date_id=first.id, project_id=project.id))
    db.session.commit()

    db.session.add(Vote(user_id=alice.id, meeting_date_id=second.id, project_id=project.id))
    with pytest.raises(Conflict):
        commit_or_conflict()

    votes = Vote.query.filter_by(user_id=alice.id).all()
    assert [v.meeting_date_id for v in votes] == [first.id]
