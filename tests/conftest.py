import pytest

from scheduler import create_app, db
from scheduler.models import Project, ProjectUser


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def register(client):
    """Register a user through the API. Returns the user JSON (id, token, ...)."""
    def _register(name='Alice', email='alice@mail.com', password='secret123'):
        response = client.post('/api/v1/register', json={
            'name': name,
            'email': email,
            'password': password,
        })
        assert response.status_code == 200, response.get_json()
        return response.get_json()
    return _register


@pytest.fixture
def create_project(client):
    """Create a project through the API as the token's user. Returns the project JSON."""
    def _create_project(token, name='Test project'):
        response = client.post('/api/v1/project', json={'name': name}, headers=bearer(token))
        assert response.status_code == 200, response.get_json()
        return response.get_json()
    return _create_project


@pytest.fixture
def add_dates(client):
    """Propose dates through the API. Returns the created date JSON objects."""
    def _add_dates(token, project_id, *dates):
        response = client.post(
            f'/api/v1/project/{project_id}/dates',
            json=[{'date': d} for d in dates],
            headers=bearer(token)
        )
        assert response.status_code == 200, response.get_json()
        return response.get_json()['meeting_dates']
    return _add_dates


@pytest.fixture
def add_membership(app):
    """Insert a ProjectUser row directly, bypassing the invitation flow."""
    def _add_membership(user_id, project_id, accepted=False, attending=False):
        with app.app_context():
            membership = ProjectUser(
                user_id=user_id,
                project_id=project_id,
                accepted=accepted,
                attending=attending
            )
            db.session.add(membership)
            db.session.commit()
            return membership.id
    return _add_membership


@pytest.fixture
def auth():
    return bearer


@pytest.fixture
def get_project(app):
    """Fetch a project row as a plain dict, outside any request."""
    def _get_project(project_id):
        with app.app_context():
            return db.session.get(Project, project_id).to_dict(include_dates=True)
    return _get_project
