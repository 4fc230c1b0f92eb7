"""
Pytest configuration and fixtures for testing.

Every test gets its own app bound to a fresh in-memory SQLite database.
"""
import itertools
import os

import pytest

os.environ.setdefault('APP_ENV', 'testing')
os.environ.setdefault('SECRET_KEY', 'sfndsfojoriwew09rjfjndsknfkj')

from quizmaster import create_app, db  # noqa: E402
from quizmaster.auth.models import User  # noqa: E402
from quizmaster.auth.utils import hash_password, issue_access_token  # noqa: E402


TEST_CONFIG = {
    'TESTING': True,
    'APP_ENV': 'testing',
    'SECRET_KEY': 'test-secret-key',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'BCRYPT_ROUNDS': 4,
    'RATE_LIMIT_ENABLED': False,
    'LOG_LEVEL': 'WARNING',
}


def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


def question_payload(text='What is the answer to this question?', correct_option=0, **overrides):
    data = {
        'text': text,
        'options': ['Option A', 'Option B', 'Option C', 'Option D'],
        'correct_option': correct_option,
    }
    data.update(overrides)
    return data


def quiz_payload(correct_options=(1, 2), published=True, **overrides):
    """A valid quiz draft with one question per entry in ``correct_options``."""
    data = {
        'title': 'Python Basics',
        'description': 'Core syntax and types',
        'time_limit': 30,
        'published': published,
        'questions': [
            question_payload(text=f'Question number {idx + 1} text?', correct_option=correct,
                             explanation=f'Because option {correct} is right', order=idx)
            for idx, correct in enumerate(correct_options)
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture
def app_factory():
    """Build apps with extra config on top of TEST_CONFIG."""
    def _build(**overrides):
        config = dict(TEST_CONFIG)
        config.update(overrides)
        return create_app(config)
    return _build


@pytest.fixture
def app(app_factory):
    app = app_factory()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Insert a user directly and return its id, credentials and bearer headers."""
    counter = itertools.count(1)

    def _make(role='STUDENT', name=None, password='password123'):
        n = next(counter)
        email = f'{role.lower()}{n}@example.com'
        with app.app_context():
            user = User(
                email=email,
                name=name or f'{role.title()} {n}',
                role=role,
                password_hash=hash_password(password),
            )
            db.session.add(user)
            db.session.commit()
            return {
                'id': user.id,
                'email': email,
                'name': user.name,
                'password': password,
                'headers': auth_headers(issue_access_token(user)),
            }
    return _make


@pytest.fixture
def teacher(make_user):
    return make_user('TEACHER')


@pytest.fixture
def other_teacher(make_user):
    return make_user('TEACHER')


@pytest.fixture
def student(make_user):
    return make_user('STUDENT')


@pytest.fixture
def admin(make_user):
    return make_user('ADMIN')


@pytest.fixture
def create_quiz(client, teacher):
    """POST a quiz as ``teacher`` (or another owner) and return the response body."""
    def _create(owner=None, **kwargs):
        owner = owner or teacher
        response = client.post('/api/quizzes', json=quiz_payload(**kwargs), headers=owner['headers'])
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _create
