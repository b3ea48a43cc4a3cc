import pytest
from flask import Flask
from flask_bcrypt import Bcrypt

from app import create_app, socketio
from config import Config
from tests.fakes import FakeRepository


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    FIREBASE_ENABLED = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    SOCKETIO_ASYNC_MODE = 'threading'
    DEADLINE_CHECK_INTERVAL = 0.05
    LOG_LEVEL = 'WARNING'


@pytest.fixture()
def hasher():
    app = Flask(__name__)
    app.config['BCRYPT_LOG_ROUNDS'] = 4
    return Bcrypt(app)


@pytest.fixture()
def repository(hasher):
    repo = FakeRepository()
    repo.add_professor(
        'prof-1',
        name='Maria Santos',
        email='maria@college.edu',
        departmentId='dept-cs',
        departmentName='Computer Science',
        passwordHash=hasher.generate_password_hash('correct-horse').decode('utf-8'),
        status='Active',
        subjectSections=[
            {'subject': 'Data Structures', 'sections': ['BSCS-2A', 'BSCS-2B']},
        ],
        subjects=['Data Structures'],
    )
    return repo


@pytest.fixture()
def app(repository):
    return create_app(TestConfig, repository=repository)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def logged_in_client(client):
    r = client.post('/auth/login', data={'email': 'maria@college.edu', 'password': 'correct-horse'})
    assert r.status_code == 200
    return client


@pytest.fixture()
def socket_client(app, logged_in_client):
    sio = socketio.test_client(app, flask_test_client=logged_in_client)
    yield sio
    if sio.is_connected():
        sio.disconnect()


@pytest.fixture(autouse=True)
def stop_live_dashboards():
    yield
    from app import events
    for professor_id in list(events._dashboards):
        events.stop_dashboards(professor_id)
