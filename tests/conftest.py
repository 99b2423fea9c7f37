# tests/conftest.py
import os
import tempfile
from datetime import timedelta

# Must be set before the package reads its configuration
os.environ.setdefault('LOGS_PATH', os.path.join(tempfile.gettempdir(), 'audio_classifier_test_logs'))

import pytest
from audio_classifier import create_app, db
from audio_classifier.config.settings import TestingConfig
from audio_classifier.core.database import Account, ROLE_ADMINISTRATOR, ROLE_USER, utcnow
from audio_classifier.services.auth_service import AuthGuard


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clock():
    return FakeClock(utcnow())


@pytest.fixture
def guard(app, clock):
    return AuthGuard.from_config(db.session, app.config, clock=clock)


@pytest.fixture
def user_account(guard):
    return guard.create_account('user@example.com', 'user-pass-123', ROLE_USER).value


@pytest.fixture
def admin_account(guard):
    return guard.create_account('admin@example.com', 'admin-pass-123', ROLE_ADMINISTRATOR).value


@pytest.fixture
def user_headers(guard, user_account):
    return {'Authorization': f'Bearer {guard.issue_token(user_account)}'}


@pytest.fixture
def admin_headers(guard, admin_account):
    return {'Authorization': f'Bearer {guard.issue_token(admin_account)}'}


@pytest.fixture
def reload_account(app):
    def reload(account_id):
        db.session.expire_all()
        return db.session.get(Account, account_id)
    return reload
