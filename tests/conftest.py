"""Shared fixtures: a JSON-file store in tmp_path and an app wired to it."""
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from taskboard.app import create_app
from taskboard.config import Config
from taskboard.core.auth.models import User
from taskboard.core.auth.passwords import PasswordHasher
from taskboard.core.json_store import JsonFileRecordStore

TEST_SECRET = 'test-secret-key-with-at-least-32-bytes!!'

# Low iteration count keeps the suite fast; production uses DEFAULT_HASH_METHOD
FAST_HASH_METHOD = 'pbkdf2:sha256:1000'


@pytest.fixture
def fast_hasher():
    return PasswordHasher(method=FAST_HASH_METHOD)


@pytest.fixture
def store(tmp_path):
    return JsonFileRecordStore(str(tmp_path / 'db.json'))


def make_config(tmp_path, **overrides):
    values = dict(
        JWT_SECRET_KEY=TEST_SECRET,
        STORE_BACKEND='json',
        JSON_STORE_PATH=str(tmp_path / 'db.json'),
        COOKIE_SECURE=False,
        LOG_LEVEL='WARNING',
        LOGIN_RATE_LIMIT=1000,
    )
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def config(tmp_path):
    return make_config(tmp_path)


@pytest.fixture
def app(config, store, fast_hasher):
    return create_app(config, store=store, hasher=fast_hasher)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def alice():
    return User({'id': 1, 'email': 'alice@x.com', 'firstname': 'Alice',
                 'lastname': 'Smith', 'gender': 'female', 'age': 30})


@pytest.fixture
def bob():
    return User({'id': 2, 'email': 'bob@x.com', 'firstname': 'Bob',
                 'lastname': 'Jones', 'gender': 'male', 'age': 41})
