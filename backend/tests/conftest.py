import json
import os
import sys

import pytest

# Ensure the backend root (containing the `trivia` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from trivia import create_app, db, socketio
from trivia.services.game.catalog import Question

# "A" is always the correct choice
QUESTIONS = [
    {
        'question': f'Question {n}?',
        'choices': ['A', 'B', 'C', 'D'],
        'correct_answer': 'A',
        'hint': f'Hint {n}',
    }
    for n in range(1, 6)
]


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = True
    VALIDATE_CATALOG_ON_STARTUP = True
    LOG_LEVEL = 'DEBUG'
    LOG_TO_FILE = False
    CORS_ORIGINS = ['*']
    MIGRATIONS_DIR = os.path.join(BACKEND_ROOT, 'migrations')


@pytest.fixture()
def questions():
    return [
        Question(text=q['question'], choices=tuple(q['choices']), correct_answer=q['correct_answer'], hint=q['hint'])
        for q in QUESTIONS
    ]


@pytest.fixture()
def questions_file(tmp_path):
    path = tmp_path / 'questions.json'
    path.write_text(json.dumps({'questions': QUESTIONS}), encoding='utf-8')
    return str(path)


@pytest.fixture()
def flask_app(questions_file):
    config = type('Config', (TestConfig,), {'QUESTIONS_FILE': questions_file})
    application = create_app(config)
    with application.app_context():
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
