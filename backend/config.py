import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'trivia.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Question catalog (JSON with a top-level "questions" array)
    QUESTIONS_FILE = os.environ.get('QUESTIONS_FILE') or os.path.join(BASE_DIR, 'questions.json')
    # Refuse to start when the catalog is missing or malformed
    VALIDATE_CATALOG_ON_STARTUP = _env_flag('VALIDATE_CATALOG_ON_STARTUP', True)
    # Alembic scripts for `flask db upgrade`
    MIGRATIONS_DIR = os.path.join(BASE_DIR, 'migrations')
    # Create tables on startup; disable when schema is managed with `flask db upgrade`
    AUTO_CREATE_TABLES = _env_flag('AUTO_CREATE_TABLES', True)
    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    LOG_TO_FILE = _env_flag('LOG_TO_FILE', True)
    LOG_FILE = os.environ.get('LOG_FILE') or os.path.join(BASE_DIR, 'logs', 'game.log')
    LOG_MAX_BYTES = int(os.environ.get('LOG_MAX_BYTES', str(5 * 1024 * 1024)))
    LOG_BACKUP_COUNT = int(os.environ.get('LOG_BACKUP_COUNT', '5'))
    # Comma separated list of allowed browser origins
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    PORT = int(os.environ.get('PORT', '3000'))
