from datetime import datetime, timezone

from trivia import db


def _utcnow():
    return datetime.now(timezone.utc)


class GameStateRecord(db.Model):
    """Key/value row holding a serialized GameState as JSON text."""
    __tablename__ = 'game_state'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(64), unique=True, nullable=False, index=True)
    payload = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
