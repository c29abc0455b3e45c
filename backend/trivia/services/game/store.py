"""Durable storage for the single game state record."""
import json

from flask import current_app

from trivia import db
from trivia.models import GameStateRecord
from .state import GameState, utc_now

STATE_KEY = 'current'


def load_state(key: str = STATE_KEY, for_update: bool = False) -> GameState:
    """Return the stored state, or a freshly saved one if none is usable.

    A missing or corrupt record never reaches the caller as an error. With
    ``for_update`` the row stays locked until the next commit, which keeps
    read-modify-write cycles serialized across worker processes on databases
    that support row locks.
    """
    query = GameStateRecord.query.filter_by(key=key)
    if for_update:
        query = query.with_for_update(nowait=False)
    record = query.first()
    if record is None:
        current_app.logger.info(f"[state-init] key={key} no stored state, creating initial state")
        return save_state(GameState(), key=key)
    try:
        state = GameState.from_dict(json.loads(record.payload))
    except ValueError as exc:
        # json.JSONDecodeError is a ValueError too
        current_app.logger.warning(f"[state-corrupt] key={key} failed to load game state, creating new state: {exc}")
        return save_state(GameState(), key=key)
    current_app.logger.debug(
        f"[state-load] key={key} question={state.current_question_index} phase={state.phase}"
    )
    return state


def save_state(state: GameState, key: str = STATE_KEY) -> GameState:
    """Persist ``state`` in one transaction and return it."""
    state.last_modified = utc_now()
    payload = json.dumps(state.to_dict())
    try:
        record = GameStateRecord.query.filter_by(key=key).first()
        if record is None:
            record = GameStateRecord(key=key, payload=payload)
        else:
            record.payload = payload
        db.session.add(record)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.error(f"[state-save] key={key} failed to save game state", exc_info=True)
        raise
    current_app.logger.debug(f"[state-save] key={key} question={state.current_question_index}")
    return state


def reset_state(key: str = STATE_KEY) -> GameState:
    current_app.logger.warning(f"[state-reset] key={key} replacing game state")
    return save_state(GameState(), key=key)
