from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .players import PLAYERS, empty_slots

NORMAL = 'normal'
DISAGREEMENT = 'disagreement'
HINTED_RETRY = 'hinted_retry'
COMPLETED = 'completed'


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class GameState:
    """The single game record shared by both players.

    Serialized with camelCase keys; ``from_dict`` fills in defaults for any
    field an older record does not carry.
    """
    current_question_index: int = 0
    answers: Dict[str, Optional[str]] = field(default_factory=empty_slots)
    consensus_answers: Dict[str, Optional[str]] = field(default_factory=empty_slots)
    in_disagreement: bool = False
    disagreement_resolved: bool = False
    show_hint: bool = False
    completed: bool = False
    history: List[dict] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now)
    last_modified: str = field(default_factory=utc_now)

    @property
    def phase(self) -> str:
        if self.completed:
            return COMPLETED
        if self.in_disagreement:
            return DISAGREEMENT
        if self.show_hint:
            return HINTED_RETRY
        return NORMAL

    def to_dict(self):
        return {
            'currentQuestionIndex': self.current_question_index,
            'answers': dict(self.answers),
            'consensusAnswers': dict(self.consensus_answers),
            'inDisagreement': self.in_disagreement,
            'disagreementResolved': self.disagreement_resolved,
            'showHint': self.show_hint,
            'completed': self.completed,
            'history': list(self.history),
            'createdAt': self.created_at,
            'lastModified': self.last_modified,
        }

    @classmethod
    def from_dict(cls, data) -> 'GameState':
        """Rebuild a state from its stored form.

        Raises ValueError when the record is not usable. Records written
        before consensus answers and hints existed load with those fields
        reset, and the legacy ``currentQuestion`` key is honoured.
        """
        if not isinstance(data, dict):
            raise ValueError('game state must be a JSON object')

        index = data.get('currentQuestionIndex', data.get('currentQuestion', 0))
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise ValueError(f'invalid question index: {index!r}')

        now = utc_now()
        return cls(
            current_question_index=index,
            answers=_slots(data.get('answers'), 'answers'),
            consensus_answers=_slots(data.get('consensusAnswers'), 'consensusAnswers'),
            in_disagreement=_flag(data, 'inDisagreement'),
            disagreement_resolved=_flag(data, 'disagreementResolved'),
            show_hint=_flag(data, 'showHint'),
            completed=_flag(data, 'completed'),
            history=_history(data.get('history')),
            created_at=data.get('createdAt') or now,
            last_modified=data.get('lastModified') or now,
        )


def _slots(raw, name) -> Dict[str, Optional[str]]:
    if raw is None:
        return empty_slots()
    if not isinstance(raw, dict):
        raise ValueError(f'{name} must be an object')
    slots = empty_slots()
    for player in PLAYERS:
        value = raw.get(player)
        if value is not None and not isinstance(value, str):
            raise ValueError(f'{name}.{player} must be a string or null')
        slots[player] = value
    return slots


def _flag(data, key) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f'{key} must be a boolean')
    return value


def _history(raw) -> List[dict]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError('history must be a list')
    return list(raw)
