"""Round state machine.

Two entry points drive every transition of the shared game state:

- ``submit_first_round_answer``: a player's initial answer for the current
  question.
- ``submit_consensus_answer``: a player's proposed agreed answer while the
  pair is in disagreement.

Both are pure. They take the current state and return a ``RoundResult``
holding a new state plus an outcome tag; the input state is never modified,
so a caller that fails to persist the result has applied nothing. Requests
that are not valid for the current phase come back as ``REJECTED`` with an
unchanged copy of the state.

The older single-submitter resolution, where either player could settle a
disagreement alone, is not supported; consensus requires both players.
"""
import copy
from collections import namedtuple
from typing import Optional, Sequence

from .catalog import Question
from .players import PLAYERS, empty_slots, is_valid_answer, is_valid_player, other_player
from .state import GameState, utc_now

WAITING = 'waiting'
ADVANCED = 'advanced'
COMPLETED = 'completed'
DISAGREEMENT = 'disagreement'
CONSENSUS_MISMATCH = 'consensus_mismatch'
HINTED_RETRY = 'hinted_retry'
REJECTED = 'rejected'

RoundResult = namedtuple('RoundResult', ['state', 'outcome'])


def current_question(state: GameState, questions: Sequence[Question]) -> Optional[Question]:
    if state.completed or state.current_question_index >= len(questions):
        return None
    return questions[state.current_question_index]


def can_submit_first_round(state: GameState, player: str, questions: Sequence[Question]) -> bool:
    """First submission wins, except during disagreement where answers may be revised."""
    if not is_valid_player(player) or current_question(state, questions) is None:
        return False
    return state.answers.get(player) is None or state.in_disagreement


def can_submit_consensus(state: GameState, player: str, questions: Sequence[Question]) -> bool:
    if not is_valid_player(player) or current_question(state, questions) is None:
        return False
    return state.in_disagreement and state.consensus_answers.get(player) is None


def submit_first_round_answer(state, player, value, questions, now=None) -> RoundResult:
    question = current_question(state, questions)
    if (not can_submit_first_round(state, player, questions)
            or not is_valid_answer(value, question.choices)):
        return RoundResult(copy.deepcopy(state), REJECTED)

    nxt = copy.deepcopy(state)
    nxt.answers[player] = value
    nxt.show_hint = False
    nxt.disagreement_resolved = False

    if nxt.answers[other_player(player)] is None:
        return RoundResult(nxt, WAITING)

    if all(question.is_correct(nxt.answers[p]) for p in PLAYERS):
        nxt.history.append(_history_entry(nxt, question, now, {
            'answers': dict(nxt.answers),
            'bothCorrect': True,
            'wasCorrect': True,
            'wasConsensus': False,
        }))
        return RoundResult(nxt, _advance(nxt, questions))

    # Answers stay visible to both players while they work towards consensus
    nxt.in_disagreement = True
    nxt.consensus_answers = empty_slots()
    return RoundResult(nxt, DISAGREEMENT)


def submit_consensus_answer(state, player, value, questions, now=None) -> RoundResult:
    question = current_question(state, questions)
    if (not can_submit_consensus(state, player, questions)
            or not is_valid_answer(value, question.choices)):
        return RoundResult(copy.deepcopy(state), REJECTED)

    nxt = copy.deepcopy(state)
    nxt.consensus_answers[player] = value

    theirs = nxt.consensus_answers[other_player(player)]
    if theirs is None:
        return RoundResult(nxt, WAITING)

    if theirs != value:
        nxt.consensus_answers = empty_slots()
        return RoundResult(nxt, CONSENSUS_MISMATCH)

    correct = question.is_correct(value)
    nxt.history.append(_history_entry(nxt, question, now, {
        'initialAnswers': dict(nxt.answers),
        'agreedAnswer': value,
        'wasCorrect': correct,
        'wasConsensus': True,
    }))
    nxt.disagreement_resolved = True
    if correct:
        return RoundResult(nxt, _advance(nxt, questions))

    nxt.answers = empty_slots()
    nxt.consensus_answers = empty_slots()
    nxt.in_disagreement = False
    nxt.show_hint = True
    return RoundResult(nxt, HINTED_RETRY)


def _advance(state: GameState, questions: Sequence[Question]) -> str:
    state.current_question_index += 1
    state.answers = empty_slots()
    state.consensus_answers = empty_slots()
    state.in_disagreement = False
    state.show_hint = False
    if state.current_question_index >= len(questions):
        state.completed = True
        return COMPLETED
    return ADVANCED


def _history_entry(state, question, now, extra):
    entry = {
        'question': state.current_question_index,
        'questionText': question.text,
        'correctAnswer': question.correct_answer,
        'timestamp': now or utc_now(),
    }
    entry.update(extra)
    return entry
