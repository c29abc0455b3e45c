"""Serialized game operations used by the HTTP and socket layers.

Each operation loads the catalog and the stored state, validates the request,
applies a round transition and saves the result while holding ``state_lock``,
so two players submitting at the same moment can never overwrite each
other's answer.
"""
import threading
from typing import List

from flask import current_app

from . import rounds
from .catalog import Question, load_questions
from .errors import (
    AlreadyAnswered,
    GameCompleted,
    InvalidAnswer,
    InvalidPlayer,
    MissingField,
    NotInDisagreement,
)
from .players import is_valid_answer, is_valid_player, other_player
from .state import GameState
from .store import load_state, reset_state, save_state

state_lock = threading.Lock()


def get_questions() -> List[Question]:
    return load_questions(current_app.config['QUESTIONS_FILE'])


def _require_player(player) -> None:
    if not is_valid_player(player):
        current_app.logger.warning(f"[reject] invalid player identifier: {player!r}")
        raise InvalidPlayer(player)


def _require_open_question(state: GameState, questions, player) -> Question:
    question = rounds.current_question(state, questions)
    if question is None:
        current_app.logger.warning(f"[reject] player={player} attempted to answer beyond last question")
        raise GameCompleted()
    return question


def _require_answer(answer, player) -> None:
    if not answer:
        current_app.logger.warning(f"[reject] player={player} missing answer")
        raise MissingField('answer')


def _require_choice(answer, question: Question, player) -> None:
    if not is_valid_answer(answer, question.choices):
        current_app.logger.warning(f"[reject] player={player} invalid answer choice: {answer!r}")
        raise InvalidAnswer(answer)


def submit_answer(player, answer) -> rounds.RoundResult:
    """Record a first-round answer for ``player``."""
    _require_player(player)
    _require_answer(answer, player)
    with state_lock:
        questions = get_questions()
        state = load_state(for_update=True)
        question = _require_open_question(state, questions, player)
        _require_choice(answer, question, player)
        if not rounds.can_submit_first_round(state, player, questions):
            current_app.logger.warning(f"[reject] player={player} attempted to answer twice")
            raise AlreadyAnswered('You have already answered this question')

        result = rounds.submit_first_round_answer(state, player, answer, questions)
        save_state(result.state)
    current_app.logger.info(
        f"[answer] player={player} question={state.current_question_index} "
        f"answer={answer!r} outcome={result.outcome}"
    )
    return result


def submit_consensus(player, answer) -> rounds.RoundResult:
    """Record a consensus answer for ``player`` during disagreement."""
    _require_player(player)
    _require_answer(answer, player)
    with state_lock:
        questions = get_questions()
        state = load_state(for_update=True)
        question = _require_open_question(state, questions, player)
        if not state.in_disagreement:
            current_app.logger.warning(f"[reject] player={player} consensus outside disagreement")
            raise NotInDisagreement()
        _require_choice(answer, question, player)
        if not rounds.can_submit_consensus(state, player, questions):
            current_app.logger.warning(f"[reject] player={player} attempted a second consensus answer")
            raise AlreadyAnswered('You have already submitted a consensus answer')

        result = rounds.submit_consensus_answer(state, player, answer, questions)
        save_state(result.state)
    current_app.logger.info(
        f"[consensus] player={player} question={state.current_question_index} "
        f"answer={answer!r} outcome={result.outcome}"
    )
    return result


def reset_game() -> GameState:
    with state_lock:
        return reset_state()


def get_state() -> GameState:
    with state_lock:
        return load_state()


def player_view(player) -> dict:
    """Return the state as seen by ``player``."""
    _require_player(player)
    with state_lock:
        questions = get_questions()
        state = load_state()
    return build_player_view(state, player, questions)


def build_player_view(state: GameState, player: str, questions) -> dict:
    other = other_player(player)
    view = {
        'player': player,
        'currentQuestion': state.current_question_index,
        'totalQuestions': len(questions),
        'phase': state.phase,
        'inDisagreement': state.in_disagreement,
        'showHint': state.show_hint,
        'completed': state.completed,
        'playerAnswered': state.answers.get(player) is not None,
        'otherPlayerAnswered': state.answers.get(other) is not None,
        'playerAnswer': state.answers.get(player),
        'playerConsensusSubmitted': state.consensus_answers.get(player) is not None,
        'otherPlayerConsensusSubmitted': state.consensus_answers.get(other) is not None,
        'playerConsensusAnswer': state.consensus_answers.get(player),
    }
    question = rounds.current_question(state, questions)
    if question is not None:
        view['question'] = question.to_dict(include_hint=state.show_hint)
        if state.in_disagreement:
            view['answers'] = dict(state.answers)
    if state.completed:
        view['history'] = list(state.history)
    return view
