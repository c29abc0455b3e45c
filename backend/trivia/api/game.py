from flask import Blueprint, current_app, jsonify, request

from trivia.services.game import rounds, session
from trivia.services.game.errors import CatalogUnavailable, SubmissionRejected
from trivia.socketio_events import broadcast_state_update

game = Blueprint('game', __name__)

_MESSAGES = {
    rounds.WAITING: 'Answer submitted',
    rounds.ADVANCED: 'Correct! Moving to the next question',
    rounds.COMPLETED: 'All questions answered. Game complete!',
    rounds.DISAGREEMENT: 'Answers submitted, time to agree on one',
    rounds.CONSENSUS_MISMATCH: 'Consensus answers differ, please agree and try again',
    rounds.HINTED_RETRY: 'Agreed answer was incorrect, a hint is now available',
}


@game.errorhandler(SubmissionRejected)
def handle_rejected(exc):
    return jsonify({'error': exc.message}), exc.status_code


@game.errorhandler(CatalogUnavailable)
def handle_catalog_unavailable(exc):
    current_app.logger.error(f"[catalog] {exc.message}")
    return jsonify({'error': 'Question catalog unavailable'}), exc.status_code


def _submission_payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    return data.get('player'), data.get('answer')


def _submission_response(result):
    # Emitted after the lock is released, so concurrent updates may arrive out
    # of commit order; clients refetch the full view on every event.
    broadcast_state_update(result.state, result.outcome)
    return jsonify({
        'success': True,
        'message': _MESSAGES.get(result.outcome, 'Answer submitted'),
        'outcome': result.outcome,
        'waitingForOther': result.outcome == rounds.WAITING,
    })


@game.route('/state', methods=['GET'])
def get_state():
    """Returns the game as seen by the requesting player."""
    player = request.args.get('player')
    return jsonify(session.player_view(player))


@game.route('/answer', methods=['POST'])
def submit_answer():
    """Submits a first-round answer for the current question."""
    player, answer = _submission_payload()
    result = session.submit_answer(player, answer)
    return _submission_response(result)


@game.route('/consensus', methods=['POST'])
def submit_consensus():
    """Submits one player's consensus answer while the pair disagrees."""
    player, answer = _submission_payload()
    result = session.submit_consensus(player, answer)
    return _submission_response(result)


@game.route('/resolve', methods=['POST'])
def resolve_disagreement():
    """Deprecated single-submitter resolution; both players now use /consensus."""
    current_app.logger.warning('[deprecated] /api/resolve called; use /api/consensus')
    return jsonify({
        'error': 'Single-submitter resolution is no longer supported; each player must POST /api/consensus',
    }), 410


@game.route('/reset', methods=['POST'])
def reset_game():
    """Restarts the game from the first question."""
    state = session.reset_game()
    broadcast_state_update(state, 'reset')
    return jsonify({'success': True, 'message': 'Game reset successfully'})


@game.route('/history', methods=['GET'])
def get_history():
    state = session.get_state()
    return jsonify({
        'history': state.history,
        'totalQuestions': len(session.get_questions()),
    })
