from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from trivia import socketio
from trivia.services.game.players import is_valid_player

NAMESPACE = '/ws'
GAME_ROOM = 'trivia'


def broadcast_state_update(state, outcome=None) -> None:
    """Tell every connected player to refetch their view."""
    socketio.emit(
        'state_update',
        {
            'currentQuestion': state.current_question_index,
            'phase': state.phase,
            'outcome': outcome,
        },
        to=GAME_ROOM,
        namespace=NAMESPACE,
    )


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_join_game(data):
    player = data.get('player') if isinstance(data, dict) else None
    if not is_valid_player(player):
        emit('error', {'message': 'Invalid player'})
        return
    join_room(GAME_ROOM)
    current_app.logger.info(f"[socket-join] player={player} sid={request.sid}")
    emit('joined', {'room': GAME_ROOM, 'player': player})


def handle_leave_game(data=None):
    leave_room(GAME_ROOM)
    emit('left', {'room': GAME_ROOM})


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_game', handle_join_game, namespace=namespace)
        socketio.on_event('leave_game', handle_leave_game, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
