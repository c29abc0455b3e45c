from flask import Blueprint, jsonify, request

from trivia.services.game.players import PLAYERS, is_valid_player

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to Birthday Trivia!',
        'players': list(PLAYERS),
        'games': {p: f'/game?player={p}' for p in PLAYERS},
    })


@main.route('/game')
def game_page():
    player = request.args.get('player')
    if not is_valid_player(player):
        return jsonify({'error': 'Invalid player. Please use the links provided.'}), 400
    return jsonify({
        'player': player,
        'state': f'/api/state?player={player}',
        'answer': '/api/answer',
        'consensus': '/api/consensus',
        'socket_namespace': '/ws',
    })


@main.route('/health')
def health():
    return jsonify({'status': 'healthy'})
