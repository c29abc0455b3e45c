import threading


def _answer(client, player, answer):
    return client.post('/api/answer', json={'player': player, 'answer': answer})


def _consensus(client, player, answer):
    return client.post('/api/consensus', json={'player': player, 'answer': answer})


def _state(client, player='lachlan'):
    return client.get(f'/api/state?player={player}').get_json()


def test_index_and_health(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['players'] == ['lachlan', 'leigh']
    assert client.get('/health').get_json() == {'status': 'healthy'}


def test_game_page_requires_known_player(client):
    assert client.get('/game?player=leigh').status_code == 200
    assert client.get('/game?player=bob').status_code == 400


def test_initial_state(client):
    res = client.get('/api/state?player=lachlan')
    assert res.status_code == 200
    state = res.get_json()
    assert state['currentQuestion'] == 0
    assert state['totalQuestions'] == 5
    assert state['phase'] == 'normal'
    assert state['question'] == {'text': 'Question 1?', 'choices': ['A', 'B', 'C', 'D']}
    assert state['playerAnswered'] is False
    assert 'answers' not in state


def test_state_rejects_unknown_player(client):
    res = client.get('/api/state?player=mallory')
    assert res.status_code == 400
    assert res.get_json() == {'error': 'Invalid player'}


def test_both_correct_advances(client):
    res = _answer(client, 'lachlan', 'A')
    assert res.status_code == 200
    assert res.get_json()['waitingForOther'] is True

    mine = _state(client, 'lachlan')
    theirs = _state(client, 'leigh')
    assert mine['playerAnswered'] is True and mine['playerAnswer'] == 'A'
    assert theirs['otherPlayerAnswered'] is True and theirs['playerAnswer'] is None

    res = _answer(client, 'leigh', 'A')
    body = res.get_json()
    assert body['outcome'] == 'advanced'
    assert body['waitingForOther'] is False
    state = _state(client)
    assert state['currentQuestion'] == 1
    assert state['playerAnswered'] is False
    assert state['otherPlayerAnswered'] is False


def test_double_answer_is_rejected(client):
    _answer(client, 'lachlan', 'A')
    res = _answer(client, 'lachlan', 'B')
    assert res.status_code == 400
    assert res.get_json()['error'] == 'You have already answered this question'
    assert _state(client)['playerAnswer'] == 'A'


def test_answer_validation(client):
    assert _answer(client, 'bob', 'A').status_code == 400
    assert _answer(client, 'lachlan', None).get_json() == {'error': 'Answer is required'}
    assert _answer(client, 'lachlan', 'Z').get_json() == {'error': 'Invalid answer choice'}
    assert client.post('/api/answer', data='nonsense', content_type='text/plain').status_code == 400
    assert _state(client)['playerAnswered'] is False


def test_disagreement_then_correct_consensus(client):
    _answer(client, 'lachlan', 'A')
    assert _answer(client, 'leigh', 'B').get_json()['outcome'] == 'disagreement'

    state = _state(client, 'leigh')
    assert state['inDisagreement'] is True
    assert state['phase'] == 'disagreement'
    assert state['answers'] == {'lachlan': 'A', 'leigh': 'B'}
    assert state['currentQuestion'] == 0

    assert _consensus(client, 'lachlan', 'A').get_json()['waitingForOther'] is True
    assert _state(client, 'leigh')['otherPlayerConsensusSubmitted'] is True
    assert _consensus(client, 'leigh', 'A').get_json()['outcome'] == 'advanced'

    state = _state(client)
    assert state['currentQuestion'] == 1
    assert state['inDisagreement'] is False
    assert state['showHint'] is False


def test_consensus_mismatch_keeps_disagreement(client):
    _answer(client, 'lachlan', 'A')
    _answer(client, 'leigh', 'B')
    _consensus(client, 'lachlan', 'A')
    assert _consensus(client, 'leigh', 'B').get_json()['outcome'] == 'consensus_mismatch'

    state = _state(client)
    assert state['inDisagreement'] is True
    assert state['playerConsensusSubmitted'] is False
    assert state['otherPlayerConsensusSubmitted'] is False
    assert state['currentQuestion'] == 0


def test_incorrect_consensus_reveals_hint(client):
    _answer(client, 'lachlan', 'A')
    _answer(client, 'leigh', 'B')
    _consensus(client, 'lachlan', 'B')
    assert _consensus(client, 'leigh', 'B').get_json()['outcome'] == 'hinted_retry'

    state = _state(client)
    assert state['showHint'] is True
    assert state['phase'] == 'hinted_retry'
    assert state['question']['hint'] == 'Hint 1'
    assert state['currentQuestion'] == 0
    assert state['playerAnswered'] is False

    _answer(client, 'leigh', 'A')
    state = _state(client)
    assert state['showHint'] is False
    assert 'hint' not in state['question']


def test_consensus_outside_disagreement_is_rejected(client):
    res = _consensus(client, 'lachlan', 'A')
    assert res.status_code == 400
    assert res.get_json() == {'error': 'Not in disagreement state'}


def test_second_consensus_is_rejected(client):
    _answer(client, 'lachlan', 'A')
    _answer(client, 'leigh', 'B')
    _consensus(client, 'lachlan', 'A')
    res = _consensus(client, 'lachlan', 'C')
    assert res.status_code == 400
    assert _state(client)['playerConsensusAnswer'] == 'A'


def test_resolve_is_gone(client):
    res = client.post('/api/resolve', json={'agreedAnswer': 'A'})
    assert res.status_code == 410


def test_full_game_completes(client):
    for _ in range(5):
        _answer(client, 'lachlan', 'A')
        _answer(client, 'leigh', 'A')

    state = _state(client)
    assert state['completed'] is True
    assert state['phase'] == 'completed'
    assert state['currentQuestion'] == 5
    assert 'question' not in state
    assert len(state['history']) == 5

    res = _answer(client, 'lachlan', 'A')
    assert res.status_code == 400
    assert res.get_json() == {'error': 'No more questions'}

    history = client.get('/api/history').get_json()
    assert history['totalQuestions'] == 5
    assert [h['question'] for h in history['history']] == [0, 1, 2, 3, 4]


def test_reset_restarts_game(client):
    _answer(client, 'lachlan', 'A')
    _answer(client, 'leigh', 'A')
    res = client.post('/api/reset')
    assert res.get_json()['success'] is True
    state = _state(client)
    assert state['currentQuestion'] == 0
    assert state['playerAnswered'] is False


def test_unknown_route_returns_json_404(client):
    res = client.get('/api/nope')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Not found'}


def test_reset_game_cli(flask_app):
    from trivia.services.game.store import load_state, save_state
    from trivia.services.game.state import GameState

    save_state(GameState(current_question_index=3))
    result = flask_app.test_cli_runner().invoke(args=['reset-game'])
    assert 'Game has been reset!' in result.output
    assert load_state().current_question_index == 0


def test_simultaneous_answers_are_both_recorded(flask_app, client):
    barrier = threading.Barrier(2)
    outcomes = {}

    def submit(player):
        player_client = flask_app.test_client()
        barrier.wait()
        outcomes[player] = _answer(player_client, player, 'A').get_json()['outcome']

    threads = [threading.Thread(target=submit, args=(p,)) for p in ('lachlan', 'leigh')]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes.values()) == ['advanced', 'waiting']
    assert _state(client)['currentQuestion'] == 1


def test_non_object_body_is_rejected(client):
    for body in (['lachlan', 'A'], 'A', 7):
        res = client.post('/api/answer', json=body)
        assert res.status_code == 400
        assert res.get_json() == {'error': 'Invalid player'}
        assert client.post('/api/consensus', json=body).status_code == 400
    assert _state(client)['playerAnswered'] is False


def test_revised_answer_in_disagreement_drops_partner_consensus(client):
    _answer(client, 'lachlan', 'A')
    _answer(client, 'leigh', 'B')
    _consensus(client, 'lachlan', 'A')

    res = _answer(client, 'leigh', 'C')
    assert res.get_json()['outcome'] == 'disagreement'
    state = _state(client, 'leigh')
    assert state['answers'] == {'lachlan': 'A', 'leigh': 'C'}
    assert state['otherPlayerConsensusSubmitted'] is False
    assert state['inDisagreement'] is True


def test_unexpected_failure_returns_generic_500(client, monkeypatch):
    from trivia.services.game import session

    def explode():
        raise RuntimeError('database path /secret/trivia.db is locked')

    monkeypatch.setattr(session, 'get_state', explode)
    res = client.get('/api/history')
    assert res.status_code == 500
    assert res.get_json() == {'error': 'Internal server error'}
