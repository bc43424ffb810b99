from flask import Blueprint, jsonify, request
from bingo.services.games.registry import get_registry


games = Blueprint('games', __name__)


def _participant(data, field):
    value = data.get(field)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@games.route('/', methods=['GET'], strict_slashes=False)
def list_games():
    """
    Returns one page of games in creation order. Pages past the end are empty.
    """
    page_size = request.args.get('page_size', 10, type=int)
    page_index = request.args.get('page_index', 0, type=int)
    registry = get_registry()
    now = registry.now()
    page = registry.list_sessions(page_size, page_index)
    return jsonify({
        'page_size': page_size,
        'page_index': page_index,
        'games': [g.to_dict(now) for g in page],
    })


@games.route('/create', methods=['POST'])
def create_game():
    """
    Creates a new game, charges the creator's entry fee and seats them as the first player.
    """
    data = request.get_json(silent=True) or {}
    creator = _participant(data, 'creator')
    if not creator:
        return jsonify({'error': 'Creator is required'}), 400

    registry = get_registry()
    game = registry.create(creator)
    return jsonify(game.to_dict(registry.now())), 201


@games.route('/<int:game_id>', methods=['GET'])
def get_game_state(game_id):
    registry = get_registry()
    game = registry.get_session(game_id)
    return jsonify(game.to_dict(registry.now()))


@games.route('/<int:game_id>/join', methods=['POST'])
def join_game(game_id):
    data = request.get_json(silent=True) or {}
    participant = _participant(data, 'participant')
    if not participant:
        return jsonify({'error': 'Participant is required'}), 400

    registry = get_registry()
    game = registry.join(game_id, participant)
    return jsonify(game.to_dict(registry.now())), 201


@games.route('/<int:game_id>/cancel', methods=['POST'])
def cancel_game(game_id):
    """
    Cancels a game nobody else joined, once the join window has closed.
    An ineligible game is left untouched; clients check 'cancelled'.
    """
    data = request.get_json(silent=True) or {}
    caller = _participant(data, 'caller')
    if not caller:
        return jsonify({'error': 'Caller is required'}), 400

    registry = get_registry()
    cancelled = registry.cancel(game_id, caller)
    payload = {'game_id': game_id, 'cancelled': cancelled}
    if not cancelled:
        payload['game'] = registry.get_session(game_id).to_dict(registry.now())
    return jsonify(payload)


@games.route('/<int:game_id>/draw', methods=['POST'])
def draw_number(game_id):
    data = request.get_json(silent=True) or {}
    caller = _participant(data, 'caller')
    if not caller:
        return jsonify({'error': 'Caller is required'}), 400

    registry = get_registry()
    number = registry.draw_number(game_id, caller)
    game = registry.get_session(game_id)
    return jsonify({'number': number, 'game': game.to_dict(registry.now())})


@games.route('/<int:game_id>/bingo', methods=['POST'])
def shout_bingo(game_id):
    data = request.get_json(silent=True) or {}
    caller = _participant(data, 'caller')
    if not caller:
        return jsonify({'error': 'Caller is required'}), 400

    registry = get_registry()
    game = registry.shout_bingo(game_id, caller)
    return jsonify(game.to_dict(registry.now()))


@games.route('/<int:game_id>/board/<string:participant>', methods=['GET'])
def get_board(game_id, participant):
    board = get_registry().get_board(game_id, participant)
    if board is None:
        return jsonify({'error': 'no_board', 'message': 'Participant has no board in this game'}), 404
    return jsonify({'game_id': game_id, 'participant': participant, 'board': board})
