from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


def _coordinator():
    return current_app.extensions['coordinator']


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the tic-tac-toe tournament server!'})


@main.route('/api/lobby')
def lobby():
    return jsonify(_coordinator().lobby_snapshot())


@main.route('/api/leaderboard')
def leaderboard():
    """Full standings, not just the lobby's top entries."""
    return jsonify(_coordinator().leaderboard_snapshot())


@main.route('/api/tournament')
def tournament():
    return jsonify({'bracket': _coordinator().bracket_snapshot()})


@main.route('/api/games/<string:game_id>')
def game_state(game_id):
    state = _coordinator().game_state_snapshot(game_id)
    if state is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(state)
