from flask import current_app, request
from flask_socketio import emit
from tictactoe import socketio
from tictactoe.services.games.coordinator import Coordinator


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _coordinator() -> Coordinator:
    return current_app.extensions['coordinator']


def _field(data, key):
    """Payloads may be a bare value or an object carrying ``key``."""
    if isinstance(data, dict):
        return data.get(key)
    return data


def handle_connect():
    emit('connected', {'message': 'Connected'})


def handle_disconnect(reason=None):
    _coordinator().disconnect(_get_sid())


def handle_join(data=None):
    _coordinator().join(_get_sid(), _field(data, 'username'))


def handle_find_match(data=None):
    _coordinator().find_match(_get_sid())


def handle_cancel_search(data=None):
    _coordinator().cancel_search(_get_sid())


def handle_make_move(data=None):
    if not isinstance(data, dict):
        return
    _coordinator().make_move(_get_sid(), data.get('gameId'), data.get('position'))


def handle_start_tournament(data=None):
    _coordinator().start_tournament(_get_sid())


def handle_rematch(data=None):
    _coordinator().request_rematch(_get_sid(), _field(data, 'gameId'))


def handle_accept_rematch(data=None):
    _coordinator().accept_rematch(_get_sid(), _field(data, 'requesterId'))


def handle_chat_message(data=None):
    _coordinator().chat(_get_sid(), _field(data, 'message'))


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Bind the lobby and game events on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join', handle_join, namespace=namespace)
    socketio.on_event('findMatch', handle_find_match, namespace=namespace)
    socketio.on_event('cancelSearch', handle_cancel_search, namespace=namespace)
    socketio.on_event('makeMove', handle_make_move, namespace=namespace)
    socketio.on_event('startTournament', handle_start_tournament, namespace=namespace)
    socketio.on_event('rematch', handle_rematch, namespace=namespace)
    socketio.on_event('acceptRematch', handle_accept_rematch, namespace=namespace)
    socketio.on_event('chatMessage', handle_chat_message, namespace=namespace)
