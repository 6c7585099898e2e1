from flask_socketio import SocketIO


class SocketIOTransport:
    """Deliver coordinator events through Flask-SocketIO.

    ``to`` is a connection sid; ``None`` fans out to every connection on the
    namespace.
    """

    def __init__(self, socketio: SocketIO, namespace: str = '/ws'):
        self._socketio = socketio
        self.namespace = namespace

    def emit(self, event, payload=None, to=None):
        args = () if payload is None else (payload,)
        self._socketio.emit(event, *args, to=to, namespace=self.namespace)
