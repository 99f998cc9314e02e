HOST_ROOM = 'host_room'


class Broadcaster:
    """Fans events out over Flask-SocketIO.

    Safe to call outside a request context (timer ticks), so it goes
    through ``socketio.emit`` and the server's room manager rather than the
    request-bound ``flask_socketio.emit``/``join_room`` helpers.
    """

    def __init__(self, socketio, namespace='/'):
        self.socketio = socketio
        self.namespace = namespace

    def _emit(self, event, payload, **kwargs):
        args = () if payload is None else (payload,)
        self.socketio.emit(event, *args, namespace=self.namespace, **kwargs)

    def to_everyone(self, event, payload=None):
        self._emit(event, payload)

    def to_connection(self, sid, event, payload=None):
        self._emit(event, payload, to=sid)

    def to_hosts(self, event, payload=None):
        self._emit(event, payload, to=HOST_ROOM)

    def add_host(self, sid):
        self.socketio.server.enter_room(sid, HOST_ROOM, namespace=self.namespace)
