from flask import request

from voteparty import get_game, socketio
from voteparty.commands import (
    Disconnect, HardReset, HostLogin, Join, NextRound, RequestState, ShowLeaderboard, StartRound, SubmitVote,
)


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def handle_connect(auth=None):
    get_game().logger.debug(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    get_game().dispatch(Disconnect(sid=_get_sid()))


def handle_join(data=None):
    data = _payload(data)
    get_game().dispatch(Join(sid=_get_sid(), name=data.get('name'), session_id=data.get('session_id')))


def handle_submit_vote(data=None):
    data = _payload(data)
    get_game().dispatch(SubmitVote(sid=_get_sid(), choice=data.get('choice'), session_id=data.get('session_id')))


def handle_request_state(data=None):
    get_game().dispatch(RequestState(sid=_get_sid()))


def handle_host_login(data=None):
    get_game().dispatch(HostLogin(sid=_get_sid(), password=_payload(data).get('password')))


def handle_admin_start_round(data=None):
    get_game().dispatch(StartRound(sid=_get_sid()))


def handle_admin_show_leaderboard(data=None):
    get_game().dispatch(ShowLeaderboard(sid=_get_sid()))


def handle_admin_next_round(data=None):
    get_game().dispatch(NextRound(sid=_get_sid()))


def handle_admin_hard_reset(data=None):
    get_game().dispatch(HardReset(sid=_get_sid()))


EVENT_HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'join': handle_join,
    'submit_vote': handle_submit_vote,
    'request_state': handle_request_state,
    'host_login': handle_host_login,
    'admin_start_round': handle_admin_start_round,
    'admin_show_leaderboard': handle_admin_show_leaderboard,
    'admin_next_round': handle_admin_next_round,
    'admin_hard_reset': handle_admin_hard_reset,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    for event, handler in EVENT_HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
