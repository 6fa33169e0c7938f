from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from typing import Any, Dict, Optional

from gomoku import socketio
from gomoku.errors import GameError
from gomoku.models import Role
from gomoku.protocol import ProtocolError, parse_request


# ---- Peer -> room bookkeeping ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _registry():
    return current_app.extensions['gomoku_rooms']


def _leaderboard():
    return current_app.extensions['gomoku_leaderboard']


def _channel(room_code: str) -> str:
    return f"room:{room_code}"


def _bind(sid: str, room_code: str) -> None:
    _sid_to_ctx[sid] = {'room_code': room_code}
    join_room(_channel(room_code))


def _parse(event: str, data) -> Optional[Any]:
    try:
        return parse_request(event, data)
    except ProtocolError as exc:
        current_app.logger.warning(f"[bad-request] sid={_get_sid()} event={event} error={exc}")
        return None


def _context(room_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """Resolve the caller's room, ignoring requests aimed at another room."""
    sid = _get_sid()
    ctx = _sid_to_ctx.get(sid)
    if not ctx:
        current_app.logger.info(f"[no-room] sid={sid}")
        return None
    if room_id and room_id != ctx['room_code']:
        current_app.logger.info(f"[room-mismatch] sid={sid} room={ctx['room_code']} requested={room_id}")
        return None
    return ctx


def _reject(event: str, exc: GameError) -> None:
    # Rejections are not relayed; the client must not emit invalid requests
    current_app.logger.info(f"[rejected] sid={_get_sid()} event={event} code={exc.code}")


def _broadcast_leaderboard(stats: Dict[str, int]) -> None:
    socketio.emit('updateLeaderboard', stats, namespace=request.namespace)


def _leave_current(sid: str) -> None:
    """Detach a peer from its room. Safe to call any number of times."""
    ctx = _sid_to_ctx.pop(sid, None)
    if not ctx:
        return
    room_code = ctx['room_code']
    leave_room(_channel(room_code))
    outcome = _registry().leave(room_code, sid)
    if outcome.remaining:
        emit('opponentLeft', {'roomId': room_code}, to=outcome.remaining)
    if outcome.torn_down:
        current_app.logger.info(f"[room-closed] room={room_code}")


# ---- Event handlers ----

def handle_connect(auth=None):
    emit('updateLeaderboard', _leaderboard().snapshot())


def handle_disconnect(reason=None):
    _leave_current(_get_sid())


def handle_create_room(data=None):
    sid = _get_sid()
    _leave_current(sid)
    room = _registry().create_room(sid)
    _bind(sid, room.code)
    emit('roomCreated', {'roomId': room.code, 'player': int(Role.PLAYER_ONE)})


def handle_join_room(data=None):
    sid = _get_sid()
    try:
        req = parse_request('joinRoom', data)
    except ProtocolError as exc:
        emit('error', {'code': 'BadRequest', 'message': str(exc)})
        return
    try:
        room = _registry().join_room(sid, req.room_id)
    except GameError as exc:
        current_app.logger.info(f"[join-rejected] sid={sid} room={req.room_id} code={exc.code}")
        emit('error', exc.to_dict())
        return
    # Joined the new room; now drop whatever room the peer was in before
    _leave_current(sid)
    role = room.role_of(sid)
    _bind(sid, room.code)
    emit('roomJoined', {'roomId': room.code, 'player': int(role)})
    emit('startGame', {'roomId': room.code}, to=_channel(room.code))


def handle_make_move(data=None):
    req = _parse('makeMove', data)
    ctx = _context(req.room_id) if req else None
    if not ctx:
        return
    room_code = ctx['room_code']
    try:
        outcome = _registry().make_move(room_code, _get_sid(), req.row, req.col)
    except GameError as exc:
        _reject('makeMove', exc)
        return
    move = {'roomId': room_code, 'row': req.row, 'col': req.col, 'player': int(outcome.role)}
    if outcome.opponent:
        emit('moveMade', move, to=outcome.opponent)
    if outcome.won:
        emit('gameOver', {
            'roomId': room_code,
            'winner': int(outcome.role),
            'line': [list(cell) for cell in outcome.line],
        }, to=_channel(room_code))
        _broadcast_leaderboard(outcome.stats)


def handle_use_power(data=None):
    req = _parse('usePower', data)
    ctx = _context(req.room_id) if req else None
    if not ctx:
        return
    room_code = ctx['room_code']
    try:
        outcome = _registry().use_power(room_code, _get_sid(), req.row, req.col)
    except GameError as exc:
        _reject('usePower', exc)
        return
    if outcome.opponent:
        emit('powerUsed', {
            'roomId': room_code,
            'row': req.row,
            'col': req.col,
            # the browser client reads r/c
            'r': req.row,
            'c': req.col,
            'player': int(outcome.role),
        }, to=outcome.opponent)


def handle_report_win(data=None):
    req = _parse('reportWin', data)
    ctx = _context(None) if req else None
    if not ctx:
        return
    room_code = ctx['room_code']
    try:
        stats = _registry().report_win(room_code, _get_sid(), req.winner)
    except GameError as exc:
        _reject('reportWin', exc)
        return
    if stats is None:
        # Already counted when the winning move was validated
        return
    emit('gameOver', {'roomId': room_code, 'winner': int(req.winner), 'line': None}, to=_channel(room_code))
    _broadcast_leaderboard(stats)


def handle_restart_request(data=None):
    req = _parse('restartRequest', data)
    ctx = _context(req.room_id) if req else None
    if not ctx:
        return
    room_code = ctx['room_code']
    try:
        _registry().restart(room_code, _get_sid())
    except GameError as exc:
        _reject('restartRequest', exc)
        return
    emit('restartGame', {'roomId': room_code}, to=_channel(room_code))


def handle_leave_room(data=None):
    _leave_current(_get_sid())


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('makeMove', handle_make_move, namespace=namespace)
    socketio.on_event('usePower', handle_use_power, namespace=namespace)
    socketio.on_event('reportWin', handle_report_win, namespace=namespace)
    socketio.on_event('restartRequest', handle_restart_request, namespace=namespace)
    socketio.on_event('leaveRoom', handle_leave_room, namespace=namespace)
