import pytest


def _named(received, name):
    return [pkt['args'][0] if pkt['args'] else None for pkt in received if pkt['name'] == name]


@pytest.fixture()
def rooms(flask_app):
    return flask_app.extensions['gomoku_rooms']


@pytest.fixture()
def pair(make_sio_client):
    """Two connected clients sitting in the same started room."""
    host = make_sio_client()
    guest = make_sio_client()
    host.emit('createRoom')
    code = _named(host.get_received(), 'roomCreated')[0]['roomId']
    guest.emit('joinRoom', code)
    host.get_received()
    guest.get_received()
    return host, guest, code


def test_connect_sends_leaderboard(sio_client):
    assert sio_client.is_connected()
    received = sio_client.get_received()
    assert _named(received, 'updateLeaderboard') == [{'p1Wins': 0, 'p2Wins': 0, 'matchesPlayed': 0}]


def test_create_and_join_room(make_sio_client, rooms):
    host = make_sio_client()
    guest = make_sio_client()
    host.get_received()
    guest.get_received()

    host.emit('createRoom')
    created = _named(host.get_received(), 'roomCreated')
    assert len(created) == 1
    code = created[0]['roomId']
    assert created[0]['player'] == 1
    assert len(code) == 5

    guest.emit('joinRoom', code.lower())
    guest_events = guest.get_received()
    assert _named(guest_events, 'roomJoined') == [{'roomId': code, 'player': 2}]
    assert _named(guest_events, 'startGame') == [{'roomId': code}]
    assert _named(host.get_received(), 'startGame') == [{'roomId': code}]
    assert rooms.get(code).active


def test_join_unknown_room_reports_error(sio_client):
    sio_client.get_received()
    sio_client.emit('joinRoom', 'ZZZZZ')
    errors = _named(sio_client.get_received(), 'error')
    assert errors[0]['code'] == 'RoomNotFound'
    assert errors[0]['message']


def test_join_without_code_reports_error(sio_client):
    sio_client.get_received()
    sio_client.emit('joinRoom', {})
    errors = _named(sio_client.get_received(), 'error')
    assert errors[0]['code'] == 'BadRequest'


def test_third_player_gets_room_full(pair, make_sio_client, rooms):
    host, guest, code = pair
    third = make_sio_client()
    third.get_received()
    third.emit('joinRoom', code)
    errors = _named(third.get_received(), 'error')
    assert errors[0]['code'] == 'RoomFull'
    assert len(rooms.get(code).peers) == 2
    assert _named(host.get_received(), 'startGame') == []


def test_move_is_relayed_to_opponent_only(pair, rooms):
    host, guest, code = pair
    host.emit('makeMove', {'roomId': code, 'row': 4, 'col': 4, 'player': 1})
    assert _named(guest.get_received(), 'moveMade') == [{'roomId': code, 'row': 4, 'col': 4, 'player': 1}]
    assert _named(host.get_received(), 'moveMade') == []
    assert rooms.get(code).board.get(4, 4) == 1


def test_out_of_turn_move_is_dropped(pair, rooms):
    host, guest, code = pair
    guest.emit('makeMove', {'roomId': code, 'row': 0, 'col': 0, 'player': 2})
    assert _named(host.get_received(), 'moveMade') == []
    assert rooms.get(code).board.get(0, 0) == 0


def test_move_for_other_room_is_ignored(pair, rooms):
    host, guest, code = pair
    host.emit('makeMove', {'roomId': 'OTHER', 'row': 0, 'col': 0, 'player': 1})
    assert _named(guest.get_received(), 'moveMade') == []
    assert rooms.get(code).board.get(0, 0) == 0


def test_winning_move_finishes_and_updates_everyone(pair, make_sio_client, rooms):
    host, guest, code = pair
    bystander = make_sio_client()
    bystander.get_received()

    for col in range(5):
        host.emit('makeMove', {'roomId': code, 'row': 0, 'col': col, 'player': 1})
        if col < 4:
            guest.emit('makeMove', {'roomId': code, 'row': 8, 'col': col, 'player': 2})

    guest_events = guest.get_received()
    assert len(_named(guest_events, 'moveMade')) == 5
    over = _named(guest_events, 'gameOver')
    assert over[0]['winner'] == 1
    assert sorted(map(tuple, over[0]['line'])) == [(0, c) for c in range(5)]

    host_events = host.get_received()
    assert _named(host_events, 'gameOver')[0]['winner'] == 1

    expected = {'p1Wins': 1, 'p2Wins': 0, 'matchesPlayed': 1}
    assert _named(host_events, 'updateLeaderboard') == [expected]
    assert _named(guest_events, 'updateLeaderboard') == [expected]
    assert _named(bystander.get_received(), 'updateLeaderboard') == [expected]
    assert not rooms.get(code).active

    # The winner's own report arrives after the server already counted it
    host.emit('reportWin', 1)
    assert _named(bystander.get_received(), 'updateLeaderboard') == []
    assert rooms.leaderboard.snapshot() == expected


def test_report_win_counts_once(pair):
    host, guest, code = pair
    guest.emit('reportWin', 2)
    guest.emit('reportWin', 2)
    updates = _named(host.get_received(), 'updateLeaderboard')
    assert updates == [{'p1Wins': 0, 'p2Wins': 1, 'matchesPlayed': 1}]


def test_power_is_relayed(pair, rooms):
    host, guest, code = pair
    host.emit('makeMove', {'roomId': code, 'row': 2, 'col': 2, 'player': 1})
    guest.emit('usePower', {'roomId': code, 'r': 2, 'c': 2, 'player': 2})
    assert _named(host.get_received(), 'powerUsed') == [
        {'roomId': code, 'row': 2, 'col': 2, 'r': 2, 'c': 2, 'player': 2}
    ]
    room = rooms.get(code)
    assert room.board.get(2, 2) == 0
    assert room.powers[2] is False


def test_power_on_empty_cell_is_dropped(pair, rooms):
    host, guest, code = pair
    host.emit('usePower', {'roomId': code, 'row': 3, 'col': 3, 'player': 1})
    assert _named(guest.get_received(), 'powerUsed') == []
    assert rooms.get(code).powers[1] is True


def test_restart_after_win(pair, rooms):
    host, guest, code = pair
    for col in range(5):
        host.emit('makeMove', {'roomId': code, 'row': 0, 'col': col, 'player': 1})
        if col < 4:
            guest.emit('makeMove', {'roomId': code, 'row': 8, 'col': col, 'player': 2})
    host.get_received()
    guest.get_received()

    guest.emit('restartRequest', code)
    assert _named(host.get_received(), 'restartGame') == [{'roomId': code}]
    assert _named(guest.get_received(), 'restartGame') == [{'roomId': code}]

    host.emit('makeMove', {'roomId': code, 'row': 0, 'col': 0, 'player': 1})
    assert _named(guest.get_received(), 'moveMade') == [{'roomId': code, 'row': 0, 'col': 0, 'player': 1}]


def test_disconnect_notifies_opponent_and_tears_down(pair, rooms):
    host, guest, code = pair
    host.disconnect()
    assert _named(guest.get_received(), 'opponentLeft') == [{'roomId': code}]
    assert code in rooms
    assert not rooms.get(code).active

    guest.emit('leaveRoom')
    assert code not in rooms
    # Leaving again, then disconnecting, is harmless
    guest.emit('leaveRoom')
    guest.disconnect()
    assert code not in rooms


def test_creating_a_new_room_leaves_the_old_one(pair, rooms):
    host, guest, code = pair
    host.emit('createRoom')
    new_code = _named(host.get_received(), 'roomCreated')[0]['roomId']
    assert new_code != code
    assert _named(guest.get_received(), 'opponentLeft') == [{'roomId': code}]
    assert len(rooms.get(new_code).peers) == 1
    assert code in rooms
    assert len(rooms.get(code).peers) == 1


def test_joining_another_room_leaves_the_old_one(pair, make_sio_client, rooms):
    host, guest, code = pair
    other_host = make_sio_client()
    other_host.emit('createRoom')
    other_code = _named(other_host.get_received(), 'roomCreated')[0]['roomId']

    guest.emit('joinRoom', other_code)
    guest_events = guest.get_received()
    assert _named(guest_events, 'roomJoined') == [{'roomId': other_code, 'player': 2}]
    assert _named(guest_events, 'startGame') == [{'roomId': other_code}]
    assert _named(host.get_received(), 'opponentLeft') == [{'roomId': code}]
    assert _named(other_host.get_received(), 'startGame') == [{'roomId': other_code}]
    assert len(rooms.get(code).peers) == 1
    assert not rooms.get(code).active
    assert rooms.get(other_code).active

    # Moves in the new room reach the new opponent only
    other_host.emit('makeMove', {'roomId': other_code, 'row': 1, 'col': 1, 'player': 1})
    assert _named(guest.get_received(), 'moveMade') == [{'roomId': other_code, 'row': 1, 'col': 1, 'player': 1}]
    assert _named(host.get_received(), 'moveMade') == []
