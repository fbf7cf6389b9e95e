"""Session directory: identity, rooms, promotion and standings."""

from __future__ import annotations

import pytest

from salvo.directory import SEAT_ID_BYTES
from salvo.errors import AuthError, CapacityError, NotFoundError, StateError
from salvo.game import Phase


def test_register_then_login_returns_same_player(directory) -> None:
    first = directory.register_or_login("alice", "secret")
    again = directory.register_or_login("alice", "secret")
    assert again is first
    assert first.win_count == 0
    assert first.password_hash != "secret"


def test_wrong_password_fails_without_mutation(directory) -> None:
    player = directory.register_or_login("alice", "secret")
    stored_hash = player.password_hash
    with pytest.raises(AuthError):
        directory.register_or_login("alice", "guess")
    assert player.password_hash == stored_hash
    assert directory.register_or_login("alice", "secret").id == player.id


def test_names_are_unique_ids(directory) -> None:
    a = directory.register_or_login("alice", "x")
    b = directory.register_or_login("bob", "x")
    assert a.id != b.id
    assert directory.lookup_player(b.id) is b
    with pytest.raises(NotFoundError):
        directory.lookup_player("P0")


def test_create_room_lists_it_as_open(directory) -> None:
    alice = directory.register_or_login("alice", "x")
    room = directory.create_room(alice)
    assert [r.room_id for r in directory.list_open_rooms()] == [room.room_id]
    assert room.players == [alice]


def test_second_open_room_for_same_player_rejected(directory) -> None:
    alice = directory.register_or_login("alice", "x")
    directory.create_room(alice)
    with pytest.raises(StateError):
        directory.create_room(alice)


def test_join_unknown_room(directory) -> None:
    bob = directory.register_or_login("bob", "x")
    with pytest.raises(NotFoundError):
        directory.join_room("R0", bob)


def test_join_own_room_rejected(directory) -> None:
    alice = directory.register_or_login("alice", "x")
    room = directory.create_room(alice)
    with pytest.raises(StateError):
        directory.join_room(room.room_id, alice)
    assert room.is_open


def test_join_promotes_room_to_game(directory) -> None:
    alice = directory.register_or_login("alice", "x")
    bob = directory.register_or_login("bob", "x")
    room = directory.create_room(alice)

    joined = directory.join_room(room.room_id, bob)

    assert directory.list_open_rooms() == []
    assert joined.linked_game_id is not None
    game = directory.lookup_game(joined.linked_game_id)
    assert game.phase is Phase.AWAITING_FLEETS
    assert [seat.player for seat in game.players] == [alice, bob]
    # seats carry pseudonyms, not global ids
    seat_ids = {seat.player_id for seat in game.players}
    assert len(seat_ids) == 2
    assert seat_ids.isdisjoint({alice.id, bob.id})
    # random tokens, not a shared counter
    for seat_id in seat_ids:
        assert seat_id.startswith("S")
        assert len(seat_id) == 1 + 2 * SEAT_ID_BYTES
        int(seat_id[1:], 16)
    # the room is gone once promoted
    carol = directory.register_or_login("carol", "x")
    with pytest.raises(NotFoundError):
        directory.join_room(room.room_id, carol)


def test_full_room_rejects_third_player(directory) -> None:
    alice = directory.register_or_login("alice", "x")
    bob = directory.register_or_login("bob", "x")
    carol = directory.register_or_login("carol", "x")
    room = directory.create_room(alice)
    room.players.append(bob)  # a full room that has not been promoted yet
    with pytest.raises(CapacityError):
        directory.join_room(room.room_id, carol)


def test_joiner_open_room_is_withdrawn(directory) -> None:
    alice = directory.register_or_login("alice", "x")
    bob = directory.register_or_login("bob", "x")
    room_a = directory.create_room(alice)
    directory.create_room(bob)
    directory.join_room(room_a.room_id, bob)
    assert directory.list_open_rooms() == []
    # bob is free to open a new room afterwards
    directory.create_room(bob)


def test_lookup_unknown_game(directory) -> None:
    with pytest.raises(NotFoundError):
        directory.lookup_game("G0")


def test_record_win_sorts_leaderboard(directory) -> None:
    alice = directory.register_or_login("alice", "x")
    bob = directory.register_or_login("bob", "x")
    directory.record_win(bob.id)
    board = directory.record_win(bob.id)
    assert [(e.name, e.wins) for e in board] == [("bob", 2), ("alice", 0)]
    board = directory.record_win(alice.id)
    assert board[0].name == "bob"
    assert bob.win_count == 2 and alice.win_count == 1


def test_record_win_unknown_player(directory) -> None:
    with pytest.raises(NotFoundError):
        directory.record_win("P0")


def test_connection_binding(directory) -> None:
    alice = directory.register_or_login("alice", "x")
    directory.bind_connection("c1", alice)
    assert directory.player_for_connection("c1") is alice
    assert directory.connection_for(alice.id) == "c1"

    # re-login from a new connection moves the binding
    directory.bind_connection("c2", alice)
    assert directory.connection_for(alice.id) == "c2"
    with pytest.raises(NotFoundError):
        directory.player_for_connection("c1")

    directory.release_connection("c2")
    assert directory.connections() == []
    assert directory.connection_for(alice.id) is None
