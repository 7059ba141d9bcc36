import json

import pytest

from tetromino_rl.game import Command, GamePhase
from tetromino_rl.game.snapshot import SnapshotError, dumps, from_record, load_state, loads, to_record


def _played(engine, started):
    state = started
    for command in (Command.MOVE_LEFT, Command.HARD_DROP, Command.HOLD, Command.ROTATE_CW, Command.SOFT_DROP,
                    Command.HARD_DROP, Command.PAUSE):
        state = engine.apply(state, command)
    return state


def test_record_round_trip(engine, started):
    state = _played(engine, started)
    record = to_record(state)
    restored = from_record(record)
    assert restored.same_as(state)
    assert not restored.board.flags.writeable


def test_record_is_plain_json(engine, started):
    record = to_record(_played(engine, started))
    assert json.loads(json.dumps(record)) == record
    assert len(record["board"]) == 20 and all(len(row) == 10 for row in record["board"])
    assert record["phase"] == "paused"


def test_restored_game_keeps_playing(engine, started):
    state = loads(dumps(_played(engine, started)), engine)
    resumed = engine.apply(state, Command.RESUME)
    assert resumed.phase == GamePhase.PLAYING
    assert engine.apply(resumed, Command.HARD_DROP).score > resumed.score


def test_menu_state_round_trips(engine):
    state = engine.initial_state("bo")
    assert from_record(to_record(state)).same_as(state)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda r: r.update(board=r["board"][:-1]),
        lambda r: r.update(board=r["board"][:-1] + ["..........X"]),
        lambda r: r.update(board=r["board"][:-1] + ["Q........."]),
        lambda r: r.update(current_piece={"kind": "W", "rotation": 0, "x": 3, "y": -1}),
        lambda r: r.update(current_piece=None),
        lambda r: r.update(phase="sleeping"),
        lambda r: r.update(score=-5),
        lambda r: r.update(level=0),
        lambda r: r.update(can_hold="yes"),
        lambda r: r.update(bag="IIIIIII"),
        lambda r: r.update(bag_index=9),
        lambda r: r.update(is_game_over=True),
        lambda r: r.update(version=0),
    ],
)
def test_invalid_records_are_rejected(started, mutate):
    record = to_record(started)
    mutate(record)
    with pytest.raises(SnapshotError):
        from_record(record)


def test_load_state_falls_back_to_fresh_game(engine, started):
    record = to_record(started)
    record["board"] = "garbage"
    state = load_state(record, engine, player_name="ada")
    assert state.phase == GamePhase.MENU
    assert state.player_name == "ada"
    assert load_state(None).phase == GamePhase.MENU


def test_loads_falls_back_on_bad_json(engine):
    state = loads("{not json", engine, player_name="cy")
    assert state.phase == GamePhase.MENU
    assert state.player_name == "cy"


def test_negative_rotation_normalizes(started):
    record = to_record(started)
    record["current_piece"]["rotation"] = -1
    state = load_state(record)
    assert state.phase == GamePhase.PLAYING
    assert state.current_piece.rotation == 3


def test_loads_falls_back_on_undecodable_bytes(engine):
    state = loads(b"\xff\xfe\xfd", engine, player_name="cy")
    assert state.phase == GamePhase.MENU
    assert state.player_name == "cy"


def test_decoded_board_goes_through_board_validation(started, monkeypatch):
    import tetromino_rl.game.snapshot as snapshot

    monkeypatch.setattr(snapshot, "validate_board", lambda board: False)
    with pytest.raises(SnapshotError):
        from_record(to_record(started))
