"""Tests for JSON save/restore of a session."""

import json
import logging

import numpy as np
import pytest

from falling_blocks.game import (
    NudgeResult,
    PieceFactory,
    Session,
    StateError,
    from_dict,
    load_or_new,
    load_state,
    save_state,
    to_dict,
)


def played_session():
    s = Session(6, 8, PieceFactory.from_sequence([0, 1, 5]))
    s.rotate_block()
    s.nudge(1, vertical=False)
    while s.nudge(1, vertical=True) != NudgeResult.LOCKED:
        pass
    s.nudge(-1, vertical=False)
    s.nudge(1, vertical=True)
    s.lines_cleared = 3
    return s


def assert_same(a, b):
    assert (a.grid.width, a.grid.height) == (b.grid.width, b.grid.height)
    assert np.array_equal(a.grid.cells, b.grid.cells)
    assert (a.piece.width, a.piece.height, a.piece.x, a.piece.y) == (
        b.piece.width,
        b.piece.height,
        b.piece.x,
        b.piece.y,
    )
    assert np.array_equal(a.piece.matrix, b.piece.matrix)
    assert a.lines_cleared == b.lines_cleared


def test_to_dict_layout():
    data = to_dict(Session(4, 5, PieceFactory.from_sequence([1])))
    assert data == {
        "grid": {"width": 4, "height": 5, "cells": [0] * 20},
        "piece": {"width": 2, "height": 2, "x": 1, "y": 0, "matrix": [2, 2, 2, 2]},
        "lines_cleared": 0,
    }
    json.dumps(data)


def test_dict_round_trip():
    s = played_session()
    assert_same(from_dict(to_dict(s)), s)


def test_file_round_trip(tmp_path):
    s = played_session()
    path = tmp_path / "state.json"
    save_state(s, path)
    assert_same(load_state(path), s)


def test_restored_session_keeps_playing():
    restored = from_dict(to_dict(played_session()), PieceFactory.from_sequence([4]))
    while restored.nudge(1, vertical=True) != NudgeResult.LOCKED:
        pass
    assert restored.piece.color == 5
    assert restored.piece.y == 0


def test_load_or_new_without_file_starts_fresh(tmp_path):
    s = load_or_new(tmp_path / "missing.json", 10, 20, PieceFactory.from_sequence([1]))
    assert (s.grid.width, s.grid.height) == (10, 20)
    assert (s.piece.x, s.piece.y) == (4, 0)
    assert s.lines_cleared == 0


def test_load_or_new_restores_saved_game(tmp_path):
    s = played_session()
    path = tmp_path / "state.json"
    save_state(s, path)
    assert_same(load_or_new(path, 6, 8), s)


def test_load_or_new_discards_game_saved_for_other_size(tmp_path, caplog):
    path = tmp_path / "state.json"
    save_state(played_session(), path)
    with caplog.at_level(logging.WARNING):
        s = load_or_new(path, 10, 20)
    assert (s.grid.width, s.grid.height) == (10, 20)
    assert not s.grid.cells.any()
    assert "expected 10x20" in caplog.text


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "",
        "[1, 2, 3]",
        '{"grid": {"width": 2, "height": 2, "cells": [0, 0, 0]}}',
    ],
)
def test_load_or_new_falls_back_on_corrupt_file(tmp_path, caplog, content):
    path = tmp_path / "state.json"
    path.write_text(content)
    with caplog.at_level(logging.WARNING):
        s = load_or_new(path, 8, 12)
    assert (s.grid.width, s.grid.height) == (8, 12)
    assert not s.grid.cells.any()
    assert "starting fresh" in caplog.text


def test_load_state_raises_on_invalid_json(tmp_path):
    path = tmp_path / "state.json"
    path.write_bytes(b"\xff\xfe garbage")
    with pytest.raises(StateError):
        load_state(path)


def mutate(data, section, key, value):
    data = json.loads(json.dumps(data))
    if section is None:
        data[key] = value
    else:
        data[section][key] = value
    return data


@pytest.mark.parametrize(
    "section,key,value",
    [
        ("grid", "width", 0),
        ("grid", "height", "20"),
        ("grid", "cells", [0] * 3),
        ("grid", "cells", [9] * 20),
        ("piece", "matrix", [2, 2, 2]),
        ("piece", "x", 1.5),
        ("piece", "y", None),
        ("piece", "width", True),
        (None, "lines_cleared", -1),
        (None, "piece", "O"),
        ("piece", "y", 50),
        ("piece", "x", -3),
        ("piece", "x", 3),
    ],
)
def test_from_dict_rejects_malformed_state(section, key, value):
    data = to_dict(Session(4, 5, PieceFactory.from_sequence([1])))
    with pytest.raises(StateError):
        from_dict(mutate(data, section, key, value))


def test_state_error_is_a_value_error():
    with pytest.raises(ValueError):
        from_dict("nope")


@pytest.mark.parametrize("key,value", [("y", 50), ("x", -3)])
def test_load_or_new_replaces_piece_saved_off_grid(tmp_path, key, value):
    data = to_dict(Session(10, 20, PieceFactory.from_sequence([1])))
    data["piece"][key] = value
    path = tmp_path / "state.json"
    path.write_text(json.dumps(data))

    s = load_or_new(path, 10, 20, PieceFactory.from_sequence([1]))
    assert (s.piece.x, s.piece.y) == (4, 0)
    while s.nudge(1, vertical=True) != NudgeResult.LOCKED:
        pass
    assert s.grid.board[18:, 4:6].all()
    assert int(np.count_nonzero(s.grid.cells)) == 4
