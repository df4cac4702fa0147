from __future__ import annotations

import json
import logging
from pathlib import Path

from agents.tabular.q_table import QTable
from agents.tabular.store import QTableStore


def test_round_trip(tmp_path: Path) -> None:
    table = QTable()
    table.ensure("3|0|0|1|0")[:] = [0.6, 0.0, -1.25, 0.0, 2.0, 0.1]
    table.ensure("0|0|4|0|0")
    store = QTableStore(tmp_path / "qtable.json", n_actions=table.n_actions)

    assert store.save(table.snapshot())

    reloaded = QTable()
    reloaded.load(store.load())
    assert reloaded.snapshot() == table.snapshot()


def test_file_layout_is_key_to_array(tmp_path: Path) -> None:
    path = tmp_path / "qtable.json"
    QTableStore(path, n_actions=2).save({"a|b": [1.0, 2.0]})
    assert json.loads(path.read_text()) == {"a|b": [1.0, 2.0]}


def test_save_overwrites_wholesale(tmp_path: Path) -> None:
    store = QTableStore(tmp_path / "qtable.json", n_actions=1)
    store.save({"old": [1.0]})
    store.save({"new": [2.0]})
    assert store.load() == {"new": [2.0]}
    assert [p.name for p in tmp_path.iterdir()] == ["qtable.json"]


def test_missing_file_is_empty(tmp_path: Path) -> None:
    assert QTableStore(tmp_path / "nope.json", n_actions=6).load() == {}


def test_corrupt_file_is_empty(tmp_path: Path, caplog) -> None:
    path = tmp_path / "qtable.json"
    path.write_text("{not json")
    with caplog.at_level(logging.WARNING):
        assert QTableStore(path, n_actions=6).load() == {}
    assert "Failed to load qtable" in caplog.text


def test_non_object_file_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "qtable.json"
    path.write_text("[1, 2, 3]")
    assert QTableStore(path, n_actions=6).load() == {}


def test_malformed_rows_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "qtable.json"
    path.write_text(json.dumps({
        "good": [1, 2, 3],
        "short": [1, 2],
        "text": ["a", "b", "c"],
        "flags": [True, False, True],
        "scalar": 4,
    }))
    assert QTableStore(path, n_actions=3).load() == {"good": [1.0, 2.0, 3.0]}


def test_save_failure_is_reported_not_raised(tmp_path: Path, caplog) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    store = QTableStore(blocker / "qtable.json", n_actions=1)
    with caplog.at_level(logging.WARNING):
        assert store.save({"s": [0.0]}) is False
    assert "Failed to save qtable" in caplog.text
