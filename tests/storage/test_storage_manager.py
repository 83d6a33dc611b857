"""Tests for qlearn2048.storage.storage_manager module."""

from __future__ import annotations

import json

import pytest

from qlearn2048.agents.q_agent import QLearningAgent
from qlearn2048.environment.game2048 import Game2048
from qlearn2048.storage.storage_manager import (
    JsonStorageManager,
    MemoryStorageManager,
    PickleStorageManager,
)

TABLE = {
    "2,0,0,0|0,0,0,0|0,0,0,0|0,0,0,0": [1.5, -1.0, 0.0, 3.25],
    "0,0,0,0|0,4,0,0|0,0,2,0|0,0,0,0": [0.0, 0.0, 7.0, -2.5],
}


class TestMemoryStorage:
    def test_empty_returns_none(self) -> None:
        assert MemoryStorageManager().get_q_data() is None

    def test_round_trip_is_copied(self) -> None:
        storage = MemoryStorageManager()
        data = {k: list(v) for k, v in TABLE.items()}
        storage.set_q_data(data)
        data[next(iter(data))][0] = 100
        assert storage.get_q_data() == TABLE


@pytest.mark.parametrize("storage_cls, filename", [
    (JsonStorageManager, "q.json"),
    (PickleStorageManager, "q.pkl"),
])
class TestFileStorage:
    def test_missing_file_returns_none(self, tmp_path, storage_cls, filename) -> None:
        assert storage_cls(tmp_path / filename).get_q_data() is None

    def test_round_trip(self, tmp_path, storage_cls, filename) -> None:
        storage_cls(tmp_path / filename).set_q_data(TABLE)
        assert storage_cls(tmp_path / filename).get_q_data() == TABLE

    def test_creates_parent_directory(self, tmp_path, storage_cls, filename) -> None:
        path = tmp_path / "nested" / "dir" / filename
        storage_cls(path).set_q_data(TABLE)
        assert path.exists()

    def test_no_temp_files_left(self, tmp_path, storage_cls, filename) -> None:
        storage = storage_cls(tmp_path / filename)
        storage.set_q_data(TABLE)
        storage.set_q_data({})
        assert [p.name for p in tmp_path.iterdir()] == [filename]
        assert storage.get_q_data() == {}

    def test_agent_round_trip(self, tmp_path, storage_cls, filename) -> None:
        storage = storage_cls(tmp_path / filename)
        storage.set_q_data(TABLE)
        agent = QLearningAgent(Game2048(seed=0), storage_manager=storage)
        assert agent.q_table.to_dict() == TABLE
        assert agent.persist()
        assert storage_cls(tmp_path / filename).get_q_data() == TABLE


class TestJsonStorage:
    def test_file_is_flat_json_object(self, tmp_path) -> None:
        path = tmp_path / "q.json"
        JsonStorageManager(path).set_q_data(TABLE)
        assert json.loads(path.read_text()) == TABLE

    def test_corrupt_file_raises_value_error(self, tmp_path) -> None:
        path = tmp_path / "q.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            JsonStorageManager(path).get_q_data()

    def test_non_object_rejected(self, tmp_path) -> None:
        path = tmp_path / "q.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError):
            JsonStorageManager(path).get_q_data()

    def test_agent_survives_corrupt_file(self, tmp_path) -> None:
        path = tmp_path / "q.json"
        path.write_text("{not json")
        agent = QLearningAgent(Game2048(seed=0), storage_manager=JsonStorageManager(path))
        assert len(agent.q_table) == 0
