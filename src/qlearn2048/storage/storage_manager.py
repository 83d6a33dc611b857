"""
Persistence backends for the agent's value table.

A storage manager exposes ``get_q_data()`` returning a mapping of state key to
four action values (or None when nothing has been stored yet) and
``set_q_data(data)`` storing such a mapping.
"""

import copy
import json
import logging
import os
import pickle
import tempfile
from typing import Dict, List, Optional

QData = Dict[str, List[float]]


class StorageManager:
    """Interface for value-table persistence."""

    def get_q_data(self) -> Optional[QData]:
        raise NotImplementedError

    def set_q_data(self, data: QData) -> None:
        raise NotImplementedError


class MemoryStorageManager(StorageManager):
    """Keeps a private copy of the table in memory."""

    def __init__(self, data: Optional[QData] = None):
        self._data = copy.deepcopy(data) if data is not None else None

    def get_q_data(self) -> Optional[QData]:
        return copy.deepcopy(self._data)

    def set_q_data(self, data: QData) -> None:
        self._data = copy.deepcopy(data)


class FileStorageManager(StorageManager):
    """Base for backends that keep the table in a single file."""

    mode = ""

    def __init__(self, path):
        self.path = os.fspath(path)

    def get_q_data(self) -> Optional[QData]:
        if not os.path.exists(self.path):
            return None
        with open(self.path, "r" + self.mode) as f:
            data = self._load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a value table")
        logging.debug(f"Loaded {len(data)} states from {self.path}")
        return data

    def set_q_data(self, data: QData) -> None:
        # Write next to the target and swap in, so a crash never leaves half a file
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w" + self.mode) as f:
                self._dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _load(self, f):
        raise NotImplementedError

    def _dump(self, data, f):
        raise NotImplementedError


class JsonStorageManager(FileStorageManager):
    """Stores the table as a JSON object of state key to a 4-element array."""

    def _load(self, f):
        return json.load(f)

    def _dump(self, data, f):
        json.dump(data, f)


class PickleStorageManager(FileStorageManager):
    mode = "b"

    def _load(self, f):
        return pickle.load(f)

    def _dump(self, data, f):
        pickle.dump(data, f)
