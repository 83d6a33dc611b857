from typing import Dict, Iterator, List, Optional

NUM_ACTIONS = 4


class ValueTable:
    """
    Tabular action values keyed by board state string.

    Every stored row holds exactly four values, one per action
    (up, right, down, left). Reads of unseen states behave as an all-zero
    row and never insert; rows are only created by ``ensure_row`` or ``set``.
    """

    def __init__(self, rows: Optional[Dict[str, List[float]]] = None):
        self._rows: Dict[str, List[float]] = {}
        if rows:
            for key, values in rows.items():
                self._rows[str(key)] = self._validate_row(key, values)

    @staticmethod
    def _validate_row(key, values) -> List[float]:
        values = list(values)
        if len(values) != NUM_ACTIONS:
            raise ValueError(f"Row for state {key!r} has {len(values)} values, expected {NUM_ACTIONS}")
        return [float(v) for v in values]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, List[float]]]) -> "ValueTable":
        return cls(data or {})

    def to_dict(self) -> Dict[str, List[float]]:
        return {key: list(values) for key, values in self._rows.items()}

    def __contains__(self, key: str) -> bool:
        return key in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rows)

    def ensure_row(self, key: str) -> List[float]:
        """Return the row for ``key``, creating a zero row on first visit."""
        if key not in self._rows:
            self._rows[key] = [0.0] * NUM_ACTIONS
        return self._rows[key]

    def get(self, key: str, action: int) -> float:
        row = self._rows.get(key)
        if row is None:
            return 0.0
        return row[action]

    def row(self, key: str) -> List[float]:
        """Copy of the row for ``key`` (zeros when unseen)."""
        return list(self._rows.get(key, [0.0] * NUM_ACTIONS))

    def set(self, key: str, action: int, value: float) -> None:
        self.ensure_row(key)[action] = float(value)

    def max_value(self, key: str) -> float:
        row = self._rows.get(key)
        if row is None:
            return 0.0
        return max(row)
