import copy
from enum import IntEnum
from typing import Optional, Tuple

import numpy as np
import torch

WIN_TILE = 2048
MIN_TILE_VALUE = 2


class Action(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


def best_tile_value(cells) -> int:
    """
    Return the highest tile value in a 2D arrangement of cells.
    Empty cells may be 0 or None. The result never drops below 2, the
    smallest tile the game spawns.
    """
    best = MIN_TILE_VALUE
    for row in cells:
        for cell in row:
            if cell is not None and cell > best:
                best = int(cell)
    return best


def state_key(board) -> str:
    """Canonical string for a board: rows of comma-separated values joined by '|'."""
    return "|".join(",".join(str(int(v)) for v in row) for row in board)


class Game2048:
    def __init__(self, size: int = 4, seed: Optional[int] = None, win_tile: int = WIN_TILE):
        self.size = size
        self.win_tile = win_tile
        if seed is not None:
            np.random.seed(seed)
            torch.manual_seed(seed)
        self.reset()

    def reset(self):
        """Start a fresh game with two random tiles."""
        self.board = np.zeros((self.size, self.size), dtype=np.int32)
        self.score = 0
        self.over = False
        self.won = False
        self.keep_playing = False
        self.moved = False
        self.add_random_tile()
        self.add_random_tile()
        return self.board.copy()

    def set_board(self, board, score: int = 0) -> None:
        """Load a specific position; the game is over if it has no legal move."""
        self.board = np.array(board, dtype=np.int32).reshape(self.size, self.size)
        self.score = score
        self.won = bool(np.any(self.board >= self.win_tile))
        self.moved = False
        self.over = not self.moves_available()

    def add_random_tile(self) -> None:
        """Add a 2 (90%) or a 4 (10%) to a random empty cell."""
        rows, cols = np.where(self.board == 0)
        if len(rows) > 0:
            idx = int(torch.randint(0, len(rows), (1,)).item())
            self.board[rows[idx], cols[idx]] = 2 if torch.rand(1).item() < 0.9 else 4

    def _merge_row(self, row: np.ndarray) -> Tuple[np.ndarray, int, int]:
        """
        Slide a row toward index 0 and merge equal neighbours, each tile at
        most once. Returns the new row, score gained and the largest tile
        produced by a merge (0 when nothing merged).
        """
        filtered = row[row != 0]
        merged = []
        score = 0
        largest = 0
        i = 0
        while i < len(filtered):
            if i + 1 < len(filtered) and filtered[i] == filtered[i + 1]:
                merged_val = int(filtered[i]) * 2
                merged.append(merged_val)
                score += merged_val
                largest = max(largest, merged_val)
                i += 2
            else:
                merged.append(int(filtered[i]))
                i += 1
        new_row = np.array(merged, dtype=np.int32)
        new_row = np.pad(new_row, (0, self.size - len(new_row)), 'constant')
        return new_row, score, largest

    def _move(self, board: np.ndarray, action: int) -> Tuple[np.ndarray, int, bool, int]:
        """
        Executes a move on a given board. action: 0=up, 1=right, 2=down, 3=left.
        Returns new board, score gained, whether the board changed and the
        largest merged tile.
        """
        action = Action(action)
        # rot90 by k brings the move direction onto the row start
        k = {Action.UP: 1, Action.RIGHT: 2, Action.DOWN: 3, Action.LEFT: 0}[action]
        rotated = np.rot90(board.copy(), k=k).copy()
        total_score = 0
        largest = 0
        for i in range(self.size):
            new_row, score, row_largest = self._merge_row(rotated[i])
            rotated[i] = new_row
            total_score += score
            largest = max(largest, row_largest)
        new_board = np.rot90(rotated, k=-k).copy()
        changed = not np.array_equal(new_board, board)
        return new_board, total_score, changed, largest

    def clone(self) -> "Game2048":
        """Independent copy of the game; the board array is not shared."""
        return copy.deepcopy(self)

    def simulate(self, action: int) -> "Game2048":
        """
        Return a copy of the game after applying ``action``, without spawning
        a tile and without touching this instance. A terminated game yields a
        copy with ``moved`` False.
        """
        action = Action(action)
        successor = self.clone()
        successor.moved = False
        if successor.is_terminated():
            return successor
        new_board, score_gain, changed, largest = successor._move(successor.board, action)
        if changed:
            successor.board = new_board
            successor.score += score_gain
            if largest >= self.win_tile:
                successor.won = True
        successor.moved = changed
        return successor

    def step(self, action: int) -> Tuple[np.ndarray, int, bool, dict]:
        """
        Play ``action`` on the real game: move, spawn a tile if anything
        moved, and refresh the termination flags.
        """
        action = Action(action)
        if self.is_terminated():
            self.moved = False
            return self.board.copy(), 0, True, self._info()

        new_board, score_gain, changed, largest = self._move(self.board, action)
        self.moved = changed
        if changed:
            self.board = new_board
            self.score += score_gain
            if largest >= self.win_tile:
                self.won = True
            self.add_random_tile()
            if not self.moves_available():
                self.over = True
        return self.board.copy(), score_gain, self.is_terminated(), self._info()

    def _info(self) -> dict:
        return {
            'max_tile': self.max_tile(),
            'valid_move': self.moved,
        }

    def moves_available(self) -> bool:
        if np.any(self.board == 0):
            return True
        # Any horizontal or vertical neighbour pair that can merge
        if np.any(self.board[:, :-1] == self.board[:, 1:]):
            return True
        return bool(np.any(self.board[:-1, :] == self.board[1:, :]))

    def continue_playing(self) -> None:
        """Keep going after the win tile appears."""
        self.keep_playing = True

    def is_terminated(self) -> bool:
        """Lost, or won without choosing to keep playing."""
        return self.over or (self.won and not self.keep_playing)

    def state_key(self) -> str:
        return state_key(self.board)

    def max_tile(self) -> int:
        return best_tile_value(self.board)

    def render(self):
        """
        Render the game board to the console.
        """
        print(f"\nScore: {self.score:,} | Max Tile: {self.max_tile()}")
        for row in self.board:
            row_str = "|"
            for cell in row:
                if cell == 0:
                    row_str += "    |"
                else:
                    row_str += str(int(cell)).rjust(4) + " |"
            print(row_str)
        print()
