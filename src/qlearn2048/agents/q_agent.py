"""
Tabular Q-learning agent for 2048.

For each decision the agent simulates all four moves on a copy of the game,
scores each successor with a shaped reward plus the discounted best value of
that successor, writes the result into its value table and emits the move
with the highest value. Move execution is left to whoever subscribes to the
agent's events.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..config import HYPERPARAMS, PERSIST_MODES, REWARD_MODES, UPDATE_MODES
from ..environment.game2048 import Action, best_tile_value
from .value_table import ValueTable


class EventKind(str, Enum):
    """Events emitted by the agent. MOVE carries an Action, RESTART carries None."""
    MOVE = "move"
    RESTART = "restart"


def _event_name(event) -> str:
    if isinstance(event, EventKind):
        return event.value
    return str(event)


class QLearningAgent:
    """
    Q-learning agent bound to one game. Building an agent only loads its value
    table; decisions begin once a driver is attached with ``start(driver)``.
    """

    def __init__(self, game, storage_manager=None,
                 gamma: float = HYPERPARAMS["gamma"],
                 update_mode: str = HYPERPARAMS["update_mode"],
                 reward_mode: str = HYPERPARAMS["reward_mode"],
                 persist_mode: str = HYPERPARAMS["persist_mode"],
                 score_weight: float = HYPERPARAMS["score_weight"],
                 invalid_penalty: float = HYPERPARAMS["invalid_penalty"]):
        if update_mode not in UPDATE_MODES:
            raise ValueError(f"Unknown update mode {update_mode!r}, expected one of {UPDATE_MODES}")
        if reward_mode not in REWARD_MODES:
            raise ValueError(f"Unknown reward mode {reward_mode!r}, expected one of {REWARD_MODES}")
        if persist_mode not in PERSIST_MODES:
            raise ValueError(f"Unknown persist mode {persist_mode!r}, expected one of {PERSIST_MODES}")

        self.game = game
        self.storage_manager = storage_manager
        self.gamma = gamma
        self.update_mode = update_mode
        self.reward_mode = reward_mode
        self.persist_mode = persist_mode
        self.score_weight = score_weight
        self.invalid_penalty = invalid_penalty
        self.events: Dict[str, List[Callable[[Any], None]]] = {}
        self.driver = None
        self._decision_lock = threading.Lock()
        self.q_table = self._load_table()

    @property
    def deciding(self) -> bool:
        """True while a tick holds the decision lock."""
        return self._decision_lock.locked()

    def _load_table(self) -> ValueTable:
        if self.storage_manager is None:
            return ValueTable()
        try:
            data = self.storage_manager.get_q_data()
            table = ValueTable.from_dict(data)
        except Exception as e:
            logging.warning(f"Could not restore value table, starting empty: {e}", exc_info=True)
            return ValueTable()
        if len(table):
            logging.info(f"Restored value table with {len(table)} states")
        return table

    # --- events ---

    def on(self, event, callback: Callable[[Any], None]) -> None:
        """Register ``callback`` for ``event``; callbacks run in registration order."""
        self.events.setdefault(_event_name(event), []).append(callback)

    def emit(self, event, data=None) -> None:
        for callback in self.events.get(_event_name(event), []):
            callback(data)

    # --- decision loop ---

    def start(self, driver):
        """Attach a scheduling driver and let it begin issuing ticks."""
        self.driver = driver
        driver.bind(self)
        return driver.start()

    def tick(self) -> Optional[Action]:
        """
        One decision. Restarts (and persists) when the game is over, otherwise
        learns from the current state and emits the chosen move. Returns the
        move, or None when restarting or when a decision is already running.
        """
        if not self._decision_lock.acquire(blocking=False):
            logging.debug("Decision already in progress, skipping tick")
            return None
        try:
            if self.game.is_terminated():
                self.persist()
                self.emit(EventKind.RESTART)
                return None

            move = self.qlearn()
            if self.persist_mode == "every_tick":
                self.persist()
            self.emit(EventKind.MOVE, move)
            return move
        finally:
            self._decision_lock.release()

    def reset(self) -> None:
        """Request a restart regardless of game or learning state."""
        self.emit(EventKind.RESTART)

    def persist(self) -> bool:
        """Hand the table to storage. Failures are logged and otherwise ignored."""
        if self.storage_manager is None:
            return False
        try:
            self.storage_manager.set_q_data(self.q_table.to_dict())
        except Exception as e:
            logging.warning(f"Failed to persist value table ({len(self.q_table)} states): {e}", exc_info=True)
            return False
        return True

    # --- learning ---

    def qlearn(self) -> Action:
        """
        Update the value of every move from the current state and return the
        move with the highest value. Ties go to the lowest action index.
        """
        best = None
        best_q = None
        state = self.game.state_key()
        row = self.q_table.ensure_row(state)

        for action in Action:
            next_game = self.game.simulate(action)
            target = self.reward(next_game) + self.gamma * self.max_q(next_game)
            if self.update_mode == "additive":
                q_value = row[action] + target
            else:
                q_value = target
            row[action] = q_value

            if best_q is None or q_value > best_q:
                best = action
                best_q = q_value

        return best

    def reward(self, next_game) -> float:
        """Shaped reward for moving from the current game to ``next_game``."""
        if not next_game.moved:
            return self.invalid_penalty
        reward = self.score_weight * (next_game.score - self.game.score)
        if self.reward_mode == "tile_delta":
            reward += best_tile_value(next_game.board) - best_tile_value(self.game.board)
        elif self.reward_mode == "best_tile":
            reward += best_tile_value(next_game.board)
        return reward

    def max_q(self, game) -> float:
        """Best stored value for ``game``'s state; 0 for unseen states."""
        return self.q_table.max_value(game.state_key())
