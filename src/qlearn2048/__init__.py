"""Tabular Q-learning for the 2048 game."""

__version__ = "0.1.0"

# Import key components for convenient access
from .environment.game2048 import Action, Game2048, best_tile_value, state_key
from .agents.q_agent import EventKind, QLearningAgent
from .agents.value_table import ValueTable
from .storage.storage_manager import JsonStorageManager, MemoryStorageManager, PickleStorageManager
from .scheduling.drivers import IntervalDriver, SignalDriver
from .session import GameSession
