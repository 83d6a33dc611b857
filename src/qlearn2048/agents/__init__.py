"""
Value-table agents for 2048.
"""

from .q_agent import EventKind, QLearningAgent
from .value_table import NUM_ACTIONS, ValueTable
