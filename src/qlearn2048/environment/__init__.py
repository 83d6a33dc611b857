"""
2048 game engine used by the agent for lookahead and by sessions for real play.
"""

from .game2048 import Action, Game2048, best_tile_value, state_key, WIN_TILE, MIN_TILE_VALUE
