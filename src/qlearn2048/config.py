import logging
import random
import sys

import numpy as np
import torch


def set_seeds(seed: int = 42) -> None:
    torch.manual_seed(seed)
    np.random.seed(seed)
    random.seed(seed)


def setup_logging(log_file="qlearn2048.log", level=logging.INFO):
    """
    Set up logging configuration.

    Args:
        log_file: Path to the log file, or None to log to stdout only
        level: Root logging level
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


UPDATE_MODES = ("additive", "replace")
REWARD_MODES = ("tile_delta", "best_tile", "score_only")
PERSIST_MODES = ("terminal", "every_tick")

# External hyperparameters dictionary for easy configuration.
HYPERPARAMS = {
    "gamma": 0.7,
    "score_weight": 0.6,       # weight on the score gained by a move
    "invalid_penalty": -1.0,   # reward for a move that changes nothing
    "tick_interval": 0.01,     # seconds between timer-driven decisions
    "max_steps": 5000,         # cap on moves per episode
    "update_mode": "additive",
    "reward_mode": "tile_delta",
    "persist_mode": "terminal",
}
