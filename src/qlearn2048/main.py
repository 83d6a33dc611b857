#!/usr/bin/env python
"""
Main entry point for training the 2048 Q-learning agent.
"""

import logging
import sys

from .agents.q_agent import QLearningAgent
from .config import set_seeds, setup_logging
from .environment.game2048 import Game2048
from .scheduling.drivers import IntervalDriver, SignalDriver, STEP, RESET
from .session import GameSession
from .storage.storage_manager import JsonStorageManager, MemoryStorageManager, PickleStorageManager
from .utils.cli import parse_args

SIGNAL_ALIASES = {
    "": STEP,
    "s": STEP,
    STEP: STEP,
    "r": RESET,
    RESET: RESET,
}


def build_storage(kind, path):
    if kind == "json":
        return JsonStorageManager(path)
    if kind == "pickle":
        return PickleStorageManager(path)
    return MemoryStorageManager()


def run_signal_loop(driver, session, stream=sys.stdin):
    """Read step/reset commands line by line until EOF or 'quit'."""
    for line in stream:
        command = line.strip().lower()
        if command in ("q", "quit"):
            break
        signal = SIGNAL_ALIASES.get(command)
        if signal is None:
            logging.warning(f"Unknown command {command!r}; use step, reset or quit")
            continue
        move = driver.send(signal)
        if move is not None:
            logging.info(f"Move {move.name} | Score: {session.game.score:,}")
    driver.stop()


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_file or None)
    set_seeds(args.seed)

    game = Game2048(seed=args.seed)
    storage = build_storage(args.storage, args.q_file)
    agent = QLearningAgent(
        game,
        storage_manager=storage,
        gamma=args.gamma,
        update_mode=args.update_mode,
        reward_mode=args.reward_mode,
        persist_mode=args.persist_mode,
    )

    logging.info(f"Gamma: {args.gamma}")
    logging.info(f"Update mode: {args.update_mode}")
    logging.info(f"Reward mode: {args.reward_mode}")
    logging.info(f"Storage: {args.storage} ({args.q_file})")

    if args.driver == "interval":
        session = GameSession(game, agent, max_episodes=args.episodes,
                              max_steps=args.max_steps, render=args.render)
        driver = IntervalDriver(interval=args.interval, should_stop=session.done)
        agent.start(driver)
    else:
        session = GameSession(game, agent, max_steps=args.max_steps, render=True, log_every=1)
        driver = SignalDriver()
        agent.start(driver)
        game.render()
        run_signal_loop(driver, session)

    agent.persist()
    session.stats.log_summary()
    if args.plot and len(session.stats):
        session.stats.plot_progress(args.plot)
        logging.info(f"Saved training progress plot to {args.plot}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
