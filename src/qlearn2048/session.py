"""
Wires an agent's events to a real game: moves are played on the game and
restarts close the episode, record statistics and start a new game.
"""

import logging
from typing import Optional

from .agents.q_agent import EventKind
from .config import HYPERPARAMS
from .utils.training_stats import TrainingStats


class GameSession:
    def __init__(self, game, agent, max_episodes: Optional[int] = None,
                 max_steps: int = HYPERPARAMS["max_steps"], stats: Optional[TrainingStats] = None,
                 render: bool = False, log_every: int = 10):
        self.game = game
        self.agent = agent
        self.max_episodes = max_episodes
        self.max_steps = max_steps
        self.stats = stats if stats is not None else TrainingStats()
        self.render = render
        self.log_every = log_every
        self.episodes = 0
        self.steps = 0
        self.invalid_moves = 0
        self.best_tile = 0

        agent.on(EventKind.MOVE, self.on_move)
        agent.on(EventKind.RESTART, self.on_restart)

    def on_move(self, action) -> None:
        _, _, _, info = self.game.step(action)
        self.steps += 1
        if info['max_tile'] > self.best_tile:
            self.best_tile = info['max_tile']
            logging.debug(f"New max tile reached: {self.best_tile} (episode {self.episodes + 1}, move {self.steps})")
        if not info['valid_move']:
            self.invalid_moves += 1
        if self.render:
            self.game.render()
        if self.steps >= self.max_steps:
            logging.info(f"Episode {self.episodes + 1} truncated after {self.steps} moves")
            # The agent only persists on terminal states, so save here as well
            self.agent.persist()
            self.finish_episode()

    def on_restart(self, _data=None) -> None:
        self.finish_episode()

    def finish_episode(self) -> None:
        max_tile = self.game.max_tile()
        self.stats.update(self.game.score, max_tile, self.steps, len(self.agent.q_table))
        self.episodes += 1
        if self.log_every and self.episodes % self.log_every == 0:
            logging.info(
                f"Episode {self.episodes} | Score: {self.game.score:,} | Max Tile: {max_tile} | "
                f"Moves: {self.steps} (invalid {self.invalid_moves}) | "
                f"Running Score: {self.stats.running_score():.1f} | States: {len(self.agent.q_table):,}"
            )
        self.game.reset()
        self.steps = 0
        self.invalid_moves = 0

    def done(self) -> bool:
        return self.max_episodes is not None and self.episodes >= self.max_episodes
