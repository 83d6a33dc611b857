"""Tests for qlearn2048.session and the command-line entry point."""

from __future__ import annotations

import io
import json

from qlearn2048.agents.q_agent import QLearningAgent
from qlearn2048.environment.game2048 import Game2048
from qlearn2048.main import main, run_signal_loop
from qlearn2048.scheduling.drivers import IntervalDriver, SignalDriver
from qlearn2048.session import GameSession
from qlearn2048.storage.storage_manager import MemoryStorageManager
from qlearn2048.utils.training_stats import TrainingStats

DEAD_BOARD = [
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 2, 4, 2],
]


class TestGameSession:
    def test_plays_requested_episodes(self) -> None:
        game = Game2048(seed=0)
        storage = MemoryStorageManager()
        agent = QLearningAgent(game, storage_manager=storage)
        session = GameSession(game, agent, max_episodes=2, max_steps=20)
        agent.start(IntervalDriver(interval=0, should_stop=session.done))

        assert session.episodes == 2
        assert len(session.stats) == 2
        assert all(length <= 20 for length in session.stats.episode_lengths)
        assert storage.get_q_data() == agent.q_table.to_dict()

    def test_restart_resets_game(self) -> None:
        game = Game2048(seed=0)
        game.set_board(DEAD_BOARD, score=500)
        agent = QLearningAgent(game)
        session = GameSession(game, agent)
        assert agent.tick() is None
        assert session.episodes == 1
        assert session.stats.scores == [500]
        assert session.stats.max_tiles == [4]
        assert game.score == 0
        assert not game.is_terminated()

    def test_moves_are_played(self) -> None:
        game = Game2048(seed=0)
        agent = QLearningAgent(game)
        session = GameSession(game, agent)
        driver = SignalDriver()
        agent.start(driver)
        driver.send("step")
        assert session.steps == 1
        assert game.score >= 0

    def test_tracks_best_tile_and_invalid_moves(self) -> None:
        game = Game2048(seed=0)
        game.set_board([[2, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])
        agent = QLearningAgent(game)
        session = GameSession(game, agent)
        session.on_move(0)
        assert session.invalid_moves == 1
        assert session.best_tile == 2
        session.on_move(3)
        assert session.invalid_moves == 2
        session.on_move(1)
        assert session.invalid_moves == 2
        assert session.best_tile == game.max_tile()

    def test_reset_signal_ends_episode(self) -> None:
        game = Game2048(seed=0)
        agent = QLearningAgent(game)
        session = GameSession(game, agent)
        driver = SignalDriver()
        agent.start(driver)
        driver.send("step")
        driver.send("reset")
        assert session.episodes == 1
        assert session.steps == 0

    def test_signal_loop_reads_commands(self) -> None:
        game = Game2048(seed=0)
        agent = QLearningAgent(game)
        session = GameSession(game, agent)
        driver = SignalDriver()
        agent.start(driver)
        run_signal_loop(driver, session, io.StringIO("step\n\nbogus\nreset\nquit\nstep\n"))
        assert session.episodes == 1
        assert not driver.active


class TestTrainingStats:
    def test_summary_and_plot(self, tmp_path) -> None:
        stats = TrainingStats(window_size=2)
        stats.update(100, 64, 40, 35)
        stats.update(300, 128, 80, 90)
        stats.update(200, 64, 60, 120)
        assert stats.running_score() == 250
        stats.log_summary()
        path = tmp_path / "progress.png"
        stats.plot_progress(str(path))
        assert path.exists()

    def test_empty_summary(self) -> None:
        stats = TrainingStats()
        assert stats.running_score() == 0.0
        stats.log_summary()


class TestMain:
    def test_interval_run_writes_table_and_plot(self, tmp_path) -> None:
        q_file = tmp_path / "q.json"
        plot = tmp_path / "plot.png"
        code = main([
            "--episodes", "1", "--interval", "0", "--max-steps", "15",
            "--q-file", str(q_file), "--plot", str(plot), "--log-file", "",
            "--update-mode", "replace", "--reward-mode", "score_only",
        ])
        assert code == 0
        assert plot.exists()
        data = json.loads(q_file.read_text())
        assert data
        assert all(len(row) == 4 for row in data.values())
