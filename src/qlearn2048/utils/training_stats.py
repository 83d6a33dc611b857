import logging
import time
from collections import deque

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np


class TrainingStats:
    def __init__(self, window_size: int = 100):
        self.scores = []
        self.max_tiles = []
        self.episode_lengths = []
        self.table_sizes = []
        self.window_size = window_size
        self.recent_scores = deque(maxlen=window_size)
        self.start_time = time.time()

    def __len__(self) -> int:
        return len(self.scores)

    def update(self, score: int, max_tile: int, episode_length: int, table_size: int) -> None:
        self.scores.append(score)
        self.max_tiles.append(max_tile)
        self.episode_lengths.append(episode_length)
        self.table_sizes.append(table_size)
        self.recent_scores.append(score)

    def running_score(self) -> float:
        if not self.recent_scores:
            return 0.0
        return float(np.mean(self.recent_scores))

    def plot_progress(self, filename: str = "training_progress.png") -> None:
        fig, ((ax1, ax2), (ax3, ax4)) = plt.subplots(2, 2, figsize=(15, 10))
        running = [np.mean(self.scores[max(0, i - self.window_size + 1):i + 1])
                   for i in range(len(self.scores))]
        ax1.plot(self.scores, label='Episode Score', alpha=0.6)
        ax1.plot(running, label='Running Score', linewidth=2)
        ax1.set_title('Score over Time')
        ax1.set_xlabel('Episode')
        ax1.set_ylabel('Score')
        ax1.legend()
        ax2.plot(self.max_tiles)
        ax2.set_title('Maximum Tile Achieved')
        ax2.set_xlabel('Episode')
        ax2.set_ylabel('Max Tile')
        ax3.plot(self.episode_lengths, color='purple')
        ax3.set_title('Episode Length')
        ax3.set_xlabel('Episode')
        ax3.set_ylabel('Moves')
        ax4.plot(self.table_sizes, color='orange')
        ax4.set_title('Value Table Size')
        ax4.set_xlabel('Episode')
        ax4.set_ylabel('States')
        plt.tight_layout()
        plt.savefig(filename)
        plt.close(fig)

    def log_summary(self) -> None:
        if not self.scores:
            logging.info("No episodes finished")
            return
        training_time = time.time() - self.start_time
        hours, rem = divmod(training_time, 3600)
        minutes, seconds = divmod(rem, 60)
        logging.info("====== Training Summary ======")
        logging.info(f"Training Duration: {int(hours)}h {int(minutes)}m {int(seconds)}s")
        logging.info(f"Episodes: {len(self.scores)}")
        logging.info(f"Best Score: {max(self.scores):,}")
        logging.info(f"Average Score (last {self.window_size} episodes): {self.running_score():.2f}")
        logging.info(f"Best Max Tile: {max(self.max_tiles)}")
        logging.info(f"Average Max Tile (last {self.window_size} episodes): {np.mean(self.max_tiles[-self.window_size:]):.2f}")
        logging.info(f"Average Episode Length: {np.mean(self.episode_lengths):.2f}")
        logging.info(f"Value Table Size: {self.table_sizes[-1]:,} states")
        logging.info("==============================")
