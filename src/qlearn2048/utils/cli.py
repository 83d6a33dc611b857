import argparse

from ..config import HYPERPARAMS, PERSIST_MODES, REWARD_MODES, UPDATE_MODES


def parse_args(args=None):
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Tabular Q-learning agent for 2048"
    )

    # General options
    parser.add_argument("--seed", type=int, default=42,
                        help="Random seed (default: 42)")
    parser.add_argument("--log-file", type=str, default="qlearn2048.log",
                        help="Log file path, empty string to disable (default: qlearn2048.log)")
    parser.add_argument("--render", action="store_true",
                        help="Print the board after every move")
    parser.add_argument("--plot", type=str, default=None,
                        help="Save a training progress plot to this path")

    # Driver options
    parser.add_argument("--driver", choices=["interval", "signal"], default="interval",
                        help="interval: tick on a timer; signal: read step/reset commands from stdin")
    parser.add_argument("--episodes", type=int, default=100,
                        help="Number of episodes to play with the interval driver (default: 100)")
    parser.add_argument("--interval", type=float, default=HYPERPARAMS["tick_interval"],
                        help=f"Seconds between ticks (default: {HYPERPARAMS['tick_interval']})")
    parser.add_argument("--max-steps", type=int, default=HYPERPARAMS["max_steps"],
                        help=f"Maximum moves per episode (default: {HYPERPARAMS['max_steps']})")

    # Learning options
    parser.add_argument("--gamma", type=float, default=HYPERPARAMS["gamma"],
                        help=f"Discount factor (default: {HYPERPARAMS['gamma']})")
    parser.add_argument("--update-mode", choices=UPDATE_MODES, default=HYPERPARAMS["update_mode"],
                        help="Accumulate into or overwrite the stored value")
    parser.add_argument("--reward-mode", choices=REWARD_MODES, default=HYPERPARAMS["reward_mode"],
                        help="Reward shaping added to the weighted score gain")

    # Storage options
    parser.add_argument("--storage", choices=["json", "pickle", "memory"], default="json",
                        help="Value table storage backend (default: json)")
    parser.add_argument("--q-file", type=str, default="q_table.json",
                        help="Value table file for json/pickle storage (default: q_table.json)")
    parser.add_argument("--persist-mode", choices=PERSIST_MODES, default=HYPERPARAMS["persist_mode"],
                        help="Save the table only when a game ends, or after every move")

    return parser.parse_args(args)
