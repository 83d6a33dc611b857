# Command-line parsing and training statistics

from .cli import parse_args
from .training_stats import TrainingStats
