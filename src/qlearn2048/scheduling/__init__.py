"""
Scheduling drivers for the agent's decision loop.
"""

from .drivers import Driver, IntervalDriver, SignalDriver, STEP, RESET
