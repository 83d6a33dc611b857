"""
Drivers that decide when the agent makes a decision.

The agent only exposes ``tick()`` and ``reset()``; a driver calls them either
on a fixed interval or in response to discrete signals.
"""

import logging
import time
from typing import Callable, Optional

STEP = "step"
RESET = "reset"


class Driver:
    def __init__(self):
        self.agent = None
        self.ticks = 0

    def bind(self, agent) -> None:
        self.agent = agent

    def _require_agent(self):
        if self.agent is None:
            raise RuntimeError(f"{type(self).__name__} is not bound to an agent")
        return self.agent

    def start(self):
        raise NotImplementedError

    def stop(self) -> None:
        pass


class IntervalDriver(Driver):
    """
    Calls ``agent.tick()`` every ``interval`` seconds until stopped.

    Args:
        interval: Seconds to wait between ticks (0 disables sleeping)
        max_ticks: Stop after this many ticks (None runs until stopped)
        should_stop: Optional predicate checked before every tick
    """

    def __init__(self, interval: float = 0.01, max_ticks: Optional[int] = None,
                 should_stop: Optional[Callable[[], bool]] = None):
        super().__init__()
        self.interval = interval
        self.max_ticks = max_ticks
        self.should_stop = should_stop
        self.running = False

    def start(self) -> int:
        """Run the loop in the calling thread. Returns the number of ticks made."""
        agent = self._require_agent()
        self.running = True
        logging.info(f"Interval driver started (interval={self.interval}s, max_ticks={self.max_ticks})")
        while self.running:
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                break
            if self.should_stop is not None and self.should_stop():
                break
            agent.tick()
            self.ticks += 1
            if self.interval > 0:
                time.sleep(self.interval)
        self.running = False
        logging.info(f"Interval driver stopped after {self.ticks} ticks")
        return self.ticks

    def stop(self) -> None:
        self.running = False


class SignalDriver(Driver):
    """
    Makes one decision per "step" signal. A "reset" signal asks for a
    restart without touching the value table.
    """

    def __init__(self):
        super().__init__()
        self.active = False

    def start(self) -> None:
        self._require_agent()
        self.active = True

    def stop(self) -> None:
        self.active = False

    def send(self, signal: str):
        agent = self._require_agent()
        if not self.active:
            logging.debug(f"Ignoring signal {signal!r}, driver is stopped")
            return None
        if signal == STEP:
            if agent.deciding:
                logging.debug("Ignoring step signal, a decision is already running")
                return None
            self.ticks += 1
            return agent.tick()
        if signal == RESET:
            agent.reset()
            return None
        raise ValueError(f"Unknown signal {signal!r}, expected {STEP!r} or {RESET!r}")
