# scheduler.py
"""
Fixed-rate frame pacing.

FrameScheduler keeps a cadence against a monotonic clock. Each wait sleeps
only for what is left of the current frame, so the time spent computing a
sweep is absorbed instead of added on top of the frame interval.
"""
import logging
import time
from typing import Callable

# --- Data Contracts ---
#
# class FrameScheduler:
#   - __init__(self, interval: float, clock=time.monotonic, sleep=time.sleep):
#     - Inputs:
#       - interval: float, target seconds per frame (> 0).
#       - clock: callable returning monotonic seconds.
#       - sleep: callable taking seconds.
#     - Raises: ValueError if interval is not positive.
#
#   - wait(self) -> float:
#     - Outputs: seconds actually slept (0.0 if the frame overran).
#     - Side Effects: Advances the deadline by one interval. If the frame
#       overran, the deadline is resynchronized to the current time.


class FrameScheduler:
    """
    Deadline-corrected frame pacing on a monotonic clock.
    """
    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        if not interval > 0:
            msg = f"Frame interval must be positive, got {interval}."
            logging.critical(msg)
            raise ValueError(msg)
        self.interval = float(interval)
        self._clock = clock
        self._sleep = sleep
        self.overruns = 0
        self._deadline = self._clock() + self.interval

    def reset(self) -> None:
        """Starts a fresh frame at the current time."""
        self._deadline = self._clock() + self.interval

    def wait(self) -> float:
        """
        Blocks until the end of the current frame.

        Returns:
            float: Seconds slept.
        """
        now = self._clock()
        remaining = self._deadline - now
        if remaining > 0:
            self._sleep(remaining)
            self._deadline += self.interval
            return remaining

        # Overran the frame: drop the lost time rather than bursting to catch up.
        self.overruns += 1
        logging.debug(f"Frame overran its deadline by {-remaining * 1000:.1f} ms.")
        self._deadline = now + self.interval
        return 0.0
