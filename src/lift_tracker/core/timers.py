"""
Session stopwatch and rest countdown.

Both are plain value objects.  Nothing runs in the background: the caller
passes timestamps (Stopwatch) or advances time with tick() (RestCountdown)
from whatever clock or redraw loop it has.
"""

from dataclasses import dataclass
from datetime import datetime

from .config import DEFAULT_REST_SECONDS


def format_clock(seconds: float) -> str:
    """Render a duration as MM:SS (minutes keep counting past 59)."""
    total = max(int(seconds), 0)
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass
class Stopwatch:
    """Elapsed time of the current training session."""

    started_at: datetime | None = None
    accumulated: float = 0.0  # seconds from earlier start/stop runs

    @property
    def is_running(self) -> bool:
        return self.started_at is not None

    def start(self, now: datetime) -> None:
        """Start counting; a running stopwatch is left as is."""
        if self.started_at is None:
            self.started_at = now

    def stop(self, now: datetime) -> None:
        """Stop counting and keep the elapsed time."""
        if self.started_at is not None:
            self.accumulated += (now - self.started_at).total_seconds()
            self.started_at = None

    def reset(self) -> None:
        self.started_at = None
        self.accumulated = 0.0

    def elapsed(self, now: datetime) -> float:
        """Seconds counted so far, including the running interval."""
        if self.started_at is None:
            return self.accumulated
        return self.accumulated + (now - self.started_at).total_seconds()


@dataclass
class RestCountdown:
    """Rest interval between sets, counting down to zero."""

    duration: float = DEFAULT_REST_SECONDS
    remaining: float = DEFAULT_REST_SECONDS
    is_running: bool = False

    def start(self) -> None:
        """Restart the countdown from the full duration."""
        self.remaining = self.duration
        self.is_running = True

    def stop(self) -> None:
        self.is_running = False

    def reset(self) -> None:
        self.stop()
        self.remaining = self.duration

    def set_duration(self, seconds: float) -> None:
        """Change the rest length and refill the remaining time."""
        if seconds < 0:
            raise ValueError("duration must be non-negative")
        self.duration = seconds
        self.remaining = seconds

    def tick(self, seconds: float = 1.0) -> bool:
        """
        Advance the countdown.

        Returns:
            True when this tick finished the countdown
        """
        if not self.is_running:
            return False
        self.remaining = max(self.remaining - seconds, 0.0)
        if self.remaining == 0:
            self.stop()
            return True
        return False
