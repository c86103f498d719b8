"""
Session and warmup actions.

The mutations a user triggers while training (starting, finishing or resetting
a session, ticking off warmups) plus the ordering helpers used to present
sessions and exercises.
"""

from datetime import datetime
from typing import Literal

from .config import WEEK_DAYS
from .models import Exercise, TrainingPlan, TrainingSession, WarmupExercise
from .sets import reset_sets
from .timers import Stopwatch

SessionStatus = Literal["done", "in_progress", "pending"]


class SessionNotReady(ValueError):
    """Raised when completing a session that still has unfinished exercises."""

    pass


def day_index(day: str) -> int:
    """Position of a day label in the week; unknown labels map to 0."""
    try:
        return WEEK_DAYS.index(day)
    except ValueError:
        return 0


def sorted_sessions(plan: TrainingPlan) -> list[TrainingSession]:
    """Sessions ordered by week day, plan order kept within a day."""
    return sorted(plan.training_sessions, key=lambda s: day_index(s.day))


def ordered_exercises(session: TrainingSession) -> list[Exercise]:
    """Exercises in authored order."""
    return sorted(session.exercises, key=lambda e: e.sort_order)


def session_progress(session: TrainingSession) -> tuple[int, int]:
    """Return (completed exercises, total exercises)."""
    done = sum(1 for e in session.exercises if e.is_completed)
    return done, len(session.exercises)


def session_status(session: TrainingSession) -> SessionStatus:
    """Badge state: done, in progress (some exercises finished), or pending."""
    if session.is_completed:
        return "done"
    done, _ = session_progress(session)
    return "in_progress" if done > 0 else "pending"


def mark_session_complete(
    session: TrainingSession,
    now: datetime | None = None,
    force: bool = False,
) -> None:
    """
    Mark a session as completed and record the completion date.

    A session that is already completed keeps its original date.

    Args:
        session: Session to complete
        now: Completion timestamp (current time by default)
        force: Complete even when some exercises are unfinished

    Raises:
        SessionNotReady: If exercises are unfinished and force is False
    """
    if session.is_completed:
        return

    if not force and not session.all_exercises_completed:
        done, total = session_progress(session)
        raise SessionNotReady(
            f"Complete all exercises to finish the session ({done}/{total} done)"
        )

    session.is_completed = True
    session.completed_date = now if now is not None else datetime.now()


def start_session(session: TrainingSession, now: datetime | None = None) -> None:
    """Stamp the session start on first activity; later calls keep the first stamp."""
    if session.started_at is None and not session.is_completed:
        session.started_at = now if now is not None else datetime.now()


def session_stopwatch(session: TrainingSession) -> Stopwatch:
    """
    Stopwatch for a session's training time.

    Runs from started_at; a completed session is stopped at its completion
    date.  A session never started reads as zero.
    """
    watch = Stopwatch()
    if session.started_at is None:
        return watch
    watch.start(session.started_at)
    if session.is_completed and session.completed_date is not None:
        watch.stop(max(session.completed_date, session.started_at))
    return watch


def reset_session(session: TrainingSession) -> None:
    """Clear every exercise's sets and the session's own completion."""
    for exercise in session.exercises:
        reset_sets(exercise)
    session.is_completed = False
    session.completed_date = None
    session.started_at = None


def toggle_warmup(warmup: WarmupExercise, now: datetime | None = None) -> None:
    """Flip a warmup's completion, stamping or clearing completed_at."""
    warmup.is_completed = not warmup.is_completed
    if warmup.is_completed:
        warmup.completed_at = now if now is not None else datetime.now()
    else:
        warmup.completed_at = None


def reset_warmups(plan: TrainingPlan) -> None:
    """Mark every warmup exercise as not done."""
    for warmup in plan.warmup_exercises:
        warmup.is_completed = False
        warmup.completed_at = None
