"""
Read-only statistics over completed training.

All functions are pure: they derive views from the current plan state and
never mutate it.  Dates come only from the data (session completion dates),
so repeated calls on the same plan return identical results.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

from .config import TREND_THRESHOLD_PCT, TREND_WINDOW
from .models import TrainingPlan
from .sets import read_sets
from .tracking import sorted_sessions

ExerciseTrend = Literal["increasing", "decreasing", "stable", "insufficient"]


@dataclass(frozen=True)
class ExerciseDataPoint:
    """One completed set with both weight and reps recorded."""

    date: datetime  # completion date of the session
    weight: float
    reps: int
    volume: float  # weight × reps
    session_day: str


@dataclass
class ExerciseStats:
    """
    History of one exercise across the plan, grouped by English name.
    """

    exercise_name: str
    exercise_name_pl: str
    total_sessions: int  # distinct session day labels, not calendar dates
    data_points: list[ExerciseDataPoint] = field(default_factory=list)
    personal_record: float | None = None
    average_weight: float = 0.0
    total_volume: float = 0.0
    last_performed: datetime | None = None
    weight_progression: list[tuple[date, float]] = field(default_factory=list)
    volume_progression: list[tuple[date, float]] = field(default_factory=list)


@dataclass
class ExerciseSummary:
    """Compact per-exercise view with a trend label."""

    exercise_name: str
    exercise_name_pl: str
    total_sessions: int
    personal_record: float | None
    last_weight: float | None
    last_performed: datetime | None
    trend: ExerciseTrend


@dataclass
class TrainingOverview:
    """Plan-wide totals for the statistics screen."""

    total_workouts: int
    exercises_completed: int
    unique_exercises: int
    total_volume: float


@dataclass
class WeeklyProgress:
    """Completion of the current week's plan."""

    completed_sessions: int
    total_sessions: int
    completion_ratio: float
    exercises_completed: int
    total_exercises: int
    current_streak: int


def _collect_data_points(plan: TrainingPlan) -> dict[str, list[ExerciseDataPoint]]:
    """
    Gather data points per English exercise name.

    Only completed sessions with a completion date and completed exercises
    contribute.  A completed exercise opens its group even when none of its
    sets has weight and reps recorded.
    """
    groups: dict[str, list[ExerciseDataPoint]] = {}

    for session in plan.training_sessions:
        if not session.is_completed or session.completed_date is None:
            continue

        for exercise in session.exercises:
            if not exercise.is_completed:
                continue

            points = groups.setdefault(exercise.name_en, [])
            sets = read_sets(exercise)
            for number in sorted(sets):
                data = sets[number]
                if not data.is_completed or data.weight is None or data.reps is None:
                    continue
                points.append(
                    ExerciseDataPoint(
                        date=session.completed_date,
                        weight=data.weight,
                        reps=data.reps,
                        volume=data.weight * data.reps,
                        session_day=session.day,
                    )
                )

    return groups


def _polish_name(plan: TrainingPlan, name_en: str) -> str:
    """First Polish name found for an English name, else the English name."""
    for exercise in plan.all_exercises():
        if exercise.name_en == name_en:
            return exercise.name_pl
    return name_en


def weight_progression(points: list[ExerciseDataPoint]) -> list[tuple[date, float]]:
    """Heaviest weight per calendar day, ascending by day."""
    by_day: dict[date, float] = {}
    for p in points:
        day = p.date.date()
        by_day[day] = max(by_day.get(day, p.weight), p.weight)
    return sorted(by_day.items())


def volume_progression(points: list[ExerciseDataPoint]) -> list[tuple[date, float]]:
    """Summed volume per calendar day, ascending by day."""
    by_day: dict[date, float] = {}
    for p in points:
        day = p.date.date()
        by_day[day] = by_day.get(day, 0.0) + p.volume
    return sorted(by_day.items())


def calculate_trend(
    progression: list[tuple[date, float]],
    window: int = TREND_WINDOW,
    threshold_pct: float = TREND_THRESHOLD_PCT,
) -> ExerciseTrend:
    """
    Classify the recent weight trend.

    Compares the first and last of the last ``window`` points:
    above +threshold% is increasing, below -threshold% decreasing, otherwise
    stable.  Fewer than ``window`` points is insufficient.  A first weight of
    0 has no defined percentage change and counts as stable.

    Args:
        progression: (day, weight) points, ascending
        window: Number of trailing points considered
        threshold_pct: Percentage change that counts as a trend

    Returns:
        Trend label
    """
    if len(progression) < window:
        return "insufficient"

    recent = progression[-window:]
    first_weight = recent[0][1]
    last_weight = recent[-1][1]

    if first_weight == 0:
        return "stable"

    change_pct = (last_weight - first_weight) / first_weight * 100

    if change_pct > threshold_pct:
        return "increasing"
    if change_pct < -threshold_pct:
        return "decreasing"
    return "stable"


def all_exercise_stats(plan: TrainingPlan) -> list[ExerciseStats]:
    """
    Compute ExerciseStats for every exercise with completed history.

    Returns:
        Stats sorted by total_sessions, highest first (ties keep plan order)
    """
    stats: list[ExerciseStats] = []

    for name_en, points in _collect_data_points(plan).items():
        sorted_points = sorted(points, key=lambda p: p.date)
        weights = [p.weight for p in sorted_points]

        stats.append(
            ExerciseStats(
                exercise_name=name_en,
                exercise_name_pl=_polish_name(plan, name_en),
                total_sessions=len({p.session_day for p in sorted_points}),
                data_points=sorted_points,
                personal_record=max(weights) if weights else None,
                average_weight=sum(weights) / len(weights) if weights else 0.0,
                total_volume=sum(p.volume for p in sorted_points),
                last_performed=sorted_points[-1].date if sorted_points else None,
                weight_progression=weight_progression(sorted_points),
                volume_progression=volume_progression(sorted_points),
            )
        )

    stats.sort(key=lambda s: s.total_sessions, reverse=True)
    return stats


def exercise_summaries(
    plan: TrainingPlan,
    window: int = TREND_WINDOW,
    threshold_pct: float = TREND_THRESHOLD_PCT,
) -> list[ExerciseSummary]:
    """Summaries with trend labels, in the same order as all_exercise_stats."""
    return [
        ExerciseSummary(
            exercise_name=s.exercise_name,
            exercise_name_pl=s.exercise_name_pl,
            total_sessions=s.total_sessions,
            personal_record=s.personal_record,
            last_weight=s.data_points[-1].weight if s.data_points else None,
            last_performed=s.last_performed,
            trend=calculate_trend(s.weight_progression, window, threshold_pct),
        )
        for s in all_exercise_stats(plan)
    ]


def stats_for_exercise(name: str, plan: TrainingPlan) -> ExerciseStats | None:
    """Stats for one exercise by English name, or None without history."""
    for s in all_exercise_stats(plan):
        if s.exercise_name == name:
            return s
    return None


def current_streak(plan: TrainingPlan) -> int:
    """Number of completed sessions in a row from the start of the week."""
    streak = 0
    for session in sorted_sessions(plan):
        if not session.is_completed:
            break
        streak += 1
    return streak


def training_overview(plan: TrainingPlan) -> TrainingOverview:
    """Totals over completed sessions and exercises."""
    completed_exercises = [e for e in plan.all_exercises() if e.is_completed]

    total_volume = 0.0
    for session in plan.training_sessions:
        if not session.is_completed:
            continue
        for exercise in session.exercises:
            if not exercise.is_completed:
                continue
            for data in read_sets(exercise).values():
                if data.is_completed and data.weight is not None and data.reps is not None:
                    total_volume += data.weight * data.reps

    return TrainingOverview(
        total_workouts=sum(1 for s in plan.training_sessions if s.is_completed),
        exercises_completed=len(completed_exercises),
        unique_exercises=len({e.name_en for e in completed_exercises}),
        total_volume=total_volume,
    )


def weekly_progress(plan: TrainingPlan) -> WeeklyProgress:
    """Session and exercise completion across the plan's week."""
    total = len(plan.training_sessions)
    completed = sum(1 for s in plan.training_sessions if s.is_completed)
    exercises = plan.all_exercises()

    return WeeklyProgress(
        completed_sessions=completed,
        total_sessions=total,
        completion_ratio=completed / total if total > 0 else 0.0,
        exercises_completed=sum(1 for e in exercises if e.is_completed),
        total_exercises=len(exercises),
        current_streak=current_streak(plan),
    )
