"""
Data models for lift-tracker.

All core dataclasses representing a training plan: the profile, the warmup
routine, the weekly sessions with their exercises, and the progression rules.
Children are owned by value; a plan holds its sessions, a session holds its
exercises, and removing a parent removes everything beneath it.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime

from .config import DEFAULT_TOTAL_SETS, SETS_REPS_PATTERN

_SETS_REPS_RE = re.compile(SETS_REPS_PATTERN)


@dataclass
class SetData:
    """
    Tracking state of one set of an exercise.

    Weight and reps stay None until the user records them.
    """

    is_completed: bool = False
    weight: float | None = None
    reps: int | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.weight is not None and self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.reps is not None and self.reps < 0:
            raise ValueError("reps must be non-negative")


@dataclass
class Profile:
    """
    User characteristics the plan was written for.

    Imported once and never mutated afterwards.  List fields keep the order
    of the source document; duplicates are allowed.
    """

    age: int
    sex: str
    height_cm: int
    weight_kg: int
    goal: str
    conditions: list[str] = field(default_factory=list)
    meds: list[str] = field(default_factory=list)
    split: str = ""
    intensity: str = ""
    cardio: str = ""
    home_equipment: list[str] = field(default_factory=list)
    gym_equipment: list[str] = field(default_factory=list)
    session_time_min: int = 60

    def __post_init__(self) -> None:
        """Validate profile data."""
        if self.age <= 0:
            raise ValueError("age must be positive")
        if self.height_cm <= 0:
            raise ValueError("height_cm must be positive")
        if self.weight_kg <= 0:
            raise ValueError("weight_kg must be positive")
        if self.session_time_min <= 0:
            raise ValueError("session_time_min must be positive")


@dataclass
class WarmupExercise:
    """A warmup or rehab movement done before every session."""

    name_pl: str
    name_en: str
    sets: str  # free text, e.g. "2x15"
    tempo: str
    video_url: str | None = None
    is_completed: bool = False
    completed_at: datetime | None = None


@dataclass
class Exercise:
    """
    A single movement within a training session.

    ``sets_data`` is the persisted set-map blob.  It is read and written only
    through lift_tracker.core.sets, which also keeps ``is_completed`` and
    ``completed_at`` in line with it.
    """

    name_pl: str
    name_en: str
    sets_reps: str  # e.g. "4×6-8", "2-3x12-15"
    start_weight_kg: float | None = None
    start_weight_kg_per_hand: float | None = None
    rir: str | None = None
    tempo: str | None = None
    notes: str | None = None
    video_url: str | None = None
    is_completed: bool = False
    completed_at: datetime | None = None
    sets_data: str = ""
    sort_order: int = 0

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if self.start_weight_kg is not None and self.start_weight_kg < 0:
            raise ValueError("start_weight_kg must be non-negative")
        if self.start_weight_kg_per_hand is not None and self.start_weight_kg_per_hand < 0:
            raise ValueError("start_weight_kg_per_hand must be non-negative")

    @property
    def total_sets(self) -> int:
        """
        Number of sets prescribed by ``sets_reps``.

        Takes the leading count of "4×6-8" (4), "3x10" (3) or "2-3×12-15"
        (the lower bound, 2).  Falls back to 1 when nothing matches.
        """
        match = _SETS_REPS_RE.search(self.sets_reps)
        if match is None:
            return DEFAULT_TOTAL_SETS
        return int(match.group(1))

    @property
    def default_weight(self) -> float | None:
        """Suggested starting weight: the bar weight, else the per-hand weight."""
        if self.start_weight_kg is not None:
            return self.start_weight_kg
        return self.start_weight_kg_per_hand


@dataclass
class TrainingSession:
    """
    One weekly workout slot.

    ``day`` is expected to be one of config.WEEK_DAYS; other labels sort
    first when sessions are ordered by day.
    """

    day: str
    location: str
    focus: str
    exercises: list[Exercise] = field(default_factory=list)
    cardio: str | None = None
    is_completed: bool = False
    completed_date: datetime | None = None
    scheduled_date: datetime | None = None
    started_at: datetime | None = None  # first set ticked off

    @property
    def all_exercises_completed(self) -> bool:
        """True when every exercise in the session is completed."""
        return all(e.is_completed for e in self.exercises)


@dataclass
class ProgressionRules:
    """Free-text progression policy (tiers T1-T3) and the T4 deload rule."""

    t1: str
    t2: str
    t3: str
    t4_deload: str


@dataclass
class TrainingPlan:
    """
    Root aggregate: the one plan the application works with.
    """

    version: str = "1.0"
    created_at: datetime = field(default_factory=datetime.now)
    profile: Profile | None = None
    warmup_exercises: list[WarmupExercise] = field(default_factory=list)
    training_sessions: list[TrainingSession] = field(default_factory=list)
    progression_rules: ProgressionRules | None = None

    def all_exercises(self) -> list[Exercise]:
        """Exercises of every session, sessions in plan order."""
        return [e for s in self.training_sessions for e in s.exercises]
