"""
JSON serialization for the training plan.

Handles conversion between the plan dataclasses and JSON-compatible dicts
for the on-disk store.  Timestamps are written as ISO-8601 strings.
"""

import json
from datetime import datetime
from typing import Any

from ..core.models import (
    Exercise,
    Profile,
    ProgressionRules,
    TrainingPlan,
    TrainingSession,
    WarmupExercise,
)


class ValidationError(Exception):
    """Raised when stored data validation fails."""

    pass


def validate_datetime(value: str | None, name: str) -> datetime | None:
    """
    Parse an optional ISO-8601 timestamp.

    Timestamps carrying a UTC offset are converted to naive local time so
    every stored datetime compares with every other.

    Args:
        value: ISO string or None
        name: Field name for the error message

    Returns:
        datetime or None

    Raises:
        ValidationError: If the string is not a valid timestamp
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be an ISO timestamp string, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid {name}: {value}") from e
    return parsed


def validate_non_negative(value: int | float | None, name: str) -> int | float | None:
    """
    Validate that an optional value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value is not None and value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def profile_to_dict(profile: Profile) -> dict[str, Any]:
    """Convert Profile to JSON-compatible dict."""
    return {
        "age": profile.age,
        "sex": profile.sex,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "conditions": list(profile.conditions),
        "meds": list(profile.meds),
        "goal": profile.goal,
        "split": profile.split,
        "intensity": profile.intensity,
        "cardio": profile.cardio,
        "home_equipment": list(profile.home_equipment),
        "gym_equipment": list(profile.gym_equipment),
        "session_time_min": profile.session_time_min,
    }


def dict_to_profile(data: dict[str, Any]) -> Profile:
    """
    Convert dict to Profile.

    Raises:
        ValidationError: If data is invalid
    """
    validate_positive(data.get("age", 0), "age")
    validate_positive(data.get("height_cm", 0), "height_cm")
    validate_positive(data.get("weight_kg", 0), "weight_kg")

    return Profile(
        age=int(data["age"]),
        sex=str(data["sex"]),
        height_cm=int(data["height_cm"]),
        weight_kg=int(data["weight_kg"]),
        goal=str(data["goal"]),
        conditions=[str(c) for c in data.get("conditions", [])],
        meds=[str(m) for m in data.get("meds", [])],
        split=str(data.get("split", "")),
        intensity=str(data.get("intensity", "")),
        cardio=str(data.get("cardio", "")),
        home_equipment=[str(h) for h in data.get("home_equipment", [])],
        gym_equipment=[str(g) for g in data.get("gym_equipment", [])],
        session_time_min=int(data.get("session_time_min", 60)),
    )


def warmup_to_dict(warmup: WarmupExercise) -> dict[str, Any]:
    """Convert WarmupExercise to JSON-compatible dict."""
    return {
        "name_pl": warmup.name_pl,
        "name_en": warmup.name_en,
        "sets": warmup.sets,
        "tempo": warmup.tempo,
        "video_url": warmup.video_url,
        "is_completed": warmup.is_completed,
        "completed_at": _ts(warmup.completed_at),
    }


def dict_to_warmup(data: dict[str, Any]) -> WarmupExercise:
    """Convert dict to WarmupExercise."""
    return WarmupExercise(
        name_pl=str(data["name_pl"]),
        name_en=str(data["name_en"]),
        sets=str(data["sets"]),
        tempo=str(data["tempo"]),
        video_url=data.get("video_url"),
        is_completed=bool(data.get("is_completed", False)),
        completed_at=validate_datetime(data.get("completed_at"), "completed_at"),
    )


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """
    Convert Exercise to JSON-compatible dict.

    The set-map blob is stored verbatim; completion fields are stored as
    last computed by the set-tracking code.
    """
    return {
        "name_pl": exercise.name_pl,
        "name_en": exercise.name_en,
        "sets_reps": exercise.sets_reps,
        "start_weight_kg": exercise.start_weight_kg,
        "start_weight_kg_per_hand": exercise.start_weight_kg_per_hand,
        "rir": exercise.rir,
        "tempo": exercise.tempo,
        "notes": exercise.notes,
        "video_url": exercise.video_url,
        "is_completed": exercise.is_completed,
        "completed_at": _ts(exercise.completed_at),
        "sets_data": exercise.sets_data,
        "sort_order": exercise.sort_order,
    }


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert dict to Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    start = validate_non_negative(data.get("start_weight_kg"), "start_weight_kg")
    per_hand = validate_non_negative(
        data.get("start_weight_kg_per_hand"), "start_weight_kg_per_hand"
    )

    return Exercise(
        name_pl=str(data["name_pl"]),
        name_en=str(data["name_en"]),
        sets_reps=str(data["sets_reps"]),
        start_weight_kg=float(start) if start is not None else None,
        start_weight_kg_per_hand=float(per_hand) if per_hand is not None else None,
        rir=data.get("rir"),
        tempo=data.get("tempo"),
        notes=data.get("notes"),
        video_url=data.get("video_url"),
        is_completed=bool(data.get("is_completed", False)),
        completed_at=validate_datetime(data.get("completed_at"), "completed_at"),
        sets_data=str(data.get("sets_data") or ""),
        sort_order=int(data.get("sort_order", 0)),
    )


def session_to_dict(session: TrainingSession) -> dict[str, Any]:
    """Convert TrainingSession to JSON-compatible dict."""
    return {
        "day": session.day,
        "location": session.location,
        "focus": session.focus,
        "cardio": session.cardio,
        "is_completed": session.is_completed,
        "completed_date": _ts(session.completed_date),
        "scheduled_date": _ts(session.scheduled_date),
        "started_at": _ts(session.started_at),
        "exercises": [exercise_to_dict(e) for e in session.exercises],
    }


def dict_to_session(data: dict[str, Any]) -> TrainingSession:
    """Convert dict to TrainingSession."""
    return TrainingSession(
        day=str(data["day"]),
        location=str(data.get("location", "")),
        focus=str(data.get("focus", "")),
        exercises=[dict_to_exercise(e) for e in data.get("exercises", [])],
        cardio=data.get("cardio"),
        is_completed=bool(data.get("is_completed", False)),
        completed_date=validate_datetime(data.get("completed_date"), "completed_date"),
        scheduled_date=validate_datetime(data.get("scheduled_date"), "scheduled_date"),
        started_at=validate_datetime(data.get("started_at"), "started_at"),
    )


def rules_to_dict(rules: ProgressionRules) -> dict[str, Any]:
    """Convert ProgressionRules to JSON-compatible dict."""
    return {"t1": rules.t1, "t2": rules.t2, "t3": rules.t3, "t4_deload": rules.t4_deload}


def dict_to_rules(data: dict[str, Any]) -> ProgressionRules:
    """Convert dict to ProgressionRules."""
    return ProgressionRules(
        t1=str(data["t1"]),
        t2=str(data["t2"]),
        t3=str(data["t3"]),
        t4_deload=str(data["t4_deload"]),
    )


def plan_to_dict(plan: TrainingPlan) -> dict[str, Any]:
    """
    Convert the whole TrainingPlan aggregate to a JSON-compatible dict.

    Args:
        plan: TrainingPlan to convert

    Returns:
        Dict representation
    """
    return {
        "version": plan.version,
        "created_at": _ts(plan.created_at),
        "profile": profile_to_dict(plan.profile) if plan.profile else None,
        "warmup_exercises": [warmup_to_dict(w) for w in plan.warmup_exercises],
        "training_sessions": [session_to_dict(s) for s in plan.training_sessions],
        "progression_rules": (
            rules_to_dict(plan.progression_rules) if plan.progression_rules else None
        ),
    }


def dict_to_plan(data: dict[str, Any]) -> TrainingPlan:
    """
    Convert dict to TrainingPlan.

    Args:
        data: Dict representation

    Returns:
        TrainingPlan instance

    Raises:
        ValidationError: If data is invalid or required fields are missing
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Plan must be a JSON object, got {type(data).__name__}")

    try:
        created_at = validate_datetime(data.get("created_at"), "created_at")
        return TrainingPlan(
            version=str(data.get("version", "1.0")),
            created_at=created_at if created_at is not None else datetime.now(),
            profile=dict_to_profile(data["profile"]) if data.get("profile") else None,
            warmup_exercises=[dict_to_warmup(w) for w in data.get("warmup_exercises", [])],
            training_sessions=[dict_to_session(s) for s in data.get("training_sessions", [])],
            progression_rules=(
                dict_to_rules(data["progression_rules"])
                if data.get("progression_rules")
                else None
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid plan data: {e!r}") from e


def plan_to_json(plan: TrainingPlan) -> str:
    """Serialize a plan to indented JSON text."""
    return json.dumps(plan_to_dict(plan), indent=2, ensure_ascii=False)


def json_to_plan(text: str) -> TrainingPlan:
    """
    Deserialize a plan from JSON text.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e

    return dict_to_plan(data)
