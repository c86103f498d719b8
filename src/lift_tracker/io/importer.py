"""
One-time import of a training plan document.

Turns the JSON plan document (profile, warmup routine, two weekly schedule
variants, progression rules) into a TrainingPlan aggregate.  The transform
is pure: nothing is written anywhere, so a document that fails to decode
leaves the store untouched.

Document layout (keys in snake_case):

    {
      "version": "1.0",
      "profile": {"age": 34, "sex": "male", "height_cm": 182, ...},
      "warmup_and_knee_rehab": [{"name_pl": ..., "name_en": ..., "sets": ..., "tempo": ...}],
      "variants": {
        "A_2x_gym_1x_home": {"schedule": [{"day": "Monday", "exercises": [...]}, ...]},
        "B_3x_gym":         {"schedule": [{"copy_of_variantA_day": "Monday"}, ...]}
      },
      "progression_rules": {"T1": ..., "T2": ..., "T3": ..., "T4_deload": ...}
    }

Start weights may be numbers or ranges such as "50-55" / "50–55"; the lower
bound is used.
"""

import json
import math
import re
import warnings
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.config import VARIANT_A_KEY, VARIANT_B_KEY
from ..core.models import (
    Exercise,
    Profile,
    ProgressionRules,
    TrainingPlan,
    TrainingSession,
    WarmupExercise,
)


class PlanImportError(Exception):
    """Base class for plan import failures."""

    pass


class ImportFileNotFound(PlanImportError, FileNotFoundError):
    """Raised when the plan document does not exist."""

    pass


class ImportDecodingFailed(PlanImportError, ValueError):
    """Raised when the plan document is not valid JSON or misses required fields."""

    pass


_RANGE_SEPARATORS = re.compile(r"[-–]")


def parse_weight(value: Any) -> float | None:
    """
    Extract a starting weight from a number or a range string.

    Examples:
        60        → 60.0
        "50-55"   → 50.0
        "12–14"   → 12.0
        "bodyweight", None, {}, 10**400, "inf" → None

    Args:
        value: Raw field value from the document

    Returns:
        Weight in kg, or None when absent or unparseable
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        raw: Any = value
    elif isinstance(value, str):
        raw = _RANGE_SEPARATORS.split(value, maxsplit=1)[0].strip()
    else:
        return None

    try:
        weight = float(raw)
    except (ValueError, OverflowError):
        return None
    return weight if math.isfinite(weight) else None


def _require(data: dict[str, Any], key: str, kind: type | tuple[type, ...], where: str) -> Any:
    """Fetch a required field and check its JSON type."""
    if key not in data:
        raise ImportDecodingFailed(f"{where}: missing required field '{key}'")
    value = data[key]
    if isinstance(value, bool) and kind is not bool:
        raise ImportDecodingFailed(f"{where}: field '{key}' has the wrong type")
    if not isinstance(value, kind):
        raise ImportDecodingFailed(f"{where}: field '{key}' has the wrong type")
    return value


def _require_int(data: dict[str, Any], key: str, where: str) -> int:
    value = _require(data, key, (int, float), where)
    if isinstance(value, float) and not value.is_integer():
        raise ImportDecodingFailed(f"{where}: field '{key}' must be a whole number")
    return int(value)


def _optional_str(data: dict[str, Any], key: str, where: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ImportDecodingFailed(f"{where}: field '{key}' must be a string")
    return value


def _string_list(data: dict[str, Any], key: str, where: str) -> list[str]:
    """Normalize a list field: a list of strings, or one string wrapped in a list."""
    value = _require(data, key, (list, str), where)
    if isinstance(value, str):
        return [value] if value else []
    if not all(isinstance(item, str) for item in value):
        raise ImportDecodingFailed(f"{where}: field '{key}' must contain only strings")
    return list(value)


def _object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ImportDecodingFailed(f"{where}: expected an object")
    return value


def _build_profile(data: dict[str, Any]) -> Profile:
    where = "profile"
    try:
        return Profile(
            age=_require_int(data, "age", where),
            sex=_require(data, "sex", str, where),
            height_cm=_require_int(data, "height_cm", where),
            weight_kg=_require_int(data, "weight_kg", where),
            goal=_require(data, "goal", str, where),
            conditions=_string_list(data, "conditions", where),
            meds=_string_list(data, "meds", where),
            split=_require(data, "split", str, where),
            intensity=_require(data, "intensity", str, where),
            cardio=_require(data, "cardio", str, where),
            home_equipment=_string_list(data, "home_equipment", where),
            gym_equipment=_string_list(data, "gym_equipment", where),
            session_time_min=_require_int(data, "session_time_min", where),
        )
    except ValueError as e:
        if isinstance(e, ImportDecodingFailed):
            raise
        raise ImportDecodingFailed(f"{where}: {e}") from e


def _build_warmup(data: dict[str, Any], index: int) -> WarmupExercise:
    where = f"warmup_and_knee_rehab[{index}]"
    return WarmupExercise(
        name_pl=_require(data, "name_pl", str, where),
        name_en=_require(data, "name_en", str, where),
        sets=_require(data, "sets", str, where),
        tempo=_require(data, "tempo", str, where),
        video_url=_optional_str(data, "video_url", where),
    )


def _build_exercise(data: dict[str, Any], where: str, sort_order: int) -> Exercise:
    try:
        return Exercise(
            name_pl=_require(data, "name_pl", str, where),
            name_en=_require(data, "name_en", str, where),
            sets_reps=_require(data, "sets_reps", str, where),
            start_weight_kg=parse_weight(data.get("start_weight_kg")),
            start_weight_kg_per_hand=parse_weight(data.get("start_weight_kg_per_hand")),
            rir=_optional_str(data, "rir", where),
            tempo=_optional_str(data, "tempo", where),
            notes=_optional_str(data, "notes", where),
            video_url=_optional_str(data, "video_url", where),
            sort_order=sort_order,
        )
    except ValueError as e:
        if isinstance(e, ImportDecodingFailed):
            raise
        raise ImportDecodingFailed(f"{where}: {e}") from e


def _validate_schedule_day(data: Any, where: str) -> dict[str, Any]:
    """Check the optional fields of one schedule entry and its exercises."""
    entry = _object(data, where)
    for key in ("day", "location", "focus", "cardio", "copy_of_variantA_day"):
        _optional_str(entry, key, where)

    exercises = entry.get("exercises")
    if exercises is not None:
        if not isinstance(exercises, list):
            raise ImportDecodingFailed(f"{where}: field 'exercises' must be a list")
        for i, ex in enumerate(exercises):
            # build once to surface decoding errors before anything is assembled
            _build_exercise(_object(ex, f"{where}.exercises[{i}]"), f"{where}.exercises[{i}]", i)
    return entry


def _build_session(entry: dict[str, Any], where: str) -> TrainingSession:
    """Create a fresh session (with fresh exercises) from a schedule entry."""
    session = TrainingSession(
        day=entry.get("day") or "",
        location=entry.get("location") or "",
        focus=entry.get("focus") or "",
        cardio=entry.get("cardio"),
    )
    for i, ex in enumerate(entry.get("exercises") or []):
        session.exercises.append(_build_exercise(ex, f"{where}.exercises[{i}]", i))
    return session


def _schedule(variants: dict[str, Any], key: str) -> list[dict[str, Any]]:
    variant = _object(_require(variants, key, dict, "variants"), f"variants.{key}")
    schedule = _require(variant, "schedule", list, f"variants.{key}")
    return [
        _validate_schedule_day(day, f"variants.{key}.schedule[{i}]")
        for i, day in enumerate(schedule)
    ]


def plan_from_document(document: Any, now: datetime | None = None) -> TrainingPlan:
    """
    Build a TrainingPlan from a decoded plan document.

    Variant A sessions come first, then variant B.  A variant-B entry with
    ``copy_of_variantA_day`` gets its own copy of the matching variant-A day
    (later changes to one do not affect the other).  When the referenced day
    does not exist the entry's own content is used if it names a day;
    otherwise the entry is dropped with a warning.

    Args:
        document: Parsed JSON document
        now: Creation timestamp for the plan (current time by default)

    Returns:
        TrainingPlan, not yet persisted

    Raises:
        ImportDecodingFailed: If required fields are missing or mistyped
    """
    doc = _object(document, "document")

    version = _require(doc, "version", str, "document")
    profile = _build_profile(_object(_require(doc, "profile", dict, "document"), "profile"))

    warmups_raw = _require(doc, "warmup_and_knee_rehab", list, "document")
    warmups = [
        _build_warmup(_object(w, f"warmup_and_knee_rehab[{i}]"), i)
        for i, w in enumerate(warmups_raw)
    ]

    variants = _object(_require(doc, "variants", dict, "document"), "variants")
    schedule_a = _schedule(variants, VARIANT_A_KEY)
    schedule_b = _schedule(variants, VARIANT_B_KEY)

    rules_raw = _object(_require(doc, "progression_rules", dict, "document"), "progression_rules")
    rules = ProgressionRules(
        t1=_require(rules_raw, "T1", str, "progression_rules"),
        t2=_require(rules_raw, "T2", str, "progression_rules"),
        t3=_require(rules_raw, "T3", str, "progression_rules"),
        t4_deload=_require(rules_raw, "T4_deload", str, "progression_rules"),
    )

    plan = TrainingPlan(
        version=version,
        created_at=now if now is not None else datetime.now(),
        profile=profile,
        warmup_exercises=warmups,
        progression_rules=rules,
    )

    variant_a_days: dict[str, dict[str, Any]] = {}
    for i, entry in enumerate(schedule_a):
        day = entry.get("day")
        if day is None:
            continue
        variant_a_days[day] = entry
        plan.training_sessions.append(
            _build_session(entry, f"variants.{VARIANT_A_KEY}.schedule[{i}]")
        )

    for i, entry in enumerate(schedule_b):
        where = f"variants.{VARIANT_B_KEY}.schedule[{i}]"
        copy_day = entry.get("copy_of_variantA_day")
        source = variant_a_days.get(copy_day) if copy_day is not None else None

        if source is not None:
            plan.training_sessions.append(_build_session(source, where))
        elif entry.get("day") is not None:
            plan.training_sessions.append(_build_session(entry, where))
        elif copy_day is not None:
            warnings.warn(
                f"lift-tracker: {where} copies variant A day '{copy_day}', "
                "which does not exist; entry skipped",
                stacklevel=2,
            )

    return plan


def import_training_plan(path: str | Path, now: datetime | None = None) -> TrainingPlan:
    """
    Read a plan document from disk and build the TrainingPlan.

    Args:
        path: Path to the JSON plan document
        now: Creation timestamp for the plan

    Returns:
        TrainingPlan, not yet persisted

    Raises:
        ImportFileNotFound: If the document does not exist
        ImportDecodingFailed: If it is not valid JSON or misses required fields
    """
    path = Path(path)
    if not path.is_file():
        raise ImportFileNotFound(f"Plan document not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise ImportDecodingFailed(f"Invalid JSON in {path}: {e}") from e

    return plan_from_document(document, now)
