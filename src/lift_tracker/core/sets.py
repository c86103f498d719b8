"""
Per-set tracking for exercises.

Each Exercise persists its sets as one JSON blob keyed by the stringified
1-based set index:

    {"1": {"isCompleted": true, "weight": 60.0, "reps": 8}, "2": {"isCompleted": false}}

Absent weight/reps are omitted.  Reading never raises: an empty or corrupt
blob reads as no sets at all.

write_sets() is the single mutation entry point.  It stores the blob and
recomputes the exercise-level completion in the same step, so every helper
below (toggle, weight, reps, reset) goes through it.
"""

import json
import math
from datetime import datetime
from typing import Any

from .models import Exercise, SetData


def _set_data_to_dict(data: SetData) -> dict[str, Any]:
    """Compact serializer: omit weight/reps that were never recorded."""
    d: dict[str, Any] = {"isCompleted": data.is_completed}
    if data.weight is not None:
        d["weight"] = data.weight
    if data.reps is not None:
        d["reps"] = data.reps
    return d


def _dict_to_set_data(raw: Any) -> SetData:
    """
    Convert one decoded entry to SetData.

    Raises:
        ValueError: If the entry is not a well-formed set record
    """
    if not isinstance(raw, dict):
        raise ValueError(f"set entry must be an object, got {type(raw).__name__}")

    is_completed = raw.get("isCompleted")
    if not isinstance(is_completed, bool):
        raise ValueError("isCompleted must be a boolean")

    weight = raw.get("weight")
    if weight is not None:
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise ValueError("weight must be a number")
        weight = float(weight)
        if not math.isfinite(weight):
            raise ValueError("weight must be finite")

    reps = raw.get("reps")
    if reps is not None:
        if isinstance(reps, bool) or not isinstance(reps, (int, float)):
            raise ValueError("reps must be a number")
        if isinstance(reps, float):
            if not reps.is_integer():
                raise ValueError("reps must be a whole number")
            reps = int(reps)

    return SetData(is_completed=is_completed, weight=weight, reps=reps)


def encode_sets(sets: dict[int, SetData]) -> str:
    """
    Encode a set map to its persisted JSON form.

    Args:
        sets: {set_number: SetData}

    Returns:
        JSON text with string keys, ordered by set number
    """
    return json.dumps(
        {str(number): _set_data_to_dict(sets[number]) for number in sorted(sets)},
        ensure_ascii=False,
    )


def decode_sets(blob: str | None) -> dict[int, SetData]:
    """
    Decode a persisted set map.

    Keys that are not integers are skipped.  Any other problem (invalid
    JSON, nesting too deep, out-of-range numbers, malformed entry) yields
    an empty map.

    Args:
        blob: Persisted JSON text, possibly empty or None

    Returns:
        {set_number: SetData}
    """
    if not blob:
        return {}

    try:
        raw = json.loads(blob)
        if not isinstance(raw, dict):
            return {}

        sets: dict[int, SetData] = {}
        for key, value in raw.items():
            try:
                number = int(key)
            except ValueError:
                continue
            sets[number] = _dict_to_set_data(value)
        return sets
    except (json.JSONDecodeError, ValueError, OverflowError, RecursionError):
        return {}


def read_sets(exercise: Exercise) -> dict[int, SetData]:
    """Return the decoded set map of an exercise (empty when absent or corrupt)."""
    return decode_sets(exercise.sets_data)


def is_complete(sets: dict[int, SetData], total_sets: int) -> bool:
    """
    Completion rule for an exercise.

    Complete when the number of completed sets equals the prescribed count.
    A prescribed count of 0 never completes.
    """
    completed_count = sum(1 for s in sets.values() if s.is_completed)
    return completed_count == total_sets and total_sets > 0


def write_sets(
    exercise: Exercise,
    sets: dict[int, SetData],
    now: datetime | None = None,
) -> None:
    """
    Replace the set map of an exercise and recompute its completion.

    This is the only path that changes ``exercise.is_completed``.  On
    completion ``completed_at`` is set to ``now`` (current time by default);
    otherwise it is cleared.

    Args:
        exercise: Exercise to update
        sets: New {set_number: SetData} map
        now: Timestamp recorded when the exercise becomes complete
    """
    exercise.sets_data = encode_sets(sets)

    if is_complete(sets, exercise.total_sets):
        exercise.is_completed = True
        exercise.completed_at = now if now is not None else datetime.now()
    else:
        exercise.is_completed = False
        exercise.completed_at = None


def _check_set_number(set_number: int) -> None:
    if set_number < 1:
        raise ValueError(f"set_number must be 1 or greater, got {set_number}")


def toggle_set(
    exercise: Exercise,
    set_number: int,
    weight: float | None = None,
    now: datetime | None = None,
) -> None:
    """
    Flip the completion of one set.

    An existing entry has its flag flipped (and its weight replaced when
    ``weight`` is given).  A missing entry is created as completed, with the
    given weight or else the exercise's suggested starting weight.

    Raises:
        ValueError: If set_number is below 1
    """
    _check_set_number(set_number)
    sets = read_sets(exercise)

    current = sets.get(set_number)
    if current is not None:
        sets[set_number] = SetData(
            is_completed=not current.is_completed,
            weight=weight if weight is not None else current.weight,
            reps=current.reps,
        )
    else:
        sets[set_number] = SetData(
            is_completed=True,
            weight=weight if weight is not None else exercise.default_weight,
        )

    write_sets(exercise, sets, now)


def update_set_weight(
    exercise: Exercise,
    set_number: int,
    weight: float | None,
    now: datetime | None = None,
) -> None:
    """
    Set (or clear) the weight of one set without touching its completion.

    Raises:
        ValueError: If set_number is below 1
    """
    _check_set_number(set_number)
    sets = read_sets(exercise)

    current = sets.get(set_number)
    if current is not None:
        sets[set_number] = SetData(current.is_completed, weight, current.reps)
    else:
        sets[set_number] = SetData(is_completed=False, weight=weight)

    write_sets(exercise, sets, now)


def update_set_reps(
    exercise: Exercise,
    set_number: int,
    reps: int | None,
    now: datetime | None = None,
) -> None:
    """
    Set (or clear) the rep count of one set without touching its completion.

    Raises:
        ValueError: If set_number is below 1
    """
    _check_set_number(set_number)
    sets = read_sets(exercise)

    current = sets.get(set_number)
    if current is not None:
        sets[set_number] = SetData(current.is_completed, current.weight, reps)
    else:
        sets[set_number] = SetData(is_completed=False, reps=reps)

    write_sets(exercise, sets, now)


def reset_sets(exercise: Exercise, now: datetime | None = None) -> None:
    """Clear every set (completion, weight, reps) and the exercise completion."""
    write_sets(exercise, {}, now)


def completed_sets(exercise: Exercise) -> set[int]:
    """Set numbers currently marked complete."""
    return {number for number, data in read_sets(exercise).items() if data.is_completed}


def last_used_weight(exercise: Exercise) -> float | None:
    """Weight of the highest-numbered completed set that has one recorded."""
    sets = read_sets(exercise)
    weights = [
        sets[number].weight
        for number in sorted(sets)
        if sets[number].is_completed and sets[number].weight is not None
    ]
    return weights[-1] if weights else None
