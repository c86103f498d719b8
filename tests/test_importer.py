"""
Tests for the plan document importer (lift_tracker.io.importer).

Covers weight parsing, list normalization, variant-B copy resolution and
the error contract: a document that fails to decode produces no plan.
"""

import copy
import json
from datetime import datetime

import pytest

from lift_tracker.core.sets import read_sets, toggle_set
from lift_tracker.io.importer import (
    ImportDecodingFailed,
    ImportFileNotFound,
    PlanImportError,
    import_training_plan,
    parse_weight,
    plan_from_document,
)
from lift_tracker.io.plan_store import get_bundled_plan_path

NOW = datetime(2026, 3, 1, 9, 0)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _make_exercise(name_en: str, sets_reps: str = "3×10", **extra) -> dict:
    data = {"name_pl": f"{name_en} (pl)", "name_en": name_en, "sets_reps": sets_reps}
    data.update(extra)
    return data


def _make_document() -> dict:
    """Minimal valid document: two variant-A days, variant B copying one."""
    return {
        "version": "2.1",
        "profile": {
            "age": 34,
            "sex": "female",
            "height_cm": 168,
            "weight_kg": 61,
            "conditions": [],
            "meds": [],
            "goal": "strength",
            "split": "full body",
            "intensity": "moderate",
            "cardio": "walks",
            "home_equipment": ["dumbbells", "bands"],
            "gym_equipment": "full gym",
            "session_time_min": 50,
        },
        "warmup_and_knee_rehab": [
            {"name_pl": "Rower", "name_en": "Bike", "sets": "5 min", "tempo": "easy"},
        ],
        "variants": {
            "A_2x_gym_1x_home": {
                "schedule": [
                    {
                        "day": "Monday",
                        "location": "gym",
                        "focus": "push",
                        "exercises": [
                            _make_exercise("Bench Press", "4×6-8", start_weight_kg="50-55"),
                            _make_exercise("Barbell Row", "4×8", start_weight_kg=45),
                        ],
                        "cardio": "10 min",
                    },
                    {
                        "day": "Thursday",
                        "location": "home",
                        "focus": "legs",
                        "exercises": [
                            _make_exercise("Goblet Squat", start_weight_kg_per_hand="12–14"),
                        ],
                    },
                ]
            },
            "B_3x_gym": {
                "schedule": [
                    {"copy_of_variantA_day": "Monday"},
                    {
                        "day": "Saturday",
                        "location": "gym",
                        "focus": "pull",
                        "exercises": [_make_exercise("Lat Pulldown", start_weight_kg=40)],
                    },
                ]
            },
        },
        "progression_rules": {
            "T1": "add weight",
            "T2": "add reps",
            "T3": "reduce weight",
            "T4_deload": "deload every 6th week",
        },
    }


class TestParseWeight:
    """Start weights: numbers, ranges, and unparseable text."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (60, 60.0),
            (62.5, 62.5),
            ("50-55", 50.0),
            ("60–70", 60.0),
            ("12.5", 12.5),
            (" 20 - 25 ", 20.0),
        ],
    )
    def test_parses(self, value, expected):
        assert parse_weight(value) == expected

    @pytest.mark.parametrize(
        "value", [None, "bodyweight", "", True, {}, [], 10 ** 400, "1" + "0" * 400, "inf", "nan"]
    )
    def test_unparseable_is_none(self, value):
        assert parse_weight(value) is None


class TestPlanFromDocument:
    """Building the aggregate from a decoded document."""

    def test_basic_shape(self):
        plan = plan_from_document(_make_document(), NOW)

        assert plan.version == "2.1"
        assert plan.created_at == NOW
        assert len(plan.warmup_exercises) == 1
        assert [s.day for s in plan.training_sessions] == [
            "Monday", "Thursday", "Monday", "Saturday",
        ]
        assert plan.progression_rules.t4_deload == "deload every 6th week"

    def test_nothing_starts_completed(self):
        plan = plan_from_document(_make_document(), NOW)
        assert not any(s.is_completed for s in plan.training_sessions)
        assert not any(e.is_completed for e in plan.all_exercises())
        assert all(e.sets_data == "" for e in plan.all_exercises())

    def test_start_weights_use_lower_bound(self):
        plan = plan_from_document(_make_document(), NOW)
        monday, thursday = plan.training_sessions[0], plan.training_sessions[1]
        assert monday.exercises[0].start_weight_kg == 50.0
        assert monday.exercises[1].start_weight_kg == 45.0
        assert thursday.exercises[0].start_weight_kg is None
        assert thursday.exercises[0].start_weight_kg_per_hand == 12.0

    def test_sort_order_follows_document(self):
        plan = plan_from_document(_make_document(), NOW)
        assert [e.sort_order for e in plan.training_sessions[0].exercises] == [0, 1]

    def test_single_string_becomes_list(self):
        plan = plan_from_document(_make_document(), NOW)
        assert plan.profile.gym_equipment == ["full gym"]
        assert plan.profile.home_equipment == ["dumbbells", "bands"]

    def test_empty_string_becomes_empty_list(self):
        doc = _make_document()
        doc["profile"]["meds"] = ""
        assert plan_from_document(doc, NOW).profile.meds == []

    def test_copy_matches_source_content(self):
        plan = plan_from_document(_make_document(), NOW)
        source, copied = plan.training_sessions[0], plan.training_sessions[2]
        assert copied.day == source.day
        assert copied.location == source.location
        assert copied.cardio == source.cardio
        assert [e.name_en for e in copied.exercises] == [e.name_en for e in source.exercises]

    def test_copy_is_independent(self):
        """Tracking a copied session leaves the variant-A session untouched."""
        plan = plan_from_document(_make_document(), NOW)
        source, copied = plan.training_sessions[0], plan.training_sessions[2]

        assert copied is not source
        assert copied.exercises[0] is not source.exercises[0]

        toggle_set(copied.exercises[0], 1, now=NOW)
        assert read_sets(copied.exercises[0])
        assert read_sets(source.exercises[0]) == {}

    def test_unresolved_copy_is_dropped_with_warning(self):
        doc = _make_document()
        doc["variants"]["B_3x_gym"]["schedule"][0] = {"copy_of_variantA_day": "Sunday"}

        with pytest.warns(UserWarning, match="Sunday"):
            plan = plan_from_document(doc, NOW)

        assert [s.day for s in plan.training_sessions] == ["Monday", "Thursday", "Saturday"]

    def test_unresolved_copy_with_own_day_uses_own_content(self):
        doc = _make_document()
        doc["variants"]["B_3x_gym"]["schedule"][0] = {
            "copy_of_variantA_day": "Sunday",
            "day": "Tuesday",
            "location": "gym",
            "focus": "arms",
            "exercises": [_make_exercise("Curl")],
        }
        plan = plan_from_document(doc, NOW)
        assert plan.training_sessions[2].day == "Tuesday"
        assert plan.training_sessions[2].exercises[0].name_en == "Curl"

    def test_does_not_mutate_document(self):
        doc = _make_document()
        before = copy.deepcopy(doc)
        plan_from_document(doc, NOW)
        assert doc == before


class TestDecodingErrors:
    """Malformed documents raise ImportDecodingFailed."""

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda d: d.pop("profile"),
            lambda d: d.pop("progression_rules"),
            lambda d: d["variants"].pop("B_3x_gym"),
            lambda d: d["profile"].__setitem__("age", "thirty"),
            lambda d: d["profile"].__setitem__("conditions", [1, 2]),
            lambda d: d["profile"].__setitem__("age", 0),
            lambda d: d["variants"]["A_2x_gym_1x_home"]["schedule"][0]["exercises"][1].__setitem__(
                "start_weight_kg", -5
            ),
            lambda d: d["warmup_and_knee_rehab"][0].pop("tempo"),
            lambda d: d["variants"]["A_2x_gym_1x_home"]["schedule"][0]["exercises"][0].pop(
                "sets_reps"
            ),
            lambda d: d["variants"]["B_3x_gym"]["schedule"][1].__setitem__("exercises", "none"),
        ],
    )
    def test_malformed(self, mutate):
        doc = _make_document()
        mutate(doc)
        with pytest.raises(ImportDecodingFailed):
            plan_from_document(doc, NOW)

    def test_not_an_object(self):
        with pytest.raises(ImportDecodingFailed):
            plan_from_document(["not", "a", "plan"], NOW)

    def test_error_hierarchy(self):
        assert issubclass(ImportDecodingFailed, PlanImportError)
        assert issubclass(ImportDecodingFailed, ValueError)
        assert issubclass(ImportFileNotFound, PlanImportError)
        assert issubclass(ImportFileNotFound, FileNotFoundError)


class TestImportTrainingPlan:
    """Reading documents from disk."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text(json.dumps(_make_document()), encoding="utf-8")

        plan = import_training_plan(path, NOW)

        assert len(plan.training_sessions) == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImportFileNotFound):
            import_training_plan(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ImportDecodingFailed):
            import_training_plan(path)

    def test_deeply_nested_json(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        with pytest.raises(ImportDecodingFailed):
            import_training_plan(path)

    def test_bundled_plan(self):
        plan = import_training_plan(get_bundled_plan_path(), NOW)

        assert plan.version == "1.0"
        assert len(plan.training_sessions) == 6
        assert len(plan.warmup_exercises) == 4
        assert plan.profile.gym_equipment == ["full commercial gym"]

        bench = plan.training_sessions[0].exercises[0]
        assert bench.name_en == "Bench Press"
        assert bench.total_sets == 4
        assert bench.start_weight_kg == 50.0
