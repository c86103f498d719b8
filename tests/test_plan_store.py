"""
Tests for plan persistence (lift_tracker.io.plan_store, lift_tracker.io.serializers).
"""

import copy
import json
from datetime import datetime

import pytest

from lift_tracker.core.sets import read_sets, toggle_set, update_set_reps
from lift_tracker.core.stats import exercise_summaries, stats_for_exercise
from lift_tracker.core.tracking import mark_session_complete, start_session
from lift_tracker.io.importer import ImportDecodingFailed, ImportFileNotFound, import_training_plan
from lift_tracker.io.plan_store import PlanStore, get_bundled_plan_path, open_plan
from lift_tracker.io.serializers import (
    ValidationError,
    dict_to_plan,
    json_to_plan,
    plan_to_dict,
    plan_to_json,
)

NOW = datetime(2026, 3, 2, 18, 0)


def _make_plan():
    """Bundled plan with some progress recorded."""
    plan = import_training_plan(get_bundled_plan_path(), NOW)
    session = plan.training_sessions[0]
    bench = session.exercises[0]
    toggle_set(bench, 1, weight=52.5, now=NOW)
    update_set_reps(bench, 1, 8, now=NOW)
    mark_session_complete(session, now=NOW, force=True)
    plan.warmup_exercises[0].is_completed = True
    plan.warmup_exercises[0].completed_at = NOW
    return plan


class TestSerializers:
    def test_round_trip(self):
        plan = _make_plan()
        restored = json_to_plan(plan_to_json(plan))
        assert plan_to_dict(restored) == plan_to_dict(plan)

    def test_round_trip_keeps_sets(self):
        restored = json_to_plan(plan_to_json(_make_plan()))
        bench = restored.training_sessions[0].exercises[0]
        assert read_sets(bench)[1].weight == 52.5
        assert read_sets(bench)[1].reps == 8
        assert restored.training_sessions[0].completed_date == NOW

    def test_timestamps_are_iso(self):
        data = plan_to_dict(_make_plan())
        assert data["created_at"] == "2026-03-02T18:00:00"
        assert data["training_sessions"][0]["completed_date"] == "2026-03-02T18:00:00"

    def test_started_at_round_trip(self):
        plan = _make_plan()
        start_session(plan.training_sessions[1], now=NOW)
        restored = json_to_plan(plan_to_json(plan))
        assert restored.training_sessions[1].started_at == NOW
        assert restored.training_sessions[2].started_at is None

    def test_offset_timestamps_load_as_naive(self):
        """A store mixing plain and UTC-offset timestamps still yields comparable dates."""
        data = plan_to_dict(_make_plan())
        first = data["training_sessions"][0]
        first["exercises"][0]["is_completed"] = True
        second = copy.deepcopy(first)
        second["completed_date"] = "2026-03-04T18:00:00+00:00"
        data["training_sessions"].append(second)

        plan = dict_to_plan(data)

        assert all(
            s.completed_date is None or s.completed_date.tzinfo is None
            for s in plan.training_sessions
        )
        bench = stats_for_exercise("Bench Press", plan)
        assert len(bench.data_points) == 2
        assert bench.last_performed == plan.training_sessions[-1].completed_date
        assert exercise_summaries(plan)

    def test_invalid_json(self):
        with pytest.raises(ValidationError):
            json_to_plan("{nope")

    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            dict_to_plan([])

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda d: d["training_sessions"][0].pop("day"),
            lambda d: d["training_sessions"][0].__setitem__("completed_date", "yesterday"),
            lambda d: d["training_sessions"][0].__setitem__("started_at", "soon"),
            lambda d: d["training_sessions"][0]["exercises"][0].__setitem__("start_weight_kg", -1),
            lambda d: d["profile"].__setitem__("age", -3),
            lambda d: d.__setitem__("created_at", 12),
        ],
    )
    def test_invalid_fields(self, mutate):
        data = plan_to_dict(_make_plan())
        mutate(data)
        with pytest.raises(ValidationError):
            dict_to_plan(data)


class TestPlanStore:
    def test_save_and_load(self, tmp_path):
        store = PlanStore(tmp_path / "nested" / "plan.json")
        plan = _make_plan()

        assert not store.exists()
        store.save_plan(plan)
        assert store.exists()

        assert plan_to_dict(store.load_plan()) == plan_to_dict(plan)
        assert not (tmp_path / "nested" / "plan.json.tmp").exists()

    def test_save_replaces(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        plan = _make_plan()
        store.save_plan(plan)

        plan.version = "9.9"
        store.save_plan(plan)

        assert store.load_plan().version == "9.9"

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="init"):
            PlanStore(tmp_path / "plan.json").load_plan()

    def test_load_corrupt(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("{corrupt", encoding="utf-8")
        with pytest.raises(ValidationError):
            PlanStore(path).load_plan()

    def test_try_save_reports_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = PlanStore(blocker / "plan.json")

        with pytest.warns(UserWarning, match="could not save"):
            assert store.try_save(_make_plan()) is False

    def test_try_save_success(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        assert store.try_save(_make_plan()) is True
        assert store.exists()

    def test_create_from_document(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        plan = store.create_from_document(get_bundled_plan_path())
        assert len(plan.training_sessions) == 6
        assert len(store.load_plan().training_sessions) == 6

    def test_create_refuses_second_plan(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        store.create_from_document(get_bundled_plan_path())
        with pytest.raises(FileExistsError):
            store.create_from_document(get_bundled_plan_path())

    def test_create_writes_nothing_on_import_error(self, tmp_path):
        source = tmp_path / "bad.json"
        source.write_text(json.dumps({"version": "1.0"}), encoding="utf-8")
        store = PlanStore(tmp_path / "plan.json")

        with pytest.raises(ImportDecodingFailed):
            store.create_from_document(source)
        assert not store.exists()

    def test_delete(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        store.save_plan(_make_plan())
        store.delete()
        assert not store.exists()
        store.delete()  # missing file is fine


class TestOpenPlan:
    def test_imports_on_first_use(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        plan = open_plan(store)
        assert len(plan.training_sessions) == 6
        assert store.exists()

    def test_loads_existing(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        store.save_plan(_make_plan())

        plan = open_plan(store)

        assert plan.training_sessions[0].is_completed

    def test_recovers_from_corrupt_store(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("{corrupt", encoding="utf-8")
        store = PlanStore(path)

        with pytest.warns(UserWarning, match="recreating"):
            plan = open_plan(store)

        assert len(plan.training_sessions) == 6
        assert not any(s.is_completed for s in plan.training_sessions)
        assert store.load_plan().version == "1.0"

    def test_missing_source(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        with pytest.raises(ImportFileNotFound):
            open_plan(store, tmp_path / "missing.json")
        assert not store.exists()
