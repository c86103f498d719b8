"""Analysis commands: stats, exercise-stats."""

import json
from typing import Annotated

import typer

from ...core.stats import exercise_summaries, stats_for_exercise, training_overview, weekly_progress
from .. import views
from ..app import JsonOption, StorePathOption, app, get_settings, get_store, load_plan_or_exit


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


@app.command()
def stats(
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show training totals, this week's progress and per-exercise trends.
    """
    settings = get_settings()
    plan = load_plan_or_exit(get_store(store_path))

    overview = training_overview(plan)
    weekly = weekly_progress(plan)
    summaries = exercise_summaries(plan, settings.trend_window, settings.trend_threshold_pct)

    if json_out:
        print(json.dumps({
            "overview": {
                "total_workouts": overview.total_workouts,
                "exercises_completed": overview.exercises_completed,
                "unique_exercises": overview.unique_exercises,
                "total_volume": overview.total_volume,
            },
            "weekly": {
                "completed_sessions": weekly.completed_sessions,
                "total_sessions": weekly.total_sessions,
                "completion_ratio": weekly.completion_ratio,
                "exercises_completed": weekly.exercises_completed,
                "total_exercises": weekly.total_exercises,
                "current_streak": weekly.current_streak,
            },
            "exercises": [
                {
                    "name_en": s.exercise_name,
                    "name_pl": s.exercise_name_pl,
                    "total_sessions": s.total_sessions,
                    "personal_record": s.personal_record,
                    "last_weight": s.last_weight,
                    "last_performed": _iso(s.last_performed),
                    "trend": s.trend,
                }
                for s in summaries
            ],
        }, indent=2, ensure_ascii=False))
        return

    views.console.print()
    views.console.print(views.format_overview(overview, weekly))
    views.console.print()

    if not summaries:
        views.print_info("No completed exercises yet. Finish a session to see progress.")
        return

    views.console.print(views.format_summaries_table(summaries))
    views.console.print()


@app.command("exercise-stats")
def exercise_stats(
    name: Annotated[str, typer.Argument(help="English exercise name, e.g. 'Bench Press'")],
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the full history of one exercise.
    """
    plan = load_plan_or_exit(get_store(store_path))
    result = stats_for_exercise(name, plan)

    if result is None:
        views.print_error(f"No completed history for '{name}'")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({
            "name_en": result.exercise_name,
            "name_pl": result.exercise_name_pl,
            "total_sessions": result.total_sessions,
            "personal_record": result.personal_record,
            "average_weight": result.average_weight,
            "total_volume": result.total_volume,
            "last_performed": _iso(result.last_performed),
            "data_points": [
                {
                    "date": p.date.isoformat(),
                    "weight": p.weight,
                    "reps": p.reps,
                    "volume": p.volume,
                    "session_day": p.session_day,
                }
                for p in result.data_points
            ],
            "weight_progression": [[d.isoformat(), w] for d, w in result.weight_progression],
            "volume_progression": [[d.isoformat(), v] for d, v in result.volume_progression],
        }, indent=2, ensure_ascii=False))
        return

    views.print_exercise_stats(result)
