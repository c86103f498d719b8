"""Session commands: session, toggle-set, set-weight, set-reps, reset-sets, complete-session, reset-session, rest."""

import json
import time
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.sets import read_sets, reset_sets, toggle_set, update_set_reps, update_set_weight
from ...core.timers import RestCountdown, format_clock
from ...core.tracking import (
    SessionNotReady,
    mark_session_complete,
    ordered_exercises,
    reset_session,
    session_stopwatch,
    start_session,
)
from .. import views
from ..app import (
    JsonOption,
    StorePathOption,
    app,
    get_settings,
    get_store,
    load_plan_or_exit,
    pick_exercise,
    pick_session,
    save_plan,
)

SessionArg = Annotated[int, typer.Argument(help="Session number (see 'show')")]
ExerciseArg = Annotated[int, typer.Argument(help="Exercise number within the session")]
SetArg = Annotated[int, typer.Argument(min=1, help="Set number (1-based)")]


@app.command()
def session(
    number: SessionArg,
    exercise: Annotated[
        Optional[int],
        typer.Option("--exercise", "-e", help="Show the sets of one exercise"),
    ] = None,
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show one session with its exercises and set progress.
    """
    plan = load_plan_or_exit(get_store(store_path))
    chosen = pick_session(plan, number)

    if exercise is not None and not json_out:
        views.print_exercise_sets(pick_exercise(chosen, exercise))
        return

    if json_out:
        exercises = []
        for i, exercise in enumerate(ordered_exercises(chosen), 1):
            sets = read_sets(exercise)
            exercises.append({
                "number": i,
                "name_en": exercise.name_en,
                "name_pl": exercise.name_pl,
                "sets_reps": exercise.sets_reps,
                "total_sets": exercise.total_sets,
                "start_weight_kg": exercise.start_weight_kg,
                "start_weight_kg_per_hand": exercise.start_weight_kg_per_hand,
                "rir": exercise.rir,
                "tempo": exercise.tempo,
                "notes": exercise.notes,
                "is_completed": exercise.is_completed,
                "sets": {
                    str(n): {"is_completed": d.is_completed, "weight": d.weight, "reps": d.reps}
                    for n, d in sorted(sets.items())
                },
            })
        print(json.dumps({
            "day": chosen.day,
            "location": chosen.location,
            "focus": chosen.focus,
            "cardio": chosen.cardio,
            "is_completed": chosen.is_completed,
            "completed_date": chosen.completed_date.isoformat() if chosen.completed_date else None,
            "started_at": chosen.started_at.isoformat() if chosen.started_at else None,
            "elapsed_seconds": round(session_stopwatch(chosen).elapsed(datetime.now())),
            "exercises": exercises,
        }, indent=2, ensure_ascii=False))
        return

    views.print_session(chosen, number)


@app.command("toggle-set")
def toggle_set_cmd(
    session_number: SessionArg,
    exercise_number: ExerciseArg,
    set_number: SetArg,
    weight: Annotated[
        Optional[float],
        typer.Option("--weight", "-w", min=0, help="Weight used (kg); defaults to the start weight"),
    ] = None,
    store_path: StorePathOption = None,
) -> None:
    """
    Mark a set done (or undo it).
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)
    chosen = pick_session(plan, session_number)
    exercise = pick_exercise(chosen, exercise_number)

    start_session(chosen)
    toggle_set(exercise, set_number, weight)
    save_plan(store, plan)

    data = read_sets(exercise)[set_number]
    state = "done" if data.is_completed else "not done"
    views.print_success(
        f"{exercise.name_en} set {set_number}: {state} ({views.format_weight(data.weight)})"
    )
    if exercise.is_completed:
        views.print_success(f"{exercise.name_en} completed!")


@app.command("set-weight")
def set_weight_cmd(
    session_number: SessionArg,
    exercise_number: ExerciseArg,
    set_number: SetArg,
    weight: Annotated[float, typer.Argument(min=0, help="Weight in kg")],
    store_path: StorePathOption = None,
) -> None:
    """
    Record the weight of a set.
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)
    exercise = pick_exercise(pick_session(plan, session_number), exercise_number)

    update_set_weight(exercise, set_number, weight)
    save_plan(store, plan)
    views.print_success(f"{exercise.name_en} set {set_number}: {views.format_weight(weight)}")


@app.command("set-reps")
def set_reps_cmd(
    session_number: SessionArg,
    exercise_number: ExerciseArg,
    set_number: SetArg,
    reps: Annotated[int, typer.Argument(min=0, help="Reps performed")],
    store_path: StorePathOption = None,
) -> None:
    """
    Record the reps of a set.
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)
    exercise = pick_exercise(pick_session(plan, session_number), exercise_number)

    update_set_reps(exercise, set_number, reps)
    save_plan(store, plan)
    views.print_success(f"{exercise.name_en} set {set_number}: {reps} reps")


@app.command("reset-sets")
def reset_sets_cmd(
    session_number: SessionArg,
    exercise_number: ExerciseArg,
    store_path: StorePathOption = None,
) -> None:
    """
    Clear all sets of one exercise.
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)
    exercise = pick_exercise(pick_session(plan, session_number), exercise_number)

    reset_sets(exercise)
    save_plan(store, plan)
    views.print_success(f"{exercise.name_en}: sets cleared")


@app.command("complete-session")
def complete_session_cmd(
    session_number: SessionArg,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Complete even with unfinished exercises"),
    ] = False,
    store_path: StorePathOption = None,
) -> None:
    """
    Mark a session as completed.
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)
    chosen = pick_session(plan, session_number)

    if chosen.is_completed:
        views.print_info(f"{chosen.day} session is already completed")
        return

    try:
        mark_session_complete(chosen, force=force)
    except SessionNotReady as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    save_plan(store, plan)
    views.print_success(f"{chosen.day} session completed")


@app.command("reset-session")
def reset_session_cmd(
    session_number: SessionArg,
    store_path: StorePathOption = None,
) -> None:
    """
    Clear every set of a session and its completion.
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)
    chosen = pick_session(plan, session_number)

    reset_session(chosen)
    save_plan(store, plan)
    views.print_success(f"{chosen.day} session reset")


@app.command()
def rest(
    seconds: Annotated[
        Optional[int],
        typer.Option("--seconds", "-s", min=0, help="Rest length (default: rest_seconds from config)"),
    ] = None,
) -> None:
    """
    Count down a rest interval between sets.
    """
    countdown = RestCountdown()
    countdown.set_duration(seconds if seconds is not None else get_settings().rest_seconds)
    countdown.start()

    with views.console.status(f"Rest {format_clock(countdown.remaining)}") as status:
        while countdown.is_running:
            time.sleep(1)
            countdown.tick(1)
            status.update(f"Rest {format_clock(countdown.remaining)}")

    views.print_success(f"Rest over ({format_clock(countdown.duration)})")
