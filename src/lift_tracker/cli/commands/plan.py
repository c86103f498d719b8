"""Plan commands: init, show, rules, warmup, toggle-warmup, reset-warmups."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.tracking import reset_warmups, session_progress, session_status, sorted_sessions, toggle_warmup
from ...io.importer import PlanImportError, import_training_plan
from ...io.plan_store import get_bundled_plan_path
from .. import views
from ..app import JsonOption, StorePathOption, app, get_settings, get_store, load_plan_or_exit, save_plan


@app.command()
def init(
    store_path: StorePathOption = None,
    source: Annotated[
        Optional[Path],
        typer.Option("--source", "-s", help="Plan document to import (default: bundled plan)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace an existing plan (all progress is lost)"),
    ] = False,
) -> None:
    """
    Import the training plan document into the store.
    """
    store = get_store(store_path)

    if source is None:
        source = get_settings().plan_source or get_bundled_plan_path()

    if store.exists():
        if not force:
            views.print_error(f"A plan already exists at {store.store_path}")
            views.print_info("Use --force to replace it (all progress is lost).")
            raise typer.Exit(1)

    # imported in full before the old plan is touched
    try:
        plan = import_training_plan(source)
    except PlanImportError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        store.save_plan(plan)
    except OSError as e:
        views.print_error(f"Could not write {store.store_path}: {e}")
        raise typer.Exit(1)

    views.print_success(
        f"Imported plan v{plan.version}: {len(plan.training_sessions)} sessions, "
        f"{len(plan.warmup_exercises)} warmup exercises"
    )
    views.print_info(f"Stored at {store.store_path}")


@app.command()
def show(
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the week's sessions and their progress.
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)

    if json_out:
        sessions = []
        for i, session in enumerate(sorted_sessions(plan), 1):
            done, total = session_progress(session)
            sessions.append({
                "number": i,
                "day": session.day,
                "location": session.location,
                "focus": session.focus,
                "status": session_status(session),
                "exercises_completed": done,
                "exercises_total": total,
                "completed_date": (
                    session.completed_date.isoformat() if session.completed_date else None
                ),
            })
        print(json.dumps({"version": plan.version, "sessions": sessions}, indent=2))
        return

    views.console.print()
    views.console.print(views.format_sessions_table(plan))
    views.console.print()


@app.command()
def rules(store_path: StorePathOption = None) -> None:
    """
    Show the progression rules.
    """
    plan = load_plan_or_exit(get_store(store_path))
    views.print_rules(plan.progression_rules)


@app.command()
def warmup(
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the warmup routine.
    """
    plan = load_plan_or_exit(get_store(store_path))

    if json_out:
        print(json.dumps({
            "warmups": [
                {
                    "number": i,
                    "name_en": w.name_en,
                    "name_pl": w.name_pl,
                    "sets": w.sets,
                    "tempo": w.tempo,
                    "video_url": w.video_url,
                    "is_completed": w.is_completed,
                }
                for i, w in enumerate(plan.warmup_exercises, 1)
            ]
        }, indent=2, ensure_ascii=False))
        return

    views.print_warmups(plan.warmup_exercises)


@app.command("toggle-warmup")
def toggle_warmup_cmd(
    number: Annotated[int, typer.Argument(help="Warmup exercise number (see 'warmup')")],
    store_path: StorePathOption = None,
) -> None:
    """
    Mark a warmup exercise done (or not done).
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)

    if number < 1 or number > len(plan.warmup_exercises):
        views.print_error(f"Warmup number must be between 1 and {len(plan.warmup_exercises)}")
        raise typer.Exit(1)

    item = plan.warmup_exercises[number - 1]
    toggle_warmup(item)
    save_plan(store, plan)

    state = "done" if item.is_completed else "not done"
    views.print_success(f"{item.name_en}: {state}")


@app.command("reset-warmups")
def reset_warmups_cmd(store_path: StorePathOption = None) -> None:
    """
    Mark every warmup exercise as not done.
    """
    store = get_store(store_path)
    plan = load_plan_or_exit(store)
    reset_warmups(plan)
    save_plan(store, plan)
    views.print_success("All warmups reset")
