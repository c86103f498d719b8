"""Shared Typer app object, shared option types, and store utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config_loader import Settings, load_settings
from ..core.models import Exercise, TrainingPlan, TrainingSession
from ..core.tracking import ordered_exercises, sorted_sessions
from ..io.importer import PlanImportError
from ..io.plan_store import PlanStore, open_plan
from . import views

# Shared --store-path option type used across all commands
StorePathOption = Annotated[
    Optional[Path],
    typer.Option("--store-path", "-p", help="Path to the plan JSON file"),
]

# Shared --json option type
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="lift-tracker",
    help="Workout tracker: follow your training plan set by set and watch your progress.",
    no_args_is_help=True,
)


def get_settings() -> Settings:
    """Settings from ~/.lift-tracker/config.yaml merged over the defaults."""
    return load_settings()


def get_store(store_path: Path | None) -> PlanStore:
    """Get plan store from path or the configured location."""
    if store_path is None:
        store_path = get_settings().store_path
    return PlanStore(store_path)


def load_plan_or_exit(store: PlanStore) -> TrainingPlan:
    """Open the stored plan (importing it on first use) or exit with an error."""
    try:
        return open_plan(store, get_settings().plan_source)
    except (PlanImportError, FileExistsError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def save_plan(store: PlanStore, plan: TrainingPlan) -> None:
    """Persist the plan; a failed write is reported but does not abort."""
    if not store.try_save(plan):
        views.print_warning(f"Changes could not be saved to {store.store_path}")


def pick_session(plan: TrainingPlan, number: int) -> TrainingSession:
    """Return the session with the given 1-based number in week order, or exit."""
    sessions = sorted_sessions(plan)
    if number < 1 or number > len(sessions):
        views.print_error(f"Session number must be between 1 and {len(sessions)}")
        raise typer.Exit(1)
    return sessions[number - 1]


def pick_exercise(session: TrainingSession, number: int) -> Exercise:
    """Return the exercise with the given 1-based number in authored order, or exit."""
    exercises = ordered_exercises(session)
    if number < 1 or number > len(exercises):
        views.print_error(f"Exercise number must be between 1 and {len(exercises)}")
        raise typer.Exit(1)
    return exercises[number - 1]

