"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plan, session and statistics data.
"""

from datetime import datetime

from rich.console import Console
from rich.table import Table

from ..core.models import Exercise, ProgressionRules, TrainingPlan, TrainingSession, WarmupExercise
from ..core.sets import last_used_weight, read_sets
from ..core.stats import ExerciseStats, ExerciseSummary, TrainingOverview, WeeklyProgress
from ..core.timers import format_clock
from ..core.tracking import (
    ordered_exercises,
    session_progress,
    session_status,
    session_stopwatch,
    sorted_sessions,
)

console = Console()

_STATUS_DISPLAY: dict[str, str] = {
    "done": "[green]✓ Done[/green]",
    "in_progress": "[yellow]In progress[/yellow]",
    "pending": "[dim]Pending[/dim]",
}
_TREND_DISPLAY: dict[str, str] = {
    "increasing": "[green]↑ up[/green]",
    "decreasing": "[red]↓ down[/red]",
    "stable": "→ stable",
    "insufficient": "[dim]–[/dim]",
}


def format_weight(weight: float | None) -> str:
    """Format a weight as '62.5 kg', dropping a trailing .0."""
    if weight is None:
        return "-"
    if float(weight).is_integer():
        return f"{weight:.0f} kg"
    return f"{weight:.1f} kg"


def _exercise_weight_hint(exercise: Exercise) -> str:
    """Start weight label; per-hand weights are marked."""
    if exercise.start_weight_kg is not None:
        return format_weight(exercise.start_weight_kg)
    if exercise.start_weight_kg_per_hand is not None:
        return format_weight(exercise.start_weight_kg_per_hand) + "/hand"
    return "-"


def format_sessions_table(plan: TrainingPlan) -> Table:
    """
    Create a Rich table listing the plan's sessions in week order.

    Args:
        plan: Plan to display

    Returns:
        Rich Table object
    """
    table = Table(title="Training Week")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Day", style="cyan")
    table.add_column("Location", style="magenta")
    table.add_column("Focus")
    table.add_column("Exercises", justify="right")
    table.add_column("Status")

    for i, session in enumerate(sorted_sessions(plan), 1):
        done, total = session_progress(session)
        table.add_row(
            str(i),
            session.day,
            session.location,
            session.focus,
            f"{done}/{total}",
            _STATUS_DISPLAY[session_status(session)],
        )

    return table


def print_session(session: TrainingSession, number: int) -> None:
    """Print one session with per-exercise set progress."""
    console.print()
    console.print(
        f"[bold cyan]#{number} {session.day}[/bold cyan] — {session.location} — {session.focus}"
    )
    if session.cardio:
        console.print(f"[dim]Cardio: {session.cardio}[/dim]")
    if session.completed_date is not None:
        console.print(f"[green]Completed {session.completed_date:%Y-%m-%d %H:%M}[/green]")
    if session.started_at is not None:
        elapsed = session_stopwatch(session).elapsed(datetime.now())
        console.print(f"Elapsed {format_clock(elapsed)}")

    table = Table(show_header=True, header_style="dim")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="bold")
    table.add_column("Sets×Reps")
    table.add_column("Start", justify="right")
    table.add_column("RIR", justify="right")
    table.add_column("Sets done")
    table.add_column("Last", justify="right")

    for i, exercise in enumerate(ordered_exercises(session), 1):
        sets = read_sets(exercise)
        marks = "".join(
            "●" if sets.get(n) is not None and sets[n].is_completed else "○"
            for n in range(1, exercise.total_sets + 1)
        )
        name = exercise.name_en
        if exercise.is_completed:
            name = f"[green]{name} ✓[/green]"
        table.add_row(
            str(i),
            name,
            exercise.sets_reps,
            _exercise_weight_hint(exercise),
            exercise.rir or "-",
            marks,
            format_weight(last_used_weight(exercise)),
        )

    console.print(table)

    done, total = session_progress(session)
    if not session.is_completed and done < total:
        console.print(f"[dim]Complete all exercises to finish session ({done}/{total})[/dim]")
    console.print()


def print_exercise_sets(exercise: Exercise) -> None:
    """Print the per-set state of one exercise."""
    sets = read_sets(exercise)
    table = Table(title=f"{exercise.name_en} ({exercise.sets_reps})")
    table.add_column("Set", justify="right")
    table.add_column("Done")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")

    for n in range(1, max([exercise.total_sets, *sets.keys()]) + 1):
        data = sets.get(n)
        table.add_row(
            str(n),
            "✓" if data is not None and data.is_completed else "",
            format_weight(data.weight) if data is not None else "-",
            str(data.reps) if data is not None and data.reps is not None else "-",
        )
    console.print(table)


def print_warmups(warmups: list[WarmupExercise]) -> None:
    """Print the warmup routine with completion marks."""
    if not warmups:
        console.print("[yellow]No warmup exercises in this plan.[/yellow]")
        return

    table = Table(title="Warmup & Knee Rehab")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="bold")
    table.add_column("Sets")
    table.add_column("Tempo")
    table.add_column("Done")

    for i, warmup in enumerate(warmups, 1):
        table.add_row(
            str(i),
            warmup.name_en,
            warmup.sets,
            warmup.tempo,
            "[green]✓[/green]" if warmup.is_completed else "",
        )
    console.print(table)


def print_rules(rules: ProgressionRules | None) -> None:
    """Print the progression rules."""
    if rules is None:
        console.print("[yellow]No progression rules in this plan.[/yellow]")
        return
    console.print()
    console.print("[bold]Progression rules[/bold]")
    console.print(f"  [cyan]T1[/cyan]  {rules.t1}")
    console.print(f"  [cyan]T2[/cyan]  {rules.t2}")
    console.print(f"  [cyan]T3[/cyan]  {rules.t3}")
    console.print(f"  [cyan]T4[/cyan]  {rules.t4_deload}")
    console.print()


def format_overview(overview: TrainingOverview, weekly: WeeklyProgress) -> str:
    """Format the overview and weekly progress as a text block."""
    lines = [
        "Training overview",
        f"- Workouts: {overview.total_workouts}",
        f"- Exercises completed: {overview.exercises_completed}"
        f"  ({overview.unique_exercises} unique)",
        f"- Total volume: {overview.total_volume:.0f} kg",
        "",
        "This week",
        f"- Sessions: {weekly.completed_sessions}/{weekly.total_sessions}"
        f"  ({weekly.completion_ratio:.0%})",
        f"- Exercises: {weekly.exercises_completed}/{weekly.total_exercises}",
        f"- Streak: {weekly.current_streak}",
    ]
    return "\n".join(lines)


def format_summaries_table(summaries: list[ExerciseSummary]) -> Table:
    """Create a Rich table of per-exercise summaries."""
    table = Table(title="Exercise Progress")
    table.add_column("Exercise", style="bold")
    table.add_column("Sessions", justify="right")
    table.add_column("PR", justify="right", style="green")
    table.add_column("Last", justify="right")
    table.add_column("Last done", style="cyan")
    table.add_column("Trend")

    for s in summaries:
        table.add_row(
            s.exercise_name,
            str(s.total_sessions),
            format_weight(s.personal_record),
            format_weight(s.last_weight),
            f"{s.last_performed:%Y-%m-%d}" if s.last_performed else "-",
            _TREND_DISPLAY[s.trend],
        )
    return table


def print_exercise_stats(stats: ExerciseStats) -> None:
    """Print the full history of one exercise."""
    console.print()
    console.print(f"[bold cyan]{stats.exercise_name}[/bold cyan]  [dim]{stats.exercise_name_pl}[/dim]")
    console.print(f"  Personal record: {format_weight(stats.personal_record)}")
    console.print(f"  Average weight:  {format_weight(round(stats.average_weight, 1))}")
    console.print(f"  Total volume:    {stats.total_volume:.0f} kg")
    console.print(f"  Sessions:        {stats.total_sessions}")
    console.print()

    if not stats.data_points:
        console.print("[yellow]No sets with weight and reps recorded yet.[/yellow]")
        return

    table = Table(show_header=True, header_style="dim")
    table.add_column("Day", style="cyan")
    table.add_column("Max weight", justify="right")
    table.add_column("Volume", justify="right")

    volumes = dict(stats.volume_progression)
    for day, weight in stats.weight_progression:
        table.add_row(f"{day:%Y-%m-%d}", format_weight(weight), f"{volumes.get(day, 0.0):.0f}")
    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
