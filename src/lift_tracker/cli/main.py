"""
CLI entry point using Typer.

Provides commands for following the training plan:
- init: Import the plan document into the store
- show / session: Display the week and one session's sets
- toggle-set / set-weight / set-reps / reset-sets: Track sets
- complete-session / reset-session: Session completion
- rest: Rest countdown between sets
- warmup / toggle-warmup / reset-warmups: Warmup routine
- stats / exercise-stats: Progress statistics
- rules: Progression rules
"""

from .app import app
from .commands import analysis, plan, sessions  # noqa: F401  registers commands


def main() -> None:
    app()


if __name__ == "__main__":
    main()
