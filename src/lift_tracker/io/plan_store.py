"""
JSON-file storage for the training plan.

The store holds exactly one plan.  The whole aggregate is rewritten on each
save; there is no partial update.
"""

import importlib.resources
import warnings
from pathlib import Path

from ..core.config import BUNDLED_PLAN_FILENAME
from ..core.models import TrainingPlan
from .importer import import_training_plan
from .serializers import ValidationError, json_to_plan, plan_to_json


class PlanStore:
    """
    Manages the persisted plan file.

    The file is a single JSON document (see serializers.plan_to_dict).
    """

    def __init__(self, store_path: str | Path):
        """
        Initialize the store.

        Args:
            store_path: Path to the plan JSON file
        """
        self.store_path = Path(store_path)

    def exists(self) -> bool:
        """Check if a plan has been stored."""
        return self.store_path.exists()

    def load_plan(self) -> TrainingPlan:
        """
        Load the stored plan.

        Returns:
            TrainingPlan

        Raises:
            FileNotFoundError: If no plan is stored
            ValidationError: If the file cannot be parsed
        """
        if not self.store_path.exists():
            raise FileNotFoundError(
                f"Plan not found: {self.store_path}. Run 'init' first."
            )

        try:
            text = self.store_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(f"Error reading {self.store_path}: {e}") from e

        try:
            return json_to_plan(text)
        except ValidationError as e:
            raise ValidationError(f"Error parsing {self.store_path}: {e}") from e

    def save_plan(self, plan: TrainingPlan) -> None:
        """
        Write the plan, replacing whatever was stored.

        Writes to a temporary file first so a failed write keeps the old plan.

        Raises:
            OSError: If the file cannot be written
        """
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.store_path.with_suffix(self.store_path.suffix + ".tmp")
        tmp_path.write_text(plan_to_json(plan) + "\n", encoding="utf-8")
        tmp_path.replace(self.store_path)

    def try_save(self, plan: TrainingPlan) -> bool:
        """
        Best-effort save.

        Returns:
            True if saved; False (with a warning) if the write failed
        """
        try:
            self.save_plan(plan)
        except OSError as e:
            warnings.warn(f"lift-tracker: could not save plan ({e})", stacklevel=2)
            return False
        return True

    def create_from_document(self, source_path: str | Path) -> TrainingPlan:
        """
        Import a plan document and persist it as the stored plan.

        Import errors propagate and nothing is written.

        Raises:
            FileExistsError: If a plan is already stored
            ImportFileNotFound: If the document does not exist
            ImportDecodingFailed: If the document is invalid
        """
        if self.exists():
            raise FileExistsError(
                f"A plan is already stored at {self.store_path}. Use 'init --force' to replace it."
            )
        plan = import_training_plan(source_path)
        self.save_plan(plan)
        return plan

    def delete(self) -> None:
        """Remove the stored plan (all progress is lost)."""
        self.store_path.unlink(missing_ok=True)


def get_bundled_plan_path() -> Path:
    """Return the path of the plan document shipped with the package."""
    ref = importlib.resources.files("lift_tracker").joinpath("data", BUNDLED_PLAN_FILENAME)
    return Path(str(ref))


def open_plan(store: PlanStore, source_path: str | Path | None = None) -> TrainingPlan:
    """
    Load the stored plan, importing it on first use.

    When the stored file cannot be read it is deleted and the plan is
    imported again from the source document: progress is lost, but the
    application starts.

    Args:
        store: Plan store
        source_path: Plan document (defaults to the bundled one)

    Returns:
        The stored TrainingPlan

    Raises:
        ImportFileNotFound, ImportDecodingFailed: If the import itself fails
    """
    if source_path is None:
        source_path = get_bundled_plan_path()

    if store.exists():
        try:
            return store.load_plan()
        except ValidationError as e:
            warnings.warn(
                f"lift-tracker: failed to load {store.store_path}, recreating: {e}",
                stacklevel=2,
            )
            store.delete()

    return store.create_from_document(source_path)
