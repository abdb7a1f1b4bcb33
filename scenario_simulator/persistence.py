"""
JSON file store for saved simulations.

One file per simulation, named after its uuid4 id. Results round-trip
through the camelCase JSON form without loss.
"""
import logging
import os
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from scenario_simulator.config import STORE_DIR
from scenario_simulator.models import SimulationResults

logger = logging.getLogger(__name__)


def generate_simulation_id() -> str:
    return str(uuid.uuid4())


class SavedSimulation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    created_at: datetime = Field(alias="createdAt")
    results: SimulationResults


class SimulationStore:
    """
    Save, list, fetch and delete simulations in a directory.

    The directory is created on first save.
    """

    def __init__(self, directory: Optional[str] = None):
        self.directory = Path(directory or STORE_DIR)

    def _path(self, simulation_id: str) -> Path:
        return self.directory / f"{simulation_id}.json"

    def save(self, name: str, results: SimulationResults) -> str:
        """Persist results under a display name and return the new id."""
        if not name or not name.strip():
            raise ValueError("simulation name must not be empty")

        saved = SavedSimulation(
            id=generate_simulation_id(),
            name=name.strip(),
            created_at=datetime.now(UTC),
            results=results,
        )
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(saved.id)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(saved.model_dump_json(by_alias=True), encoding="utf-8")
        os.replace(tmp_path, path)
        logger.info("Saved simulation %s (%s) to %s", saved.id, saved.name, path)
        return saved.id

    def get(self, simulation_id: str) -> Optional[SavedSimulation]:
        path = self._path(simulation_id)
        if not path.is_file():
            return None
        return SavedSimulation.model_validate_json(path.read_text(encoding="utf-8"))

    def load(self) -> list[SavedSimulation]:
        """All saved simulations, newest first. Unreadable files are skipped with a warning."""
        if not self.directory.is_dir():
            return []
        saved = []
        for path in self.directory.glob("*.json"):
            try:
                saved.append(SavedSimulation.model_validate_json(path.read_text(encoding="utf-8")))
            except ValueError as e:
                logger.warning("Skipping unreadable simulation file %s: %s", path, e)
        saved.sort(key=lambda s: s.created_at, reverse=True)
        return saved

    def delete(self, simulation_id: str) -> bool:
        """Remove a saved simulation. Returns False when it did not exist."""
        path = self._path(simulation_id)
        if not path.is_file():
            return False
        path.unlink()
        logger.info("Deleted simulation %s", simulation_id)
        return True
