"""Store and project configuration"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

BEADS_DIR = ".beads"
CONFIG_FILENAME = "config.json"
DEFAULT_DB_FILENAME = "beads.db"
DEFAULT_PREFIX = "bd"

# Environment override for the default database location
DB_ENV_VAR = "BEADS_DB"

DEFAULT_PROJECT_CONFIG = {
    "project_prefix": DEFAULT_PREFIX,
    "source_id": "local",
}


def default_db_path() -> Path:
    """Database path from $BEADS_DB, else .beads/beads.db in the working directory"""
    env_path = os.environ.get(DB_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path(BEADS_DIR) / DEFAULT_DB_FILENAME


def get_project_config(beads_dir: Optional[Path] = None) -> dict:
    """Get project configuration from .beads/config.json"""
    config_file = (beads_dir or Path(BEADS_DIR)) / CONFIG_FILENAME
    config = dict(DEFAULT_PROJECT_CONFIG)
    if config_file.exists():
        try:
            with open(config_file, "r") as f:
                config.update(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s, using defaults: %s", config_file, e)
    return config


def save_project_config(config: dict, beads_dir: Optional[Path] = None):
    """Save project configuration to .beads/config.json"""
    config_file = (beads_dir or Path(BEADS_DIR)) / CONFIG_FILENAME
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, "w") as f:
        json.dump(config, f, indent=2)


class StoreConfig(BaseModel):
    """Settings for opening a store"""

    db_path: Path = Field(default_factory=default_db_path, description="SQLite database file")
    create_if_missing: bool = Field(True, description="Create the database file and schema when absent")
    id_prefix: Optional[str] = Field(None, min_length=1, max_length=20, description="Prefix for generated issue ids")
    actor: str = Field("system", min_length=1, description="Default actor recorded on events")
    echo: bool = Field(False, description="Log emitted SQL")
    busy_timeout: float = Field(5.0, ge=0, description="Seconds to wait for the SQLite write lock")

    def resolved_prefix(self) -> str:
        """Explicit prefix, else the one in the project config next to the database"""
        if self.id_prefix:
            return self.id_prefix
        return get_project_config(Path(self.db_path).parent)["project_prefix"]

    @property
    def database_url(self) -> str:
        return f"sqlite:///{Path(self.db_path)}"
