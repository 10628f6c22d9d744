"""Configuration defaults, env vars, and runtime options for taskdash."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


VERSION = "1.0.0"

# Fixed, versionless key under which the task snapshot is stored.
STORAGE_KEY = "taskdash.tasks"

DEFAULT_DATA_DIR = "~/.taskdash"


@dataclass
class Config:
    """Runtime configuration shared by the CLI and the store factory."""

    # Storage
    data_dir: str = ""
    storage_key: str = STORAGE_KEY

    # Misc
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.data_dir:
            self.data_dir = os.environ.get("TASKDASH_HOME") or DEFAULT_DATA_DIR
        if not self.storage_key:
            self.storage_key = STORAGE_KEY

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()
