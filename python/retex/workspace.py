"""
On-disk layout of a resume workspace.

    master.tex          the editable template (source of truth)
    state.json          remembered inclusion flags, keyed by section title + content
    compiled.tex        assembled output handed to the compiler
    build/              compiler output
    backups/            master snapshots taken before every merge
    patches/            raw generator output that was merged
"""

import datetime
import json
import os
from pathlib import Path
from typing import Optional, Tuple, Union

import structlog

from retex.models import SelectionTable
from retex.selection import selection_from_records, selection_to_records
from retex.template import SAMPLE_MASTER_TEX

logger = structlog.get_logger(__name__)

WORKSPACE_ENV = "RETEX_WORKSPACE"

MASTER_FILE = "master.tex"
STATE_FILE = "state.json"
COMPILED_FILE = "compiled.tex"
BUILD_DIR = "build"
BACKUP_DIR = "backups"
PATCH_DIR = "patches"


def default_workspace() -> Path:
    """RETEX_WORKSPACE if set, otherwise the current directory."""
    return Path(os.environ.get(WORKSPACE_ENV) or Path.cwd())


class Workspace:
    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    @property
    def master_path(self) -> Path:
        return self.root / MASTER_FILE

    @property
    def state_path(self) -> Path:
        return self.root / STATE_FILE

    @property
    def compiled_path(self) -> Path:
        return self.root / COMPILED_FILE

    @property
    def build_dir(self) -> Path:
        return self.root / BUILD_DIR

    def exists(self) -> bool:
        return self.master_path.is_file()

    def initialize(self, template: str = SAMPLE_MASTER_TEX) -> bool:
        """
        Creates the workspace directory and writes `template` as master.tex
        unless a master already exists. Returns True if a master was written.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        if self.exists():
            logger.info("Using existing master", path=str(self.master_path))
            return False
        self.write_master(template)
        logger.info("Created master from template", path=str(self.master_path))
        return True

    def read_master(self) -> str:
        if not self.exists():
            raise FileNotFoundError(f"No {MASTER_FILE} in workspace: {self.root}")
        with open(self.master_path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def write_master(self, text: str):
        self._write(self.master_path, text)

    def load_selection(self) -> SelectionTable:
        """Remembered flags; an absent or unreadable state file means no flags."""
        if not self.state_path.is_file():
            return {}
        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("State file is not valid JSON, starting fresh", path=str(self.state_path))
            return {}
        return selection_from_records(data.get("selection", []) if isinstance(data, dict) else [])

    def save_selection(self, table: SelectionTable):
        self._write(self.state_path, json.dumps({"selection": selection_to_records(table)}, indent=2))

    def write_compiled(self, text: str) -> Path:
        self._write(self.compiled_path, text)
        self.build_dir.mkdir(parents=True, exist_ok=True)
        return self.compiled_path

    def snapshot(self, master: str, patch: Optional[str] = None) -> Tuple[Path, Optional[Path]]:
        """
        Saves the current master (and the patch about to be merged) under
        timestamped names. Returns (backup path, patch path or None).
        """
        stamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_path = self.root / BACKUP_DIR / f"master-{stamp}.tex"
        self._write(backup_path, master)

        patch_path = None
        if patch is not None:
            patch_path = self.root / PATCH_DIR / f"patch-{stamp}.txt"
            self._write(patch_path, patch)

        logger.info("Workspace snapshot written", backup=str(backup_path))
        return backup_path, patch_path

    def _write(self, path: Path, text: str):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
