# core/state_store.py

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from core.models import AppState

logger = logging.getLogger(__name__)


class StateStore:
    """
    Single JSON document holding schedules, memos and goals.

    - load() never raises; missing or corrupt files yield an empty state
    - save() always writes the full snapshot (last writer wins)
    """

    def __init__(self, path, backup_dir=None, max_backups: int = 10):
        self.path = Path(path)
        self.backup_dir = Path(backup_dir) if backup_dir else self.path.parent / "backups"
        self.max_backups = max_backups

    # ==================================================
    # INTERNAL HELPERS
    # ==================================================
    def _ensure_dirs(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _timestamp(self) -> str:
        return datetime.now().strftime("%Y-%m-%d_%H-%M-%S-%f")

    def _atomic_write(self, data):
        tmp = self.path.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        tmp.replace(self.path)

    def _create_backup(self, tag: str = "auto") -> Optional[Path]:
        if not self.path.exists() or self.max_backups <= 0:
            return None

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        target = self.backup_dir / f"{self.path.stem}_{self._timestamp()}_{tag}.json"
        shutil.copy2(self.path, target)

        backups = sorted(self.backup_dir.glob(f"{self.path.stem}_*.json"))
        if len(backups) > self.max_backups:
            for old in backups[:-self.max_backups]:
                old.unlink()

        return target

    # ==================================================
    # LOAD / SAVE
    # ==================================================
    def load(self) -> AppState:
        if not self.path.exists():
            logger.info("No saved state at %s; starting empty", self.path)
            return AppState()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            logger.error("Saved state at %s is unreadable: %s", self.path, e)
            try:
                backup = self._create_backup(tag="corrupt")
                if backup:
                    logger.warning("Corrupt state copied to %s", backup)
            except OSError as backup_error:
                logger.error("Could not back up corrupt state: %s", backup_error)
            return AppState()

        return AppState.from_dict(data)

    def save(self, state: AppState) -> None:
        try:
            self._ensure_dirs()
            self._atomic_write(state.to_dict())
        except OSError as e:
            logger.error("Failed to save state to %s: %s", self.path, e)

    def mutate(self, state: AppState, fn: Callable[..., AppState], *args, **kwargs) -> AppState:
        new_state = fn(state, *args, **kwargs)
        self.save(new_state)
        return new_state
