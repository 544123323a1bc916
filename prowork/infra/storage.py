from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from prowork.domain.entities import Task

from .codec import decode_tasks, encode_tasks

logger = logging.getLogger(__name__)


class TaskFileStore:
    """The tasks file on disk.

    Writes go to a sibling ``.tmp`` file that is then moved over the target,
    so a failed write never leaves a half-written tasks file behind.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self.persistent = self._ensure_dir()
        logger.info("Tasks will be stored at %s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_dir(self) -> bool:
        directory = self._path.parent
        if directory.is_dir():
            return True
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create data directory %s: %s; running in memory only", directory, exc)
            return False
        logger.info("Created data directory %s", directory)
        return True

    def read(self) -> list[Task]:
        if not self._path.exists():
            logger.info("No tasks file at %s, starting empty", self._path)
            return []
        try:
            # Bad bytes decode to U+FFFD instead of failing the load.
            text = self._path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            logger.exception("Failed to read tasks from %s", self._path)
            return []
        tasks = decode_tasks(text)
        logger.info("Loaded %s tasks from %s", len(tasks), self._path)
        return tasks

    def write(self, tasks: Sequence[Task]) -> bool:
        if not self.persistent:
            self.persistent = self._ensure_dir()
            if not self.persistent:
                logger.warning("Not saving %s tasks: no data directory", len(tasks))
                return False

        payload = encode_tasks(tasks)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError:
            logger.exception("Failed to save tasks to %s", self._path)
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove %s", tmp_path, exc_info=True)
            return False
        logger.debug("Saved %s tasks to %s", len(tasks), self._path)
        return True
