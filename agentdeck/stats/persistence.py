"""Crash-safe JSON persistence for usage statistics snapshots."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Mapping

from .models import StatEntry

logger = logging.getLogger(__name__)


class StatsPersistenceError(RuntimeError):
    """Raised when the statistics file cannot be written, read or parsed."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class StatsPersistence:
    """Read and write the statistics snapshot file.

    Writes go to a temporary file in the destination directory which is then
    renamed over the destination, so readers only ever see a complete file
    and a failed write leaves the previous snapshot untouched.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def save(self, entries: Mapping[str, StatEntry]) -> None:
        payload = {name: entry.to_dict() for name, entry in entries.items()}
        directory = self._path.parent
        temp_path: str | None = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=str(directory),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, self._path)
            temp_path = None
        except (OSError, TypeError, ValueError) as exc:
            raise StatsPersistenceError(
                f"Failed to write statistics to {self._path}: {exc}",
                path=self._path,
            ) from exc
        finally:
            if temp_path is not None:
                try:
                    os.unlink(temp_path)
                except OSError as cleanup_exc:
                    logger.debug("Failed to remove temp stats file %s: %s", temp_path, cleanup_exc)

        logger.debug("Persisted %d agent statistics to %s", len(payload), self._path)

    def load(self) -> Dict[str, StatEntry]:
        if not self._path.exists():
            logger.debug("No existing stats file found at %s", self._path)
            return {}

        try:
            with self._path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, ValueError, RecursionError) as exc:
            raise StatsPersistenceError(
                f"Failed to read statistics from {self._path}: {exc}",
                path=self._path,
            ) from exc

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise StatsPersistenceError(
                f"Statistics file {self._path} must contain a JSON object",
                path=self._path,
            )

        entries: Dict[str, StatEntry] = {}
        for name, payload in raw.items():
            try:
                entries[name] = StatEntry.from_dict(payload, agent_name=name)
            except (ValueError, TypeError, OverflowError) as exc:
                raise StatsPersistenceError(
                    f"Malformed entry {name!r} in {self._path}: {exc}",
                    path=self._path,
                ) from exc

        logger.info("Loaded %d agent statistics from %s", len(entries), self._path)
        return entries
