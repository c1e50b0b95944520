"""Snapshot stores. A store round-trips one flat dict, nothing more."""
from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from tick_pet.types import SnapshotError


@runtime_checkable
class SnapshotStore(Protocol):
    def load(self) -> dict[str, Any] | None:
        """Return the saved snapshot, or None if nothing was saved."""
        ...

    def save(self, data: dict[str, Any]) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryStore:
    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = copy.deepcopy(data)

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._data)

    def save(self, data: dict[str, Any]) -> None:
        self._data = copy.deepcopy(data)

    def clear(self) -> None:
        self._data = None


class JsonFileStore:
    """One JSON file. Writes go to a temp file first and are swapped in
    with ``os.replace``, so a reader never sees half a snapshot."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any] | None:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SnapshotError(f"Cannot read {self._path}: {exc}") from exc
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"Corrupt snapshot in {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SnapshotError(
                f"Snapshot in {self._path} is {type(data).__name__}, expected object"
            )
        return data

    def save(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, self._path)
        except BaseException:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
