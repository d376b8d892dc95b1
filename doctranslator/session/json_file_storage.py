import json
import os
from pathlib import Path

from doctranslator.logging.logger import Log
from doctranslator.session.base import BaseStorage
from doctranslator.session.exceptions import StorageError


class JsonFileStorage(BaseStorage):
    """Durable key/value storage backed by a single JSON object on disk.

    The file is re-read on every access so that changes made by another
    process (a second CLI invocation, another front-end) are observed.
    Writes go to a temporary sibling file which then replaces the original.
    """

    def __init__(self, path: Path) -> None:
        self._path = path.expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def remove_many(self, keys: tuple[str, ...]) -> None:
        data = self._read()
        removed = [key for key in keys if data.pop(key, None) is not None]
        if removed:
            self._write(data)

    def _read(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to read session storage: {exc}") from exc
        if not raw.strip():
            return {}
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            Log.warning(f"Session storage {self._path} is corrupt, ignoring contents")
            return {}
        if not isinstance(parsed, dict):
            Log.warning(f"Session storage {self._path} is not a JSON object, ignoring")
            return {}
        return parsed

    def _write(self, data: dict[str, object]) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise StorageError(f"Failed to write session storage: {exc}") from exc
