"""Local key/value persistence: one JSON text blob per named slot."""

import os
from typing import Dict, Optional, Protocol

import config
from utils.logger import get_logger
from utils.error_handler import PersistenceError

logger = get_logger()


class KeyValueStore(Protocol):
    """Minimal string slot storage used by the history and usage repositories."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class FileStorage:
    """Stores each slot as `<root_dir>/<key>.json`.

    Writes go to a temporary file that is then renamed over the slot, so a
    slot is always either the old blob or the new one, never a partial write.
    There is no locking between processes: concurrent writers race and the
    last rename wins.
    """

    def __init__(self, root_dir: str = config.DATA_DIR):
        self.root_dir = root_dir

    def _path(self, key: str) -> str:
        return os.path.join(self.root_dir, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            logger.debug(f"Storage slot '{key}' is empty ({path} missing).")
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise PersistenceError(f"Could not read storage slot '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        try:
            os.makedirs(self.root_dir, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError as e:
            raise PersistenceError(f"Could not write storage slot '{key}': {e}") from e
        logger.debug(f"Wrote storage slot '{key}' ({len(value)} chars) to {path}.")

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            raise PersistenceError(f"Could not delete storage slot '{key}': {e}") from e
        logger.debug(f"Deleted storage slot '{key}'.")


class InMemoryStorage:
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value

    def delete(self, key: str) -> None:
        self.slots.pop(key, None)
