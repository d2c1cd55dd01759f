"""
Layout persistence.

The layout snapshot lives under a single well-known key ("app-state") in
a small JSON key/value file that plays the role of local device storage.
It is read once at startup and written after every committed store
change.

Writes are best-effort and asynchronous: LayoutPersistence.save hands
the snapshot to a single background writer thread, so writes land in
commit order and never block the caller. Failures are logged and
dropped; the in-memory workspace stays authoritative. A missing,
unreadable or structurally invalid snapshot loads as None, which callers
treat as "start from the default workspace".
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from widgetboard.config.constants import APP_STATE_KEY
from widgetboard.config.settings import get_storage_path
from widgetboard.exceptions import PersistenceError, SnapshotError, StorageWriteError

from .models import Workspace
from .registry import WidgetRegistry
from .store import LayoutStore

logger = logging.getLogger(__name__)


class LocalStorage:
    """A JSON file of key -> value entries.

    Usage:
        storage = LocalStorage(Path("~/.config/widgetboard/local_storage.json"))
        storage.set_item("app-state", {"pages": []})
        storage.get_item("app-state")
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SnapshotError("Local storage is not valid JSON", path=str(self.path)) from e
        except UnicodeDecodeError as e:
            raise SnapshotError("Local storage is not valid UTF-8", path=str(self.path)) from e
        except OSError as e:
            raise SnapshotError("Local storage could not be read", path=str(self.path)) from e
        if not isinstance(data, dict):
            raise SnapshotError("Local storage is not a JSON object", path=str(self.path))
        return data

    def get_item(self, key: str) -> Optional[Any]:
        """Read one entry.

        Raises:
            SnapshotError: If the storage file exists but cannot be parsed
        """
        return self._read_all().get(key)

    def set_item(self, key: str, value: Any) -> None:
        """Write one entry, keeping the others.

        The file is replaced atomically so a crash mid-write never leaves
        a truncated snapshot behind.

        Raises:
            StorageWriteError: If the value cannot be serialized or written
        """
        try:
            data = self._read_all()
        except SnapshotError as e:
            logger.warning(f"Discarding unreadable local storage: {e}")
            data = {}
        data[key] = value

        try:
            payload = json.dumps(data, indent=2) + "\n"
        except (TypeError, ValueError) as e:
            raise StorageWriteError("Snapshot is not JSON serializable", path=str(self.path)) from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(str(e), path=str(self.path)) from e

class LayoutPersistence:
    """Loads and saves the workspace snapshot.

    Args:
        storage: Backing key/value storage
        key: Storage key of the snapshot
        background: Write on a background thread (False writes inline,
            which is what one-shot CLI commands want)
    """

    def __init__(
        self,
        storage: LocalStorage,
        *,
        key: str = APP_STATE_KEY,
        background: bool = True,
    ) -> None:
        self.storage = storage
        self.key = key
        self.background = background
        self._executor: Optional[ThreadPoolExecutor] = None
        self._last_write: Optional[Future] = None

    def load(self) -> Optional[Workspace]:
        """Read the stored workspace.

        Returns:
            The workspace, or None if there is no usable snapshot
        """
        try:
            data = self.storage.get_item(self.key)
            if data is None:
                logger.info("No stored layout found, starting fresh")
                return None
            workspace = Workspace.from_dict(data)
        except SnapshotError as e:
            logger.warning(f"Ignoring unreadable layout snapshot: {e}")
            return None

        logger.info(f"Loaded layout with {len(workspace.pages)} page(s)")
        return workspace

    def save_now(self, workspace: Workspace) -> None:
        """Write the workspace synchronously.

        Raises:
            StorageWriteError: If the write fails
        """
        self.storage.set_item(self.key, workspace.to_dict())
        logger.debug(f"Saved layout to {self.storage.path}")

    def save(self, workspace: Workspace) -> None:
        """Write the workspace without blocking; failures are only logged."""
        snapshot = workspace.to_dict()
        if not self.background:
            self._write_snapshot(snapshot)
            return

        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="widgetboard-save"
            )
        self._last_write = self._executor.submit(self._write_snapshot, snapshot)

    def _write_snapshot(self, snapshot: Mapping[str, Any]) -> None:
        try:
            self.storage.set_item(self.key, snapshot)
            logger.debug(f"Saved layout to {self.storage.path}")
        except PersistenceError as e:
            logger.error(f"Failed to save layout: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error saving layout: {e}")

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait until every scheduled write has finished."""
        if self._last_write is not None:
            self._last_write.result(timeout=timeout)

    def close(self) -> None:
        """Finish pending writes and stop the writer thread."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._last_write = None

    def attach(self, store: LayoutStore) -> Callable[[], None]:
        """Save after every committed change of the store.

        Returns:
            A function that detaches persistence from the store
        """
        return store.subscribe(self.save)


def open_store(
    storage_path: Optional[Path] = None,
    *,
    background: bool = True,
    registry: Optional[WidgetRegistry] = None,
    instance_defaults: Optional[Mapping[str, Any]] = None,
) -> Tuple[LayoutStore, LayoutPersistence]:
    """Create a store restored from storage with persistence attached.

    Args:
        storage_path: Storage file (defaults to the configured path)
        background: Whether saves run on the background writer
        registry: Widget registry for default sizes
        instance_defaults: Overrides stamped onto new instances

    Returns:
        Tuple of (store, persistence)
    """
    persistence = LayoutPersistence(
        LocalStorage(storage_path or get_storage_path()), background=background
    )
    store = LayoutStore(
        persistence.load(),
        registry=registry,
        instance_defaults=instance_defaults,
    )
    persistence.attach(store)
    return store, persistence
