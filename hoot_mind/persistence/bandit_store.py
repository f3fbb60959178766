"""JSON persistence for the adaptive threshold tuner.

Writes are atomic (temp file in the same directory, then os.replace) so a
crash never leaves a half-written state file. Failures are logged and never
raised: the last in-memory state stays authoritative for the process.
"""

import json
import logging
import os
import threading
import time
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Callable, Optional, Sequence

from ..models.bandit_state import BanditState

logger = logging.getLogger(__name__)


class BanditStateStore:
    """Load/save BanditState with a single-writer discipline per process."""

    def __init__(self, path: str, arms: Optional[Sequence[float]] = None) -> None:
        self.path = Path(path)
        self.arms = tuple(arms) if arms is not None else None
        self._lock = threading.Lock()
        self._last_state: Optional[BanditState] = None
        self._dirty = False

    @property
    def last_state(self) -> Optional[BanditState]:
        """Most recent state seen or produced by this store."""
        return self._last_state

    def load(self) -> Optional[BanditState]:
        """Read the persisted state.

        Returns:
            BanditState, or None when the file is missing or unreadable.
        """
        if not self.path.exists():
            logger.info("bandit_store: %s not created yet, starting fresh", self.path)
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            state = BanditState.from_dict(data, arms=self.arms)
        except (OSError, ValueError) as exc:
            logger.error("bandit_store: cannot read %s: %s", self.path, exc)
            return None
        if not self._dirty:
            self._last_state = state
        logger.debug("bandit_store: loaded %s trials from %s", state.total_trials, self.path)
        return state

    def save(self, state: BanditState) -> bool:
        """Atomically write `state`. Returns False on failure.

        After a failed save the in-memory state is served by current() until
        a later save succeeds, so pending updates are not replaced by an
        older file on disk.
        """
        self._last_state = state
        self._dirty = True
        payload = state.to_dict()
        payload["updated_at"] = int(time.time())
        try:
            text = json.dumps(payload, indent=2, allow_nan=False)
        except (TypeError, ValueError) as exc:
            logger.error("bandit_store: state for %s is not serialisable: %s", self.path, exc)
            return False

        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=str(self.path.parent),
                prefix=".bandit_",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.warning("bandit_store: failed to save %s: %s (keeping in-memory state)", self.path, exc)
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.remove(tmp_name)
                except OSError:
                    logger.debug("bandit_store: could not remove temp file %s", tmp_name)
            return False
        self._dirty = False
        return True

    def current(self, default: Callable[[], BanditState]) -> BanditState:
        """Freshest available state.

        Unsaved memory first, then disk, then the last state seen, then
        `default()`.
        """
        if self._dirty and self._last_state is not None:
            return self._last_state
        state = self.load()
        if state is not None:
            return state
        if self._last_state is not None:
            return self._last_state
        return default()

    def update(
        self,
        mutate: Callable[[BanditState], BanditState],
        default: Callable[[], BanditState],
    ) -> BanditState:
        """Read-modify-write as one transaction under the store lock.

        Concurrent callers in this process serialise here; across processes
        the atomic replace gives last-write-wins.
        """
        with self._lock:
            new_state = mutate(self.current(default))
            self.save(new_state)
            return new_state
