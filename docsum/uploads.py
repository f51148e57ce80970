"""Release-once ownership of a temporary upload on disk."""

from __future__ import annotations

import logging
import os
from types import TracebackType

log = logging.getLogger(__name__)


class TemporaryUpload:
    """Context manager that deletes ``path`` exactly once when the scope exits.

    ``release`` may be called early; later calls (including the implicit one on
    exit) are no-ops.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> bool:
        """Delete the file if it still exists. Returns True if a deletion happened."""
        if self._released:
            return False
        self._released = True
        if not os.path.exists(self.path):
            log.debug("Upload already gone: %s", self.path)
            return False
        os.remove(self.path)
        log.info("Removed upload %s", self.path)
        return True

    def __enter__(self) -> TemporaryUpload:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.release()
            return
        # Keep the original failure; a cleanup error is only logged here.
        try:
            self.release()
        except OSError:
            log.exception("Failed to remove upload %s after error", self.path)
