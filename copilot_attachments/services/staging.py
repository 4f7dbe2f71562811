"""
StagingDirectoryManager - lazily created local directory for attachments.

The path is resolved and created once per manager; every later caller,
including ones racing the first, reuses the cached value.
"""
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from ..config import STAGING_DIR_NAME
from ..errors import UploadErrorKind

logger = logging.getLogger(__name__)


def default_cache_root() -> Path:
    """Platform cache root: $XDG_CACHE_HOME, ~/.cache, or the temp dir."""
    xdg = os.getenv("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg)
    try:
        return Path.home() / ".cache"
    except RuntimeError:
        return Path(tempfile.gettempdir())


class StagingDirectoryManager:
    """Owns the process-wide staging directory path."""

    def __init__(self, cache_root: Optional[Path] = None, dir_name: str = STAGING_DIR_NAME):
        """
        Initialize manager.

        Args:
            cache_root: Parent directory (default: platform cache root)
            dir_name: Name of the staging subdirectory
        """
        self._cache_root = cache_root
        self._dir_name = dir_name
        self._path: Optional[Path] = None
        self._lock = threading.Lock()

    @property
    def is_resolved(self) -> bool:
        return self._path is not None

    def get_or_create(self) -> Path:
        """
        Return the staging directory, creating it on first use.

        Creation failures are logged and the path is returned anyway.
        """
        with self._lock:
            if self._path is not None:
                return self._path

            root = self._cache_root if self._cache_root is not None else default_cache_root()
            path = Path(root) / self._dir_name
            try:
                path.mkdir(parents=True, exist_ok=True)
                logger.debug("Staging directory ready at %s", path)
            except OSError as e:
                logger.warning(
                    "%s: could not create %s: %s",
                    UploadErrorKind.DIRECTORY_CREATION_FAILED.value, path, e
                )
            self._path = path
            return path

    def resolve(self, location: Path) -> Path:
        """Resolve a relative archive location against the staging directory."""
        location = Path(location)
        if location.is_absolute():
            return location
        return self.get_or_create() / location
