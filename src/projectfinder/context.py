"""
Project context store holding the active project root.

The root is shared between request handlers running on different threads, so
every read and write goes through a lock. Reads copy the value out and release
the lock before any traversal starts.
"""

import logging
import os
import threading
from typing import Optional, Union

from .tools.root_resolver import get_project_root


logger = logging.getLogger(__name__)


class ProjectContext:
    """
    Mutable holder for the current project root.

    ``set`` performs no validation: a root that does not exist simply yields
    no candidates on the next search.
    """

    def __init__(self, root: Union[str, os.PathLike]):
        self._lock = threading.Lock()
        self._root = os.fspath(root)

    @classmethod
    def from_resolver(cls, hint: Optional[Union[str, os.PathLike]] = None) -> 'ProjectContext':
        """Create a context rooted at the repository enclosing ``hint`` (or the cwd)."""
        root = get_project_root(hint)
        logger.info(f"Initial project root: {root}")
        return cls(root)

    def get(self) -> str:
        """Return the current root."""
        with self._lock:
            return self._root

    def set(self, new_root: Union[str, os.PathLike]) -> None:
        """Replace the current root unconditionally."""
        new_root = os.fspath(new_root)
        with self._lock:
            self._root = new_root
        logger.info(f"Set project root to: {new_root}")

    def __repr__(self) -> str:
        return f"ProjectContext(root={self.get()!r})"
