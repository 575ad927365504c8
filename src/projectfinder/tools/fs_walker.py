"""
Filesystem walker for the Project Finder.

This module collects every filesystem entry below a project root as a
root-relative candidate path. Directories named in the ignore set are pruned
before descent so nothing beneath them is ever visited. Unreadable entries are
skipped and counted rather than failing the whole walk.
"""

import os
from pathlib import Path, PurePath
from typing import Dict, List, Optional, Any, Union
import logging

from ..cancellation import CancellationToken
from ..models.config import FinderConfig


logger = logging.getLogger(__name__)


class PathCollector:
    """
    Filesystem walker that gathers candidate paths for fuzzy ranking.

    This class provides directory traversal with support for:
    - Pruning of ignored directory names (build output, dependencies, VCS metadata)
    - Root-relative paths with '/' separators on every platform
    - An entry limit guarding against runaway trees
    - Cooperative cancellation between directory steps

    An instance keeps statistics for the walks it performs; use one instance
    per thread.
    """

    def __init__(self, config: Optional[FinderConfig] = None):
        """
        Initialize the path collector.

        Args:
            config: Configuration providing the ignore set and entry limit
        """
        self.config = config or FinderConfig()
        self._ignore_dirs = self.config.ignore_set
        self._stats = self._empty_stats()

    def collect(self, root: Union[str, os.PathLike],
                cancel_token: Optional[CancellationToken] = None) -> List[str]:
        """
        Walk a root directory and return every entry as a relative path.

        Both files and directories become candidates. The root itself is never
        included. A missing or unreadable root yields an empty list.

        Args:
            root: Project root to walk
            cancel_token: Optional token checked before each directory is processed

        Returns:
            List of root-relative paths using '/' separators

        Raises:
            SearchCancelled: If cancel_token was cancelled during the walk
        """
        root_path = Path(root)
        if not root_path.is_dir():
            logger.warning(f"Root directory does not exist or is not a directory: {root_path}")
            return []

        max_entries = self.config.limits.max_entries
        candidates: List[str] = []

        logger.info(f"Walking directory tree: {root_path}")

        for current_dir, subdirs, files in os.walk(root_path, onerror=self._on_walk_error):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            self._stats['directories_traversed'] += 1

            kept_dirs = []
            for name in sorted(subdirs):
                if name in self._ignore_dirs:
                    self._stats['directories_pruned'] += 1
                    logger.debug(f"Pruning ignored directory: {os.path.join(current_dir, name)}")
                else:
                    kept_dirs.append(name)
            subdirs[:] = kept_dirs

            rel_dir = self._relative_dir(root_path, current_dir)

            for name in kept_dirs + sorted(files):
                candidate = f"{rel_dir}/{name}" if rel_dir else name
                candidates.append(candidate)

                if len(candidates) >= max_entries:
                    logger.warning(f"Reached maximum entry limit: {max_entries}")
                    self._stats['truncated'] = True
                    self._stats['entries_collected'] += len(candidates)
                    return candidates

        if self._stats['directories_traversed'] == 0:
            logger.warning(f"Root directory could not be read: {root_path}")

        self._stats['entries_collected'] += len(candidates)
        return candidates

    @staticmethod
    def _relative_dir(root_path: Path, current_dir: str) -> str:
        """
        Strip the root prefix from a directory reached during the walk.

        Falls back to the unmodified path when the directory is not under the
        root.
        """
        current = PurePath(current_dir)
        try:
            rel = current.relative_to(root_path).as_posix()
        except ValueError:
            return current.as_posix()
        return '' if rel == '.' else rel

    def _on_walk_error(self, error: OSError) -> None:
        """Count and skip a directory that could not be listed."""
        self._stats['entries_skipped'] += 1
        logger.debug(f"Skipping unreadable entry {error.filename}: {error.strerror}")

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            'entries_collected': 0,
            'directories_traversed': 0,
            'directories_pruned': 0,
            'entries_skipped': 0,
            'truncated': False
        }

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the walks performed so far.

        Returns:
            Dictionary containing operation statistics
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = self._empty_stats()


def collect_paths(root: Union[str, os.PathLike],
                  config: Optional[FinderConfig] = None,
                  cancel_token: Optional[CancellationToken] = None) -> List[str]:
    """
    Convenience function to collect candidate paths below a root.

    Args:
        root: Project root to walk
        config: Optional configuration (defaults prune target, node_modules, .git and .venv)
        cancel_token: Optional cancellation token

    Returns:
        List of root-relative paths using '/' separators
    """
    return PathCollector(config).collect(root, cancel_token=cancel_token)
