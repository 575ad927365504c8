"""
Search service tying together the context store, collector and ranker.

The service exposes the three operations a host application needs (set root,
get root, search) plus a bounded worker pool for running the blocking
collect + rank pipeline off the caller's thread.
"""

import logging
import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Union

from .cancellation import CancellationToken
from .context import ProjectContext
from .models.config import FinderConfig
from .models.resolution import RootResolution
from .models.search_results import SearchResults
from .tools.file_reader import read_workspace_file
from .tools.fs_walker import PathCollector
from .tools.fuzzy_ranker import FuzzyMatcher
from .tools.root_resolver import resolve_root


logger = logging.getLogger(__name__)


class SearchService:
    """
    Fuzzy path search over the current project root.

    The matcher is built once and reused for every query. The project root is
    read from the context on each search, so a concurrent ``set_root`` takes
    effect on the next search without disturbing one already running.
    """

    def __init__(self, config: Optional[FinderConfig] = None,
                 context: Optional[ProjectContext] = None):
        """
        Initialize the search service.

        Args:
            config: Configuration; defaults are used when omitted
            context: Project context; resolved from the current directory when omitted
        """
        self.config = config or FinderConfig()
        self.context = context if context is not None else ProjectContext.from_resolver()
        self.matcher = FuzzyMatcher(self.config.ranking)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    def set_root(self, path: Union[str, os.PathLike]) -> None:
        """Replace the current project root. No validation is performed."""
        self.context.set(path)

    def current_root(self) -> str:
        """Return the root searches currently run against."""
        return self.context.get()

    def get_root(self, hint: Optional[Union[str, os.PathLike]] = None) -> str:
        """Resolve the repository root for ``hint`` (or the cwd), or ``"Unknown"``."""
        return resolve_root(hint).as_text()

    def resolve_root(self, hint: Optional[Union[str, os.PathLike]] = None) -> RootResolution:
        """Resolve the repository root for ``hint`` with the failure cause kept."""
        return resolve_root(hint)

    def search(self, query: str, cancel_token: Optional[CancellationToken] = None) -> List[str]:
        """
        Search the current root for paths matching ``query``.

        Blocks until traversal and ranking finish; use ``submit_search`` to run
        on the worker pool instead.

        Args:
            query: Query text; empty returns every entry
            cancel_token: Optional token to abandon the search early

        Returns:
            Relative paths, best match first

        Raises:
            SearchCancelled: If cancel_token was cancelled
        """
        return self.search_detailed(query, cancel_token).paths

    def search_detailed(self, query: str,
                        cancel_token: Optional[CancellationToken] = None) -> SearchResults:
        """
        Search the current root and report traversal statistics alongside the paths.

        Raises:
            SearchCancelled: If cancel_token was cancelled
        """
        started = time.perf_counter()
        root = self.context.get()

        collector = PathCollector(self.config)
        candidates = collector.collect(root, cancel_token=cancel_token)
        stats = collector.get_stats()

        paths = self.matcher.rank(query, candidates, limit=self.config.limits.max_results)

        results = SearchResults(
            query=query,
            root=root,
            paths=paths,
            total_candidates=len(candidates),
            skipped_entries=stats['entries_skipped'],
            truncated=stats['truncated'],
            elapsed_ms=(time.perf_counter() - started) * 1000.0
        )
        if stats['truncated']:
            results.add_error(f"Traversal stopped at {self.config.limits.max_entries} entries")

        logger.debug(f"Search complete: {results}")
        return results

    def submit_search(self, query: str,
                      cancel_token: Optional[CancellationToken] = None) -> 'Future[List[str]]':
        """
        Run ``search`` on the bounded worker pool.

        Returns:
            Future resolving to the ranked paths, or raising SearchCancelled
        """
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.limits.max_workers,
                    thread_name_prefix="projectfinder-search"
                )
            return self._executor.submit(self.search, query, cancel_token)

    def read_file(self, path: str) -> str:
        """
        Read a workspace file relative to the current root.

        Raises:
            WorkspaceAccessError: If the path escapes the root or cannot be read
        """
        return read_workspace_file(self.context.get(), path,
                                   max_bytes=self.config.limits.max_bytes_per_file)

    def close(self) -> None:
        """Shut down the worker pool, waiting for running searches."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> 'SearchService':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
