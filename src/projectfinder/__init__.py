"""
Project Finder - Core Package

Interactive fuzzy search for file paths inside a project, ranked by relevance
and skipping build, dependency, VCS and virtual-env directories.
"""

from .cancellation import CancellationToken, SearchCancelled
from .context import ProjectContext
from .service import SearchService
from .tools.fs_walker import PathCollector, collect_paths
from .tools.fuzzy_ranker import FuzzyMatcher, rank
from .tools.root_resolver import get_project_root, resolve_root

__version__ = "0.1.0"
__author__ = "Project Finder Team"

__all__ = [
    'CancellationToken',
    'SearchCancelled',
    'ProjectContext',
    'SearchService',
    'PathCollector',
    'collect_paths',
    'FuzzyMatcher',
    'rank',
    'get_project_root',
    'resolve_root',
]
