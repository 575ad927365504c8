"""
Data models for the Project Finder.

This module contains all the core data structures used throughout the system.
"""

from .config import DEFAULT_IGNORE_DIRS, FinderConfig, LimitsConfig, RankingConfig
from .resolution import UNKNOWN_ROOT, ResolutionStatus, RootResolution
from .search_results import MatchResult, SearchResults

__all__ = [
    'DEFAULT_IGNORE_DIRS',
    'FinderConfig',
    'LimitsConfig',
    'RankingConfig',
    'UNKNOWN_ROOT',
    'ResolutionStatus',
    'RootResolution',
    'MatchResult',
    'SearchResults',
]
