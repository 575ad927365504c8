"""
Configuration data models for the Project Finder.

This module defines the data structures for application configuration:
the directory names that prune traversal, traversal and worker limits,
and the fuzzy ranking options.
"""

from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field, field_validator


DEFAULT_IGNORE_DIRS = frozenset({"target", "node_modules", ".git", ".venv"})

_WILDCARD_CHARS = set("*?[]")


class LimitsConfig(BaseModel):
    """
    Configuration for system limits and constraints.

    Attributes:
        max_entries: Maximum number of filesystem entries collected per search
        max_results: Maximum number of ranked paths returned (None for all)
        max_bytes_per_file: Maximum file size the read tool will return (bytes)
        max_workers: Size of the search worker pool
    """

    max_entries: int = Field(200000, gt=0, description="Maximum number of entries collected per search")
    max_results: Optional[int] = Field(None, gt=0, description="Maximum number of ranked paths returned")
    max_bytes_per_file: int = Field(5000000, gt=0, description="Maximum file size to read (bytes)")
    max_workers: int = Field(4, gt=0, description="Size of the search worker pool")

    def get_max_size_human_readable(self) -> str:
        """Get max file size in human-readable format."""
        size = float(self.max_bytes_per_file)
        for unit in ['B', 'KB', 'MB', 'GB']:
            if size < 1024.0:
                return f"{size:.1f} {unit}"
            size /= 1024.0
        return f"{size:.1f} TB"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class RankingConfig(BaseModel):
    """
    Configuration for the fuzzy ranker.

    Attributes:
        prefer_prefix: Favour matches that start a path segment
        normalize_unicode: Apply NFKC normalization to query and candidates
        ignore_case: Compare case-insensitively
    """

    prefer_prefix: bool = Field(True, description="Favour matches at the start of a path segment")
    normalize_unicode: bool = Field(True, description="Apply compatibility normalization before matching")
    ignore_case: bool = Field(True, description="Compare case-insensitively")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class FinderConfig(BaseModel):
    """
    Main configuration class for the Project Finder.

    Attributes:
        ignore_dirs: Directory basenames whose subtrees are never traversed
        limits: Traversal, result and worker limits
        ranking: Fuzzy ranking options
    """

    ignore_dirs: List[str] = Field(
        default_factory=lambda: sorted(DEFAULT_IGNORE_DIRS),
        description="Directory basenames pruned from traversal"
    )
    limits: LimitsConfig = Field(default_factory=LimitsConfig, description="System limits and constraints")
    ranking: RankingConfig = Field(default_factory=RankingConfig, description="Fuzzy ranking options")

    @field_validator('ignore_dirs')
    @classmethod
    def validate_ignore_dirs(cls, v: List[str]) -> List[str]:
        """Ignore entries must be plain directory basenames."""
        normalized = []
        for name in v:
            if not isinstance(name, str) or not name.strip():
                continue
            name = name.strip()
            if '/' in name or '\\' in name:
                raise ValueError(f"Ignore entry must be a directory name, not a path: {name}")
            if _WILDCARD_CHARS & set(name):
                raise ValueError(f"Ignore entry must not contain wildcards: {name}")
            if name in ('.', '..'):
                raise ValueError(f"Invalid ignore entry: {name}")
            if name not in normalized:
                normalized.append(name)
        return normalized

    @property
    def ignore_set(self) -> frozenset:
        """Ignore entries as a frozenset for membership tests."""
        return frozenset(self.ignore_dirs)

    def validate_configuration(self) -> List[str]:
        """
        Check the configuration for settings that are legal but suspicious.

        Returns:
            List of warning messages
        """
        warnings = []

        missing = DEFAULT_IGNORE_DIRS - self.ignore_set
        if missing:
            warnings.append(
                f"Default ignore directories not pruned: {', '.join(sorted(missing))}"
            )

        if self.limits.max_entries > 1000000:
            warnings.append("Very high max_entries limit may cause slow searches and memory issues")

        if self.limits.max_workers > 32:
            warnings.append(f"Large worker pool ({self.limits.max_workers}) rarely helps interactive search")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'ignore_dirs': list(self.ignore_dirs),
            'limits': self.limits.to_dict(),
            'ranking': self.ranking.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FinderConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Ignore dirs: {', '.join(self.ignore_dirs) or 'none'}"]
        parts.append(f"Max entries: {self.limits.max_entries}")
        parts.append(f"Workers: {self.limits.max_workers}")
        parts.append(f"Prefer prefix: {self.ranking.prefer_prefix}")

        return " | ".join(parts)
