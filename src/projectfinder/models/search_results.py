"""
Search results data models for the Project Finder.

This module defines the data structures for ranked matches and for the
diagnostic view of a complete search.
"""

from typing import Dict, List, Any
from pydantic import BaseModel, Field, field_validator


class MatchResult(BaseModel):
    """
    A candidate path paired with its fuzzy match score.

    Attributes:
        candidate: Root-relative path using '/' separators
        score: Match score, higher is better
    """

    candidate: str = Field(..., min_length=1, description="Root-relative candidate path")
    score: int = Field(..., description="Match score, higher is better")

    def __str__(self) -> str:
        return f"{self.candidate} ({self.score})"


class SearchResults(BaseModel):
    """
    Complete results of a single search, with traversal statistics.

    Attributes:
        query: The query exactly as typed
        root: The project root the search ran against
        paths: Matching paths, best match first
        total_candidates: Number of entries collected before ranking
        skipped_entries: Entries that could not be read during traversal
        truncated: Whether traversal stopped at the entry limit
        elapsed_ms: Wall time of collect + rank in milliseconds
        errors: Non-fatal problems encountered
    """

    query: str = Field("", description="Query text")
    root: str = Field(..., description="Project root searched")
    paths: List[str] = Field(default_factory=list, description="Ranked relative paths")
    total_candidates: int = Field(0, ge=0, description="Entries collected before ranking")
    skipped_entries: int = Field(0, ge=0, description="Unreadable entries skipped")
    truncated: bool = Field(False, description="Traversal stopped at the entry limit")
    elapsed_ms: float = Field(0.0, ge=0.0, description="Search time in milliseconds")
    errors: List[str] = Field(default_factory=list, description="Non-fatal errors")

    @field_validator('paths')
    @classmethod
    def validate_paths(cls, v: List[str]) -> List[str]:
        """Relative paths must be non-empty."""
        for path in v:
            if not path:
                raise ValueError("Result paths cannot be empty")
        return v

    def get_match_count(self) -> int:
        """Get the number of matching paths."""
        return len(self.paths)

    def get_top_matches(self, n: int = 10) -> List[str]:
        """Get the top N paths."""
        return self.paths[:n]

    def has_errors(self) -> bool:
        """Check if any errors were recorded."""
        return bool(self.errors)

    def add_error(self, error: str) -> None:
        """Record a non-fatal error."""
        self.errors.append(error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert search results to dictionary representation."""
        data = self.model_dump()
        data['match_count'] = self.get_match_count()
        return data

    def __str__(self) -> str:
        """String representation of the search results."""
        parts = [f"Query: '{self.query}'"]
        parts.append(f"Matches: {self.get_match_count()}/{self.total_candidates}")

        if self.skipped_entries:
            parts.append(f"Skipped: {self.skipped_entries}")

        if self.truncated:
            parts.append("Truncated")

        parts.append(f"Time: {self.elapsed_ms:.1f}ms")

        return " | ".join(parts)
