"""
Project root resolution result model.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator


UNKNOWN_ROOT = "Unknown"


class ResolutionStatus(Enum):
    """Outcome of looking up the enclosing repository work tree."""
    OK = "ok"
    NO_REPOSITORY = "no_repository"
    BARE_REPOSITORY = "bare_repository"
    NOT_REPRESENTABLE = "not_representable"


class RootResolution(BaseModel):
    """
    Tagged result of resolving a project root.

    Attributes:
        status: Which resolution outcome occurred
        root: Absolute work tree path, set only when status is OK
        hint: The path resolution started from
    """

    status: ResolutionStatus = Field(..., description="Resolution outcome")
    root: Optional[str] = Field(None, description="Absolute work tree path")
    hint: str = Field("", description="Path the search started from")

    @model_validator(mode='after')
    def validate_root(self):
        """Only successful resolutions carry a root."""
        if self.status is ResolutionStatus.OK and not self.root:
            raise ValueError("Successful resolution requires a root")
        if self.status is not ResolutionStatus.OK and self.root is not None:
            raise ValueError(f"Resolution with status {self.status.value} cannot carry a root")
        return self

    @property
    def ok(self) -> bool:
        return self.status is ResolutionStatus.OK

    def as_text(self) -> str:
        """Return the root path, or the "Unknown" sentinel on any failure."""
        return self.root if self.ok else UNKNOWN_ROOT

    def __str__(self) -> str:
        return f"{self.status.value}: {self.as_text()}"
