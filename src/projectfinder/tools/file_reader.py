"""
Workspace file-read tool.

Reads a text file addressed relative to the project root on behalf of a chat
model tool call. Paths that are absolute or that resolve outside the root
(through ``..`` or symlinks) are rejected.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import BaseModel, Field, ValidationError, field_validator


logger = logging.getLogger(__name__)


DEFAULT_MAX_BYTES = 5000000

READ_FILE_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "read_file",
        "description": (
            "Read a **text** file in the current workspace and return its "
            "complete UTF-8 contents as a string."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": (
                        "Relative path from the project root to the file to read "
                        "(e.g. \"src/index.ts\"). Must stay inside the workspace."
                    ),
                },
            },
            "required": ["path"],
        },
    },
}


class WorkspaceAccessError(Exception):
    """Raised when a workspace file cannot be read or lies outside the workspace."""
    pass


class ReadFileArgs(BaseModel):
    """Arguments of a read_file tool call."""

    path: str = Field(..., min_length=1, description="Workspace-relative file path")

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("File path cannot be empty")
        return v.strip()


def resolve_in_workspace(root: Union[str, os.PathLike], path: str) -> Path:
    """
    Resolve a workspace-relative path, refusing anything outside the root.

    Args:
        root: Project root
        path: Path relative to the root

    Returns:
        Absolute resolved path inside the root

    Raises:
        WorkspaceAccessError: If the path is absolute or escapes the root
    """
    if os.path.isabs(path) or Path(path).anchor:
        raise WorkspaceAccessError(f"Absolute paths are not allowed: {path}")

    root_path = Path(root).resolve()
    target = (root_path / path).resolve()

    if target != root_path and root_path not in target.parents:
        raise WorkspaceAccessError(f"Path escapes the workspace: {path}")

    return target


def read_workspace_file(root: Union[str, os.PathLike], path: str,
                        max_bytes: int = DEFAULT_MAX_BYTES) -> str:
    """
    Read a UTF-8 text file addressed relative to the project root.

    Args:
        root: Project root
        path: Path relative to the root
        max_bytes: Largest file size that will be returned

    Returns:
        File contents

    Raises:
        WorkspaceAccessError: If the path is outside the root, too large, or unreadable
    """
    try:
        args = ReadFileArgs(path=path)
    except ValidationError as e:
        raise WorkspaceAccessError(f"Invalid file path {path!r}: {e}") from e

    target = resolve_in_workspace(root, args.path)
    logger.debug(f"Attempting to read file: {target}")

    try:
        size = target.stat().st_size
        if size > max_bytes:
            raise WorkspaceAccessError(
                f"Failed to read {args.path}: file is {size} bytes, limit is {max_bytes}"
            )
        content = target.read_text(encoding='utf-8')
    except WorkspaceAccessError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Failed to read file {target}: {e}")
        raise WorkspaceAccessError(f"Failed to read {args.path}: {e}") from e

    logger.debug(f"Successfully read file: {target}")
    return content
