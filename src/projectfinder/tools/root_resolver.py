"""
Project root resolution backed by pygit2.

Finds the top-level work tree of the git repository enclosing a path. Every
failure is reported as a RootResolution variant instead of an exception so the
host application can always start, even without a project.
"""

import logging
import os
from typing import Optional, Union

import pygit2

from ..models.resolution import ResolutionStatus, RootResolution


logger = logging.getLogger(__name__)


def resolve_root(hint: Optional[Union[str, os.PathLike]] = None) -> RootResolution:
    """
    Resolve the work tree root of the repository enclosing ``hint``.

    Args:
        hint: Path to start searching upward from; defaults to the current directory

    Returns:
        RootResolution describing the outcome. Never raises.
    """
    if hint is None:
        try:
            start = os.getcwd()
        except OSError as e:
            logger.debug(f"Current directory is unavailable: {e}")
            return RootResolution(status=ResolutionStatus.NO_REPOSITORY)
    else:
        start = os.fspath(hint)

    repo_path = _discover_repo_path(start)
    if repo_path is None:
        return RootResolution(status=ResolutionStatus.NO_REPOSITORY, hint=start)

    try:
        repo = pygit2.Repository(repo_path)
    except (KeyError, ValueError, pygit2.GitError) as e:
        logger.debug(f"Cannot open repository {repo_path}: {e}")
        return RootResolution(status=ResolutionStatus.NO_REPOSITORY, hint=start)

    if not repo.workdir:
        logger.debug(f"Repository has no work tree: {repo_path}")
        return RootResolution(status=ResolutionStatus.BARE_REPOSITORY, hint=start)

    root = os.path.abspath(repo.workdir)
    try:
        root.encode('utf-8')
    except UnicodeEncodeError:
        logger.debug(f"Work tree path is not valid text: {root!r}")
        return RootResolution(status=ResolutionStatus.NOT_REPRESENTABLE, hint=start)

    logger.debug(f"Resolved project root {root} from {start}")
    return RootResolution(status=ResolutionStatus.OK, root=root, hint=start)


def get_project_root(hint: Optional[Union[str, os.PathLike]] = None) -> str:
    """Return the project root for ``hint`` as text, or ``"Unknown"``."""
    return resolve_root(hint).as_text()


def _discover_repo_path(path: str) -> Optional[str]:
    try:
        repo_path = pygit2.discover_repository(path)
    except (KeyError, ValueError, OSError, pygit2.GitError) as e:
        logger.debug(f"Repository discovery failed for {path}: {e}")
        return None
    if repo_path is None:
        logger.debug(f"No repository found above {path}")
    return repo_path
