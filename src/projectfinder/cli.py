"""
Command-line entry point: fuzzy-search paths in a project.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config.parser import ConfigurationError, load_config
from .context import ProjectContext
from .models.resolution import UNKNOWN_ROOT
from .service import SearchService
from .tools.root_resolver import get_project_root


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projectfinder",
        description="Fuzzy-search file paths inside a project, best match first."
    )
    parser.add_argument("query", nargs="*", help="Query atoms (empty lists every entry)")
    parser.add_argument("--root", help="Project root (default: enclosing git work tree of the cwd)")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of paths to print")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config = load_config(args.config).config
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    root = args.root
    if root is None:
        root = get_project_root()
        if root == UNKNOWN_ROOT:
            root = os.getcwd()
            logger.info(f"No enclosing repository, searching {root}")

    with SearchService(config, ProjectContext(root)) as service:
        paths = service.search(" ".join(args.query))

    if args.limit is not None:
        paths = paths[:args.limit]
    for path in paths:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
