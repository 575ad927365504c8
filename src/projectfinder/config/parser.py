"""
YAML configuration loading for the Project Finder.

Configuration is looked up in this order:

1. the file named by the ``PROJECTFINDER_CONFIG`` environment variable
2. ``.projectfinder.yaml`` and friends in the current directory
3. the same names in the home directory
4. the same names in ``~/.config/projectfinder``

Whatever the file leaves out is filled from ``FinderConfig`` defaults. Every
failure surfaces as ``ConfigurationError``.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple, Union
import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from ..models.config import FinderConfig, DEFAULT_IGNORE_DIRS


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PROJECTFINDER_CONFIG"

SECTION_COMMENTS = {
    'ignore_dirs': "Directory names whose subtrees are never searched",
    'limits': "Traversal and worker limits",
    'ranking': "Fuzzy ranking options",
}


@dataclass
class ConfigParseResult:
    """
    Outcome of loading a configuration.

    Attributes:
        config: Validated configuration
        warnings: Non-fatal problems found while loading
        config_path: File the configuration came from, None for defaults
        is_default: True when no file was found
    """
    config: FinderConfig
    warnings: List[str] = field(default_factory=list)
    config_path: Optional[Path] = None
    is_default: bool = False


class ConfigurationError(Exception):
    """Configuration file is missing, malformed or fails validation."""
    pass


class ConfigParser:
    """
    Finds, reads and validates Project Finder configuration files.

    In strict mode any warning (unknown sections, suspicious limits, missing
    default ignore entries) is raised as a ConfigurationError instead.
    """

    DEFAULT_CONFIG_NAMES = [
        '.projectfinder.yaml',
        '.projectfinder.yml',
        'projectfinder.yaml',
        'projectfinder.yml'
    ]

    KNOWN_SECTIONS = set(SECTION_COMMENTS)

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def search_dirs(self) -> List[Path]:
        """Directories scanned for a configuration file, in priority order."""
        home = Path.home()
        return [Path.cwd(), home, home / '.config' / 'projectfinder']

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
        """
        Load the configuration from config_path, or discover one.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        if config_path is None and os.environ.get(CONFIG_ENV_VAR):
            config_path = os.environ[CONFIG_ENV_VAR]
            self.logger.debug(f"Using {CONFIG_ENV_VAR}={config_path}")

        if config_path:
            path = Path(config_path)
            if not path.is_file():
                raise ConfigurationError(f"Configuration file not found: {path}")
            raw = self.read_file(path)
        else:
            found = self._discover()
            path, raw = found if found else (None, None)

        is_default = raw is None
        config = self.build_config(raw or {})

        warnings = config.validate_configuration()
        if is_default:
            warnings.append("No configuration file found, using default settings")
        unknown = sorted(set(raw or {}) - self.KNOWN_SECTIONS)
        if unknown:
            warnings.append(f"Unknown configuration sections ignored: {', '.join(unknown)}")

        if warnings and self.strict_mode:
            raise ConfigurationError(f"Configuration warnings in strict mode: {'; '.join(warnings)}")
        for warning in warnings:
            self.logger.debug(warning)

        self.logger.info(f"Configuration loaded from {path or 'defaults'}")
        return ConfigParseResult(config=config, warnings=warnings, config_path=path, is_default=is_default)

    def _discover(self) -> Optional[Tuple[Path, Dict[str, Any]]]:
        """Return the first readable configuration file and its contents."""
        for directory in self.search_dirs():
            for name in self.DEFAULT_CONFIG_NAMES:
                candidate = directory / name
                if not candidate.is_file():
                    continue
                try:
                    raw = self.read_file(candidate)
                except ConfigurationError as e:
                    self.logger.warning(f"Skipping unusable configuration {candidate}: {e}")
                    continue
                self.logger.info(f"Found configuration file: {candidate}")
                return candidate, raw

        self.logger.info("No configuration file found, using defaults")
        return None

    def read_file(self, path: Path) -> Dict[str, Any]:
        """
        Parse a YAML file into a mapping. An empty file is an empty mapping.

        Raises:
            ConfigurationError: If the file cannot be read, is not YAML, or is
                not a mapping at the top level
        """
        try:
            text = Path(path).read_text(encoding='utf-8')
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {path}: {e}") from e

        if data is None:
            self.logger.warning(f"Configuration file is empty: {path}")
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a YAML object, got {type(data).__name__}"
            )
        return data

    def build_config(self, raw: Dict[str, Any]) -> FinderConfig:
        """
        Overlay raw file contents on the defaults and validate the result.

        Sections that are absent or null keep their defaults.
        """
        ignore_dirs = raw.get('ignore_dirs')
        if ignore_dirs is None:
            ignore_dirs = sorted(DEFAULT_IGNORE_DIRS)
        elif not isinstance(ignore_dirs, list):
            raise ConfigurationError("Configuration validation failed: 'ignore_dirs' must be a list")

        data: Dict[str, Any] = {'ignore_dirs': ignore_dirs}
        for section in ('limits', 'ranking'):
            value = raw.get(section)
            if value is None:
                value = {}
            elif not isinstance(value, dict):
                raise ConfigurationError(f"Configuration validation failed: '{section}' must be a mapping")
            data[section] = value

        try:
            return FinderConfig.from_dict(data)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def render(self, config: FinderConfig) -> str:
        """Serialize a configuration as commented YAML."""
        out = [
            "# Project Finder Configuration",
            "# Controls which directories are pruned and how paths are ranked",
            "",
        ]
        for section, value in config.to_dict().items():
            out.append(f"# {SECTION_COMMENTS[section]}")
            out.append(yaml.safe_dump({section: value}, default_flow_style=False, sort_keys=False).rstrip())
            out.append("")
        return "\n".join(out)

    def save_config(self, config: FinderConfig, output_path: Union[str, Path]) -> None:
        """
        Write config to output_path as commented YAML, creating parent dirs.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        _write_text(Path(output_path), self.render(config))
        self.logger.info(f"Configuration saved to {output_path}")

    def validate_config_file(self, config_path: Union[str, Path]) -> List[str]:
        """Return the errors found in a configuration file, empty if it is valid."""
        path = Path(config_path)
        if not path.is_file():
            return [f"Configuration file not found: {path}"]

        try:
            self.build_config(self.read_file(path))
        except ConfigurationError as e:
            return [str(e)]
        return []

    def get_config_template(self) -> str:
        """Commented YAML holding every option at its default value."""
        return self.render(FinderConfig())


def _write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"Cannot write configuration file {path}: {e}") from e


def load_config(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> ConfigParseResult:
    """Load configuration with a throwaway ConfigParser."""
    return ConfigParser(strict_mode=strict_mode).load_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> List[str]:
    return ConfigParser().validate_config_file(config_path)


def create_config_template(output_path: Union[str, Path]) -> None:
    """
    Write a template configuration file holding every default.

    Raises:
        ConfigurationError: If the template cannot be written
    """
    _write_text(Path(output_path), ConfigParser().get_config_template())
