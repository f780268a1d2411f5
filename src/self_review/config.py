"""YAML configuration loading and merging.

Two optional files are read, later ones winning:

- ``~/.config/self-review/config.yaml`` (user)
- ``.self-review.yaml`` in the working directory (project)

Keys are kebab-case in YAML. Lists replace, they are not merged.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path

import yaml

from self_review.models.diff import DiffFile

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = Path(".config") / "self-review" / "config.yaml"
PROJECT_CONFIG_NAME = ".self-review.yaml"
DEFAULT_OUTPUT_FILE = "review.xml"


class ConfigError(ValueError):
    """A configuration file is not a YAML mapping."""


@dataclass(frozen=True)
class CategoryDef:
    """A comment category offered to reviewers."""

    name: str
    description: str
    color: str


@dataclass(frozen=True)
class AppConfig:
    """Settings that affect loading and saving reviews."""

    output_file: str = DEFAULT_OUTPUT_FILE
    default_diff_args: str = ""
    ignore: tuple[str, ...] = ()
    categories: tuple[CategoryDef, ...] = ()
    show_untracked: bool = True

    @property
    def category_names(self) -> list[str]:
        return [c.name for c in self.categories]

    @property
    def diff_args(self) -> list[str]:
        """``default_diff_args`` split into argv form."""
        return self.default_diff_args.split()


def _parse_categories(raw: object) -> tuple[CategoryDef, ...]:
    categories = []
    for item in raw:
        if (
            isinstance(item, dict)
            and isinstance(item.get("name"), str)
            and isinstance(item.get("description"), str)
            and isinstance(item.get("color"), str)
        ):
            categories.append(
                CategoryDef(name=item["name"], description=item["description"], color=item["color"])
            )
        else:
            logger.warning("Ignoring invalid category entry: %r", item)
    return tuple(categories)


def config_overrides(data: dict) -> dict:
    """Map raw YAML keys to AppConfig field overrides, dropping bad values."""
    overrides: dict = {}

    output_file = data.get("output-file")
    if isinstance(output_file, str) and output_file.strip():
        overrides["output_file"] = output_file
    elif "output-file" in data:
        logger.warning("Invalid output-file value %r, using default", output_file)

    if "default-diff-args" in data:
        if isinstance(data["default-diff-args"], str):
            overrides["default_diff_args"] = data["default-diff-args"]
        else:
            logger.warning("Invalid default-diff-args value, using default")

    if isinstance(data.get("ignore"), list):
        overrides["ignore"] = tuple(p for p in data["ignore"] if isinstance(p, str))

    if isinstance(data.get("categories"), list):
        overrides["categories"] = _parse_categories(data["categories"])

    if "show-untracked" in data:
        if isinstance(data["show-untracked"], bool):
            overrides["show_untracked"] = data["show-untracked"]
        else:
            logger.warning("Invalid show-untracked value %r, using default", data["show-untracked"])

    return overrides


def load_config_file(path: Path) -> dict:
    """Read one YAML config file into AppConfig overrides.

    Raises:
        ConfigError: If the file does not hold a YAML mapping
    """
    with open(path, encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid YAML format in {path}: expected a mapping")
    return config_overrides(raw)


def load_config(cwd: Path | None = None, home: Path | None = None) -> AppConfig:
    """Load user then project configuration on top of the defaults.

    Unreadable or invalid files are skipped with a warning.
    """
    home = home if home is not None else Path.home()
    cwd = cwd if cwd is not None else Path.cwd()

    config = AppConfig()
    for path in (home / USER_CONFIG_PATH, cwd / PROJECT_CONFIG_NAME):
        if not path.exists():
            continue
        try:
            config = dataclasses.replace(config, **load_config_file(path))
        except (ConfigError, OSError) as e:
            logger.warning("Failed to load config from %s: %s", path, e)
    return config


def filter_ignored(files: list[DiffFile], patterns: tuple[str, ...] | list[str]) -> list[DiffFile]:
    """Drop files whose path matches any of the glob ``patterns``."""
    if not patterns:
        return list(files)
    return [f for f in files if not any(fnmatch(f.path, p) for p in patterns)]
