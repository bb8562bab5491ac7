"""Site configuration for rendering the publication list."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TypedDict

import msgspec

from .exceptions import ConfigError
from .fetch import DEFAULT_TIMEOUT, is_url
from .render import DEFAULT_WINDOW

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pubpage.json"
STDOUT = "-"


class SiteSettings(TypedDict, total=False):
    """Structure of the optional ``pubpage.json`` settings file."""

    source: str
    output: str | None
    window: int | None
    title: str
    document: bool
    strict: bool
    empty_message: str | None
    timeout: float


@dataclass
class SiteConfig:
    """Where the bibliography comes from, where the list goes, and how it is filtered."""

    source: str | Path
    output: Path | None
    window: int | None = DEFAULT_WINDOW
    title: str = "Publications"
    document: bool = False
    strict: bool = False
    empty_message: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_workspace(cls, workspace: Path) -> "SiteConfig":
        """Create configuration from workspace root path.

        Args:
            workspace: Path to the homepage directory

        Returns:
            SiteConfig reading ``bibliography.bib`` and writing ``publications.html``
        """
        return cls(
            source=workspace / "bibliography.bib",
            output=workspace / "publications.html",
        )


def resolve_source(value: str, workspace: Path) -> str | Path:
    """Keep URLs verbatim; anchor relative file paths at the workspace."""
    if is_url(value):
        return value
    path = Path(value)
    return path if path.is_absolute() else workspace / path


def resolve_output(value: str | None, workspace: Path) -> Path | None:
    """Map ``None`` or ``-`` to stdout, otherwise anchor the path at the workspace."""
    if value is None or value == STDOUT:
        return None
    path = Path(value)
    return path if path.is_absolute() else workspace / path


def load_config(workspace: Path, config_path: Path | None = None) -> SiteConfig:
    """Build the site configuration, overlaying the settings file on the defaults.

    Args:
        workspace: Path to the homepage directory
        config_path: Explicit settings file; defaults to ``workspace/pubpage.json``
            which may be absent

    Returns:
        The merged configuration

    Raises:
        ConfigError: If the settings file is unreadable, not valid JSON, or has
            unknown keys or wrongly typed values
    """
    config = SiteConfig.from_workspace(workspace)
    path = config_path if config_path is not None else workspace / CONFIG_FILENAME

    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Settings file not found: {path}")
        logger.debug(f"No settings file at {path}, using defaults")
        return config

    logger.debug(f"Loading settings: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw_data = json.load(f)
        settings = msgspec.convert(raw_data, type=SiteSettings)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read settings from {path}: {e}") from e
    except msgspec.ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    unknown = sorted(set(raw_data) - set(SiteSettings.__annotations__))
    if unknown:
        raise ConfigError(f"Unknown settings in {path}: {', '.join(unknown)}")

    if "source" in settings:
        config.source = resolve_source(settings["source"], workspace)
    if "output" in settings:
        config.output = resolve_output(settings["output"], workspace)
    if "window" in settings:
        config.window = settings["window"]
    if "title" in settings:
        config.title = settings["title"]
    if "document" in settings:
        config.document = settings["document"]
    if "strict" in settings:
        config.strict = settings["strict"]
    if "empty_message" in settings:
        config.empty_message = settings["empty_message"]
    if "timeout" in settings:
        config.timeout = settings["timeout"]

    if config.window is not None and config.window < 0:
        raise ConfigError(f"Recency window must not be negative in {path}: {config.window}")

    logger.debug(f"Loaded {len(settings)} settings from {path}")
    return config
