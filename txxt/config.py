"""txxt configuration management.

Loads configuration from .txxt/config.toml if present, with sensible defaults.
Configuration hierarchy (highest priority first):
1. Command-line flags
2. Repo-level config (.txxt/config.toml)
3. Defaults
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from txxt.engine.formatter import METADATA_KEY_WIDTH

DEFAULT_EXTENSIONS = (".txxt", ".rfc")
CONFIG_PATH = Path(".txxt") / "config.toml"


@dataclass
class FilesConfig:
    """Which files are treated as txxt documents."""

    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

    def __post_init__(self) -> None:
        # Accept "txxt" as well as ".txxt"
        self.extensions = [ext if ext.startswith(".") else f".{ext}" for ext in self.extensions]

    def is_supported(self, path: str | Path) -> bool:
        """Return True if the file has a txxt extension."""
        return Path(path).suffix.lower() in {ext.lower() for ext in self.extensions}


@dataclass
class FormatConfig:
    """Formatting behavior configuration."""

    metadata_key_width: int = METADATA_KEY_WIDTH


@dataclass
class TxxtConfig:
    """txxt configuration."""

    files: FilesConfig = field(default_factory=FilesConfig)
    format: FormatConfig = field(default_factory=FormatConfig)


def load_config(workspace: Path) -> TxxtConfig:
    """Load configuration from .txxt/config.toml if it exists.

    Args:
        workspace: Path to the workspace/repository root.

    Returns:
        TxxtConfig with values from config file or defaults.
    """
    config_path = workspace / CONFIG_PATH

    if not config_path.exists():
        return TxxtConfig()

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    files_data = data.get("files", {})
    format_data = data.get("format", {})

    files = FilesConfig(
        extensions=list(files_data.get("extensions", DEFAULT_EXTENSIONS)),
    )

    format_config = FormatConfig(
        metadata_key_width=int(format_data.get("metadata_key_width", METADATA_KEY_WIDTH)),
    )

    return TxxtConfig(files=files, format=format_config)
