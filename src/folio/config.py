"""Configuration loading from environment variables and folio.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_CONFIG_FILENAME = "folio.toml"

DEFAULT_MORE_MARKER = "<!-- more -->"
DEFAULT_EXTENSIONS = ["fenced_code", "tables"]


@dataclass
class ContentConfig:
    """Where articles live and how they are split."""

    dir: Path = Path("articles")
    more_marker: str = DEFAULT_MORE_MARKER
    default_author: str = ""


@dataclass
class BuildConfig:
    """Rendered export settings."""

    output_dir: Path = Path("_site")
    include_drafts: bool = False
    markdown_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))


@dataclass
class FolioConfig:
    """Top-level Folio configuration."""

    content: ContentConfig = field(default_factory=ContentConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    log_level: str = "INFO"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(config_path: Path | None = None) -> FolioConfig:
    """Load configuration from environment variables and optional folio.toml.

    Priority: environment variables > folio.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    else:
        candidate = Path.cwd() / _CONFIG_FILENAME
        if candidate.exists():
            file_data = tomllib.loads(candidate.read_text(encoding="utf-8"))

    content_data = file_data.get("content", {})
    build_data = file_data.get("build", {})

    config = FolioConfig(
        content=ContentConfig(
            dir=Path(os.getenv("FOLIO_CONTENT_DIR", content_data.get("dir", "articles"))),
            more_marker=os.getenv(
                "FOLIO_MORE_MARKER", content_data.get("more_marker", DEFAULT_MORE_MARKER)
            ),
            default_author=os.getenv("FOLIO_AUTHOR", content_data.get("default_author", "")),
        ),
        build=BuildConfig(
            output_dir=Path(os.getenv("FOLIO_OUTPUT_DIR", build_data.get("output_dir", "_site"))),
            include_drafts=_env_bool(
                "FOLIO_INCLUDE_DRAFTS", bool(build_data.get("include_drafts", False))
            ),
            markdown_extensions=list(
                build_data.get("markdown_extensions", DEFAULT_EXTENSIONS)
            ),
        ),
        log_level=os.getenv("FOLIO_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
