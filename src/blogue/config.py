"""Configuration management for blogue.

Settings come from, highest priority first:
  1. `.blogue.json` in the project root
  2. Environment variables with the `BLOGUE_` prefix
  3. Defaults below
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from blogue.utils import FilePath

CONFIG_FILE_NAME = ".blogue.json"


class BlogueConfig(BaseSettings):
    """Settings for post creation and frontmatter inference."""

    model_config = SettingsConfigDict(env_prefix="BLOGUE_", extra="ignore")

    content_dir: str = Field(
        default="src/content/blog",
        description="Directory new posts are written to, relative to the project root",
    )
    max_posts: int = Field(
        default=10, gt=0, description="Number of recent posts sampled for pattern learning"
    )
    markdown_extensions: list[str] = Field(
        default_factory=lambda: [".md"], description="Extensions treated as posts"
    )
    default_author: str = Field(default="", description="Author used when none is given")
    log_level: str = "INFO"
    required_threshold: float = Field(
        default=0.8, ge=0.0, le=1.0, description="Frequency at or above which a field is required"
    )
    optional_threshold: float = Field(
        default=0.2, ge=0.0, le=1.0, description="Frequency at or above which a field is optional"
    )


class ConfigManager:
    """Loads the configuration for one project."""

    def __init__(self, project_root: FilePath | None = None):
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.config_file = self.project_root / CONFIG_FILE_NAME

    def load(self) -> BlogueConfig:
        """Load settings, letting the project file override the environment."""
        return BlogueConfig(**self._read_file())

    def save(self, config: BlogueConfig) -> None:
        """Write settings to the project file."""
        self.config_file.write_text(config.model_dump_json(indent=2), encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        if not self.config_file.is_file():
            return {}
        try:
            data = json.loads(self.config_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring invalid {CONFIG_FILE_NAME}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {CONFIG_FILE_NAME}: expected a JSON object")
            return {}
        return data
