#!/usr/bin/env python3

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

CONFIG_FILENAME = "hbind_config.json"

DEFAULT_PARSER_COMMAND = ["clang", "-Xclang", "-ast-dump=json", "-fsyntax-only"]


class HbindConfig(BaseModel):
    """Options recognized by the header-to-symbols pipeline."""

    use_cache: bool = True
    cache_directory: Path = Field(default_factory=lambda: Path(".hbind") / "cache")

    # The header path is appended as the final argument
    parser_command: list[str] = Field(default_factory=lambda: list(DEFAULT_PARSER_COMMAND))

    @classmethod
    def load_from_file(cls, config_path: Path) -> "HbindConfig":
        """Load configuration from a JSON file.

        A relative cache_directory is taken relative to the file's directory.
        """
        args = json.loads(Path(config_path).read_text())
        config = cls.model_validate(args)
        if not config.cache_directory.is_absolute():
            config.cache_directory = Path(config_path).parent / config.cache_directory
        return config

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        data = self.model_dump(mode="json")
        Path(config_path).write_text(json.dumps(data, indent=2))

    @classmethod
    def find_config(cls, start_path: Path) -> Optional["HbindConfig"]:
        """Find configuration by searching up the directory tree."""
        current = Path(start_path).resolve()
        while current != current.parent:
            config_file = current / CONFIG_FILENAME
            if config_file.exists():
                return cls.load_from_file(config_file)
            current = current.parent
        return None
