# autoload/config.py
"""
YAML configuration for loaders.

A config document lists prefixes and the directories they map to:

    separator: "."
    extension: ".py"
    loaders:
      - prefix: "theme."
        path: src/theme
      - prefix: "vendor."
        paths: [lib/vendor, extra/vendor]
        prepend: true

Relative paths are resolved against the directory holding the config
file (or the base_dir passed to from_yaml).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .loader import Loader, LoaderEntry

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a loader config document is malformed."""


@dataclass
class LoaderConfig:
    """Parsed loader configuration."""
    entries: List[LoaderEntry] = field(default_factory=list)
    separator: str = "."
    extension: str = ".py"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "LoaderConfig":
        """Build a config from an already-parsed mapping."""
        if not isinstance(data, dict):
            raise ConfigError(f"Loader config must be a mapping, got {type(data).__name__}")

        separator = data.get("separator", ".")
        extension = data.get("extension", ".py")
        if not isinstance(separator, str) or not isinstance(extension, str):
            raise ConfigError("'separator' and 'extension' must be strings")

        loaders = data.get("loaders", [])
        if not isinstance(loaders, list):
            raise ConfigError("'loaders' must be a list")

        entries = []
        for i, item in enumerate(loaders):
            if not isinstance(item, dict):
                raise ConfigError(f"Loader #{i} must be a mapping")

            prefix = item.get("prefix")
            if not isinstance(prefix, str):
                raise ConfigError(f"Loader #{i} is missing a 'prefix' string")

            # Accept both 'path' and 'paths'
            paths = item.get("paths", item.get("path"))
            if isinstance(paths, str):
                paths = [paths]
            if not paths or not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
                raise ConfigError(f"Loader '{prefix}' needs a 'path' or a list of 'paths'")

            prepend = item.get("prepend", False)
            if not isinstance(prepend, bool):
                raise ConfigError(f"Loader '{prefix}' has a non-boolean 'prepend'")

            for path in paths:
                resolved = Path(path)
                if base_dir is not None and not resolved.is_absolute():
                    resolved = Path(base_dir) / resolved
                entries.append(LoaderEntry(prefix, str(resolved), prepend))

        return cls(entries=entries, separator=separator, extension=extension)

    @classmethod
    def from_yaml(cls, yaml_content: str, base_dir: Optional[Path] = None) -> "LoaderConfig":
        """Parse config from YAML string."""
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid loader config: {e}") from e
        return cls.from_dict(data if data is not None else {}, base_dir=base_dir)

    @classmethod
    def from_file(cls, path: Path | str) -> "LoaderConfig":
        """Load config from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Loader config not found: {path}")
        with open(path, "r") as f:
            config = cls.from_yaml(f.read(), base_dir=path.parent.resolve())
        logger.debug(f"Loaded {len(config.entries)} loader entries from {path}")
        return config

    def apply(self, loader: Loader) -> Loader:
        """Add this config's entries to an existing loader."""
        for entry in self.entries:
            loader.add(entry.prefix, entry.base_path, entry.prepend)
        return loader

    def build(self, meta_path: Optional[list] = None) -> Loader:
        """Create a new loader populated with this config's entries."""
        loader = Loader(
            separator=self.separator,
            extension=self.extension,
            meta_path=meta_path,
        )
        return self.apply(loader)
