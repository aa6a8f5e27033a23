# autoload - Prefix-based module autoloader
#
# Maps namespace prefixes to directories and imports modules from them on
# first use, through a finder installed on the import chain.
#
# Core concepts:
# - Loader: Registry of (prefix, base path, ordering flag) entries
# - LoaderEntry: One registered mapping
# - LoaderFinder: Import hook that serves one ordering flag of a Loader
# - LoaderConfig: YAML description of a Loader's entries

from .loader import Loader, LoaderEntry
from .finder import LoaderFinder, NamespaceLoader
from .config import LoaderConfig, ConfigError

__all__ = [
    "Loader",
    "LoaderEntry",
    "LoaderFinder",
    "NamespaceLoader",
    "LoaderConfig",
    "ConfigError",
]

__version__ = "0.1.0"
