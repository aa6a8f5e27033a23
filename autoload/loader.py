# autoload/loader.py
"""
Prefix-based module loader registry.

A Loader maps namespace prefixes to one or more base directories. When a
module whose name starts with a registered prefix is imported, the rest of
the name is turned into a relative file path and looked up under each base
directory in turn:

    loader = Loader()
    loader.add("theme.", "/srv/theme/src")
    loader.register()

    import theme.widgets.menu    # /srv/theme/src/widgets/menu.py

Each entry carries an ordering flag. Entries with prepend=True are served
by a finder placed at the front of the import chain, entries with
prepend=False by one appended at the back.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .finder import LoaderFinder

logger = logging.getLogger(__name__)


@dataclass
class LoaderEntry:
    """
    One registered mapping.

    Attributes:
        prefix: Literal leading part of a module name (not a pattern)
        base_path: Directory that mirrors the namespace below the prefix
        prepend: Whether the entry is served from the front of the chain
    """
    prefix: str
    base_path: str
    prepend: bool = False


class Loader:
    """
    Registry of (prefix, base path, ordering flag) entries.

    Prefixes are tried in the order they were first added, and paths under
    a prefix likewise. The first existing file wins; there is no preference
    for a longer, more specific prefix.
    """

    def __init__(
        self,
        separator: str = ".",
        extension: str = ".py",
        meta_path: Optional[list] = None,
    ):
        """
        Initialize the registry.

        Args:
            separator: Namespace separator used in module names
            extension: Source file suffix appended to resolved paths
            meta_path: Handler chain to install finders into
                (defaults to sys.meta_path at register() time)
        """
        self.separator = separator
        self.extension = extension
        self.meta_path = meta_path
        self._loaders: Dict[str, Dict[str, LoaderEntry]] = {}
        self._prepends: Dict[bool, int] = {True: 0, False: 0}
        self._finders: List[Tuple[list, LoaderFinder]] = []

    def add(self, prefix: str, base_path: os.PathLike | str, prepend: bool = False):
        """
        Add a prefix and the directory to look for its modules in.

        Re-adding an existing (prefix, base_path) pair only updates its
        ordering flag.
        """
        base_path = os.fspath(base_path)
        prepend = bool(prepend)

        paths = self._loaders.setdefault(prefix, {})
        entry = paths.get(base_path)
        if entry is None:
            paths[base_path] = LoaderEntry(prefix, base_path, prepend)
        else:
            self._prepends[entry.prepend] -= 1
            entry.prepend = prepend
        self._prepends[prepend] += 1

    def remove(self, prefix: str, base_path: os.PathLike | str | None = ""):
        """
        Remove a single (prefix, base_path) entry, or every entry under
        prefix when no path is given.

        Only "" and None mean "no path". Any path object names a directory,
        so Path("") refers to the "." entry.
        """
        base_path = self._path_key(base_path)

        if base_path is not None:
            if self.has(prefix, base_path):
                entry = self._loaders[prefix].pop(base_path)
                self._prepends[entry.prepend] -= 1
                if not self._loaders[prefix]:
                    del self._loaders[prefix]
            return

        if self.has(prefix):
            for entry in self._loaders.pop(prefix).values():
                self._prepends[entry.prepend] -= 1

    def has(self, prefix: str, base_path: os.PathLike | str | None = "") -> bool:
        """Check whether a prefix, or a prefix + path pair, is registered."""
        base_path = self._path_key(base_path)
        if base_path is not None:
            return base_path in self._loaders.get(prefix, {})
        return prefix in self._loaders

    @staticmethod
    def _path_key(base_path) -> Optional[str]:
        """Key a base path is stored under, or None when no path was given."""
        if base_path is None or base_path == "":
            return None
        return os.fspath(base_path)

    def register(self) -> List[LoaderFinder]:
        """
        Install finders into the import chain.

        One finder is installed per ordering flag that has at least one
        entry. Calling this twice installs the finders twice.

        Returns:
            The finders that were installed
        """
        meta_path = self.meta_path if self.meta_path is not None else sys.meta_path
        installed = []

        for prepend in (True, False):
            if self._prepends[prepend] <= 0:
                continue

            finder = LoaderFinder(self, prepend)
            try:
                if prepend:
                    meta_path.insert(0, finder)
                else:
                    meta_path.append(finder)
            except (AttributeError, TypeError) as e:
                logger.warning(f"Could not register {finder!r}: {e}")
                continue

            self._finders.append((meta_path, finder))
            installed.append(finder)
            logger.debug(f"Registered {finder!r}")

        return installed

    def unregister(self) -> int:
        """
        Remove every finder this loader installed.

        Returns:
            Number of finders removed
        """
        removed = 0
        for meta_path, finder in self._finders:
            if finder in meta_path:
                meta_path.remove(finder)
                removed += 1
        self._finders.clear()
        return removed

    def count(self, prepend: bool) -> int:
        """Number of entries currently registered with the given flag."""
        return self._prepends[bool(prepend)]

    def resolve(self, name: str, prepend: bool) -> Optional[Path]:
        """
        Find the source file for a module name.

        Only entries whose flag equals prepend take part. Returns the first
        candidate that exists, or None on a miss.
        """
        for prefix, paths in self._loaders.items():
            if not name.startswith(prefix):
                continue

            relative = self._relative_path(name[len(prefix):])
            if not relative:
                continue
            relative += self.extension

            for base in self._base_dirs(paths, prepend):
                candidate = base / relative
                if candidate.is_file():
                    return candidate

        return None

    def resolve_package(self, name: str, prepend: bool) -> Optional[List[str]]:
        """
        Find the search locations for a package name.

        A package is a directory mirroring the name below a prefix, or the
        base directory itself when the name is the prefix without its
        trailing separator. Names that are parents of a registered prefix
        (e.g. "vendor" for "vendor.theme.") get an empty search path so
        their children can still be imported. The finder only uses that
        empty path when no real package of the same name exists.

        Returns:
            [directory], [] for a parent namespace, or None on a miss
        """
        for prefix, paths in self._loaders.items():
            if name.startswith(prefix):
                relative = self._relative_path(name[len(prefix):])
                if relative is None:
                    continue
            elif prefix.rstrip(self.separator) == name:
                relative = ""
            else:
                continue

            for base in self._base_dirs(paths, prepend):
                directory = base / relative if relative else base
                if directory.is_dir():
                    return [str(directory)]

        parent = name + self.separator
        for prefix, paths in self._loaders.items():
            if prefix.startswith(parent) and any(
                entry.prepend == prepend for entry in paths.values()
            ):
                return []

        return None

    def _relative_path(self, remainder: str) -> Optional[str]:
        """
        Turn the part of a name after its prefix into a relative path.

        Returns None when the path would leave the base directory.
        """
        if self.separator:
            remainder = remainder.lstrip(self.separator)
            remainder = remainder.replace(self.separator, os.sep)
        relative = Path(remainder)
        if relative.is_absolute() or os.pardir in relative.parts:
            return None
        return remainder

    def _base_dirs(self, paths: Dict[str, LoaderEntry], prepend: bool) -> Iterator[Path]:
        for base_path, entry in paths.items():
            if entry.prepend != prepend:
                continue
            yield Path(base_path).resolve()

    @property
    def finders(self) -> List[LoaderFinder]:
        """Finders installed by register(), in install order."""
        return [finder for _, finder in self._finders]

    def prefixes(self) -> List[str]:
        """List registered prefixes in resolution order."""
        return list(self._loaders)

    def entries(self) -> List[LoaderEntry]:
        """List all entries in resolution order."""
        return [entry for paths in self._loaders.values() for entry in paths.values()]

    def __contains__(self, prefix: str) -> bool:
        return self.has(prefix)

    def __len__(self) -> int:
        return sum(len(paths) for paths in self._loaders.values())

    def __iter__(self):
        return iter(self.entries())
