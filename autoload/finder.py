# autoload/finder.py
"""
Import hook that serves modules from a Loader.

A LoaderFinder sits on the import chain (sys.meta_path) and answers
find_spec() for names the loader can resolve. It holds a reference to
the loader and its ordering flag, and reads the loader's live state on
every call, so entries removed after register() are no longer served.
"""

import importlib.abc
import importlib.machinery
import importlib.util
import logging
import os

logger = logging.getLogger(__name__)


class NamespaceLoader(importlib.abc.Loader):
    """Loader for package directories without an __init__ file."""

    def create_module(self, spec):
        return None

    def exec_module(self, module):
        pass


class LoaderFinder(importlib.abc.MetaPathFinder):
    """
    Meta path finder bound to one Loader and one ordering flag.

    Returns None for every name it cannot resolve so the import system
    moves on to the next finder and raises its own ModuleNotFoundError
    once the chain is exhausted.
    """

    def __init__(self, loader, prepend: bool):
        self.loader = loader
        self.prepend = prepend

    def find_spec(self, fullname, path=None, target=None):
        if self.loader.count(self.prepend) <= 0:
            return None

        source = self.loader.resolve(fullname, self.prepend)
        if source is not None:
            logger.debug(f"Resolved {fullname} -> {source}")
            return importlib.util.spec_from_file_location(
                fullname,
                str(source),
                loader=importlib.machinery.SourceFileLoader(fullname, str(source)),
            )

        locations = self.loader.resolve_package(fullname, self.prepend)
        if locations is None:
            return None

        # Parent namespaces never shadow a real package of the same name
        if not locations and self._found_elsewhere(fullname, path):
            return None

        if locations:
            init_file = os.path.join(locations[0], "__init__" + self.loader.extension)
            if os.path.isfile(init_file):
                logger.debug(f"Resolved package {fullname} -> {init_file}")
                return importlib.util.spec_from_file_location(
                    fullname,
                    init_file,
                    loader=importlib.machinery.SourceFileLoader(fullname, init_file),
                    submodule_search_locations=locations,
                )

        logger.debug(f"Resolved namespace {fullname} -> {locations}")
        spec = importlib.machinery.ModuleSpec(fullname, NamespaceLoader(), is_package=True)
        spec.submodule_search_locations = locations
        return spec

    @staticmethod
    def _found_elsewhere(fullname, path) -> bool:
        """Check whether the standard finders can supply fullname."""
        for finder in (
            importlib.machinery.BuiltinImporter,
            importlib.machinery.FrozenImporter,
            importlib.machinery.PathFinder,
        ):
            if finder.find_spec(fullname, path) is not None:
                return True
        return False

    def __repr__(self) -> str:
        order = "prepend" if self.prepend else "append"
        return f"LoaderFinder({self.loader.prefixes()!r}, {order})"
