"""Repository holding its bundles in memory."""
from __future__ import annotations

import logging
import threading
from typing import Iterable, List

from model.elements import Bundle, Library, RequirementKind
from resolution.config import LookupOptions

from .base import BundleRepository

logger = logging.getLogger(__name__)


class InMemoryBundleRepository(BundleRepository):
    """Repository over an explicit list of bundles.

    Candidates are returned in the order bundles were added. With
    LookupOptions.LOCAL_ONLY only synchronized bundles are offered, and with
    LookupOptions.INDEXED_ONLY only indexed ones.
    """

    def __init__(self, name: str, bundles: Iterable[Bundle] = ()):
        super().__init__(name)
        self._lock = threading.Lock()
        self._bundles: List[Bundle] = list(bundles)

    def add_bundle(self, bundle: Bundle) -> None:
        with self._lock:
            self._bundles = self._bundles + [bundle]

    def remove_bundle(self, bundle: Bundle) -> bool:
        with self._lock:
            if bundle not in self._bundles:
                return False
            self._bundles = [b for b in self._bundles if b is not bundle]
            return True

    @property
    def bundles(self) -> List[Bundle]:
        return list(self._bundles)

    def _visible(self, options) -> List[Bundle]:
        # the list is replaced, never mutated, so iterating a snapshot is safe
        bundles = list(self._bundles)
        options = LookupOptions(options or 0)
        if options & LookupOptions.LOCAL_ONLY:
            bundles = [b for b in bundles if b.synchronized]
        if options & LookupOptions.INDEXED_ONLY:
            bundles = [b for b in bundles if b.indexed]
        return bundles

    def find_all_providers(self, requirement, options=LookupOptions.NONE) -> List[Bundle]:
        kind = requirement.kind
        if kind is RequirementKind.PACKAGE_IMPORT:
            return [b for b in self._visible(options) if _exports(b, requirement)]
        if kind is RequirementKind.REQUIRED_BUNDLE:
            return [
                b for b in self._visible(options)
                if b.symbolic_name == requirement.bundle_name
                and requirement.version_range.contains(b.version)
            ]
        raise ValueError(f"{self.name} cannot search providers for {requirement!r}")

    def find_library_providers(self, library: Library, options=LookupOptions.NONE) -> List[Bundle]:
        wanted = [imp for imp in library.imports if not imp.optional] or list(library.imports)
        if not wanted:
            return []
        return [
            b for b in self._visible(options)
            if all(_exports(b, imp) for imp in wanted)
        ]


def _exports(bundle: Bundle, package_import) -> bool:
    export = bundle.find_export(package_import.package_name)
    return export is not None and package_import.version_range.contains(export.version)
