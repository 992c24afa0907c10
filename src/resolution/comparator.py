"""Ordering of competing providers for one requirement.

Candidates are sorted ascending, so the first one is tried first:

1. version: for a package import, the version of the bundle's export of
   that package; for a required bundle, the bundle version. Newer first;
   a candidate without version information sorts after one with it.
2. import count: fewer declared package imports first.

Python's sort is stable, so candidates that tie on both keys keep the order
in which repositories returned them.
"""

from functools import cmp_to_key
from typing import Callable, List, Optional

import semantic_version

from model.elements import Bundle, RequirementKind
from model.version import compare_versions


def _provider_version(requirement, bundle: Bundle) -> Optional[semantic_version.Version]:
    if requirement.kind is RequirementKind.PACKAGE_IMPORT:
        export = bundle.find_export(requirement.package_name)
        return export.version if export is not None else None
    if requirement.kind is RequirementKind.REQUIRED_BUNDLE:
        return bundle.version
    return None


def compare_imports(b1: Bundle, b2: Bundle) -> int:
    c1 = len(b1.imports)
    c2 = len(b2.imports)
    return (c1 > c2) - (c1 < c2)


def bundle_order(requirement) -> Callable[[Bundle, Bundle], int]:
    """Return a cmp function ranking providers of ``requirement``."""

    def compare(b1: Bundle, b2: Bundle) -> int:
        c = compare_versions(
            _provider_version(requirement, b1),
            _provider_version(requirement, b2),
        )
        if c == 0:
            c = compare_imports(b1, b2)
        return c

    return compare


def sort_providers(requirement, providers: List[Bundle]) -> List[Bundle]:
    """Return ``providers`` in the order they should be tried."""
    return sorted(providers, key=cmp_to_key(bundle_order(requirement)))
