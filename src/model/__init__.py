"""Model elements and versions used as resolver input."""

from .elements import (
    Bundle,
    CompoundElement,
    Library,
    LibraryImport,
    PackageExport,
    PackageImport,
    Project,
    RequiredBundle,
    Requirement,
    RequirementKind,
    describe,
    is_requirement,
)
from .version import ANY_VERSION, VersionRange, compare_versions, parse_version

__all__ = [
    "ANY_VERSION",
    "Bundle",
    "CompoundElement",
    "Library",
    "LibraryImport",
    "PackageExport",
    "PackageImport",
    "Project",
    "RequiredBundle",
    "Requirement",
    "RequirementKind",
    "VersionRange",
    "compare_versions",
    "describe",
    "is_requirement",
    "parse_version",
]
