"""Model elements consumed by the resolver.

Requirements form a closed set of kinds tagged by RequirementKind. Compound
elements (projects, bundles) expose an ordered sequence of children which
are either requirements or further compounds. All elements compare by
identity: the same import text declared in two bundles is two requirements.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, List, Optional, Sequence, Union

import semantic_version

from .version import ANY_VERSION, VersionLike, VersionRange, parse_version

logger = logging.getLogger(__name__)


class RequirementKind(Enum):
    """Kinds of requirement a bundle can declare."""
    PACKAGE_IMPORT = "package-import"
    REQUIRED_BUNDLE = "required-bundle"
    LIBRARY_IMPORT = "library-import"


def _as_range(value: Union[str, VersionRange, None]) -> VersionRange:
    if isinstance(value, VersionRange):
        return value
    return VersionRange.parse(value)


@dataclass(frozen=True, eq=False)
class Requirement:
    """Base of all requirement kinds."""
    kind: ClassVar[Optional[RequirementKind]] = None

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, eq=False)
class PackageImport(Requirement):
    """Import of a package exported by some bundle."""
    kind: ClassVar[RequirementKind] = RequirementKind.PACKAGE_IMPORT

    package_name: str
    version_range: VersionRange = ANY_VERSION
    optional: bool = False

    def __post_init__(self):
        object.__setattr__(self, "version_range", _as_range(self.version_range))

    @property
    def name(self) -> str:
        return self.package_name


@dataclass(frozen=True, eq=False)
class RequiredBundle(Requirement):
    """Requirement on a whole bundle by symbolic name."""
    kind: ClassVar[RequirementKind] = RequirementKind.REQUIRED_BUNDLE

    bundle_name: str
    version_range: VersionRange = ANY_VERSION
    optional: bool = False

    def __post_init__(self):
        object.__setattr__(self, "version_range", _as_range(self.version_range))

    @property
    def name(self) -> str:
        return self.bundle_name


@dataclass(frozen=True, eq=False)
class LibraryImport(Requirement):
    """Reference to a named library; its optionality comes from the library."""
    kind: ClassVar[RequirementKind] = RequirementKind.LIBRARY_IMPORT

    library_name: str
    version_range: VersionRange = ANY_VERSION

    def __post_init__(self):
        object.__setattr__(self, "version_range", _as_range(self.version_range))

    @property
    def name(self) -> str:
        return self.library_name


@dataclass(frozen=True)
class PackageExport:
    """A package offered by a bundle, at its own version."""
    package_name: str
    version: Optional[semantic_version.Version] = None

    def __post_init__(self):
        object.__setattr__(self, "version", parse_version(self.version))


@dataclass(frozen=True, eq=False)
class Library:
    """A named, versioned group of package imports."""
    name: str
    version: Optional[semantic_version.Version] = None
    imports: Sequence[PackageImport] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "version", parse_version(self.version))
        object.__setattr__(self, "imports", tuple(self.imports))


class CompoundElement:
    """An element holding an ordered sequence of child elements."""

    def __init__(self, name: str, children: Iterable[object] = ()):
        self.name = name
        self._children: List[object] = list(children)

    def children(self) -> List[object]:
        """Return the children in declaration order."""
        return list(self._children)

    def add_child(self, child: object) -> None:
        self._children.append(child)

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class Project(CompoundElement):
    """Root of a resolution: a set of bundles and loose requirements."""


class Bundle(CompoundElement):
    """A candidate provider: a versioned bundle with exports and requirements.

    The bundle's children are its package imports, then its required bundles,
    then its library imports. ``synchronized`` reports local availability;
    ``synchronize`` materializes the bundle and raises OSError on failure.
    ``indexed`` is False for bundles a repository knows of but has not yet
    listed in its index.
    """

    def __init__(
        self,
        symbolic_name: str,
        version: VersionLike = None,
        exports: Iterable[PackageExport] = (),
        imports: Iterable[PackageImport] = (),
        requires: Iterable[RequiredBundle] = (),
        libraries: Iterable[LibraryImport] = (),
        synchronized: bool = True,
        sync_error: Optional[str] = None,
        indexed: bool = True,
    ):
        self.imports = tuple(imports)
        self.requires = tuple(requires)
        self.libraries = tuple(libraries)
        super().__init__(symbolic_name, self.imports + self.requires + self.libraries)
        self.version = parse_version(version)
        self.exports = tuple(exports)
        self.synchronized = synchronized
        self.sync_error = sync_error
        self.indexed = indexed

    @property
    def symbolic_name(self) -> str:
        return self.name

    def find_export(self, package_name: str) -> Optional[PackageExport]:
        """Return the export named ``package_name`` if this bundle has one."""
        for export in self.exports:
            if export.package_name == package_name:
                return export
        return None

    def synchronize(self, progress) -> None:
        """Make the bundle locally available.

        Args:
            progress: ProgressMonitor receiving one unit of work.

        Raises:
            OSError: if the bundle could not be materialized.
        """
        progress.begin(1)
        try:
            if self.sync_error:
                raise OSError(self.sync_error)
            self.synchronized = True
            logger.debug("Synchronized %s", describe(self))
        finally:
            progress.done()

    def __repr__(self):
        version = str(self.version) if self.version is not None else None
        return f"Bundle({self.name!r}, {version!r})"


def is_requirement(element: object) -> bool:
    """Return True if ``element`` is one of the requirement kinds."""
    return isinstance(element, Requirement)


def describe(element: object) -> str:
    """Short human readable label for an element."""
    if isinstance(element, Requirement):
        kind = element.kind.value if element.kind else type(element).__name__
        range_ = getattr(element, "version_range", None)
        suffix = f" {range_}" if range_ is not None and not range_.is_unbounded else ""
        return f"{kind} {element.name}{suffix}"
    if isinstance(element, Bundle):
        if element.version is not None:
            return f"{element.symbolic_name} {element.version}"
        return element.symbolic_name
    if isinstance(element, CompoundElement):
        return element.name
    return repr(element)
