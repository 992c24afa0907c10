"""Bundle version parsing and OSGi-style version ranges."""

from dataclasses import dataclass
from typing import Optional, Union

import semantic_version

VersionLike = Union[str, semantic_version.Version, None]


def parse_version(value: VersionLike) -> Optional[semantic_version.Version]:
    """Coerce a loose bundle version into a semantic_version.Version.

    Accepts OSGi style strings such as "2", "2.0" or "1.0.0.v2008" (the
    qualifier becomes build metadata). None or blank means the element
    carries no version information and is returned as None.

    semantic_version ignores build metadata, so range checks treat
    "1.0.0.v1" and "1.0.0.v2" alike; compare_versions orders the qualifiers.
    """
    if value is None:
        return None
    if isinstance(value, semantic_version.Version):
        return value
    text = str(value).strip()
    if not text:
        return None
    return semantic_version.Version.coerce(text)


def compare_versions(v1: Optional[semantic_version.Version],
                     v2: Optional[semantic_version.Version]) -> int:
    """Order two versions newest first; a missing version sorts last.

    Equal versions are ordered by qualifier, compared as plain strings the
    way OSGi does; a version without a qualifier is older than the same
    version with one.
    """
    if v1 is None:
        return 0 if v2 is None else 1
    if v2 is None:
        return -1
    result = (v2 > v1) - (v2 < v1)
    if result:
        return result
    q1, q2 = ".".join(v1.build or ()), ".".join(v2.build or ())
    return (q2 > q1) - (q2 < q1)


@dataclass(frozen=True)
class VersionRange:
    """Interval of versions using OSGi notation.

    "[1.0,2.0)" includes 1.0 and excludes 2.0, "(1.0,]" has no ceiling, and a
    bare "1.0" means "1.0 or later".
    """
    floor: Optional[semantic_version.Version] = None
    floor_inclusive: bool = True
    ceiling: Optional[semantic_version.Version] = None
    ceiling_inclusive: bool = False

    @classmethod
    def parse(cls, text: Optional[str]) -> "VersionRange":
        """Parse range text; None, blank and "*" give the unbounded range."""
        if text is None:
            return ANY_VERSION
        raw = str(text).strip()
        if not raw or raw == "*":
            return ANY_VERSION

        if raw[0] not in "[(":
            if any(char in raw for char in "[](),"):
                raise ValueError(f"Invalid version range '{raw}'")
            return cls(floor=parse_version(raw), floor_inclusive=True)

        if raw[-1] not in "])" or "," not in raw:
            raise ValueError(f"Invalid version range '{raw}'")

        lower_str, upper_str = (part.strip() for part in raw[1:-1].split(",", 1))
        if not lower_str:
            raise ValueError(f"Version range '{raw}' has no floor")
        floor = parse_version(lower_str)
        ceiling = parse_version(upper_str) if upper_str else None
        if ceiling is not None and ceiling < floor:
            raise ValueError(f"Version range '{raw}' is empty")
        return cls(
            floor=floor,
            floor_inclusive=raw[0] == "[",
            ceiling=ceiling,
            ceiling_inclusive=raw[-1] == "]",
        )

    @property
    def is_unbounded(self) -> bool:
        return self.floor is None and self.ceiling is None

    def contains(self, version: VersionLike) -> bool:
        """Return True if ``version`` falls inside this range."""
        if self.is_unbounded:
            return True
        parsed = parse_version(version)
        if parsed is None:
            return False

        if self.floor is not None:
            if self.floor_inclusive and parsed < self.floor:
                return False
            if not self.floor_inclusive and parsed <= self.floor:
                return False

        if self.ceiling is not None:
            if self.ceiling_inclusive and parsed > self.ceiling:
                return False
            if not self.ceiling_inclusive and parsed >= self.ceiling:
                return False

        return True

    def __contains__(self, version: VersionLike) -> bool:
        return self.contains(version)

    def __str__(self) -> str:
        if self.is_unbounded:
            return "*"
        if self.ceiling is None and self.floor_inclusive:
            return str(self.floor)
        return "{}{},{}{}".format(
            "[" if self.floor_inclusive else "(",
            self.floor,
            self.ceiling if self.ceiling is not None else "",
            "]" if self.ceiling_inclusive else ")",
        )


ANY_VERSION = VersionRange()
