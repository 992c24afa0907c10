"""Options controlling a single resolve call."""

from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Dict, Optional

from constants import Constants


class LookupOptions(IntFlag):
    """Flags passed through to repositories when searching for providers."""
    NONE = 0
    LOCAL_ONLY = 1
    INDEXED_ONLY = 2


@dataclass
class ResolutionConfig:
    """Resolution behavior flags.

    Attributes:
        resolve_optional: also search providers for optional requirements
        resolve_dependents: recurse into the requirements of chosen providers
        ignore_errors: treat unsatisfied requirements as satisfied
        lookup_options: flags forwarded to every repository query
    """
    resolve_optional: bool = Constants.RESOLVE_OPTIONAL
    resolve_dependents: bool = Constants.RESOLVE_DEPENDENTS
    ignore_errors: bool = Constants.IGNORE_ERRORS
    lookup_options: LookupOptions = LookupOptions.NONE

    @property
    def local_only(self) -> bool:
        return bool(self.lookup_options & LookupOptions.LOCAL_ONLY)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ResolutionConfig":
        """Build a config from a mapping such as the ``resolution`` YAML section.

        Unknown keys are ignored; missing keys fall back to the defaults.
        """
        data = data or {}
        options = LookupOptions.NONE
        if bool(data.get("local_only", Constants.LOCAL_ONLY)):
            options |= LookupOptions.LOCAL_ONLY
        if bool(data.get("indexed_only", False)):
            options |= LookupOptions.INDEXED_ONLY
        return cls(
            resolve_optional=bool(data.get("resolve_optional", Constants.RESOLVE_OPTIONAL)),
            resolve_dependents=bool(data.get("resolve_dependents", Constants.RESOLVE_DEPENDENTS)),
            ignore_errors=bool(data.get("ignore_errors", Constants.IGNORE_ERRORS)),
            lookup_options=options,
        )
