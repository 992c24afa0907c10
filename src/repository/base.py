"""Abstract repository of candidate provider bundles."""

from abc import ABC, abstractmethod
from typing import Iterable

from model.elements import Bundle, Library


class BundleRepository(ABC):
    """A source of candidate bundles.

    Implementations must tolerate concurrent calls to the find methods.
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def find_all_providers(self, requirement, options) -> Iterable[Bundle]:
        """Return every bundle able to satisfy a package import or required bundle.

        Args:
            requirement: PackageImport or RequiredBundle
            options: LookupOptions flags from the resolution config
        """
        raise NotImplementedError

    @abstractmethod
    def find_library_providers(self, library: Library, options) -> Iterable[Bundle]:
        """Return every bundle exporting all mandatory packages of ``library``."""
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"
