"""Repository manager: prioritized repositories plus the library catalogue."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from constants import Constants
from model.elements import Library, describe

from .base import BundleRepository

logger = logging.getLogger(__name__)


class ChangeKind(Enum):
    """What changed in a repository manager."""
    REPOSITORY_ADDED = "repository_added"
    REPOSITORY_REMOVED = "repository_removed"
    LIBRARY_ADDED = "library_added"


@dataclass
class RepositoryChangeEvent:
    """Notification passed to change listeners."""
    kind: ChangeKind
    repository: Optional[BundleRepository] = None
    library: Optional[Library] = None


ChangeListener = Callable[[RepositoryChangeEvent], None]


class RepositoryManager:
    """Groups repositories into priority levels; lower levels are searched first."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._levels: Dict[int, List[BundleRepository]] = {}
        self._libraries: List[Library] = []
        self._listeners: List[ChangeListener] = []

    def add_repository(self, repository: BundleRepository, level: int = Constants.DEFAULT_PRIORITY) -> None:
        with self._lock:
            self._levels.setdefault(int(level), []).append(repository)
        logger.debug("Added repository %s at priority %s", repository.name, level)
        self._fire(RepositoryChangeEvent(ChangeKind.REPOSITORY_ADDED, repository=repository))

    def remove_repository(self, repository: BundleRepository) -> bool:
        with self._lock:
            for level, repositories in list(self._levels.items()):
                if repository in repositories:
                    repositories.remove(repository)
                    if not repositories:
                        del self._levels[level]
                    break
            else:
                return False
        self._fire(RepositoryChangeEvent(ChangeKind.REPOSITORY_REMOVED, repository=repository))
        return True

    def priority_levels(self) -> List[int]:
        """Levels holding at least one repository, highest priority first."""
        with self._lock:
            return sorted(self._levels)

    def repositories_at(self, level: int) -> List[BundleRepository]:
        with self._lock:
            return list(self._levels.get(level, ()))

    def repositories(self) -> List[BundleRepository]:
        """All repositories in search order."""
        return [repo for level in self.priority_levels() for repo in self.repositories_at(level)]

    def add_library(self, library: Library) -> None:
        with self._lock:
            self._libraries.append(library)
        self._fire(RepositoryChangeEvent(ChangeKind.LIBRARY_ADDED, library=library))

    def resolve_library(self, library_import) -> Optional[Library]:
        """Return the newest known library matching ``library_import``, or None."""
        with self._lock:
            matches = [
                lib for lib in self._libraries
                if lib.name == library_import.library_name
                and library_import.version_range.contains(lib.version)
            ]
        if not matches:
            logger.debug("No library matches %s", describe(library_import))
            return None
        best = matches[0]
        for lib in matches[1:]:
            if best.version is None or (lib.version is not None and lib.version > best.version):
                best = lib
        return best

    def add_change_listener(self, listener: ChangeListener) -> None:
        """Register ``listener`` to be called after every change, e.g. to re-run resolution."""
        with self._lock:
            self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _fire(self, event: RepositoryChangeEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Repository change listener failed for %s", event.kind.value)
