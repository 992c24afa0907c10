"""Repositories of candidate bundles and the manager that prioritizes them."""

from .base import BundleRepository
from .manager import ChangeKind, RepositoryChangeEvent, RepositoryManager
from .memory import InMemoryBundleRepository
from .workspace import Workspace, WorkspaceError, load_workspace

__all__ = [
    "BundleRepository",
    "ChangeKind",
    "InMemoryBundleRepository",
    "RepositoryChangeEvent",
    "RepositoryManager",
    "Workspace",
    "WorkspaceError",
    "load_workspace",
]
