"""Resolution engine: match requirements to providers across prioritized repositories."""

from .config import LookupOptions, ResolutionConfig
from .errors import InvalidRequirementError, ResolutionError
from .monitor import (
    NULL_MONITOR,
    NULL_PROGRESS,
    CancellableMonitor,
    LoggingResolutionMonitor,
    ProgressMonitor,
    ResolutionMonitor,
)
from .resolution import Resolution
from .resolver import BundleResolver

__all__ = [
    "BundleResolver",
    "CancellableMonitor",
    "InvalidRequirementError",
    "LoggingResolutionMonitor",
    "LookupOptions",
    "NULL_MONITOR",
    "NULL_PROGRESS",
    "ProgressMonitor",
    "Resolution",
    "ResolutionConfig",
    "ResolutionError",
    "ResolutionMonitor",
]
