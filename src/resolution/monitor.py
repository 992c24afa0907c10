"""Progress and cancellation hooks passed explicitly into resolution.

ResolutionMonitor receives per-requirement notifications and is polled for
cancellation at fixed points of the search. ProgressMonitor tracks bounded
units of work during synchronization of resolved bundles.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)


class ResolutionMonitor:
    """No-op monitor; subclass and override the hooks you need."""

    def start_resolution(self, requirement) -> None:
        """Called before providers are searched for ``requirement``."""

    def end_resolution(self, requirement, provider) -> None:
        """Called once ``requirement`` is settled; ``provider`` may be None."""

    def is_cancelled(self) -> bool:
        return False


NULL_MONITOR = ResolutionMonitor()


class CancellableMonitor(ResolutionMonitor):
    """Monitor whose cancellation can be requested from another thread."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()


class LoggingResolutionMonitor(CancellableMonitor):
    """Emit a structured DEBUG record for each requirement start and end."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        super().__init__()
        self._log = log or logger
        self.resolved = 0
        self.unresolved = 0

    def start_resolution(self, requirement) -> None:
        if is_debug_enabled(self._log):
            self._log.debug(
                "Resolving %s",
                requirement,
                extra=extra_context(
                    event="requirement_start",
                    component="monitor",
                    requirement_kind=requirement.kind.value,
                    requirement=requirement.name,
                ),
            )

    def end_resolution(self, requirement, provider) -> None:
        if provider is None:
            self.unresolved += 1
        else:
            self.resolved += 1
        if is_debug_enabled(self._log):
            self._log.debug(
                "Resolved %s -> %s",
                requirement.name,
                provider,
                extra=extra_context(
                    event="requirement_end",
                    component="monitor",
                    requirement_kind=requirement.kind.value,
                    requirement=requirement.name,
                    outcome="resolved" if provider is not None else "unresolved",
                    provider=getattr(provider, "symbolic_name", None),
                ),
            )


class ProgressMonitor:
    """Bounded unit-of-work progress with shared cancellation.

    ``new_child(units)`` hands a slice of this monitor's work to a callee;
    the child's own ``begin``/``done`` are scaled into that slice. Children
    share the root's cancellation flag.
    """

    def __init__(self, parent: Optional["ProgressMonitor"] = None, units: float = 0.0):
        self._parent = parent
        self._units_in_parent = units
        self._cancel_event = parent._cancel_event if parent else threading.Event()
        self.total = 0.0
        self.completed = 0.0

    def begin(self, total: float) -> None:
        self.total = float(total)
        self.completed = 0.0

    def worked(self, units: float) -> None:
        if units <= 0:
            return
        remaining = (self.total - self.completed) if self.total else units
        step = min(units, remaining)
        self.completed += step
        if self._parent is not None and self.total:
            self._parent.worked(self._units_in_parent * step / self.total)

    def done(self) -> None:
        if self.total:
            self.worked(self.total - self.completed)
        elif self._parent is not None:
            self._parent.worked(self._units_in_parent)
            self._units_in_parent = 0.0

    def new_child(self, units: float) -> "ProgressMonitor":
        return ProgressMonitor(self, units)

    def cancel(self) -> None:
        self._cancel_event.set()

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 0.0


class _NullProgressMonitor(ProgressMonitor):
    """Progress monitor that is never cancelled and records nothing."""

    def begin(self, total: float) -> None:
        return None

    def worked(self, units: float) -> None:
        return None

    def done(self) -> None:
        return None

    def cancel(self) -> None:
        return None

    def new_child(self, units: float) -> "ProgressMonitor":
        return self


NULL_PROGRESS = _NullProgressMonitor()
