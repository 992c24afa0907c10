"""Per-call mutable state of a resolution."""

from typing import List, Set

from .config import ResolutionConfig
from .errors import ResolutionError
from .monitor import ResolutionMonitor
from .resolution import Resolution


class ResolutionContext:
    """State owned by a single resolve() call.

    Holds the Resolution being built, the compound elements entered on the
    current recursion path and the stack of requirements still being
    searched. Failed requirements stay on that stack as a trace.
    """

    def __init__(self, root, config: ResolutionConfig, monitor: ResolutionMonitor):
        self.root = root
        self.config = config
        self.monitor = monitor
        self.resolution = Resolution()
        self._entered: Set[int] = set()
        self._trace: List[object] = []

    def enter(self, element) -> None:
        self._entered.add(id(element))

    def exit(self, element) -> None:
        self._entered.discard(id(element))

    def is_entered(self, element) -> bool:
        """True if ``element`` is a compound on the current recursion path."""
        return id(element) in self._entered

    @property
    def valid(self) -> bool:
        return self.resolution.is_success

    @valid.setter
    def valid(self, value: bool) -> None:
        self.resolution._success = value

    @property
    def trace(self) -> List[object]:
        return list(self._trace)

    def is_cancelled(self) -> bool:
        return self.monitor.is_cancelled()

    def start_requirement(self, requirement) -> None:
        self._trace.append(requirement)
        self.monitor.start_resolution(requirement)

    def end_requirement(self, requirement, optional: bool) -> None:
        """Settle ``requirement`` and update validity.

        The requirement is popped from the trace only when the context is
        still valid; otherwise it is kept for the error report.
        """
        provider = self.resolution.get_provider(requirement)
        self.valid = provider is not None or optional or self.config.ignore_errors

        if self.valid:
            self._remove_from_trace(requirement)

        self.monitor.end_resolution(requirement, provider)

    def truncate_trace(self, size: int) -> None:
        """Drop breadcrumbs pushed after the trace had ``size`` entries."""
        del self._trace[size:]

    def _remove_from_trace(self, requirement) -> None:
        # everything above the requirement was pushed while searching for it
        for index in range(len(self._trace) - 1, -1, -1):
            if self._trace[index] is requirement:
                del self._trace[index:]
                return

    def new_error(self) -> ResolutionError:
        return ResolutionError(self.root, self._trace)
