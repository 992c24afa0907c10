"""Exceptions raised by the resolver."""

from typing import Iterable, Tuple

from model.elements import describe


class ResolutionError(Exception):
    """Raised when a mandatory requirement reachable from ``root`` cannot be satisfied.

    Attributes:
        root: the element passed to resolve()
        trace: unresolved requirements at failure time, outermost first; the
            last entry is the requirement whose search was exhausted
    """

    def __init__(self, root, trace: Iterable[object]):
        self.root = root
        self.trace: Tuple[object, ...] = tuple(trace)
        super().__init__(self._format())

    @property
    def requirement(self):
        """The innermost unresolved requirement, or None for an empty trace."""
        return self.trace[-1] if self.trace else None

    def _format(self) -> str:
        if not self.trace:
            return f"Failed to resolve {describe(self.root)}"
        chain = " -> ".join(describe(req) for req in self.trace)
        return f"Failed to resolve {describe(self.root)}: {chain}"


class InvalidRequirementError(TypeError):
    """An element was handled as a requirement but is none of the known kinds.

    Indicates a defect in how the caller built its model, not a resolution outcome.
    """
