"""Bundle resolver: match every requirement reachable from a root element to a provider.

The search walks the element tree depth first. For each requirement the
repository manager's priority levels are searched in ascending order; within
a level all candidates are ranked by the bundle order comparator and tried
in turn. Choosing a candidate that was not already a provider recursively
resolves its own requirements, and a failure there rejects the candidate.
Every association made while trying it is rolled back before the next one
is tried. A candidate already chosen for another requirement is reused
without resolving its requirements again.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from common.logging_utils import extra_context, is_debug_enabled, Timer
from model.elements import CompoundElement, RequirementKind, describe, is_requirement

from .comparator import sort_providers
from .config import ResolutionConfig
from .context import ResolutionContext
from .errors import InvalidRequirementError
from .monitor import NULL_MONITOR, ResolutionMonitor
from .resolution import Resolution

logger = logging.getLogger(__name__)


class BundleResolver:
    """Resolve model elements against the repositories of a RepositoryManager."""

    def __init__(self, repository_manager):
        self.repository_manager = repository_manager

    def resolve(
        self,
        element,
        config: Optional[ResolutionConfig] = None,
        monitor: Optional[ResolutionMonitor] = None,
    ) -> Resolution:
        """Resolve ``element`` and everything it transitively requires.

        Args:
            element: a requirement or compound element (project, bundle)
            config: resolution options; defaults to ResolutionConfig()
            monitor: progress/cancellation hooks; defaults to a no-op monitor

        Returns:
            The populated Resolution.

        Raises:
            ResolutionError: if a mandatory requirement could not be satisfied.
                Carries the root and the chain of unresolved requirements.
            InvalidRequirementError: if the model holds a requirement of an
                unknown kind.
        """
        config = config or ResolutionConfig()
        ctx = ResolutionContext(element, config, monitor or NULL_MONITOR)

        with Timer() as t:
            if isinstance(element, CompoundElement):
                ctx.enter(element)
            try:
                self._resolve_element(element, ctx)
            finally:
                ctx.exit(element)

        logger.debug(
            "Resolution finished",
            extra=extra_context(
                event="resolution_complete",
                component="resolver",
                root=describe(element),
                outcome="success" if ctx.valid else "failure",
                requirements=len(ctx.resolution),
                bundles=len(ctx.resolution.bundles()),
                cancelled=ctx.is_cancelled() or None,
                duration_ms=t.duration_ms(),
            ),
        )

        if not ctx.valid:
            raise ctx.new_error()

        return ctx.resolution

    def is_optional(self, requirement) -> bool:
        """Return whether ``requirement`` may stay unsatisfied.

        A library import is optional only if every package import of the
        referenced library is optional; an unknown library is mandatory.
        """
        kind = requirement.kind
        if kind is RequirementKind.PACKAGE_IMPORT or kind is RequirementKind.REQUIRED_BUNDLE:
            return requirement.optional
        if kind is RequirementKind.LIBRARY_IMPORT:
            library = self.repository_manager.resolve_library(requirement)
            if library is None:
                return False
            return all(self.is_optional(imp) for imp in library.imports)
        raise InvalidRequirementError(f"Invalid optional element test for {requirement!r}")

    def _resolve_element(self, element, ctx: ResolutionContext) -> None:
        if is_requirement(element):
            self._resolve_requirement(element, ctx)

        if ctx.valid and isinstance(element, CompoundElement):
            self._resolve_compound(element, ctx)

    def _resolve_compound(self, compound: CompoundElement, ctx: ResolutionContext) -> None:
        for child in compound.children():
            if ctx.is_entered(child):
                continue

            if is_requirement(child):
                self._resolve_requirement(child, ctx)
            elif isinstance(child, CompoundElement):
                if ctx.is_cancelled():
                    break
                ctx.enter(child)
                try:
                    self._resolve_element(child, ctx)
                finally:
                    ctx.exit(child)

            if not ctx.valid:
                break

    def _resolve_requirement(self, requirement, ctx: ResolutionContext) -> None:
        optional = self.is_optional(requirement)
        if optional and not ctx.config.resolve_optional:
            return

        ctx.start_requirement(requirement)
        try:
            self._search(requirement, ctx)
        finally:
            ctx.end_requirement(requirement, optional)

    def _search(self, requirement, ctx: ResolutionContext) -> None:
        """Try candidates tier by tier until one resolves or all are exhausted."""
        mark = len(ctx.trace)

        for level in self.repository_manager.priority_levels():
            if ctx.is_cancelled():
                return

            providers = self._find_providers_at_priority(level, requirement, ctx)
            if not providers or ctx.is_cancelled():
                continue

            if len(providers) > 1:
                providers = sort_providers(requirement, providers)

            if is_debug_enabled(logger):
                logger.debug(
                    "Candidates for %s at priority %s: %s",
                    describe(requirement),
                    level,
                    [describe(p) for p in providers],
                    extra=extra_context(
                        event="candidates",
                        component="resolver",
                        priority=level,
                        count=len(providers),
                    ),
                )

            for provider in providers:
                ctx.truncate_trace(mark)
                ctx.valid = True
                checkpoint = ctx.resolution.mark()

                if not ctx.resolution.add_provider(requirement, provider):
                    # already chosen for another requirement
                    return

                if ctx.config.resolve_dependents:
                    self._resolve_element(provider, ctx)

                if ctx.valid:
                    return

                ctx.resolution.rollback(checkpoint)
                logger.debug(
                    "Rejected %s for %s",
                    describe(provider),
                    describe(requirement),
                    extra=extra_context(
                        event="candidate_rejected",
                        component="resolver",
                        priority=level,
                    ),
                )

    def _find_providers_at_priority(self, level: int, requirement, ctx: ResolutionContext) -> List:
        kind = requirement.kind
        library = None
        if kind is RequirementKind.LIBRARY_IMPORT:
            library = self.repository_manager.resolve_library(requirement)
            if library is None:
                return []
        elif kind is not RequirementKind.PACKAGE_IMPORT and kind is not RequirementKind.REQUIRED_BUNDLE:
            raise InvalidRequirementError(f"Invalid requirement type {requirement!r}")

        options = ctx.config.lookup_options
        providers: List = []
        for repository in self.repository_manager.repositories_at(level):
            if ctx.is_cancelled():
                break
            if library is not None:
                providers.extend(repository.find_library_providers(library, options))
            else:
                providers.extend(repository.find_all_providers(requirement, options))
        return providers
