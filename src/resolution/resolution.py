"""Bidirectional map of satisfied requirements and their chosen providers."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from common.logging_utils import extra_context, Timer
from model.elements import Bundle, describe
from .monitor import NULL_PROGRESS, ProgressMonitor

logger = logging.getLogger(__name__)


class Resolution:
    """Outcome of one resolve call.

    Keeps ``provider_of`` (requirement -> bundle) and ``requirements_of``
    (bundle -> requirements) mutually consistent: a requirement is listed
    under exactly the bundle it maps to, and a bundle with no remaining
    requirements is dropped. Both maps preserve insertion order.

    Every change made by add_provider is journaled so a failed search can
    undo everything it added with ``rollback(mark)``.
    """

    def __init__(self) -> None:
        self._providers: Dict[object, Bundle] = {}
        self._providees: Dict[Bundle, Dict[object, None]] = {}
        self._journal: List[Tuple[object, Optional[Bundle]]] = []
        self._success = True

    def add_provider(self, requirement, provider: Bundle) -> bool:
        """Associate ``requirement`` with ``provider``.

        Re-adding an existing association is a no-op. A requirement already
        mapped to another bundle is moved.

        Returns:
            True if ``provider`` was not associated with any requirement before.
        """
        current = self._providers.get(requirement)
        if current is not provider:
            self._journal.append((requirement, current))
        return self._associate(requirement, provider)

    def _associate(self, requirement, provider: Bundle) -> bool:
        current = self._providers.get(requirement)
        if current is not None and current is not provider:
            self.remove_provider(requirement)

        requirements = self._providees.get(provider)
        is_new_provider = requirements is None
        if is_new_provider:
            requirements = {}
            self._providees[provider] = requirements

        self._providers[requirement] = provider
        requirements[requirement] = None
        return is_new_provider

    def mark(self) -> int:
        """Return a journal position to pass to rollback()."""
        return len(self._journal)

    def rollback(self, mark: int) -> None:
        """Undo every add_provider call made since ``mark``, newest first.

        Providers that were only chosen after the mark disappear from
        bundles(); moved requirements return to their previous provider.
        """
        while len(self._journal) > mark:
            requirement, previous = self._journal.pop()
            if previous is None:
                self.remove_provider(requirement)
            else:
                self._associate(requirement, previous)

    def remove_provider(self, requirement) -> Optional[Bundle]:
        """Drop the association of ``requirement``; absent requirements are ignored.

        Returns:
            The bundle the requirement was mapped to, if any.
        """
        provider = self._providers.pop(requirement, None)
        if provider is None:
            return None
        requirements = self._providees.get(provider)
        if requirements is not None:
            requirements.pop(requirement, None)
            if not requirements:
                del self._providees[provider]
        return provider

    def get_provider(self, requirement) -> Optional[Bundle]:
        return self._providers.get(requirement)

    def get_provided_requirements(self, provider: Bundle) -> Set[object]:
        """Requirements satisfied by ``provider``; empty if it was not chosen."""
        return set(self._providees.get(provider, ()))

    def bundles(self) -> List[Bundle]:
        """Chosen providers in the order they were first selected."""
        return list(self._providees)

    def requirements(self) -> List[object]:
        """Satisfied requirements in the order they were associated."""
        return list(self._providers)

    def is_provider(self, bundle: Bundle) -> bool:
        return bundle in self._providees

    @property
    def is_success(self) -> bool:
        return self._success

    def is_fully_synchronized(self) -> bool:
        """True when every chosen provider is locally available."""
        return all(bundle.synchronized for bundle in self._providees)

    def synchronize_all(self, progress: Optional[ProgressMonitor] = None) -> List[Bundle]:
        """Synchronize every chosen provider, one at a time.

        A failure for one bundle is logged and the remaining bundles are
        still attempted. Cancellation is checked before each bundle.

        Returns:
            The bundles that failed to synchronize.
        """
        progress = progress or NULL_PROGRESS
        bundles = self.bundles()
        progress.begin(len(bundles))
        failed: List[Bundle] = []
        with Timer() as t:
            for bundle in bundles:
                if progress.is_cancelled():
                    logger.info("Synchronization cancelled")
                    break
                try:
                    bundle.synchronize(progress.new_child(1))
                except OSError as exc:
                    failed.append(bundle)
                    logger.error(
                        "Failed to synchronize %s: %s",
                        describe(bundle),
                        exc,
                        extra=extra_context(
                            event="sync_failed",
                            component="resolution",
                            bundle=bundle.symbolic_name,
                        ),
                    )
        progress.done()
        logger.debug(
            "Synchronization finished",
            extra=extra_context(
                event="sync_complete",
                component="resolution",
                count=len(bundles),
                failed=len(failed),
                duration_ms=t.duration_ms(),
            ),
        )
        return failed

    def to_dict(self) -> Dict[str, Any]:
        """Plain data view used by the exporters."""
        records = []
        for requirement, provider in self._providers.items():
            records.append({
                "kind": requirement.kind.value,
                "requirement": requirement.name,
                "version_range": str(getattr(requirement, "version_range", "*")),
                "optional": getattr(requirement, "optional", None),
                "provider": provider.symbolic_name,
                "provider_version": str(provider.version) if provider.version is not None else None,
                "synchronized": provider.synchronized,
            })
        return {"success": self._success, "resolved": records}

    def __contains__(self, requirement) -> bool:
        return requirement in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def __repr__(self):
        return f"Resolution(success={self._success}, requirements={len(self)}, bundles={len(self._providees)})"
