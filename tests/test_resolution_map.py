"""Tests for the Resolution map and provider synchronization."""

import logging

import pytest

from model.elements import Bundle, PackageImport
from resolution import ProgressMonitor, Resolution


class TestResolutionMap:
    """provider_of and requirements_of stay consistent."""

    def setup_method(self):
        self.resolution = Resolution()
        self.a = Bundle("A", "1.0")
        self.b = Bundle("B", "1.0")
        self.r1 = PackageImport("p1")
        self.r2 = PackageImport("p2")

    def test_first_association_reports_new_provider(self):
        assert self.resolution.add_provider(self.r1, self.a) is True
        assert self.resolution.add_provider(self.r2, self.a) is False
        assert self.resolution.get_provided_requirements(self.a) == {self.r1, self.r2}

    def test_adding_same_pair_twice_is_idempotent(self):
        self.resolution.add_provider(self.r1, self.a)
        self.resolution.add_provider(self.r1, self.a)

        assert len(self.resolution) == 1
        assert self.resolution.get_provided_requirements(self.a) == {self.r1}

    def test_removing_last_requirement_drops_provider(self):
        self.resolution.add_provider(self.r1, self.a)

        assert self.resolution.remove_provider(self.r1) is self.a
        assert self.resolution.get_provider(self.r1) is None
        assert self.resolution.bundles() == []
        assert self.resolution.get_provided_requirements(self.a) == set()
        assert not self.resolution.is_provider(self.a)

    def test_remove_keeps_provider_with_other_requirements(self):
        self.resolution.add_provider(self.r1, self.a)
        self.resolution.add_provider(self.r2, self.a)
        self.resolution.remove_provider(self.r1)

        assert self.resolution.bundles() == [self.a]
        assert self.resolution.get_provided_requirements(self.a) == {self.r2}

    def test_remove_absent_requirement_is_noop(self):
        assert self.resolution.remove_provider(self.r1) is None
        assert len(self.resolution) == 0

    def test_reassociation_moves_requirement(self):
        self.resolution.add_provider(self.r1, self.a)
        assert self.resolution.add_provider(self.r1, self.b) is True

        assert self.resolution.get_provider(self.r1) is self.b
        assert self.resolution.bundles() == [self.b]

    def test_equal_imports_are_distinct_requirements(self):
        twin = PackageImport("p1")
        self.resolution.add_provider(self.r1, self.a)
        self.resolution.add_provider(twin, self.b)

        assert self.resolution.get_provider(self.r1) is self.a
        assert self.resolution.get_provider(twin) is self.b

    def test_rollback_undoes_additions_since_mark(self):
        self.resolution.add_provider(self.r1, self.a)
        mark = self.resolution.mark()
        self.resolution.add_provider(self.r2, self.b)
        self.resolution.add_provider(self.r1, self.b)

        self.resolution.rollback(mark)

        assert self.resolution.get_provider(self.r1) is self.a
        assert self.r2 not in self.resolution
        assert self.resolution.bundles() == [self.a]
        assert self.resolution.get_provided_requirements(self.a) == {self.r1}

    def test_rollback_ignores_readded_pairs(self):
        self.resolution.add_provider(self.r1, self.a)
        mark = self.resolution.mark()
        self.resolution.add_provider(self.r1, self.a)

        self.resolution.rollback(mark)

        assert self.resolution.get_provider(self.r1) is self.a

    def test_outcome_is_read_only(self):
        assert self.resolution.is_success is True
        with pytest.raises(AttributeError):
            self.resolution.is_success = False

    def test_to_dict_records(self):
        self.resolution.add_provider(PackageImport("p", "[1.0,2.0)", optional=True), self.a)
        data = self.resolution.to_dict()

        assert data["success"] is True
        assert data["resolved"] == [{
            "kind": "package-import",
            "requirement": "p",
            "version_range": "[1.0.0,2.0.0)",
            "optional": True,
            "provider": "A",
            "provider_version": "1.0.0",
            "synchronized": True,
        }]


class TestSynchronization:
    """Best-effort synchronization of chosen providers."""

    def setup_method(self):
        self.resolution = Resolution()
        self.ok = Bundle("ok", "1.0", synchronized=False)
        self.broken = Bundle("broken", "1.0", synchronized=False, sync_error="disk full")
        self.later = Bundle("later", "1.0", synchronized=False)
        for i, bundle in enumerate([self.ok, self.broken, self.later]):
            self.resolution.add_provider(PackageImport(f"p{i}"), bundle)

    def test_fully_synchronized_reflects_every_bundle(self):
        assert self.resolution.is_fully_synchronized() is False
        empty = Resolution()
        assert empty.is_fully_synchronized() is True

    def test_failure_does_not_stop_remaining_bundles(self, caplog):
        progress = ProgressMonitor()
        with caplog.at_level(logging.ERROR):
            failed = self.resolution.synchronize_all(progress)

        assert failed == [self.broken]
        assert self.ok.synchronized is True
        assert self.later.synchronized is True
        assert self.broken.synchronized is False
        assert self.resolution.is_fully_synchronized() is False
        assert "disk full" in caplog.text
        assert progress.fraction == 1.0

    def test_cancellation_checked_before_each_bundle(self):
        progress = ProgressMonitor()
        progress.cancel()

        self.resolution.synchronize_all(progress)

        assert self.ok.synchronized is False
        assert self.later.synchronized is False

    def test_defaults_to_null_progress(self):
        self.broken.sync_error = None
        assert self.resolution.synchronize_all() == []
        assert self.resolution.is_fully_synchronized() is True
