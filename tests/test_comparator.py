"""Tests for provider ordering."""

from model.elements import Bundle, LibraryImport, PackageExport, PackageImport, RequiredBundle
from resolution.comparator import bundle_order, compare_imports, sort_providers


def bundle(name, version="1.0.0", exports=(), imports=0):
    return Bundle(
        name,
        version,
        exports=[PackageExport(p, v) for p, v in exports],
        imports=[PackageImport(f"dep{i}") for i in range(imports)],
    )


def names(bundles):
    return [b.symbolic_name for b in bundles]


def test_package_import_newer_export_first():
    req = PackageImport("com.acme.api")
    old = bundle("old", exports=[("com.acme.api", "1.0")])
    new = bundle("new", exports=[("com.acme.api", "2.0")])

    assert names(sort_providers(req, [old, new])) == ["new", "old"]


def test_matching_export_found_by_package_name():
    """The export of the imported package decides, not the bundle's first export."""
    req = PackageImport("com.acme.api")
    first_export_high = bundle("decoy", exports=[("org.other", "9.0"), ("com.acme.api", "1.0")])
    real = bundle("real", exports=[("com.acme.api", "2.0")])

    assert names(sort_providers(req, [first_export_high, real])) == ["real", "decoy"]


def test_candidate_without_matching_export_sorts_last():
    req = PackageImport("com.acme.api")
    without = bundle("without", exports=[("org.other", "3.0")])
    with_export = bundle("with", exports=[("com.acme.api", "0.1")])

    assert names(sort_providers(req, [without, with_export])) == ["with", "without"]


def test_export_without_version_sorts_last():
    req = PackageImport("com.acme.api")
    unversioned = bundle("unversioned", exports=[("com.acme.api", None)])
    versioned = bundle("versioned", exports=[("com.acme.api", "0.1")])

    assert names(sort_providers(req, [unversioned, versioned])) == ["versioned", "unversioned"]


def test_qualifier_decides_before_import_count():
    req = PackageImport("com.acme.api")
    older = bundle("older", exports=[("com.acme.api", "2.0.0.v1")], imports=0)
    newer = bundle("newer", exports=[("com.acme.api", "2.0.0.v2")], imports=3)

    assert names(sort_providers(req, [older, newer])) == ["newer", "older"]


def test_version_tie_broken_by_import_count():
    req = PackageImport("com.acme.api")
    heavy = bundle("heavy", exports=[("com.acme.api", "2.0")], imports=3)
    light = bundle("light", exports=[("com.acme.api", "2.0")], imports=1)

    assert names(sort_providers(req, [heavy, light])) == ["light", "heavy"]


def test_required_bundle_compares_both_candidates():
    req = RequiredBundle("core")
    old = bundle("core", "1.0.0")
    new = bundle("core", "2.0.0")

    cmp = bundle_order(req)
    assert cmp(old, new) > 0
    assert cmp(new, old) < 0
    assert names(sort_providers(req, [old, new])) == ["core", "core"]
    assert sort_providers(req, [old, new])[0] is new


def test_required_bundle_without_version_sorts_last():
    req = RequiredBundle("core")
    unversioned = bundle("core", None)
    versioned = bundle("core", "0.0.1")

    assert sort_providers(req, [unversioned, versioned])[0] is versioned


def test_library_import_ordered_by_import_count_only():
    req = LibraryImport("logging")
    heavy = bundle("heavy", "9.0.0", imports=2)
    light = bundle("light", "1.0.0", imports=0)

    assert names(sort_providers(req, [heavy, light])) == ["light", "heavy"]


def test_equal_candidates_keep_discovery_order():
    req = PackageImport("com.acme.api")
    candidates = [bundle(f"b{i}", exports=[("com.acme.api", "1.0")], imports=1) for i in range(5)]

    assert names(sort_providers(req, candidates)) == ["b0", "b1", "b2", "b3", "b4"]


def test_compare_imports_is_antisymmetric():
    few = bundle("few", imports=1)
    many = bundle("many", imports=4)

    assert compare_imports(few, many) == -1
    assert compare_imports(many, few) == 1
    assert compare_imports(few, few) == 0
