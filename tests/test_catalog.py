from __future__ import annotations

from types import SimpleNamespace

import pytest
from structlog.testing import capture_logs

from migraplan.catalog import VersionCatalog, ordering_key, sort_identifiers
from migraplan.errors import MigrationLoadError
from migraplan.loader import DirectorySource, MigrationSource, RegistrySource

from conftest import FILES, VERSIONS


class CountingSource(MigrationSource):
    def __init__(self, names):
        self.names = names
        self.listed = 0

    def list_identifiers(self):
        self.listed += 1
        return list(self.names)

    def load(self, identifier):
        raise NotImplementedError


def test_ordering_key_is_prefix_before_first_dash():
    assert ordering_key("201601011200-Add-Person") == "201601011200"
    assert ordering_key("nodash") == "nodash"


def test_sort_is_string_based_and_stable():
    assert sort_identifiers(["2-b", "1-a", "2-a"]) == ["1-a", "2-b", "2-a"]
    # Plain string comparison, not numeric.
    assert sort_identifiers(["9-y", "10-x"]) == ["10-x", "9-y"]


def test_catalog_sorts_strips_suffix_and_caches():
    source = CountingSource(reversed(FILES))
    catalog = VersionCatalog(source)

    assert catalog.load() == VERSIONS
    assert catalog.load() == VERSIONS
    assert source.listed == 1

    catalog.invalidate()
    catalog.load()
    assert source.listed == 2


def test_catalog_drops_duplicate_identifiers():
    catalog = VersionCatalog(CountingSource(["1-a.py", "1-a", "2-b.sql"]))
    assert catalog.load() == ["1-a", "2-b"]


def test_directory_source_lists_python_files(tmp_path):
    (tmp_path / "201601011200-first.py").write_text("def up(s, c): pass\ndef down(s, c): pass\n")
    (tmp_path / "201601021200-second.py").write_text("def up(s, c): pass\ndef down(s, c): pass\n")
    (tmp_path / "__init__.py").write_text("")
    (tmp_path / "README.md").write_text("notes")
    (tmp_path / "sub.py").mkdir()

    source = DirectorySource(tmp_path)
    assert sorted(source.list_identifiers()) == ["201601011200-first", "201601021200-second"]


def test_directory_source_missing_directory_propagates(tmp_path):
    catalog = VersionCatalog(DirectorySource(tmp_path / "missing"))
    with pytest.raises(FileNotFoundError):
        catalog.load()


def test_directory_source_loads_module(tmp_path):
    (tmp_path / "1-first.py").write_text("NAME = 'first'\ndef up(s, c): pass\ndef down(s, c): pass\n")
    module = DirectorySource(tmp_path).load("1-first")
    assert module.NAME == "first"


def test_directory_source_rejects_missing_and_incomplete_modules(tmp_path):
    (tmp_path / "1-only-up.py").write_text("def up(s, c): pass\n")
    source = DirectorySource(tmp_path)

    with pytest.raises(MigrationLoadError):
        source.load("2-absent")
    with pytest.raises(MigrationLoadError, match="down"):
        source.load("1-only-up")


def test_registry_source_strips_suffix_on_register():
    step = SimpleNamespace(up=lambda s, c: None, down=lambda s, c: None)
    source = RegistrySource({"1-a.py": step})

    assert source.list_identifiers() == ["1-a"]
    assert source.load("1-a") is step


def test_registry_source_rejects_unknown_and_incomplete():
    source = RegistrySource({"1-a": object()})

    with pytest.raises(MigrationLoadError):
        source.load("1-a")
    with pytest.raises(MigrationLoadError):
        source.load("2-b")


def test_mixed_key_width_warning_is_logged_once_per_catalog():
    catalog = VersionCatalog(CountingSource(FILES))

    with capture_logs() as logs:
        catalog.load()
        catalog.invalidate()
        catalog.load()

    warnings = [e for e in logs if e["event"] == "catalog_mixed_key_widths"]
    assert len(warnings) == 1
    assert warnings[0]["widths"] == [12, 13]


def test_equal_key_widths_do_not_warn():
    catalog = VersionCatalog(CountingSource(["201601011200-a", "201601021200-b"]))

    with capture_logs() as logs:
        catalog.load()

    assert logs == []
