"""Tests for removal and cleanup of unused dependencies."""

from pathlib import Path

import pytest

from fakes import fabric_mod, write_jar
from modinstall.exceptions import AmbiguousMatchError, ModNotFoundError
from modinstall.repository import ModsFolder
from modinstall.services import OrphanAnalyzer, is_likely_library


@pytest.fixture
def analyzer(mods_folder: ModsFolder) -> OrphanAnalyzer:
    return OrphanAnalyzer(mods_folder)


def names(mods_dir: Path):
    return sorted(p.name for p in mods_dir.iterdir())


def test_is_likely_library() -> None:
    assert is_likely_library("cloth_config", "cloth-config-11.jar")
    assert is_likely_library("somemod", "somemod-api-1.0.jar")
    assert not is_likely_library("sodium", "sodium-0.5.jar")


def test_remove_deletes_single_use_dependency(
    analyzer: OrphanAnalyzer, mods_dir: Path
) -> None:
    write_jar(mods_dir, "coolmod-1.0.jar", fabric=fabric_mod("coolmod", "libutil"))
    write_jar(mods_dir, "libutil-2.0.jar", fabric=fabric_mod("libutil"))
    write_jar(mods_dir, "sodium-0.5.jar", fabric=fabric_mod("sodium"))

    result = analyzer.remove("coolmod")

    assert result.target.filename == "coolmod-1.0.jar"
    assert [a.filename for a in result.orphans] == ["libutil-2.0.jar"]
    assert names(mods_dir) == ["sodium-0.5.jar"]


def test_remove_keeps_shared_dependency(
    analyzer: OrphanAnalyzer, mods_dir: Path
) -> None:
    write_jar(mods_dir, "coolmod-1.0.jar", fabric=fabric_mod("coolmod", "libutil"))
    write_jar(mods_dir, "othermod-1.0.jar", fabric=fabric_mod("othermod", "libutil"))
    write_jar(mods_dir, "libutil-2.0.jar", fabric=fabric_mod("libutil"))

    result = analyzer.remove("coolmod")

    assert result.orphans == []
    assert names(mods_dir) == ["libutil-2.0.jar", "othermod-1.0.jar"]


def test_remove_matches_underscore_ids_to_hyphen_filenames(
    analyzer: OrphanAnalyzer, mods_dir: Path
) -> None:
    write_jar(mods_dir, "coolmod-1.0.jar", fabric=fabric_mod("coolmod", "cloth_config"))
    write_jar(mods_dir, "Cloth-Config-11.1.jar", fabric=fabric_mod("cloth_config"))

    result = analyzer.remove("COOLMOD")

    assert [a.filename for a in result.orphans] == ["Cloth-Config-11.1.jar"]
    assert names(mods_dir) == []


def test_remove_only_handles_one_level(
    analyzer: OrphanAnalyzer, mods_dir: Path
) -> None:
    write_jar(mods_dir, "coolmod-1.0.jar", fabric=fabric_mod("coolmod", "midlib"))
    write_jar(mods_dir, "midlib-1.0.jar", fabric=fabric_mod("midlib", "baselib"))
    write_jar(mods_dir, "baselib-1.0.jar", fabric=fabric_mod("baselib"))

    analyzer.remove("coolmod")

    assert names(mods_dir) == ["baselib-1.0.jar"]


def test_remove_without_dependencies(analyzer: OrphanAnalyzer, mods_dir: Path) -> None:
    write_jar(mods_dir, "sodium-0.5.jar", fabric=fabric_mod("sodium"))
    write_jar(mods_dir, "lithium-0.11.jar", fabric=fabric_mod("lithium"))

    result = analyzer.remove("sodium")

    assert result.orphans == []
    assert names(mods_dir) == ["lithium-0.11.jar"]


def test_remove_no_match(analyzer: OrphanAnalyzer, mods_dir: Path) -> None:
    write_jar(mods_dir, "sodium-0.5.jar", fabric=fabric_mod("sodium"))

    with pytest.raises(ModNotFoundError):
        analyzer.remove("iris")

    assert names(mods_dir) == ["sodium-0.5.jar"]


def test_remove_ambiguous_deletes_nothing(
    analyzer: OrphanAnalyzer, mods_dir: Path
) -> None:
    write_jar(mods_dir, "jei-1.0.jar", fabric=fabric_mod("jei"))
    write_jar(mods_dir, "jei-addon-1.0.jar", fabric=fabric_mod("jeiaddon"))

    with pytest.raises(AmbiguousMatchError) as excinfo:
        analyzer.remove("jei")

    assert excinfo.value.matches == ["jei-1.0.jar", "jei-addon-1.0.jar"]
    assert names(mods_dir) == ["jei-1.0.jar", "jei-addon-1.0.jar"]


def test_clean_removes_unused_libraries_only(
    analyzer: OrphanAnalyzer, mods_dir: Path
) -> None:
    write_jar(mods_dir, "coolmod-1.0.jar", fabric=fabric_mod("coolmod", "libutil"))
    write_jar(mods_dir, "libutil-2.0.jar", fabric=fabric_mod("libutil"))
    write_jar(mods_dir, "cloth-config-11.jar", fabric=fabric_mod("cloth_config"))
    write_jar(mods_dir, "sodium-0.5.jar", fabric=fabric_mod("sodium"))

    removed = analyzer.clean()

    assert [a.filename for a in removed] == ["cloth-config-11.jar"]
    assert names(mods_dir) == ["coolmod-1.0.jar", "libutil-2.0.jar", "sodium-0.5.jar"]


def test_clean_dry_run_keeps_files(analyzer: OrphanAnalyzer, mods_dir: Path) -> None:
    write_jar(mods_dir, "cloth-config-11.jar", fabric=fabric_mod("cloth_config"))

    candidates = analyzer.clean(dry_run=True)

    assert [a.filename for a in candidates] == ["cloth-config-11.jar"]
    assert names(mods_dir) == ["cloth-config-11.jar"]


def test_clean_never_touches_unreadable_jars(
    analyzer: OrphanAnalyzer, mods_dir: Path
) -> None:
    (mods_dir / "corrupt-lib.jar").write_bytes(b"garbage")
    write_jar(mods_dir, "mystery-api.jar", extra={"README.txt": "hello"})

    assert analyzer.clean() == []
    assert names(mods_dir) == ["corrupt-lib.jar", "mystery-api.jar"]


def test_clean_ignores_non_jar_files(analyzer: OrphanAnalyzer, mods_dir: Path) -> None:
    (mods_dir / "config-notes.txt").write_text("notes")

    assert analyzer.clean() == []
    assert names(mods_dir) == ["config-notes.txt"]


def test_clean_empty_folder(analyzer: OrphanAnalyzer) -> None:
    assert analyzer.clean() == []


def test_clean_heuristic_split(analyzer: OrphanAnalyzer, mods_dir: Path) -> None:
    write_jar(mods_dir, "createlib-1.0.jar", fabric=fabric_mod("createlib"))
    write_jar(mods_dir, "mainmod-1.0.jar", fabric=fabric_mod("mainmod"))

    removed = analyzer.clean()

    assert [a.filename for a in removed] == ["createlib-1.0.jar"]
    assert names(mods_dir) == ["mainmod-1.0.jar"]
