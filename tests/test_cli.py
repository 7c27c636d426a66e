"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest

from sg_techdocs_search.cli import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate the CLI from the host environment.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Pytest temporary directory fixture.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ELEVENTY_PATH_PREFIX", raising=False)
    monkeypatch.delenv("PATH_PREFIX", raising=False)


def _build(content_dir: Path, output: Path, *extra: str) -> int:
    return main(["build", "--content-dir", str(content_dir), "--output", str(output), *extra])


def test_build_writes_index(content_dir: Path, tmp_path: Path) -> None:
    """Test building the index from the built-in page list."""
    output = tmp_path / "_site" / "search-index.json"

    assert _build(content_dir, output) == 0

    pages = json.loads(output.read_text(encoding="utf-8"))["pages"]
    # scotaccount-complete-guide.md is absent from the fixtures
    assert len(pages) == 7
    assert pages[1]["url"] == "/getting-started/"


def test_build_with_path_prefix(content_dir: Path, tmp_path: Path) -> None:
    """Test that the path prefix option prefixes URLs."""
    output = tmp_path / "index.json"

    assert _build(content_dir, output, "--path-prefix", "/sg-identity-techdocs/") == 0

    pages = json.loads(output.read_text(encoding="utf-8"))["pages"]
    assert pages[0]["url"] == "/sg-identity-techdocs/"


def test_build_discover(content_dir: Path, tmp_path: Path) -> None:
    """Test building from a discovered manifest."""
    (content_dir / "glossary.md").write_text("# Glossary\n\nPKCE: proof key for code exchange.\n", encoding="utf-8")
    output = tmp_path / "index.json"

    assert _build(content_dir, output, "--discover") == 0

    urls = [page["url"] for page in json.loads(output.read_text(encoding="utf-8"))["pages"]]
    assert "/glossary/" in urls


def test_build_empty_directory_fails(tmp_path: Path) -> None:
    """Test that a build with no readable pages fails."""
    empty = tmp_path / "empty"
    empty.mkdir()

    assert _build(empty, tmp_path / "index.json") == 1
    assert not (tmp_path / "index.json").exists()


def test_search_prints_results(content_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test querying a built index."""
    output = tmp_path / "index.json"
    _build(content_dir, output)
    capsys.readouterr()

    assert main(["search", "pkce", "--index", str(output)]) == 0

    out = capsys.readouterr().out
    assert 'for "pkce"' in out
    assert "Getting Started </getting-started/>" in out


def test_search_json(content_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test JSON output of a query with no matches."""
    output = tmp_path / "index.json"
    _build(content_dir, output)
    capsys.readouterr()

    assert main(["search", "zzzzxxqq", "--index", str(output), "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["count"] == 0
    assert "zzzzxxqq" in payload["message"]
    assert payload["suggestions"]


def test_search_short_query(tmp_path: Path) -> None:
    """Test that too-short queries are rejected."""
    assert main(["search", "a", "--index", str(tmp_path / "index.json")]) == 2


def test_search_missing_index(tmp_path: Path) -> None:
    """Test that a missing index reports failure."""
    assert main(["search", "token", "--index", str(tmp_path / "missing.json")]) == 1


def test_invalid_log_level_exits_cleanly(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that a bad log level reports invalid configuration."""
    monkeypatch.setenv("TECHDOCS_SEARCH_LOG_LEVEL", "verbose")

    assert main(["search", "token", "--index", str(tmp_path / "index.json")]) == 1
    assert "Invalid configuration" in capsys.readouterr().err
