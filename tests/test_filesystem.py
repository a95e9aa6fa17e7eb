"""Tests for archive extraction and file staging."""

import tarfile
import zipfile
from pathlib import Path

import pytest

from buildforge.errors import MissingArtifactError
from buildforge.services.filesystem import extract_archive, find_first, stage_file


class TestExtractArchive:
    """Tests for extract_archive."""

    def test_extracts_zip(self, tmp_path: Path) -> None:
        archive = tmp_path / "sdk.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("sdk/lib/a.txt", "a")
        extract_archive(archive, tmp_path / "out")
        assert (tmp_path / "out" / "sdk" / "lib" / "a.txt").read_text() == "a"

    def test_extracts_tarball(self, tmp_path: Path) -> None:
        source = tmp_path / "b.txt"
        source.write_text("b")
        archive = tmp_path / "sdk.tar.gz"
        with tarfile.open(archive, "w:gz") as tf:
            tf.add(source, arcname="sdk/b.txt")
        extract_archive(archive, tmp_path / "out")
        assert (tmp_path / "out" / "sdk" / "b.txt").read_text() == "b"

    def test_missing_archive(self, tmp_path: Path) -> None:
        with pytest.raises(MissingArtifactError, match="Archive not found"):
            extract_archive(tmp_path / "nope.zip", tmp_path / "out")
        assert not (tmp_path / "out").exists()


class TestStageFile:
    """Tests for stage_file."""

    def test_copies_into_directory(self, tmp_path: Path) -> None:
        source = tmp_path / "steam_api64.dll"
        source.write_bytes(b"\x00dll")
        staged = stage_file(source, tmp_path / "build" / "bin")
        assert staged == tmp_path / "build" / "bin" / "steam_api64.dll"
        assert staged.read_bytes() == b"\x00dll"

    def test_optional_missing_is_skipped(self, tmp_path: Path) -> None:
        assert stage_file(tmp_path / "nope.dll", tmp_path / "bin") is None
        assert not (tmp_path / "bin").exists()

    def test_required_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(MissingArtifactError, match="Required artifact"):
            stage_file(tmp_path / "nope.dll", tmp_path / "bin", required=True)


class TestFindFirst:
    """Tests for find_first."""

    def test_returns_first_sorted_match(self, tmp_path: Path) -> None:
        for name in ["godot.x.editor.y.mono.exe", "godot.x.editor.y.mono.console.exe", "other"]:
            (tmp_path / name).write_text("")
        match = find_first(tmp_path, "godot.*.editor.*.mono*")
        assert match == tmp_path / "godot.x.editor.y.mono.console.exe"

    def test_no_match(self, tmp_path: Path) -> None:
        assert find_first(tmp_path, "*.exe") is None

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert find_first(tmp_path / "bin", "*") is None
