"""Tests for ignore-aware tracked file listing."""

from __future__ import annotations

import os
import sys

import pytest

from services import git_repository
from services.errors import RepositoryOpenError, RepositoryReadError
from services.tracked_files import list_tracked_files


def test_single_committed_file(repo_builder):
    repo_builder.write("a.go", "package a\n")
    repo_builder.commit()

    assert list_tracked_files(repo_builder.root) == ["a.go"]


def test_git_metadata_is_never_listed(repo_builder):
    repo_builder.write("a.go", "package a\n")
    repo_builder.write("pkg/b.go", "package pkg\n")
    repo_builder.commit()

    files = list_tracked_files(repo_builder.root)

    assert sorted(files) == ["a.go", "pkg/b.go"]
    assert not any(path.split("/")[0] == ".git" for path in files)


def test_ignored_extension_is_dropped(repo_builder):
    repo_builder.write(".gitignore", "*.log\n")
    repo_builder.write("main.py", "print('hi')\n")
    repo_builder.commit()
    repo_builder.write("debug.log", "noise\n")
    repo_builder.write("logs/server.log", "noise\n")

    files = list_tracked_files(repo_builder.root)

    assert "debug.log" not in files
    assert "logs/server.log" not in files
    assert sorted(files) == [".gitignore", "main.py"]


def test_ignored_directory_drops_its_contents(repo_builder):
    repo_builder.write(".gitignore", "build/\n")
    repo_builder.write("src/app.py", "x = 1\n")
    repo_builder.write("build/out/app.o", b"\x00\x01")
    repo_builder.write("build/report.txt", "done\n")

    files = list_tracked_files(repo_builder.root)

    assert sorted(files) == [".gitignore", "src/app.py"]


def test_negated_pattern_keeps_file(repo_builder):
    repo_builder.write(".gitignore", "*.log\n!keep.log\n")
    repo_builder.write("drop.log", "x\n")
    repo_builder.write("keep.log", "x\n")

    files = list_tracked_files(repo_builder.root)

    assert "keep.log" in files
    assert "drop.log" not in files


def test_nested_gitignore_is_scoped_to_its_directory(repo_builder):
    repo_builder.write("sub/.gitignore", "*.tmp\n")
    repo_builder.write("sub/scratch.tmp", "x\n")
    repo_builder.write("top.tmp", "x\n")

    files = list_tracked_files(repo_builder.root)

    assert "top.tmp" in files
    assert "sub/scratch.tmp" not in files
    assert "sub/.gitignore" in files


def test_info_exclude_rules_apply(repo_builder):
    (repo_builder.root / ".git" / "info").mkdir(exist_ok=True)
    (repo_builder.root / ".git" / "info" / "exclude").write_text("secret.txt\n")
    repo_builder.write("secret.txt", "x\n")
    repo_builder.write("public.txt", "x\n")

    assert list_tracked_files(repo_builder.root) == ["public.txt"]


def test_committed_file_matching_pattern_is_dropped(repo_builder):
    repo_builder.write("notes.log", "committed before the rule\n")
    repo_builder.write("main.py", "x = 1\n")
    repo_builder.commit()
    repo_builder.write(".gitignore", "*.log\n")

    assert "notes.log" not in list_tracked_files(repo_builder.root)


def test_untracked_files_are_listed(repo_builder):
    repo_builder.write("a.go", "package a\n")
    repo_builder.commit()
    repo_builder.write("new.go", "package a\n")

    assert sorted(list_tracked_files(repo_builder.root)) == ["a.go", "new.go"]


def test_not_a_repository(tmp_path):
    with pytest.raises(RepositoryOpenError):
        list_tracked_files(tmp_path)


def test_missing_root(tmp_path):
    with pytest.raises(RepositoryOpenError):
        list_tracked_files(tmp_path / "missing")


def test_unreadable_directory_aborts_listing(repo_builder, monkeypatch):
    repo_builder.write("ok.txt", "x\n")
    repo_builder.write("locked/inner.txt", "x\n")
    real_scandir = os.scandir

    def scandir(path="."):
        if os.fspath(path).endswith("locked"):
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(git_repository.os, "scandir", scandir)

    with pytest.raises(RepositoryReadError):
        list_tracked_files(repo_builder.root)


def test_ignore_check_without_any_match(repo_builder):
    repo_builder.write("a.go", "package a\n")
    repo_builder.write("pkg/b.go", "package pkg\n")

    assert list_tracked_files(repo_builder.root) == ["a.go", "pkg/b.go"]


def test_many_paths_are_checked_in_one_pass(repo_builder):
    repo_builder.write(".gitignore", "*.tmp\n")
    for i in range(300):
        repo_builder.write(f"src/mod_{i:03d}.py", "x = 1\n")
        repo_builder.write(f"src/mod_{i:03d}.tmp", "x\n")

    files = list_tracked_files(repo_builder.root)

    assert len(files) == 301
    assert not any(path.endswith(".tmp") for path in files)


def test_names_with_spaces_and_newlines(repo_builder):
    repo_builder.write(".gitignore", "drop*\n")
    repo_builder.write("keep me.txt", "x\n")
    repo_builder.write("drop me.txt", "x\n")
    if sys.platform != "win32":
        repo_builder.write("line\nbreak.txt", "x\n")

    files = list_tracked_files(repo_builder.root)

    assert "keep me.txt" in files
    assert "drop me.txt" not in files
    if sys.platform != "win32":
        assert "line\nbreak.txt" in files


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="needs arbitrary bytes in file names")
def test_non_utf8_file_names(repo_builder):
    repo_builder.write(".gitignore", "bad*\n")
    repo_builder.write("good.txt", "x\n")
    root = os.fsencode(str(repo_builder.root))
    with open(root + b"/bad\xff.txt", "wb") as f:
        f.write(b"x\n")
    with open(root + b"/keep\xfe.txt", "wb") as f:
        f.write(b"x\n")

    files = list_tracked_files(repo_builder.root)

    assert os.fsdecode(b"bad\xff.txt") not in files
    assert os.fsdecode(b"keep\xfe.txt") in files
    assert "good.txt" in files
