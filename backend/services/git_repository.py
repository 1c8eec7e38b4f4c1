"""
Git Repository - Narrow read-only query interface over a git working tree

Wraps GitPython so the rest of the backend never touches the object store,
the index or the git CLI directly. Handles are cheap to open and are meant
to be opened fresh for every operation:

    with RepositoryHandle.open(root) as handle:
        handle.status("src/app.py")
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path, PurePosixPath

import git
from git.exc import BadName, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from .errors import FileNotFound, PathNotInHistory, RepositoryOpenError, RepositoryReadError

logger = logging.getLogger(__name__)

GIT_DIR_NAME = ".git"


def normalize_path(path: str) -> str:
    """Turn a client-supplied path into a clean POSIX path relative to the root"""
    parts = [part for part in PurePosixPath(path.replace("\\", "/")).parts if part not in ("/", ".")]
    return "/".join(parts)


class RepositoryHandle:
    """An opened git working tree. Not thread-safe; do not share across requests."""

    def __init__(self, repo: git.Repo):
        self.repo = repo
        self.root = Path(repo.working_tree_dir).resolve()

    @classmethod
    def open(cls, root: str | os.PathLike) -> "RepositoryHandle":
        try:
            repo = git.Repo(os.fspath(root))
        except (NoSuchPathError, InvalidGitRepositoryError) as e:
            raise RepositoryOpenError(f"failed to open git repository {root}: {e}") from e

        if repo.bare or repo.working_tree_dir is None:
            repo.close()
            raise RepositoryOpenError(f"git repository {root} has no working tree")

        return cls(repo)

    def close(self):
        self.repo.close()

    def __enter__(self) -> "RepositoryHandle":
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ========== Working tree ==========

    def list_tree(self) -> tuple[list[str], list[str]]:
        """Walk the working tree, returning (files, directories) relative to root.

        The top-level .git directory is never entered. Symlinks are reported
        as files and not followed.
        """
        files: list[str] = []
        directories: list[str] = []
        self._walk("", files, directories)
        return files, directories

    def _walk(self, prefix: str, files: list[str], directories: list[str]):
        current = self.root / prefix if prefix else self.root
        try:
            with os.scandir(current) as entries:
                children = list(entries)
        except OSError as e:
            raise RepositoryReadError(f"failed to read directory: {prefix or '.'}") from e

        for entry in children:
            path = f"{prefix}/{entry.name}" if prefix else entry.name
            if entry.is_dir(follow_symlinks=False):
                if not prefix and entry.name == GIT_DIR_NAME:
                    continue
                directories.append(path)
                self._walk(path, files, directories)
            else:
                files.append(path)

    def ignored(self, paths: list[str]) -> set[str]:
        """Return the subset of paths matched by the repository's ignore rules.

        Uses git's own matcher over .gitignore files, .git/info/exclude and
        core.excludesFile. Tracked files are checked against the patterns too.
        Paths travel as raw filesystem bytes, so names that are not valid
        UTF-8 round-trip through os.fsencode/os.fsdecode unchanged.
        """
        if not paths:
            return set()

        proc = self.repo.git.check_ignore(
            "--no-index", "--stdin", "-z", as_process=True, istream=subprocess.PIPE
        )
        stdout, stderr = proc.communicate(b"".join(os.fsencode(path) + b"\0" for path in paths))

        # Exit status 1 means none of the paths are ignored
        if proc.returncode == 1:
            return set()
        if proc.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise RepositoryReadError(f"failed to evaluate ignore rules: {message}")

        return {os.fsdecode(raw) for raw in stdout.split(b"\0") if raw}

    def status(self, path: str) -> str:
        """Return the working-tree column of git's porcelain status for one path.

        A clean path yields an empty string.
        """
        try:
            output = self.repo.git.status("--porcelain", "-z", "--untracked-files=all", "--", path)
        except GitCommandError as e:
            raise RepositoryReadError(f"failed to get git status for {path}: {e}") from e

        if len(output) < 2:
            return ""
        return output[1]

    def read_working_file(self, path: str) -> bytes:
        full_path = (self.root / path).resolve()
        if full_path != self.root and self.root not in full_path.parents:
            raise FileNotFound(f"path escapes the repository root: {path}")

        try:
            return full_path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise FileNotFound(f"failed to open file: {path}") from e
        except OSError as e:
            raise RepositoryReadError(f"failed to read file: {path}") from e

    # ========== History ==========

    def head_blob(self, path: str) -> bytes:
        """Read a path's bytes from the tree of the commit HEAD points at"""
        try:
            commit = self.repo.head.commit
        except (ValueError, BadName) as e:
            raise PathNotInHistory(f"failed to get HEAD commit: {e}") from e

        try:
            entry = commit.tree / path
        except KeyError as e:
            raise PathNotInHistory(f"failed to find file entry for path: {path}") from e

        if entry.type != "blob":
            raise PathNotInHistory(f"path is not a file in HEAD: {path}")

        return entry.data_stream.read()
