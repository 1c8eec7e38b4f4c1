"""Shared fixtures: throwaway git repositories and a fake code rewriter."""

from __future__ import annotations

from pathlib import Path

import git
import pytest


class RepoBuilder:
    """Creates files in a fresh repository and commits them."""

    def __init__(self, root: Path):
        self.root = root
        self.repo = git.Repo.init(root)
        with self.repo.config_writer() as config:
            config.set_value("user", "name", "Tests")
            config.set_value("user", "email", "tests@example.com")

    def write(self, path: str, content: str | bytes) -> Path:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
        return target

    def commit(self, message: str = "commit"):
        self.repo.git.add(A=True)
        self.repo.git.commit("-m", message)

    def close(self):
        self.repo.close()


@pytest.fixture
def repo_builder(tmp_path):
    root = tmp_path / "repo"
    root.mkdir()
    builder = RepoBuilder(root)
    yield builder
    builder.close()


class FakeRewriter:
    """Records calls and returns canned text, or raises ``error``."""

    def __init__(self, rewritten: str = "rewritten code", explanation: str = "explained"):
        self.rewritten = rewritten
        self.explanation = explanation
        self.error: Exception | None = None
        self.calls: list[tuple] = []

    async def rewrite(self, language: str, code: str, instruction: str) -> str:
        self.calls.append(("rewrite", language, code, instruction))
        if self.error is not None:
            raise self.error
        return self.rewritten

    async def explain(self, instruction: str, modification: str) -> str:
        self.calls.append(("explain", instruction, modification))
        return self.explanation


@pytest.fixture
def fake_rewriter():
    return FakeRewriter()


@pytest.fixture(autouse=True)
def _clear_env_overrides(monkeypatch):
    for name in ("EDITOR_BACKEND_REPO_ROOT", "EDITOR_BACKEND_CONFIG_DIR", "OPENAI_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
