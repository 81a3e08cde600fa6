"""
Pytest configuration and shared fixtures for hocon-config tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from hocon_config.logging import SilentLogger, set_global_logger
from hocon_config.parser import ParseContext


class MemorySource:
    """In-memory document source keyed by absolute path."""

    def __init__(self, documents: dict[str, str], root: str = "/virtual") -> None:
        self.root = Path(root)
        self.documents = {str(self.root / name): text for name, text in documents.items()}
        self.reads: list[str] = []

    def locate(self, base_dir: Path | None, name: str) -> Path:
        return (base_dir or self.root) / name

    def exists(self, path: Path) -> bool:
        return str(path) in self.documents

    def read(self, path: Path) -> str:
        self.reads.append(str(path))
        return self.documents[str(path)]


class RecordingLogger:
    """Logger that keeps every message for assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str, str]] = []

    def verbose(self, prefix: str, message: str) -> None:
        self.messages.append(("verbose", prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.messages.append(("debug", prefix, message))

    def prefixes(self) -> set[str]:
        return {prefix for _, prefix, _ in self.messages}


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Restore the silent global logger after every test."""
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def create_conf_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary configuration files.

    Usage:
        conf_path = create_conf_file("app.conf", "a = 1\\n")
    """

    def _create(filename: str, text: str) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _create


@pytest.fixture
def clean_env(monkeypatch) -> dict[str, Any]:
    """
    Remove environment variables the tests rely on being unset.

    Returns an empty mapping usable as an explicit `env` argument.
    """
    for name in ("HOCON_TEST_PORT", "HOCON_TEST_HOST", "HOCON_TEST_UNSET"):
        monkeypatch.delenv(name, raising=False)
    return {}


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that records messages instead of printing them."""
    return RecordingLogger()


@pytest.fixture
def memory_source():
    """
    Factory fixture for in-memory document sources.

    Usage:
        source = memory_source({"base.conf": "a = 1"})
    """
    return MemorySource


@pytest.fixture
def make_context():
    """
    Factory fixture for ParseContext instances backed by memory.

    Usage:
        ctx = make_context(env={"PORT": "80"}, documents={"a.conf": "x = 1"})
        ctx = make_context(overrides=[("port", "9999")])
    """

    def _make(
        env: dict[str, str] | None = None,
        documents: dict[str, str] | None = None,
        logger: Any = None,
        overrides: list[tuple[str, Any]] | None = None,
    ) -> ParseContext:
        source = MemorySource(documents or {})
        return ParseContext(
            base_dir=source.root,
            env=env or {},
            source=source,
            logger=logger or SilentLogger(),
            overrides=tuple(overrides or ()),
        )

    return _make
