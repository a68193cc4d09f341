"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from fugo.models.installation import Installation, Source
from fugo.settings import Settings


@pytest.fixture(autouse=True)
def isolate_home(tmp_path, monkeypatch):
    """Point HOME and the XDG directories at a temp directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setattr(Settings, "_instance", None)
    return home


@pytest.fixture
def fake_goroot(tmp_path) -> Path:
    """A minimal Go tree with a VERSION file and no runnable binary."""
    root = tmp_path / "go"
    (root / "bin").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "VERSION").write_text("go1.22.3\ntime 2024-05-01T19:20:51Z\n")
    (root / "src" / "main.go").write_bytes(b"p" * 2048)
    return root


@pytest.fixture
def make_installation():
    def _make(path: Path, source: Source = Source.OFFICIAL, size: int = 1024) -> Installation:
        return Installation(
            path=path,
            version="go version go1.22.3 linux/amd64",
            source=source,
            size_bytes=size,
            permissions="drwxr-xr-x",
            verified=True,
        )

    return _make
