"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import patch

import pytest

from lettre.storage import ensure_folder


def make_message(
    subject: str = "Hello",
    sender: str = "Alice Smith <alice@example.com>",
    to: str = "Bob Jones <bob@example.com>",
    date: str | None = "Mon, 15 Jan 2024 10:00:00 +0000",
    body: str = "line one\nline two\nline three\n",
) -> bytes:
    """Build a small plain text RFC 2822 message."""
    lines = [f"From: {sender}", f"To: {to}", f"Subject: {subject}"]
    if date is not None:
        lines.append(f"Date: {date}")
    lines.append('Content-Type: text/plain; charset="utf-8"')
    return ("\n".join(lines) + "\n\n" + body).encode()


@pytest.fixture
def maildir_root(tmp_path: Path) -> Path:
    """Empty directory to hold Maildir folders."""
    root = tmp_path / "Maildir"
    root.mkdir()
    return root


@pytest.fixture
def make_folder(maildir_root: Path):
    """Factory fixture creating a Maildir folder under ``maildir_root``."""

    def _create(name: str) -> Path:
        return ensure_folder(maildir_root / name)

    return _create


@pytest.fixture
def add_message():
    """Factory fixture writing a message file into a folder's new/ or cur/."""

    def _create(folder: Path, filename: str, subdir: str = "cur", **headers) -> Path:
        path = folder / subdir / filename
        path.write_bytes(make_message(**headers))
        return path

    return _create


@pytest.fixture
def config_file(tmp_path: Path):
    """Point the config module at a temporary file with an empty cache."""
    config_dir = tmp_path / "config"
    path = config_dir / "config.toml"

    with (
        patch("lettre.config.CONFIG_FILE", path),
        patch("lettre.config.paths.CONFIG_DIR", config_dir),
        patch("lettre.config._cached_config", None),
        patch("lettre.cli.commands.config.CONFIG_FILE", path),
        patch("lettre.cli.commands.config.CONFIG_DIR", config_dir),
    ):
        yield path
