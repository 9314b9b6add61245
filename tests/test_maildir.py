"""Tests for Maildir storage.

Uses pytest tmp_path fixture for isolated filesystem tests.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from lettre.errors import MaildirError
from lettre.storage import (
    MaildirFolder,
    copy_message,
    deliver_message,
    ensure_folder,
    is_maildir,
    message_in,
    scan_folders,
)
from lettre.storage.maildir import generate_filename


@pytest.fixture
def inbox(make_folder, add_message) -> Path:
    """INBOX with one unread and two read messages (one with literal N)."""
    folder = make_folder("INBOX")
    add_message(folder, "1.host", subdir="new")
    add_message(folder, "2.host:2,S")
    add_message(folder, "3.host:2,N")
    return folder


class TestEnsureFolder:
    """Tests for ensure_folder()."""

    def test_creates_maildir_structure(self, tmp_path: Path):
        """ensure_folder creates cur/, new/, tmp/ subdirectories."""
        folder_path = ensure_folder(tmp_path / "INBOX")

        assert (folder_path / "cur").is_dir()
        assert (folder_path / "new").is_dir()
        assert (folder_path / "tmp").is_dir()

    def test_handles_nested_folders(self, tmp_path: Path):
        folder_path = ensure_folder(tmp_path / "Lists" / "python")

        assert folder_path.name == "python"
        assert folder_path.parent.name == "Lists"
        assert is_maildir(folder_path)

    def test_idempotent_creation(self, tmp_path: Path):
        """ensure_folder can be called multiple times safely."""
        ensure_folder(tmp_path / "INBOX")
        ensure_folder(tmp_path / "INBOX")  # Should not raise

        assert (tmp_path / "INBOX" / "cur").is_dir()


class TestIsMaildir:
    """Tests for is_maildir()."""

    def test_requires_new_and_cur(self, tmp_path: Path):
        (tmp_path / "half" / "cur").mkdir(parents=True)
        assert not is_maildir(tmp_path / "half")

        (tmp_path / "half" / "new").mkdir()
        assert is_maildir(tmp_path / "half")

    def test_missing_directory(self, tmp_path: Path):
        assert not is_maildir(tmp_path / "nope")


class TestMaildirFolder:
    """Tests for MaildirFolder counts and filters."""

    def test_scan_counts(self, inbox: Path):
        """Unread counts location-implied and literal N alike."""
        folder = MaildirFolder(inbox)
        assert folder.scan() == (3, 2)
        assert folder.total == 3
        assert folder.unread == 2

    def test_counts_are_snapshots(self, inbox: Path, add_message):
        folder = MaildirFolder(inbox)
        assert folder.total == 3

        add_message(inbox, "4.host", subdir="new")
        assert folder.total == 3
        assert folder.scan() == (4, 3)

    def test_message_paths_new_first(self, inbox: Path):
        paths = MaildirFolder(inbox).message_paths()
        assert [os.path.basename(p) for p in paths] == ["1.host", "2.host:2,S", "3.host:2,N"]
        assert os.sep + "new" + os.sep in paths[0]

    def test_empty_folder(self, make_folder):
        folder = MaildirFolder(make_folder("empty"))
        assert folder.scan() == (0, 0)

    def test_identity_by_path(self, inbox: Path):
        assert MaildirFolder(inbox) == MaildirFolder(str(inbox))
        assert len({MaildirFolder(inbox), MaildirFolder(str(inbox))}) == 1

    def test_name(self, inbox: Path):
        assert MaildirFolder(inbox).name == "INBOX"

    def test_matches_filter(self, inbox: Path, make_folder):
        folder = MaildirFolder(inbox)
        empty = MaildirFolder(make_folder("Archive"))

        assert folder.matches_filter("all")
        assert empty.matches_filter("all")
        assert folder.matches_filter("new")
        assert not empty.matches_filter("new")
        assert folder.matches_filter("INB")
        assert not folder.matches_filter("Archive")


class TestScanFolders:
    """Tests for scan_folders()."""

    def test_finds_maildirs_sorted(self, maildir_root: Path, make_folder):
        make_folder("work")
        make_folder("INBOX")
        (maildir_root / "not-a-maildir").mkdir()
        (maildir_root / "stray-file").write_text("x")

        folders = scan_folders(maildir_root)

        assert [f.name for f in folders] == ["INBOX", "work"]

    def test_missing_prefix(self, tmp_path: Path):
        """A missing prefix is an empty universe, not an error."""
        assert scan_folders(tmp_path / "missing") == []

    def test_only_immediate_children(self, maildir_root: Path, make_folder):
        make_folder("Lists/python")
        assert scan_folders(maildir_root) == []


class TestGenerateFilename:
    """Tests for generate_filename()."""

    def test_filename_format(self):
        """Filename follows <timestamp>.<pid>_<counter>.<hostname> format."""
        with patch("lettre.storage.maildir.time.time", return_value=1704067200):
            filename = generate_filename()

        parts = filename.split(".")
        assert parts[0] == "1704067200"  # timestamp
        assert parts[1].startswith(f"{os.getpid()}_")
        assert ":" not in filename

    def test_includes_hostname(self):
        with patch("lettre.storage.maildir.socket.gethostname", return_value="testhost"):
            filename = generate_filename()

        assert filename.endswith(".testhost")

    def test_escapes_hostname(self):
        with patch("lettre.storage.maildir.socket.gethostname", return_value="a/b:c"):
            filename = generate_filename()

        assert "/" not in filename
        assert ":" not in filename
        assert filename.endswith(r"a\057b\072c")

    def test_unique_within_one_second(self):
        with patch("lettre.storage.maildir.time.time", return_value=1704067200):
            assert generate_filename() != generate_filename()


class TestMessageIn:
    """Tests for message_in()."""

    def test_new_has_no_suffix(self, inbox: Path):
        path = message_in(inbox, new=True)
        assert Path(path).parent == inbox / "new"
        assert ":2," not in path

    def test_cur_gets_flags_without_n(self, inbox: Path):
        path = message_in(inbox, new=False, flags="NS")
        assert Path(path).parent == inbox / "cur"
        assert path.endswith(":2,S")

    def test_regenerates_taken_names(self, inbox: Path, add_message):
        add_message(inbox, "dup:2,S")

        with patch(
            "lettre.storage.maildir.generate_filename", side_effect=["dup", "fresh"]
        ):
            path = message_in(inbox, new=True)

        assert path == str(inbox / "new" / "fresh")


class TestDeliverMessage:
    """Tests for deliver_message()."""

    def test_unread_goes_to_new(self, inbox: Path):
        message = b"From: test@example.com\r\nSubject: Test\r\n\r\nBody"

        path = deliver_message(inbox, message)

        assert path.parent.name == "new"
        assert path.read_bytes() == message

    def test_read_goes_to_cur(self, inbox: Path):
        path = deliver_message(inbox, b"Test message", new=False, flags="S")

        assert path.parent.name == "cur"
        assert path.name.endswith(":2,S")

    def test_atomic_write(self, inbox: Path):
        """Message not left in tmp/ after write."""
        deliver_message(inbox, b"Test message")

        assert list((inbox / "tmp").iterdir()) == []

    def test_not_a_maildir(self, tmp_path: Path):
        with pytest.raises(MaildirError):
            deliver_message(tmp_path, b"Test message")

    def test_rename_failure_cleans_tmp(self, inbox: Path):
        with patch("lettre.storage.maildir.os.rename", side_effect=OSError("boom")):
            with pytest.raises(MaildirError):
                deliver_message(inbox, b"Test message")

        assert list((inbox / "tmp").iterdir()) == []
        assert len(list((inbox / "new").iterdir())) == 1  # only the fixture message


class TestCopyMessage:
    """Tests for copy_message()."""

    def test_copies_and_keeps_source(self, inbox: Path, make_folder):
        source = inbox / "cur" / "2.host:2,S"
        archive = make_folder("Archive")

        path = copy_message(source, archive, new=False, flags="S")

        assert source.exists()
        assert path.read_bytes() == source.read_bytes()
        assert path.parent == archive / "cur"

    def test_preserves_mtime(self, inbox: Path, make_folder):
        source = inbox / "cur" / "2.host:2,S"
        os.utime(source, (1_600_000_000, 1_600_000_000))

        path = copy_message(source, make_folder("Archive"))

        assert path.stat().st_mtime == 1_600_000_000

    def test_missing_source(self, inbox: Path, make_folder):
        archive = make_folder("Archive")

        with pytest.raises(MaildirError):
            copy_message(inbox / "cur" / "gone", archive)

        assert list((archive / "new").iterdir()) == []
        assert list((archive / "tmp").iterdir()) == []
