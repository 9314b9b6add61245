"""Tests for the scripting-facing Bindings facade."""

import os
from pathlib import Path

import pytest

from lettre.bindings import Bindings
from lettre.errors import InvalidInputError, NoMessageError
from lettre.nav import Mode, Navigator


@pytest.fixture
def inbox(make_folder, add_message) -> Path:
    folder = make_folder("INBOX")
    add_message(folder, "1.host", subdir="new", subject="Welcome")
    add_message(folder, "2.host:2,S", subject="Minutes")
    make_folder("Sent")
    return folder


@pytest.fixture
def bindings(maildir_root: Path, inbox: Path) -> Bindings:
    return Bindings(Navigator(maildir_root), {"from": "Me <me@example.com>"})


class TestVariables:
    """Tests for variable() and variables()."""

    def test_get_and_set(self, bindings: Bindings):
        assert bindings.variable("maildir_limit") == "all"
        assert bindings.variable("maildir_limit", "new") == "new"
        assert bindings.count_maildirs() == 1

    def test_prefix(self, bindings: Bindings, maildir_root: Path, tmp_path: Path):
        assert bindings.variable("maildir_prefix") == str(maildir_root)

        with pytest.raises(InvalidInputError):
            bindings.variable("maildir_prefix", str(tmp_path / "missing"))

    def test_global_mode(self, bindings: Bindings):
        assert bindings.variable("global_mode", "message") == "message"
        assert bindings.nav.mode is Mode.message

        with pytest.raises(InvalidInputError):
            bindings.variable("global_mode", "bogus")

    def test_compose_variables(self, bindings: Bindings):
        assert bindings.variable("from") == "Me <me@example.com>"
        assert bindings.variable("sent_mail", "~/Maildir/Sent") == "~/Maildir/Sent"
        assert bindings.variable("sendmail_path") == ""

    def test_unknown(self, bindings: Bindings):
        with pytest.raises(InvalidInputError):
            bindings.variable("no_such_thing")

    def test_variables(self, bindings: Bindings):
        values = bindings.variables()

        assert values["index_format"] == bindings.nav.index_format
        assert values["global_mode"] == "maildir"
        assert values["from"] == "Me <me@example.com>"

    def test_editor(self, bindings: Bindings, monkeypatch):
        monkeypatch.delenv("EDITOR", raising=False)
        assert bindings.editor() == "vim"

        monkeypatch.setenv("EDITOR", "nano")
        assert bindings.editor() == "nano"

        bindings.variable("editor", "emacs")
        assert bindings.editor() == "emacs"


class TestFolderOperations:
    """Tests for folder listing and selection calls."""

    def test_listing(self, bindings: Bindings, inbox: Path):
        assert bindings.count_maildirs() == 2
        assert bindings.current_maildir() == str(inbox)
        assert bindings.current_maildirs()[0] == str(inbox)
        assert bindings.maildir_lines()[0] == f"[1/2] - {inbox}"

    def test_count_all_ignores_filter(self, bindings: Bindings):
        bindings.variable("maildir_limit", "new")

        assert bindings.count_maildirs() == 1
        assert bindings.count_all_maildirs() == 2

    def test_matching(self, bindings: Bindings):
        assert [os.path.basename(p) for p in bindings.maildirs_matching("Sent")] == ["Sent"]

        with pytest.raises(InvalidInputError):
            bindings.maildirs_matching("")

    def test_select_and_scroll(self, bindings: Bindings, maildir_root: Path):
        assert bindings.select_maildir(str(maildir_root / "Sent"))
        assert bindings.jump_maildir_to(0) == 0
        assert bindings.scroll_maildir_down() == 1
        assert bindings.scroll_maildir_up(5) == 0
        assert bindings.scroll_maildir_to("Sent") == 1

    def test_selection(self, bindings: Bindings, inbox: Path):
        assert bindings.toggle_selected_folder() == str(inbox)
        assert bindings.selected_folders() == [str(inbox)]
        assert bindings.count_messages() == 2

        bindings.clear_selected_folders()
        assert bindings.selected_folders() == []

    def test_selection_without_folders(self, bindings: Bindings):
        bindings.variable("maildir_limit", "nothing-matches")
        assert bindings.add_selected_folder() == ""


class TestMessageOperations:
    """Tests for message queries and mutations."""

    @pytest.fixture
    def bindings(self, bindings: Bindings) -> Bindings:
        bindings.set_selected_folder()
        return bindings

    def test_queries(self, bindings: Bindings, inbox: Path):
        assert bindings.current_message() == str(inbox / "new" / "1.host")
        assert bindings.header("Subject") == "Welcome"
        assert bindings.headers(["Subject", "X-None"]) == {"Subject": "Welcome", "X-None": ""}
        assert bindings.body() == ["line one", "line two", "line three"]
        assert bindings.flags() == "N"
        assert bindings.is_new()

    def test_missing_header_name(self, bindings: Bindings):
        with pytest.raises(InvalidInputError):
            bindings.header("")

    def test_index_lines(self, bindings: Bindings):
        bindings.variable("index_format", "SUBJECT")
        assert bindings.index_lines() == ["Welcome", "Minutes"]

    def test_format_message(self, bindings: Bindings):
        assert bindings.format_message("[FLAGS] SUBJECT") == "[N   ] Welcome"

    def test_scrolling(self, bindings: Bindings):
        assert bindings.scroll_index_down() == 1
        assert bindings.scroll_index_up() == 0
        assert bindings.jump_index_to(5) == 1
        assert bindings.scroll_index_to("Welcome") == 0
        assert bindings.scroll_message_down(2) == 2
        assert bindings.scroll_message_up() == 1
        assert bindings.jump_message_to(-1) == 0

    def test_mutations(self, bindings: Bindings, inbox: Path):
        assert bindings.mark_read()
        assert not bindings.is_new()
        assert bindings.add_flag("F")
        assert bindings.flags() == "F"
        assert bindings.remove_flag("F")
        assert bindings.mark_new()
        assert bindings.is_new()

    def test_delete(self, bindings: Bindings):
        bindings.delete_message()
        assert bindings.count_messages() == 1

    def test_save(self, bindings: Bindings, maildir_root: Path):
        new_path = bindings.save_message(str(maildir_root / "Sent"))
        assert Path(new_path).exists()
        assert bindings.count_messages() == 1

        with pytest.raises(InvalidInputError):
            bindings.save_message("")

    def test_save_explicit_path(self, bindings: Bindings, inbox: Path, maildir_root: Path):
        source = inbox / "cur" / "2.host:2,S"

        new_path = bindings.save_message(str(maildir_root / "Sent"), str(source))

        assert Path(new_path).parent == maildir_root / "Sent" / "cur"
        assert not source.exists()
        assert bindings.current_message() == str(inbox / "new" / "1.host")

    def test_mark_read_relative_path(
        self, bindings: Bindings, inbox: Path, maildir_root: Path, monkeypatch
    ):
        monkeypatch.chdir(maildir_root)
        bindings.variable("index_format", "SUBJECT")

        assert bindings.mark_read(os.path.join("INBOX", "new", "1.host"))
        assert bindings.current_message() == str(inbox / "cur" / "1.host:2,")
        assert bindings.index_lines() == ["Welcome", "Minutes"]

    def test_index_lines_after_external_rename(self, bindings: Bindings, inbox: Path):
        bindings.variable("index_format", "SUBJECT")
        os.rename(inbox / "new" / "1.host", inbox / "cur" / "1.host:2,S")

        assert sorted(bindings.index_lines()) == ["Minutes", "Welcome"]
        assert bindings.count_messages() == 2

    def test_no_message(self, bindings: Bindings):
        bindings.clear_selected_folders()
        assert bindings.current_message() == ""

        with pytest.raises(NoMessageError):
            bindings.body()


class TestFileUtilities:
    """Tests for file_exists(), is_directory() and executable()."""

    def test_file_checks(self, tmp_path: Path):
        script = tmp_path / "script.sh"
        script.write_text("#!/bin/sh\n")

        assert Bindings.file_exists(str(script))
        assert not Bindings.file_exists(str(tmp_path / "missing"))
        assert Bindings.is_directory(str(tmp_path))
        assert not Bindings.is_directory(str(script))
        assert not Bindings.executable(str(script))

        script.chmod(0o755)
        assert Bindings.executable(str(script))
        assert not Bindings.executable(str(tmp_path))

    def test_missing_argument(self):
        with pytest.raises(InvalidInputError):
            Bindings.file_exists("")


class TestFromConfig:
    """Tests for Bindings.from_config()."""

    def test_builds_navigator_and_compose(self, maildir_root: Path, inbox: Path):
        config = {
            "maildir": {"prefix": str(maildir_root), "limit": "new"},
            "compose": {"editor": "ed"},
        }

        bindings = Bindings.from_config(config)

        assert bindings.count_maildirs() == 1
        assert bindings.variable("editor") == "ed"
