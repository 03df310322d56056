"""Unit tests for console formatting helpers."""

import pytest
from locatedb.utils.formatting import create_table, print_error, print_path


class TestPrintPath:
    """Tests for print_path."""

    def test_markup_is_not_interpreted(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Square brackets and emoji codes in names are printed verbatim."""
        print_path("/data/[bold]x[/bold]/:smile:")

        assert capsys.readouterr().out == "/data/[bold]x[/bold]/:smile:\n"

    def test_long_paths_not_wrapped(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Paths longer than the terminal stay on one line."""
        path = "/" + "/".join(["segment"] * 40)
        print_path(path)

        assert capsys.readouterr().out == path + "\n"

    def test_custom_terminator(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A NUL terminator can replace the newline."""
        print_path("/a", end="\0")

        assert capsys.readouterr().out == "/a\0"

    def test_control_characters_kept(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Tabs and carriage returns in file names are written unchanged."""
        print_path("/d/tab\there.txt")
        print_path("/d/cr\rname.txt")

        assert capsys.readouterr().out == "/d/tab\there.txt\n/d/cr\rname.txt\n"


class TestMessages:
    """Tests for message helpers."""

    def test_error_message_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Messages containing markup are shown literally on stderr."""
        print_error("bad pattern [abc")

        assert "Error: bad pattern [abc" in capsys.readouterr().err

    def test_create_table_title(self) -> None:
        """Tables carry the given title."""
        assert create_table("Indexed Mounts").title == "Indexed Mounts"
