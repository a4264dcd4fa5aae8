"""Tests for stagescribe.diff module."""

import pytest

from stagescribe.config import DiffGranularity
from stagescribe.diff import render_diff, render_file_diff
from stagescribe.models import FileChange, FileSnapshot, StagingStatus


SAMPLE_TEXTS = [
    "",
    "hi\n",
    "a\nb\nc\n",
    "no trailing newline",
    "def main():\n    print('hello')\n\nmain()\n",
    "line one\r\nline two\r\n",
    "repeated\nrepeated\nrepeated\n",
]


def _markers(rendered: str) -> list[str]:
    return [line[0] for line in rendered.split("\n") if line]


class TestRenderDiffLines:
    """Tests for line granularity rendering."""

    def test_modified_line(self):
        """Test that a replaced line is marked deleted then inserted."""
        result = render_diff("a\nb\n", "a\nc\n")

        assert result.split("\n") == [" a", "-b", "+c"]

    def test_added_file_is_one_insertion_span(self):
        """Test that empty old content renders all new lines as inserted."""
        result = render_diff("", "one\ntwo\nthree\n")

        assert result.split("\n") == ["+one", "+two", "+three"]

    def test_deleted_file_is_one_deletion_span(self):
        """Test that empty new content renders all old lines as deleted."""
        result = render_diff("one\ntwo\n", "")

        assert result.split("\n") == ["-one", "-two"]

    def test_both_empty(self):
        """Test that two empty texts render nothing."""
        assert render_diff("", "") == ""

    def test_insertion_in_middle(self):
        """Test insertion between unchanged lines."""
        result = render_diff("a\nc\n", "a\nb\nc\n")

        assert result.split("\n") == [" a", "+b", " c"]

    def test_deletion_at_end(self):
        """Test deletion of the last line."""
        result = render_diff("a\nb\n", "a\n")

        assert result.split("\n") == [" a", "-b"]

    def test_minimal_for_repeated_lines(self):
        """Test that frequent lines are not treated as junk."""
        old = "x\n" * 300
        new = "x\n" * 150 + "y\n" + "x\n" * 150

        result = render_diff(old, new).split("\n")

        assert result.count("+y") == 1
        assert not any(line.startswith("-") for line in result)

    def test_line_ending_change_is_marked(self):
        """Test that converting CRLF to LF renders the lines as replaced."""
        result = render_diff("a\r\nb\r\n", "a\nb\n")

        assert result.split("\n") == ["-a\r", "-b\r", "+a", "+b"]

    def test_missing_final_newline_is_marked(self):
        """Test that adding a final newline renders the last line as replaced."""
        result = render_diff("a\nb", "a\nb\n")

        assert result.split("\n") == [" a", "-b", "+b"]

    def test_only_newline_splits_lines(self):
        """Test that form feed and other separators stay inside a line."""
        text = "a\x0cb\x1cc\u2028d\n"

        assert render_diff(text, text) == " " + text[:-1]

    def test_accepts_string_granularity(self):
        """Test that the granularity can be given as its value."""
        assert render_diff("a\n", "b\n", "line") == "-a\n+b"

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_identical_texts_have_no_markers(self, text):
        """Test that identical inputs render only unchanged lines."""
        result = render_diff(text, text)

        assert set(_markers(result)) <= {" "}

    @pytest.mark.parametrize("text", [t for t in SAMPLE_TEXTS if t])
    def test_empty_old_renders_only_insertions(self, text):
        """Test that every line of new content is inserted."""
        result = render_diff("", text)

        assert set(_markers(result)) == {"+"}
        assert len(result.split("\n")) == len(text.splitlines())

    @pytest.mark.parametrize("text", [t for t in SAMPLE_TEXTS if t])
    def test_empty_new_renders_only_deletions(self, text):
        """Test that every line of old content is deleted."""
        result = render_diff(text, "")

        assert set(_markers(result)) == {"-"}

    @pytest.mark.parametrize("old", SAMPLE_TEXTS)
    @pytest.mark.parametrize("new", SAMPLE_TEXTS)
    def test_deterministic(self, old, new):
        """Test that rendering twice gives identical output."""
        assert render_diff(old, new) == render_diff(old, new)


class TestRenderDiffWords:
    """Tests for word granularity rendering."""

    def test_inline_replacement(self):
        """Test that a changed character is wrapped inline."""
        result = render_diff("a\nb\n", "a\nc\n", DiffGranularity.WORD)

        assert result == "a\n[-b-]{+c+}\n"

    def test_added_text_is_one_insertion(self):
        """Test that empty old content is one insertion span."""
        assert render_diff("", "hi\n", DiffGranularity.WORD) == "{+hi\n+}"

    def test_deleted_text_is_one_deletion(self):
        """Test that empty new content is one deletion span."""
        assert render_diff("hi\n", "", DiffGranularity.WORD) == "[-hi\n-]"

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_identical_texts_have_no_markers(self, text):
        """Test that identical inputs render verbatim."""
        assert render_diff(text, text, DiffGranularity.WORD) == text

    def test_invalid_granularity(self):
        """Test that an unknown granularity is rejected."""
        with pytest.raises(ValueError):
            render_diff("a", "b", "paragraph")


class TestRenderFileDiff:
    """Tests for render_file_diff function."""

    def test_added_file(self):
        """Test header and body of a new file."""
        change = FileChange("hello.txt", StagingStatus.ADDED)
        snapshot = FileSnapshot("hello.txt", committed_content=None, staged_content="hi\n")

        block = render_file_diff(change, snapshot)

        assert block.path == "hello.txt"
        assert block.rendered_text == "+hi"
        assert block.header == "diff --git a/hello.txt b/hello.txt\nnew file mode 100644"
        assert block.status == StagingStatus.ADDED

    def test_deleted_file(self):
        """Test header and body of a deleted file."""
        change = FileChange("old.txt", StagingStatus.DELETED)
        snapshot = FileSnapshot("old.txt", committed_content="bye\n", staged_content=None)

        block = render_file_diff(change, snapshot)

        assert block.rendered_text == "-bye"
        assert "deleted file mode 100644" in block.header

    def test_modified_file_has_no_mode_line(self):
        """Test that a modification only has the diff --git line."""
        change = FileChange("notes.txt", StagingStatus.MODIFIED)
        snapshot = FileSnapshot("notes.txt", "a\nb\n", "a\nc\n")

        block = render_file_diff(change, snapshot)

        assert block.header == "diff --git a/notes.txt b/notes.txt"
        assert block.rendered_text == " a\n-b\n+c"

    def test_renamed_file(self):
        """Test rename header uses both paths."""
        change = FileChange("new.py", StagingStatus.RENAMED, original_path="old.py")
        snapshot = FileSnapshot("new.py", "x = 1\n", "x = 1\n")

        block = render_file_diff(change, snapshot)

        assert block.header.splitlines() == [
            "diff --git a/old.py b/new.py",
            "rename from old.py",
            "rename to new.py",
        ]
        assert block.rendered_text == " x = 1"
        assert block.original_path == "old.py"

    def test_copied_file(self):
        """Test copy header."""
        change = FileChange("b.py", StagingStatus.COPIED, original_path="a.py")
        snapshot = FileSnapshot("b.py", "", "")

        block = render_file_diff(change, snapshot)

        assert "copy from a.py" in block.header
        assert "copy to b.py" in block.header

    def test_word_granularity(self):
        """Test that granularity is passed through."""
        change = FileChange("notes.txt", StagingStatus.MODIFIED)
        snapshot = FileSnapshot("notes.txt", "cat", "car")

        block = render_file_diff(change, snapshot, DiffGranularity.WORD)

        assert block.rendered_text == "ca[-t-]{+r+}"
