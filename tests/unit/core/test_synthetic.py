"""
Tests for the synthetic module.

Synthetic diffs are checked through the parser, since that is how the rest
of the package consumes them.
"""

from self_review.core.diff_parser import parse_diff
from self_review.core.synthetic import (
    BINARY_SNIFF_BYTES,
    NO_NEWLINE_MARKER,
    generate_synthetic_diff,
    is_binary_content,
    scan_directory,
    scan_file,
)
from self_review.models import ChangeType, LineType


class TestBinaryDetection:
    """Test NUL-byte sniffing."""

    def test_text(self):
        assert not is_binary_content(b"plain text\nwith lines\n")

    def test_nul_byte(self):
        assert is_binary_content(b"PNG\x00\x01\x02")

    def test_nul_past_sniff_window(self):
        """Only the first 8 KiB are inspected."""
        content = b"a" * BINARY_SNIFF_BYTES + b"\0"
        assert not is_binary_content(content)

    def test_empty(self):
        assert not is_binary_content(b"")


class TestGenerateSyntheticDiff:
    """Test synthetic diff text."""

    def test_every_line_is_an_addition(self, tmp_path):
        (tmp_path / "a.py").write_text("one\ntwo\nthree\n")

        files = parse_diff(generate_synthetic_diff(["a.py"], tmp_path))

        assert len(files) == 1
        assert files[0].path == "a.py"
        assert files[0].old_path == ""
        assert files[0].change_type == ChangeType.ADDED
        hunk = files[0].hunks[0]
        assert (hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines) == (0, 0, 1, 3)
        assert [line.line_type for line in hunk.lines] == [LineType.ADDITION] * 3
        assert [line.new_line_no for line in hunk.lines] == [1, 2, 3]
        assert [line.content for line in hunk.lines] == ["one", "two", "three"]

    def test_classifies_each_file(self, tmp_path):
        """N readable files give N added files, binaries without hunks."""
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "x.py").write_text("x = 1\n")
        (tmp_path / "notes.md").write_text("# Notes\n\ntext\n")
        (tmp_path / "icon.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")
        paths = ["src/x.py", "notes.md", "icon.png"]

        files = parse_diff(generate_synthetic_diff(paths, tmp_path))

        assert [f.path for f in files] == paths
        assert all(f.change_type == ChangeType.ADDED for f in files)
        assert [f.is_binary for f in files] == [False, False, True]
        assert files[2].hunks == []
        assert files[1].added_lines == 3

    def test_binary_name_with_and(self, tmp_path):
        """A binary whose name contains " and " keeps its full path."""
        (tmp_path / "terms and conditions.pdf").write_bytes(b"%PDF\x00\x01")

        files = parse_diff(generate_synthetic_diff(["terms and conditions.pdf"], tmp_path))

        assert len(files) == 1
        assert files[0].is_binary
        assert files[0].path == "terms and conditions.pdf"
        assert files[0].old_path == ""
        assert files[0].change_type == ChangeType.ADDED

    def test_missing_newline_marker(self, tmp_path):
        (tmp_path / "a.txt").write_text("a\nb")

        text = generate_synthetic_diff(["a.txt"], tmp_path)
        files = parse_diff(text)

        assert text.endswith(NO_NEWLINE_MARKER)
        assert [line.content for line in files[0].hunks[0].lines] == ["a", "b"]

    def test_empty_file(self, tmp_path):
        """An empty file still gets a hunk, just with no lines."""
        (tmp_path / "empty.txt").write_text("")

        files = parse_diff(generate_synthetic_diff(["empty.txt"], tmp_path))

        assert len(files) == 1
        assert files[0].hunks[0].lines == []

    def test_missing_file_skipped(self, tmp_path):
        """Files that disappear before they are read are left out."""
        (tmp_path / "here.txt").write_text("here\n")

        files = parse_diff(generate_synthetic_diff(["gone.txt", "here.txt"], tmp_path))

        assert [f.path for f in files] == ["here.txt"]

    def test_no_paths(self, tmp_path):
        assert generate_synthetic_diff([], tmp_path) == ""


class TestScan:
    """Test directory and single-file scans."""

    def test_scan_directory(self, tmp_path):
        """Every file, recursively, sorted by relative path."""
        (tmp_path / "b.txt").write_text("b\n")
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "z.txt").write_text("z\n")

        files = scan_directory(tmp_path)

        assert [f.path for f in files] == ["a/z.txt", "b.txt"]

    def test_scan_missing_directory(self, tmp_path):
        assert scan_directory(tmp_path / "nope") == []

    def test_scan_empty_directory(self, tmp_path):
        assert scan_directory(tmp_path) == []

    def test_scan_file(self, tmp_path):
        """A single file is listed by its name."""
        target = tmp_path / "one.py"
        target.write_text("print(1)\n")

        files = scan_file(target)

        assert [f.path for f in files] == ["one.py"]
        assert files[0].added_lines == 1
