"""Tests for glob pattern matching."""

import os
import tempfile
from pathlib import Path

import pytest

from gosrcs.pattern import BadPatternError, check_pattern, glob, has_meta, match


class TestMatch:
    """Test single-name matching."""

    def test_star(self) -> None:
        """Test star matches within one element only."""
        assert match("*.txt", "x.txt")
        assert match("*.txt", ".hidden.txt")
        assert not match("*.txt", "dir/x.txt")
        assert match("data/*", "data/x")

    def test_question_mark(self) -> None:
        """Test question mark matches exactly one character."""
        assert match("?.go", "a.go")
        assert not match("?.go", "ab.go")
        assert not match("a?b", "a/b")

    def test_character_class(self) -> None:
        """Test character classes, ranges and negation."""
        assert match("[abc].txt", "b.txt")
        assert not match("[abc].txt", "d.txt")
        assert match("[a-c]x", "bx")
        assert match("[^a-c]x", "dx")
        assert not match("[^a-c]x", "ax")

    def test_escape(self) -> None:
        """Test escaped metacharacters match literally."""
        assert match("a\\*b", "a*b")
        assert not match("a\\*b", "axb")
        assert match("[\\]]", "]")

    def test_bad_patterns(self) -> None:
        """Test malformed patterns are rejected."""
        for pattern in ("[", "[]", "[a-", "a\\", "[]a]", "[-a]", "[a-]"):
            with pytest.raises(BadPatternError):
                check_pattern(pattern)

    def test_good_patterns(self) -> None:
        """Test well-formed patterns pass the syntax check."""
        for pattern in ("*", "data/*.txt", "[a-z]*", "x\\[1\\]"):
            check_pattern(pattern)

    def test_has_meta(self) -> None:
        """Test metacharacter detection."""
        assert has_meta("a*")
        assert has_meta("a[b]")
        assert not has_meta("plain")


class TestGlob:
    """Test filesystem globbing."""

    def test_glob_files(self) -> None:
        """Test glob lists matching names in sorted order."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            for name in ("b.txt", "a.txt", ".h.txt", "c.go"):
                (root / name).write_text("x")

            matches = glob(os.path.join(tmpdir, "*.txt"))
            assert [Path(m).name for m in matches] == [".h.txt", "a.txt", "b.txt"]

    def test_glob_nested_directories(self) -> None:
        """Test metacharacters in directory elements."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "d1").mkdir()
            (root / "d2").mkdir()
            (root / "d1" / "x.txt").write_text("x")
            (root / "d2" / "y.txt").write_text("y")

            matches = glob(os.path.join(tmpdir, "d*", "*.txt"))
            assert [Path(m).name for m in matches] == ["x.txt", "y.txt"]

    def test_glob_literal(self) -> None:
        """Test a literal pattern is returned only if it exists."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "file.txt"
            target.write_text("x")

            assert glob(str(target)) == [str(target)]
            assert glob(str(Path(tmpdir) / "missing.txt")) == []

    @pytest.mark.skipif(os.name == "nt", reason="backslash is a separator on Windows")
    def test_glob_quoted_directory(self) -> None:
        """Test a quoted directory containing metacharacters."""
        with tempfile.TemporaryDirectory() as tmpdir:
            odd = Path(tmpdir) / "a[1]"
            odd.mkdir()
            (odd / "x.txt").write_text("x")

            pattern = os.path.join(tmpdir, "a\\[1\\]", "*.txt")
            assert glob(pattern) == [str(odd / "x.txt")]

    def test_glob_bad_pattern(self) -> None:
        """Test malformed patterns raise."""
        with tempfile.TemporaryDirectory() as tmpdir, pytest.raises(BadPatternError):
            glob(os.path.join(tmpdir, "[a-"))
