"""Tests for embed pattern resolution."""

import os
import socket
import tempfile
from pathlib import Path

import pytest

from gosrcs.errors import EmbedError
from gosrcs.resolution import EmbedResolver, resolve_embed, valid_embed_pattern


def create_file(directory: Path, name: str, content: str = "x") -> Path:
    """Helper to create a file and its parent directories."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestEmbedPatterns:
    """Test pattern validation and file matching."""

    def test_glob_files(self) -> None:
        """Test a glob selecting regular files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "data/y.txt")
            create_file(pkg, "data/x.txt")
            create_file(pkg, "data/z.json")

            assert resolve_embed(str(pkg), ["data/*.txt"]) == ["data/x.txt", "data/y.txt"]

    def test_union_is_sorted_and_unique(self) -> None:
        """Test overlapping patterns contribute each file once."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "b.txt")
            create_file(pkg, "a.txt")
            create_file(pkg, "c.md")

            files = resolve_embed(str(pkg), ["*.txt", "a.txt", "*"])
            assert files == ["a.txt", "b.txt", "c.md"]

    def test_dot_pattern_is_invalid(self) -> None:
        """Test the bare dot pattern is rejected instead of matching the package."""
        with tempfile.TemporaryDirectory() as tmpdir:
            create_file(Path(tmpdir), "a.txt")
            with pytest.raises(EmbedError, match="invalid pattern syntax") as exc_info:
                resolve_embed(tmpdir, ["."])
            assert exc_info.value.pattern == "."

    def test_invalid_patterns(self) -> None:
        """Test malformed and non-relative patterns."""
        with tempfile.TemporaryDirectory() as tmpdir:
            create_file(Path(tmpdir), "a.txt")
            for pattern in ("[", "../a.txt", "/a.txt", "x//y", "all:."):
                with pytest.raises(EmbedError, match="invalid pattern syntax"):
                    resolve_embed(tmpdir, [pattern])

    def test_valid_embed_pattern(self) -> None:
        """Test the relative path rule for patterns."""
        assert valid_embed_pattern("static")
        assert valid_embed_pattern("a/b/*.txt")
        assert not valid_embed_pattern(".")
        assert not valid_embed_pattern("./a")

    def test_no_matching_files(self) -> None:
        """Test a pattern matching nothing fails with the pattern attached."""
        with tempfile.TemporaryDirectory() as tmpdir:
            create_file(Path(tmpdir), "a.txt")
            with pytest.raises(EmbedError) as exc_info:
                resolve_embed(tmpdir, ["a.txt", "missing/*.txt"])
            assert exc_info.value.pattern == "missing/*.txt"
            assert str(exc_info.value) == "pattern missing/*.txt: no matching files found"

    def test_bad_file_name(self) -> None:
        """Test a direct match with an unshippable name."""
        with tempfile.TemporaryDirectory() as tmpdir:
            create_file(Path(tmpdir), "bad:name.txt")
            with pytest.raises(EmbedError, match="invalid name bad:name.txt"):
                resolve_embed(tmpdir, ["*.txt"])

    def test_tilde_digit_names(self) -> None:
        """Test short-name lookalikes are ordinary file names."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "data/a.txt")
            create_file(pkg, "data/backup~1")
            create_file(pkg, "PROGRA~1.txt")

            assert resolve_embed(tmpdir, ["data"]) == ["data/a.txt", "data/backup~1"]
            assert resolve_embed(tmpdir, ["*.txt"]) == ["PROGRA~1.txt"]

    @pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="needs symlinks")
    def test_match_through_symlinked_directory(self) -> None:
        """Test a match below a symlink to a directory is rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "real/x.txt")
            os.symlink(pkg / "real", pkg / "link")

            with pytest.raises(EmbedError, match="cannot embed file link/x.txt: in non-directory link"):
                resolve_embed(tmpdir, ["link/x.txt"])

    def test_file_in_vcs_directory(self) -> None:
        """Test a match inside a version control directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            create_file(Path(tmpdir), ".git/config")
            with pytest.raises(EmbedError, match="in invalid directory .git"):
                resolve_embed(tmpdir, [".git/config"])

    @pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="needs unix sockets")
    def test_irregular_file(self) -> None:
        """Test a socket cannot be embedded."""
        with tempfile.TemporaryDirectory() as tmpdir:
            sock_path = os.path.join(tmpdir, "s.sock")
            sock = socket.socket(socket.AF_UNIX)
            try:
                sock.bind(sock_path)
            except OSError:
                pytest.skip("cannot bind unix socket here")
            try:
                with pytest.raises(EmbedError, match="cannot embed irregular file s.sock"):
                    resolve_embed(tmpdir, ["s.sock"])
            finally:
                sock.close()


class TestEmbedDirectories:
    """Test patterns that match directories."""

    def test_directory_is_walked(self) -> None:
        """Test all regular files below a matched directory are collected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "static/index.html")
            create_file(pkg, "static/css/site.css")

            assert resolve_embed(tmpdir, ["static"]) == [
                "static/css/site.css",
                "static/index.html",
            ]

    def test_hidden_files_excluded(self) -> None:
        """Test dot and underscore names are skipped inside a directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "static/index.html")
            create_file(pkg, "static/.secret")
            create_file(pkg, "static/_draft.html")
            create_file(pkg, "static/.cache/blob")

            assert resolve_embed(tmpdir, ["static"]) == ["static/index.html"]

    def test_hidden_files_included_with_marker(self) -> None:
        """Test the include-hidden marker keeps dot and underscore names."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "static/index.html")
            create_file(pkg, "static/.secret")
            create_file(pkg, "static/_draft.html")

            assert resolve_embed(tmpdir, ["all:static"]) == [
                "static/.secret",
                "static/_draft.html",
                "static/index.html",
            ]

    def test_vcs_directory_skipped_even_with_marker(self) -> None:
        """Test version control directories are never walked."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "static/index.html")
            create_file(pkg, "static/.git/HEAD")

            assert resolve_embed(tmpdir, ["all:static"]) == ["static/index.html"]

    def test_nested_module_stops_walk(self) -> None:
        """Test a subtree with its own manifest is skipped without error."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "static/index.html")
            create_file(pkg, "static/nested/go.mod", "module nested\n")
            create_file(pkg, "static/nested/file.txt")

            assert resolve_embed(tmpdir, ["static"]) == ["static/index.html"]

    def test_match_inside_nested_module_fails(self) -> None:
        """Test a direct match inside another module is an error."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "nested/go.mod", "module nested\n")
            create_file(pkg, "nested/file.txt")

            with pytest.raises(EmbedError, match="cannot embed file nested/file.txt: in different module"):
                resolve_embed(tmpdir, ["nested/*.txt"])

    def test_matched_directory_is_nested_module(self) -> None:
        """Test matching a directory that is itself another module."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "nested/go.mod", "module nested\n")

            with pytest.raises(EmbedError, match="cannot embed directory nested: in different module"):
                resolve_embed(tmpdir, ["nested"])

    def test_empty_directory(self) -> None:
        """Test a directory without embeddable files fails."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "static/.only-hidden")

            with pytest.raises(EmbedError, match="cannot embed directory static: contains no embeddable files"):
                resolve_embed(tmpdir, ["static"])

    def test_custom_manifest_name(self) -> None:
        """Test the unit boundary follows the configured manifest name."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            create_file(pkg, "static/index.html")
            create_file(pkg, "static/sub/unit.manifest")
            create_file(pkg, "static/sub/file.txt")

            resolver = EmbedResolver(tmpdir, manifest_name="unit.manifest")
            assert resolver.resolve(["static"]) == ["static/index.html"]


class TestEmbedDeterminism:
    """Test repeated resolution gives identical results."""

    def test_repeatable(self) -> None:
        """Test two resolutions of the same tree agree."""
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = Path(tmpdir)
            for name in ("z/1.txt", "a/2.txt", "m/3.txt", "top.txt"):
                create_file(pkg, name)

            first = resolve_embed(tmpdir, ["*"])
            second = resolve_embed(tmpdir, ["*"])
            assert first == second == ["a/2.txt", "m/3.txt", "top.txt", "z/1.txt"]
