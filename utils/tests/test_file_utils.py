"""
Unit tests for file_utils module.
"""

import tempfile
import unittest
from pathlib import Path

from utils.file_utils import find_project_root, sanitize_filename, write_asset_file


class TestSanitizeFilename(unittest.TestCase):
    """Test cases for sanitize_filename."""

    def test_plain_name_unchanged(self) -> None:
        self.assertEqual(sanitize_filename("matcap-1712345678901"), "matcap-1712345678901")

    def test_invalid_characters_replaced(self) -> None:
        self.assertEqual(sanitize_filename("test<file>name"), "test_file_name")

    def test_path_traversal_flattened(self) -> None:
        self.assertEqual(sanitize_filename("../etc/passwd"), "etc_passwd")
        self.assertEqual(sanitize_filename("..\\..\\boot"), "boot")

    def test_dots_only(self) -> None:
        self.assertEqual(sanitize_filename(".."), "Untitled")

    def test_empty(self) -> None:
        self.assertEqual(sanitize_filename(""), "Untitled")

    def test_unicode_punctuation(self) -> None:
        self.assertEqual(sanitize_filename("red–blue"), "red-blue")

    def test_non_ascii_letters_kept(self) -> None:
        self.assertEqual(sanitize_filename("赤"), "赤")
        self.assertEqual(sanitize_filename("café noir"), "café_noir")

    def test_custom_fallback(self) -> None:
        self.assertEqual(sanitize_filename("../", fallback=""), "")

    def test_max_length(self) -> None:
        self.assertEqual(len(sanitize_filename("a" * 300)), 100)


class TestFindProjectRoot(unittest.TestCase):
    """Test cases for find_project_root."""

    def test_finds_ancestor_with_marker(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "public").mkdir()
            nested = root / "src" / "scene"
            nested.mkdir(parents=True)
            self.assertEqual(find_project_root(nested, "public"), root.resolve())

    def test_start_itself_is_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "static").mkdir()
            self.assertEqual(find_project_root(root, "static"), root.resolve())

    def test_marker_file_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "marker-xyz-file").write_text("")
            self.assertIsNone(find_project_root(root, "marker-xyz-file"))


class TestWriteAssetFile(unittest.TestCase):
    """Test cases for write_asset_file."""

    def test_creates_parents_and_overwrites(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            dest = Path(tmpdir) / "textures" / "matcap" / "a.webp"
            write_asset_file(dest, b"first")
            result = write_asset_file(dest, b"second")
            self.assertEqual(result, dest)
            self.assertEqual(dest.read_bytes(), b"second")


if __name__ == "__main__":
    unittest.main()
