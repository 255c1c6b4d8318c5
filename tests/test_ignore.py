import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from zipbundle.errors import FileSystemError
from zipbundle.ignore import IgnoreCache, IgnoreMatcher, parse_ignore_lines


class TestParseIgnoreLines(unittest.TestCase):
    def test_strips_comments_and_blank_lines(self):
        text = "\n".join([
            "# deployment excludes",
            "",
            "   ",
            "build/ # generated output",
            "  vendor  ",
            "   # indented comment",
            "notes.txt#inline",
        ])
        self.assertEqual(parse_ignore_lines(text), ["build/", "vendor", "notes.txt"])

    def test_bare_comment_markers(self):
        self.assertEqual(parse_ignore_lines("   #\n#\nkeep #\n"), ["keep"])

    def test_windows_line_endings(self):
        self.assertEqual(parse_ignore_lines("a.txt\r\nb/\r\n"), ["a.txt", "b/"])


class TestIgnoreMatcher(unittest.TestCase):
    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp(prefix="zipbundle_ignore_"))
        self.ignore_file = self.tmpdir / ".zipignore"
        self.ignore_file.write_text("build\nsecrets.env\n# tests/\n", encoding="utf-8")

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_exact_and_prefix_matches(self):
        matcher = IgnoreMatcher()
        self.assertTrue(matcher.match("secrets.env", self.ignore_file))
        self.assertTrue(matcher.match("build", self.ignore_file))
        self.assertTrue(matcher.match("build/out.o", self.ignore_file))
        # Literal prefix, not a path component match.
        self.assertTrue(matcher.match("build.log", self.ignore_file))
        self.assertFalse(matcher.match("src/build/out.o", self.ignore_file))
        self.assertFalse(matcher.match("tests/test_a.py", self.ignore_file))

    def test_matching_is_case_sensitive(self):
        matcher = IgnoreMatcher()
        self.assertFalse(matcher.match("BUILD/out.o", self.ignore_file))
        self.assertFalse(matcher.match("Secrets.env", self.ignore_file))

    def test_no_wildcards(self):
        self.ignore_file.write_text("*.log\n", encoding="utf-8")
        matcher = IgnoreMatcher()
        self.assertFalse(matcher.match("app.log", self.ignore_file))
        self.assertTrue(matcher.match("*.log", self.ignore_file))

    def test_missing_ignore_file_ignores_nothing(self):
        matcher = IgnoreMatcher()
        missing = self.tmpdir / "nope.ignore"
        self.assertFalse(matcher.match("build/out.o", missing))
        self.assertEqual(matcher.patterns(missing), ())
        self.assertFalse(matcher.match("build/out.o", None))


class TestIgnoreCache(unittest.TestCase):
    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp(prefix="zipbundle_cache_"))

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_patterns_are_memoized_until_rebuild(self):
        ignore_file = self.tmpdir / ".zipignore"
        ignore_file.write_text("dist\n", encoding="utf-8")
        cache = IgnoreCache()

        self.assertEqual(cache.get(ignore_file), ("dist",))
        self.assertIn(ignore_file, cache)

        ignore_file.write_text("node_modules\n", encoding="utf-8")
        self.assertEqual(cache.get(ignore_file), ("dist",))
        self.assertEqual(cache.rebuild(ignore_file), ("node_modules",))
        self.assertEqual(cache.get(ignore_file), ("node_modules",))

    def test_each_ignore_file_has_its_own_entry(self):
        first = self.tmpdir / "first.ignore"
        second = self.tmpdir / "second.ignore"
        first.write_text("a\n", encoding="utf-8")
        second.write_text("b\n", encoding="utf-8")
        cache = IgnoreCache()
        matcher = IgnoreMatcher(cache)

        self.assertTrue(matcher.match("a.txt", first))
        self.assertFalse(matcher.match("a.txt", second))
        self.assertTrue(matcher.match("b.txt", second))
        self.assertEqual(len(cache), 2)

        cache.clear()
        self.assertEqual(len(cache), 0)
        self.assertNotIn(first, cache)

    def test_unreadable_ignore_file_raises_filesystem_error(self):
        ignore_file = self.tmpdir / ".zipignore"
        ignore_file.write_text("dist\n", encoding="utf-8")
        cache = IgnoreCache()

        denied = PermissionError(13, "Permission denied", str(ignore_file))
        with mock.patch.object(Path, "read_text", side_effect=denied):
            with self.assertRaises(FileSystemError) as ctx:
                cache.get(ignore_file)

        self.assertIn("Permission denied", str(ctx.exception))
        self.assertEqual(ctx.exception.path, str(ignore_file.resolve()))
        self.assertNotIn(ignore_file, cache)


if __name__ == "__main__":
    unittest.main()
