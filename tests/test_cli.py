import os
import shutil
import tempfile
import unittest
import zipfile
from pathlib import Path

from zipbundle.cli import _normalize_legacy_args, build_parser, main


class TestCliParser(unittest.TestCase):
    def test_bundle_arguments(self):
        parser, commands = build_parser()
        args = parser.parse_args(["bundle", "./plugin", "-n", "release", "-o", "dist", "-i", "deploy.ignore"])
        self.assertEqual(args.command, "bundle")
        self.assertEqual(args.folder, "./plugin")
        self.assertEqual(args.name, "release")
        self.assertEqual(args.output_dir, "dist")
        self.assertEqual(args.ignore, "deploy.ignore")
        self.assertIsNone(args.report)
        self.assertEqual(set(commands), {"bundle", "list", "help"})

    def test_list_defaults(self):
        parser, _ = build_parser()
        args = parser.parse_args(["list"])
        self.assertEqual(args.folder, ".")
        self.assertFalse(args.show_ignored)

    def test_legacy_args_default_to_bundle(self):
        self.assertEqual(_normalize_legacy_args([]), ["bundle"])
        self.assertEqual(_normalize_legacy_args(["./plugin", "-n", "x"]), ["bundle", "./plugin", "-n", "x"])
        self.assertEqual(_normalize_legacy_args(["list", "."]), ["list", "."])
        self.assertEqual(_normalize_legacy_args(["--version"]), ["--version"])


class TestCliMain(unittest.TestCase):
    def setUp(self):
        self._cwd = os.getcwd()
        self.tmpdir = Path(tempfile.mkdtemp(prefix="zipbundle_cli_")).resolve()
        self.src = self.tmpdir / "plugin"
        self.src.mkdir()
        (self.src / "main.py").write_text("print('hi')\n", encoding="utf-8")
        (self.src / "cache").mkdir()
        (self.src / "cache" / "tmp.bin").write_bytes(b"\x00\x01")
        (self.src / ".zipignore").write_text("cache/\n.zipignore\n", encoding="utf-8")

    def tearDown(self):
        os.chdir(self._cwd)
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_bundle_command_writes_archive(self):
        out = self.tmpdir / "dist"
        out.mkdir()
        code = main(["bundle", str(self.src), "-n", "release", "-o", str(out), "--log-level", "WARNING"])
        self.assertEqual(code, 0)
        with zipfile.ZipFile(out / "release.zip") as archive:
            self.assertEqual(archive.namelist(), ["main.py"])

    def test_bare_folder_argument_bundles(self):
        code = main([str(self.src), "--log-level", "WARNING"])
        self.assertEqual(code, 0)
        self.assertTrue((self.src / "plugin.zip").is_file())

    def test_failed_bundle_returns_one(self):
        code = main(["bundle", str(self.src), "-o", str(self.tmpdir / "missing"), "--log-level", "CRITICAL"])
        self.assertEqual(code, 1)

    def test_unknown_path_returns_two(self):
        code = main([str(self.tmpdir / "nope")])
        self.assertEqual(code, 2)

    def test_list_writes_nothing(self):
        code = main(["list", str(self.src), "--show-ignored", "--log-level", "WARNING"])
        self.assertEqual(code, 0)
        self.assertFalse((self.src / "plugin.zip").exists())

    def test_list_folds_ignored_directories(self):
        with self.assertLogs("zipbundle.cli", level="INFO") as logs:
            code = main(["list", str(self.src), "--show-ignored"])

        self.assertEqual(code, 0)
        output = "\n".join(logs.output)
        self.assertIn("cache/ [IGNORED, 1 file]", output)
        self.assertIn(".zipignore [IGNORED]", output)
        self.assertIn("1 file(s) to bundle, 2 ignored", output)

    def test_list_missing_folder(self):
        code = main(["list", str(self.tmpdir / "nope"), "--log-level", "CRITICAL"])
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
