"""
Forget It Test Suite: Entry Point
==================================
Command line parsing, the corrupt snapshot prompt and startup failures.
The curses session itself is not started here.

Usage:
    python -m pytest tests/test_main.py -v
    python tests/test_main.py
"""
import sys
import os
import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from core.constants import APP_DIR_ENV, TICK_RATE_DEFAULT_MS, app_dir
from core.persistence import SnapshotFile
from core.seed import default_collection


# ─────────────────────────────────────────────
#  Argument Tests
# ─────────────────────────────────────────────

class TestParseArgs(unittest.TestCase):

    def test_default_tick_rate(self):
        self.assertEqual(main.parse_args([]).tick_rate, TICK_RATE_DEFAULT_MS)

    def test_custom_tick_rate(self):
        self.assertEqual(main.parse_args(["250"]).tick_rate, 250)

    def test_rejects_bad_tick_rate(self):
        for argv in (["0"], ["-5"], ["fast"]):
            with self.subTest(argv=argv):
                with redirect_stderr(io.StringIO()):
                    with self.assertRaises(SystemExit):
                        main.parse_args(argv)

    def test_version(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(SystemExit) as ctx:
                main.parse_args(["--version"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn("0.3.0", out.getvalue())


# ─────────────────────────────────────────────
#  Startup Tests
# ─────────────────────────────────────────────

class TestOpenNotes(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "note_db.json"
        self.store = SnapshotFile(self.path)

    def tearDown(self):
        self._tmp.cleanup()

    def corrupt(self):
        self.path.write_text("not json", encoding="utf-8")

    def test_first_run_seeds(self):
        notes = main.open_notes(self.store, ask=self.fail)
        self.assertEqual([n.title for n in notes], ["Note One", "Note Two"])

    def test_declined_reset_keeps_file(self):
        self.corrupt()
        with redirect_stdout(io.StringIO()):
            self.assertIsNone(main.open_notes(self.store, ask=lambda prompt: "n"))
        self.assertEqual(self.path.read_text(encoding="utf-8"), "not json")

    def test_closed_stdin_counts_as_no(self):
        self.corrupt()

        def eof(prompt):
            raise EOFError

        with redirect_stdout(io.StringIO()):
            self.assertIsNone(main.open_notes(self.store, ask=eof))

    def test_accepted_reset(self):
        self.corrupt()
        with redirect_stdout(io.StringIO()):
            notes = main.open_notes(self.store, ask=lambda prompt: " Y ")
        self.assertEqual(len(notes), len(default_collection()))
        self.assertEqual(self.store.backup_path().read_text(encoding="utf-8"), "not json")


class TestMain(unittest.TestCase):

    def test_app_dir_override(self):
        with mock.patch.dict(os.environ, {APP_DIR_ENV: "/tmp/forget-test-home"}):
            self.assertEqual(app_dir(), Path("/tmp/forget-test-home"))

    def test_unusable_data_directory_exits_1(self):
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "not-a-dir"
            blocker.write_text("x", encoding="utf-8")
            out = io.StringIO()
            with mock.patch.dict(os.environ, {APP_DIR_ENV: str(blocker)}):
                with redirect_stdout(out):
                    self.assertEqual(main.main([]), 1)
            self.assertIn("[ERROR]", out.getvalue())


if __name__ == "__main__":
    unittest.main(verbosity=2)
