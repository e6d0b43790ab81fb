import contextlib
import io
import os
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from metwatch.logs import log


class LogTest(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_appends_line(self):
        log_path = self.tmp / "metwatch.log"
        with mock.patch.dict(os.environ, {"METWATCH_LOG_PATH": str(log_path)}):
            with contextlib.redirect_stdout(io.StringIO()):
                log("first")
                log("second")
        lines = log_path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[1].endswith(" | second"))

    def test_write_failure_is_reported_on_stderr(self):
        blocker = self.tmp / "not_a_dir"
        blocker.write_text("", encoding="utf-8")
        err = io.StringIO()
        with mock.patch.dict(os.environ, {"METWATCH_LOG_PATH": str(blocker / "metwatch.log")}):
            with contextlib.redirect_stdout(io.StringIO()) as out, contextlib.redirect_stderr(err):
                log("hello")
        self.assertIn("| hello", out.getvalue())
        self.assertIn("log write to", err.getvalue())


if __name__ == "__main__":
    unittest.main()
