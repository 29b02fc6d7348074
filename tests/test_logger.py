import logging
import os
import tempfile
import unittest
from unittest import mock

import utils.logger as logger_module
from utils.logger import get_logger


class LogFileTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.log_file = os.path.join(self.temp_dir.name, "admin.log")
        self.names = ["admin.tests.one", "admin.tests.two"]

        patches = [
            mock.patch.dict(os.environ, {"ADMIN_LOG_FILE": self.log_file}),
            mock.patch.object(logger_module, "_shared_console", None),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def tearDown(self):
        console = logger_module._shared_console
        for name in self.names:
            logging.getLogger(name).handlers.clear()
        if console is not None:
            console.file.close()
        self.temp_dir.cleanup()

    def test_loggers_share_one_file(self):
        one, two = (get_logger(name) for name in self.names)
        self.assertIs(one.handlers[0].console, two.handlers[0].console)

        one.warning("first record")
        two.warning("second record")
        logger_module._shared_console.file.flush()

        with open(self.log_file, encoding="utf-8") as f:
            text = f.read()
        self.assertIn("first record", text)
        self.assertIn("second record", text)


if __name__ == "__main__":
    unittest.main()
