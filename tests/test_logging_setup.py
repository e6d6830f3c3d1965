from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from kmipexplorer import logging_setup


def _reset_logger() -> None:
    logger = logging.getLogger(logging_setup.APP_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logging_setup._handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class SetupLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        _reset_logger()

    def test_records_go_to_the_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "explorer.log"

            self.assertEqual(logging_setup.setup_logging(path), path)
            logging.getLogger("kmipexplorer.controller").info("refresh done")
            logging.getLogger("kmipexplorer.controller").debug("hidden")
            _reset_logger()

            text = path.read_text(encoding="utf-8")
            self.assertIn("kmipexplorer.controller: refresh done", text)
            self.assertNotIn("hidden", text)

    def test_verbose_enables_debug_and_replaces_handler(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            logging_setup.setup_logging(Path(tmp) / "a.log")
            logging_setup.setup_logging(Path(tmp) / "b.log", verbose=True)
            logger = logging.getLogger(logging_setup.APP_NAME)

            file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
            self.assertEqual(len(file_handlers), 1)
            self.assertTrue(file_handlers[0].baseFilename.endswith("b.log"))
            self.assertEqual(logger.level, logging.DEBUG)
            _reset_logger()

    def test_unwritable_location_disables_logging(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")

            self.assertIsNone(logging_setup.setup_logging(blocker / "explorer.log"))


if __name__ == "__main__":
    unittest.main()
