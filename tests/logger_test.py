# -*- coding: utf-8 -*-
"""Unit tests for the visionlink logger."""
import logging
import os
import tempfile
import unittest

from visionlink import logger, setup_logger


class LoggerTest(unittest.TestCase):
    """Unit test for logger."""

    def tearDown(self) -> None:
        """Restore the default logger."""
        for handler in logger.handlers:
            handler.close()
        setup_logger("INFO")

    def test_setup_level(self) -> None:
        """Test that the level and the console handler are set."""
        setup_logger("DEBUG")
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)
        self.assertFalse(logger.propagate)

        # Setting up again replaces the handlers
        setup_logger("WARNING")
        self.assertEqual(logger.level, logging.WARNING)
        self.assertEqual(len(logger.handlers), 1)

    def test_invalid_level(self) -> None:
        """Test that an unknown level is refused."""
        with self.assertRaises(ValueError):
            setup_logger("VERBOSE")

    def test_log_file(self) -> None:
        """Test that the logs are saved to the given file."""
        with tempfile.TemporaryDirectory() as run_dir:
            filepath = os.path.join(run_dir, "visionlink.log")
            setup_logger("INFO", filepath=filepath)
            self.assertEqual(len(logger.handlers), 2)

            logger.info("Connecting to %s...", "gateway")
            logger.debug("Not saved")
            for handler in logger.handlers:
                handler.flush()

            with open(filepath, "r", encoding="utf-8") as file:
                content = file.read()

            self.assertIn("Connecting to gateway...", content)
            self.assertIn("| INFO    |", content)
            self.assertNotIn("Not saved", content)

            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()


if __name__ == "__main__":
    unittest.main()
