#! /usr/bin/env python

import io
import logging
import unittest
import paleosim
from paleosim import utility

class AttachedSystem(object):

    def __init__(self):
        self.name = "Run1"
        self.elapsed_time = 2.5

class RunLoggerTestCase(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()
        self.run_logger = utility.RunLogger(
                name="paleosim.test.utility",
                log_to_stderr=False,
                log_to_file=True,
                log_stream=self.stream,
                file_logging_level="info",
                logging_format="none")

    def tearDown(self):
        self.run_logger.close()

    def test_levels(self):
        self.run_logger.debug("hidden")
        self.run_logger.info("shown %s", "here")
        self.assertEqual(self.stream.getvalue(), "shown here\n")
        self.assertTrue(self.run_logger.is_enabled_for("info"))
        self.assertFalse(self.run_logger.is_enabled_for("debug"))

    def test_simulation_time_prefix(self):
        self.run_logger.system = AttachedSystem()
        self.run_logger.warning("event")
        self.assertIn("Run1 t = 2.500000: event", self.stream.getvalue())
        self.run_logger.system = None
        self.run_logger.warning("done")
        self.assertTrue(self.stream.getvalue().endswith("\ndone\n"))

    def test_level_names(self):
        self.assertEqual(utility.get_logging_level("warning"), logging.WARNING)
        self.assertEqual(utility.get_logging_level(logging.ERROR), logging.ERROR)
        self.assertEqual(utility.get_logging_level("bogus"), logging.NOTSET)

    def test_no_handlers(self):
        quiet = utility.RunLogger(name="paleosim.test.quiet", log_to_stderr=False, log_to_file=False)
        self.assertFalse(quiet.is_enabled_for("critical"))
        quiet.critical("dropped")

class DescriptionTestCase(unittest.TestCase):

    def test_description(self):
        self.assertEqual(paleosim.description(include_revision=False), "Paleosim 0.1.0")
        self.assertTrue(paleosim.description().startswith("Paleosim 0.1.0"))

if __name__ == "__main__":
    unittest.main()
