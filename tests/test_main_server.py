#!/usr/bin/env python3
"""
Unit tests for the server entry point's argument handling.
"""

import logging
import signal
import unittest
from unittest.mock import patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import main_server
from server.utils.logger import logger


class TestServerEntryPoint(unittest.TestCase):

    def setUp(self):
        self.previous_level = logger.logger.level
        self.previous_sigterm = signal.getsignal(signal.SIGTERM)

    def tearDown(self):
        logger.set_level(self.previous_level)
        signal.signal(signal.SIGTERM, self.previous_sigterm)

    def run_main(self, argv):
        with patch('server.main_server.ChatServer') as server_class:
            result = main_server.main(argv)
        return result, server_class

    def test_debug_flag_sets_config_and_logger_level(self):
        result, server_class = self.run_main(['--debug', '0'])

        self.assertEqual(result, 0)
        config = server_class.call_args.kwargs['config']
        self.assertEqual(config.log_level, logging.DEBUG)
        self.assertEqual(logger.logger.level, logging.DEBUG)
        server_class.return_value.start.assert_called_once()
        server_class.return_value.shutdown.assert_called_once()

    def test_default_level_is_info(self):
        result, server_class = self.run_main(['--port', '0'])

        self.assertEqual(result, 0)
        config = server_class.call_args.kwargs['config']
        self.assertEqual(config.port, 0)
        self.assertEqual(config.log_level, logging.INFO)
        self.assertEqual(logger.logger.level, logging.INFO)

    def test_invalid_port_rejected(self):
        result, server_class = self.run_main(['70000'])

        self.assertEqual(result, 1)
        server_class.assert_not_called()


if __name__ == '__main__':
    unittest.main()
