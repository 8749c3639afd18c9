import unittest
from unittest.mock import Mock, patch
import argparse
import json

import requests

from inventory_sync.cli import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_SETUP_ERROR,
    add_common_arguments,
    execute,
    handle_keyboard_interrupt,
    retry_options,
)
from inventory_sync.exceptions import APIRequestError, AuthenticationError, ConfigurationError
from inventory_sync.models import RunSummary


class TestCommonArguments(unittest.TestCase):
    def setUp(self):
        patch.dict('os.environ', {}, clear=True).start()

    def tearDown(self):
        patch.stopall()

    def test_defaults(self):
        args = add_common_arguments(argparse.ArgumentParser(), batching=True).parse_args([])

        self.assertFalse(args.dry_run)
        self.assertEqual(args.batch_size, 50)
        self.assertEqual(retry_options(args), {'max_retries': 5, 'initial_backoff': 5, 'max_backoff': 300})

    def test_whatif_alias(self):
        args = add_common_arguments(argparse.ArgumentParser()).parse_args(['--whatif'])

        self.assertTrue(args.dry_run)

    def test_batch_size_must_be_positive(self):
        parser = add_common_arguments(argparse.ArgumentParser(), batching=True)

        with self.assertRaises(SystemExit):
            parser.parse_args(['--batch-size', '0'])


class TestExecute(unittest.TestCase):
    """Test cases for exit code mapping."""

    def setUp(self):
        patch('inventory_sync.cli.logger').start()
        patch('inventory_sync.report.logger').start()

    def tearDown(self):
        patch.stopall()

    def test_success_prints_summary(self):
        summary = RunSummary(runbook='demo')

        with patch('builtins.print') as mock_print:
            code = execute(lambda: 'context', lambda context: summary)

        self.assertEqual(code, EXIT_OK)
        self.assertEqual(json.loads(mock_print.call_args[0][0])['runbook'], 'demo')

    def test_configuration_error_is_setup_error(self):
        work = Mock()

        def setup():
            raise ConfigurationError('Missing required environment variable: AZURE_CLIENT_SECRET')

        with patch('builtins.print') as mock_print:
            code = execute(setup, work)

        self.assertEqual(code, EXIT_SETUP_ERROR)
        work.assert_not_called()
        mock_print.assert_not_called()

    def test_authentication_error_is_setup_error(self):
        def setup():
            raise AuthenticationError('invalid_client')

        self.assertEqual(execute(setup, Mock()), EXIT_SETUP_ERROR)

    def test_fetch_failure_is_failure_without_summary(self):
        def work(context):
            raise APIRequestError(503, 'https://example.com', 'GET', 'busy')

        with patch('builtins.print') as mock_print:
            code = execute(lambda: None, work)

        self.assertEqual(code, EXIT_FAILURE)
        mock_print.assert_not_called()

    def test_requests_error_is_failure(self):
        def work(context):
            raise requests.exceptions.SSLError('bad certificate')

        self.assertEqual(execute(lambda: None, work), EXIT_FAILURE)


class TestHandleKeyboardInterrupt(unittest.TestCase):
    def test_exits_with_interrupted_code(self):
        @handle_keyboard_interrupt()
        def interrupted():
            raise KeyboardInterrupt

        with patch('inventory_sync.cli.logging'):
            with self.assertRaises(SystemExit) as ctx:
                interrupted()
        self.assertEqual(ctx.exception.code, EXIT_INTERRUPTED)


if __name__ == '__main__':
    unittest.main()
