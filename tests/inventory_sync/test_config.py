import unittest
from unittest.mock import patch

from inventory_sync.config import (
    get_action1_config,
    get_graph_config,
    get_required,
    get_retry_config,
    get_snipeit_config,
)
from inventory_sync.exceptions import ConfigurationError


class TestConfig(unittest.TestCase):
    """Test cases for environment-backed configuration."""

    def tearDown(self):
        patch.stopall()

    def test_get_required_missing(self):
        patch.dict('os.environ', {}, clear=True).start()

        with self.assertRaises(ConfigurationError) as ctx:
            get_required('SNIPEIT_API_TOKEN')
        self.assertIn('SNIPEIT_API_TOKEN', str(ctx.exception))

    def test_get_required_blank_is_missing(self):
        patch.dict('os.environ', {'TOKEN': '   '}, clear=True).start()

        with self.assertRaises(ConfigurationError):
            get_required('TOKEN')

    def test_retry_defaults(self):
        patch.dict('os.environ', {}, clear=True).start()

        self.assertEqual(get_retry_config(), {
            'max_retries': 5,
            'initial_backoff': 5,
            'max_backoff': 300,
            'batch_size': 50,
            'batch_delay': 10,
        })

    def test_retry_overrides(self):
        patch.dict('os.environ', {'SYNC_MAX_RETRIES': '3', 'SYNC_BATCH_DELAY': '0.5'}, clear=True).start()

        config = get_retry_config()
        self.assertEqual(config['max_retries'], 3)
        self.assertEqual(config['batch_delay'], 0.5)

    def test_retry_rejects_non_numbers(self):
        patch.dict('os.environ', {'SYNC_BATCH_SIZE': 'lots'}, clear=True).start()

        with self.assertRaises(ConfigurationError):
            get_retry_config()

    def test_graph_config_uses_named_variables(self):
        patch.dict('os.environ', {
            'OTHER_TENANT': 'tenant',
            'OTHER_CLIENT': 'client',
            'OTHER_SECRET': 'secret',
        }, clear=True).start()

        config = get_graph_config('OTHER_TENANT', 'OTHER_CLIENT', 'OTHER_SECRET')

        self.assertEqual(config['tenant_id'], 'tenant')
        self.assertEqual(config['client_secret'], 'secret')
        self.assertEqual(config['base_url'], 'https://graph.microsoft.com/beta')

    def test_snipeit_url_argument_wins(self):
        patch.dict('os.environ', {'SNIPEIT_URL': 'https://env/api/v1', 'SNIPEIT_API_TOKEN': 't'}, clear=True).start()

        self.assertEqual(get_snipeit_config('https://flag/api/v1')['base_url'], 'https://flag/api/v1')
        self.assertEqual(get_snipeit_config()['base_url'], 'https://env/api/v1')

    def test_action1_requires_org(self):
        patch.dict('os.environ', {'ACTION1_CLIENT_ID': 'id', 'ACTION1_CLIENT_SECRET': 's'}, clear=True).start()

        with self.assertRaises(ConfigurationError):
            get_action1_config()
        self.assertEqual(get_action1_config('org-1')['org_id'], 'org-1')


if __name__ == '__main__':
    unittest.main()
