import unittest
from unittest.mock import patch, Mock, MagicMock

from snipeit.api.hardware_api import HardwareAPI
from snipeit.facade.snipeit_facade import SnipeITFacade, hardware_to_record


def make_response(payload):
    response = Mock()
    response.status_code = 200
    response.headers = {}
    response.text = ''
    response.content = b'{}'
    response.json.return_value = payload
    return response


class TestHardwareAPI(unittest.TestCase):
    """Test cases for Snipe-IT hardware paging."""

    def setUp(self):
        self.mock_request = patch('inventory_sync.api.resilient_api.requests.request').start()
        self.api = HardwareAPI('https://snipe.example.com/api/v1', {'Authorization': 'Bearer t'})

    def tearDown(self):
        patch.stopall()

    def test_list_hardware_follows_offsets(self):
        self.mock_request.side_effect = [
            make_response({'total': 3, 'rows': [{'id': 1}, {'id': 2}]}),
            make_response({'total': 3, 'rows': [{'id': 3}]}),
        ]

        assets = self.api.list_hardware()

        self.assertEqual([a['id'] for a in assets], [1, 2, 3])
        urls = [c[0][1] for c in self.mock_request.call_args_list]
        self.assertEqual(urls[0], 'https://snipe.example.com/api/v1/hardware?limit=500&offset=0&sort=id&order=asc')
        self.assertIn('offset=2', urls[1])

    def test_limit_shrinks_page_size(self):
        self.mock_request.return_value = make_response({'total': 100, 'rows': [{'id': 1}, {'id': 2}]})

        assets = self.api.list_hardware(limit=2)

        self.assertEqual(len(assets), 2)
        self.assertEqual(self.mock_request.call_count, 1)
        self.assertIn('limit=2&', self.mock_request.call_args[0][1])


class TestSnipeITFacade(unittest.TestCase):
    def test_hardware_to_record(self):
        record = hardware_to_record({
            'id': 42,
            'name': 'LAB-MAC-07',
            'asset_tag': 'A0042',
            'serial': 'C02XK1',
            'model': {'id': 3, 'name': 'MacBook Pro 14'},
            'category': {'id': 5, 'name': 'Research'},
            'updated_at': {'datetime': '2025-01-15 09:30:00', 'formatted': '2025-01-15 09:30 AM'},
        })

        self.assertEqual(record.serial_number, 'C02XK1')
        self.assertEqual(record.record_id, '42')
        self.assertEqual(record.attribute('category'), 'Research')
        self.assertEqual(record.operating_system, 'MacBook Pro 14')
        self.assertEqual(record.last_sync.year, 2025)
        self.assertEqual(record.source, 'Snipe-IT')

    def test_hardware_without_name_uses_asset_tag(self):
        record = hardware_to_record({'id': 1, 'name': '', 'asset_tag': 'A0001', 'serial': None, 'category': None})

        self.assertEqual(record.display_name, 'A0001')
        self.assertIsNone(record.attribute('category'))
        self.assertIsNone(record.last_sync)

    @patch('snipeit.facade.snipeit_facade.HardwareAPI')
    def test_get_assets(self, mock_hardware_api):
        mock_hardware_api.return_value.list_hardware = MagicMock(return_value=[{'id': 1, 'serial': 'S1'}])

        facade = SnipeITFacade('https://snipe.example.com/api/v1', 'token', max_retries=2)
        records = facade.get_assets(limit=5)

        mock_hardware_api.assert_called_once_with(
            'https://snipe.example.com/api/v1',
            {'Authorization': 'Bearer token', 'Content-Type': 'application/json', 'Accept': 'application/json'},
            max_retries=2,
        )
        facade.hardware.list_hardware.assert_called_once_with(limit=5)
        self.assertEqual(records[0].serial_number, 'S1')


if __name__ == '__main__':
    unittest.main()
