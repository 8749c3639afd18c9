import unittest
from unittest.mock import Mock, patch

from inventory_sync.models import DeviceRecord, Outcome
from inventory_sync.reconciliation import ReconciliationPolicy
from inventory_sync.runbook import run_attribute_sync, run_existence_check


def device(serial, category=None, name=None):
    return DeviceRecord(serial_number=serial, display_name=name or serial, attributes={'category': category})


class TestRunExistenceCheck(unittest.TestCase):
    def test_reports_missing_in_source_order(self):
        sources = [device('A'), device('B'), device(''), device('c'), device('D')]
        targets = [device('C'), device('A')]

        result = run_existence_check(sources, targets, runbook='demo')

        self.assertEqual([r.serial_number for r in result.notable_records], ['B', 'D'])
        self.assertEqual(result.summary.count(Outcome.MISSING), 2)
        self.assertEqual(result.summary.count(Outcome.MATCHED_NO_CHANGE), 2)
        self.assertEqual(result.summary.count(Outcome.SKIPPED_NO_SERIAL), 1)
        self.assertEqual(result.summary.runbook, 'demo')
        self.assertEqual([row['Serial Number'] for row in result.report_rows], ['B', 'D'])


class TestRunAttributeSync(unittest.TestCase):
    """Test cases for the batched attribute-sync flow."""

    def setUp(self):
        self.mock_sleep = patch('inventory_sync.batching.time.sleep').start()
        self.policy = ReconciliationPolicy.for_attribute('category', 'category')
        self.sources = [device('ABC123', 'Finance'), device('', 'IT'), device('XYZ999', 'Sales')]
        self.targets = [device('ABC123', 'Finance'), device('XYZ999', 'Ops')]

    def tearDown(self):
        patch.stopall()

    def test_live_run_writes_changed_records(self):
        writer = Mock()

        result = run_attribute_sync(self.sources, self.targets, self.policy, writer, dry_run=False)

        writer.assert_called_once()
        source, target = writer.call_args[0]
        self.assertEqual(source.attribute('category'), 'Sales')
        self.assertEqual(target.attribute('category'), 'Ops')
        summary = result.summary.as_dict()
        self.assertEqual(summary['total'], 3)
        self.assertEqual(summary['noChange'], 1)
        self.assertEqual(summary['skippedNoSerial'], 1)
        self.assertEqual(summary['needsUpdate'], 1)
        self.assertEqual(summary['updated'], 1)
        self.assertEqual(summary['batches'], 1)

    def test_dry_run_is_repeatable_and_never_writes(self):
        writer = Mock()

        first = run_attribute_sync(self.sources, self.targets, self.policy, writer, dry_run=True).summary.as_dict()
        second = run_attribute_sync(self.sources, self.targets, self.policy, writer, dry_run=True).summary.as_dict()

        writer.assert_not_called()
        first.pop('durationSeconds')
        second.pop('durationSeconds')
        self.assertEqual(first, second)
        self.assertTrue(first['dryRun'])
        self.assertEqual(first['updated'], 1)

    def test_failed_write_is_counted_and_run_continues(self):
        sources = [device('S1', 'x'), device('S2', 'x'), device('S3', 'x')]
        targets = [device('S1', 'y'), device('S2', 'y'), device('S3', 'y')]
        writer = Mock(side_effect=[None, RuntimeError('409 Conflict'), None])

        summary = run_attribute_sync(sources, targets, self.policy, writer, dry_run=False).summary

        self.assertEqual(writer.call_count, 3)
        self.assertEqual(summary.updated, 2)
        self.assertEqual(summary.errors, 1)
        self.assertEqual(summary.count(Outcome.ERROR), 1)
        self.assertEqual(summary.count(Outcome.MATCHED_NEEDS_UPDATE), 2)

    def test_failed_write_is_reported_separately(self):
        sources = [device('S1', 'Kiosk'), device('S2', 'Kiosk')]
        targets = [device('S1', 'Standard'), device('S2')]
        writer = Mock(side_effect=[RuntimeError('403 Forbidden'), None])

        result = run_attribute_sync(sources, targets, self.policy, writer, dry_run=False)

        self.assertEqual([item.source.serial_number for item in result.notable], ['S2'])
        self.assertEqual([item.source.serial_number for item in result.failed], ['S1'])
        self.assertEqual(
            [(row['Serial Number'], row['Previous Value'], row['New Value'], row['Status']) for row in result.report_rows],
            [('S1', 'Standard', 'Kiosk', 'Failed: 403 Forbidden'), ('S2', '', 'Kiosk', 'Updated')],
        )
        self.assertIn('Previous Value', result.report_columns)

    def test_dry_run_rows_say_would_update(self):
        result = run_attribute_sync(self.sources, self.targets, self.policy, Mock(), dry_run=True)

        self.assertEqual(len(result.report_rows), 1)
        self.assertEqual(result.report_rows[0]['Status'], 'Would update')
        self.assertEqual(result.report_rows[0]['Previous Value'], 'Ops')
        self.assertEqual(result.report_rows[0]['New Value'], 'Sales')

    def test_five_updates_in_batches_of_two(self):
        sources = [device(f'S{i}', 'new') for i in range(5)]
        targets = [device(f'S{i}', 'old') for i in range(5)]
        writer = Mock()

        summary = run_attribute_sync(
            sources, targets, self.policy, writer, dry_run=False, batch_size=2, batch_delay=0
        ).summary

        self.assertEqual(summary.batches, 3)
        self.assertEqual(summary.updated, 5)
        self.assertEqual(writer.call_count, 5)
        self.mock_sleep.assert_not_called()


if __name__ == '__main__':
    unittest.main()
