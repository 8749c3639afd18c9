import unittest
import datetime

from inventory_sync.models import ActionResult, DeviceRecord, Outcome, Ownership, RunSummary


class TestOwnership(unittest.TestCase):
    def test_parse(self):
        self.assertIs(Ownership.parse('company'), Ownership.CORPORATE)
        self.assertIs(Ownership.parse('Corporate'), Ownership.CORPORATE)
        self.assertIs(Ownership.parse('personal'), Ownership.PERSONAL)
        self.assertIs(Ownership.parse('unknown'), Ownership.UNKNOWN)
        self.assertIs(Ownership.parse(None), Ownership.UNKNOWN)


class TestDeviceRecord(unittest.TestCase):
    def test_report_row(self):
        record = DeviceRecord(
            serial_number='SN1',
            display_name='Laptop',
            operating_system='Windows',
            last_sync=datetime.datetime(2025, 1, 1, tzinfo=datetime.timezone.utc),
            ownership=Ownership.CORPORATE,
            attributes={'group_tag': None},
        )

        row = record.as_report_row()

        self.assertEqual(row['Serial Number'], 'SN1')
        self.assertEqual(row['Ownership'], 'Corporate')
        self.assertEqual(row['Last Sync'], '2025-01-01T00:00:00+00:00')
        self.assertEqual(row['Group Tag'], '')


class TestRunSummary(unittest.TestCase):
    def test_failed_action_moves_count_to_error(self):
        summary = RunSummary()
        summary.record_outcome(Outcome.MATCHED_NEEDS_UPDATE)
        summary.record_outcome(Outcome.MATCHED_NEEDS_UPDATE)

        summary.record_action(ActionResult(applied=True))
        summary.record_action(ActionResult(applied=False, error='boom'))

        self.assertEqual(summary.updated, 1)
        self.assertEqual(summary.errors, 1)
        self.assertEqual(summary.count(Outcome.MATCHED_NEEDS_UPDATE), 1)
        self.assertEqual(summary.count(Outcome.ERROR), 1)
        self.assertEqual(sum(summary.counts.values()), summary.total)

    def test_as_dict_keys(self):
        data = RunSummary(runbook='demo', dry_run=True, duration_seconds=1.234).as_dict()

        self.assertEqual(data['runbook'], 'demo')
        self.assertTrue(data['dryRun'])
        self.assertEqual(data['durationSeconds'], 1.23)
        for key in ('missing', 'noChange', 'needsUpdate', 'skippedNoSerial',
                    'skippedNoSourceValue', 'notFoundInTarget', 'error', 'updated', 'errors', 'batches'):
            self.assertEqual(data[key], 0)


if __name__ == '__main__':
    unittest.main()
