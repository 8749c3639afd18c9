import unittest
from unittest.mock import patch, call

from inventory_sync.batching import run_in_batches


class TestRunInBatches(unittest.TestCase):
    """Test cases for the batch scheduler."""

    def setUp(self):
        self.mock_sleep = patch('inventory_sync.batching.time.sleep').start()

    def tearDown(self):
        patch.stopall()

    def test_five_items_in_batches_of_two(self):
        seen = []

        run = run_in_batches([1, 2, 3, 4, 5], 2, 0, lambda item: seen.append(item) or item * 10)

        self.assertEqual(run.batches, 3)
        self.assertEqual(seen, [1, 2, 3, 4, 5])
        self.assertEqual(run.results, [10, 20, 30, 40, 50])
        self.mock_sleep.assert_not_called()

    def test_sleeps_between_batches_only(self):
        run_in_batches(list(range(5)), 2, 1.5, lambda item: item)

        self.assertEqual(self.mock_sleep.call_args_list, [call(1.5), call(1.5)])

    def test_empty_work_list(self):
        run = run_in_batches([], 10, 5, lambda item: item)

        self.assertEqual(run.batches, 0)
        self.assertEqual(run.results, [])
        self.mock_sleep.assert_not_called()

    def test_single_batch_does_not_sleep(self):
        run = run_in_batches([1, 2], 50, 10, lambda item: item)

        self.assertEqual(run.batches, 1)
        self.mock_sleep.assert_not_called()

    def test_invalid_batch_size(self):
        with self.assertRaises(ValueError):
            run_in_batches([1], 0, 0, lambda item: item)


if __name__ == '__main__':
    unittest.main()
