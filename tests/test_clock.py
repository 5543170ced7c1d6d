import unittest
from datetime import datetime, timedelta, timezone

from workout_engine.utils.clock import utcnow


class TestUtcNow(unittest.TestCase):

    def test_naive_utc(self):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        now = utcnow()
        after = datetime.now(timezone.utc).replace(tzinfo=None)

        self.assertIsNone(now.tzinfo)
        self.assertTrue(before <= now <= after)

    def test_comparable_with_stored_timestamps(self):
        # Columns are naive; mixing aware values would raise TypeError here
        stored = datetime(2026, 1, 1, 12, 0, 0)
        self.assertGreater(utcnow() - stored, timedelta(0))


if __name__ == '__main__':
    unittest.main()
