import threading
import unittest

from dataset_processor.progress import ProgressReporter, ProgressSnapshot, run_in_background


class TestProgressReporter(unittest.TestCase):
    def test_percent_is_zero_without_total(self):
        progress = ProgressReporter()

        self.assertEqual(progress.percent, 0.0)
        progress.advance()
        self.assertEqual(progress.current, 0)

    def test_set_total_restarts_count(self):
        progress = ProgressReporter()
        progress.set_total(4)
        progress.advance()
        progress.advance()

        self.assertEqual(progress.percent, 0.5)

        progress.set_total(10)
        self.assertEqual(progress.snapshot(), ProgressSnapshot(total=10, current=0))

    def test_advance_clamps_at_total(self):
        progress = ProgressReporter()
        progress.set_total(2)
        for _ in range(5):
            progress.advance()

        self.assertEqual(progress.current, 2)
        self.assertEqual(progress.percent, 1.0)

    def test_reset(self):
        progress = ProgressReporter()
        progress.set_total(3)
        progress.advance()
        progress.reset()

        self.assertEqual(progress.snapshot(), ProgressSnapshot(0, 0))

    def test_negative_total_rejected(self):
        with self.assertRaises(ValueError):
            ProgressReporter().set_total(-1)

    def test_snapshots_are_consistent_under_concurrent_writes(self):
        progress = ProgressReporter()
        progress.set_total(10000)
        bad = []

        def writer():
            for _ in range(10000):
                progress.advance()

        def reader():
            for _ in range(2000):
                snap = progress.snapshot()
                if snap.current > snap.total or not 0.0 <= snap.percent <= 1.0:
                    bad.append(snap)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(bad, [])
        self.assertEqual(progress.current, 10000)

    def test_run_in_background_returns_result_and_progress(self):
        progress = ProgressReporter()

        def job(n, progress=None):
            progress.set_total(n)
            for _ in range(n):
                progress.advance()
            return "done"

        future = run_in_background(job, 3, progress=progress)

        self.assertEqual(future.result(timeout=5), "done")
        self.assertEqual(progress.percent, 1.0)

    def test_run_in_background_propagates_errors(self):
        def job():
            raise RuntimeError("boom")

        future = run_in_background(job)

        with self.assertRaises(RuntimeError):
            future.result(timeout=5)


if __name__ == '__main__':
    unittest.main()
