import threading
import time
import unittest
from unittest.mock import patch

from healthboard.checks.batch import check_all
from healthboard.checks.results import HealthRecord
from healthboard.models import Endpoint

ENDPOINTS = [
    Endpoint(name=f"svc-{i}", url=f"http://svc-{i}.local/health") for i in range(4)
]


def _ok(ep: Endpoint) -> HealthRecord:
    return HealthRecord.success(ep.name, ep.url, status=200, latency_ms=1, response="ok")


class CheckAllTests(unittest.TestCase):
    def test_results_keep_input_order_when_probes_finish_out_of_order(self) -> None:
        # svc-0 is the slowest, svc-3 the fastest
        delays = {ep.name: 0.1 * (len(ENDPOINTS) - i) for i, ep in enumerate(ENDPOINTS)}
        finished: list[str] = []
        lock = threading.Lock()

        def fake_probe(ep, timeout_s=None):
            time.sleep(delays[ep.name])
            with lock:
                finished.append(ep.name)
            return _ok(ep)

        with patch("healthboard.checks.batch.probe", side_effect=fake_probe):
            records = check_all(ENDPOINTS)

        self.assertEqual([r.name for r in records], [ep.name for ep in ENDPOINTS])
        self.assertEqual(finished[0], "svc-3")

    def test_probes_run_concurrently(self) -> None:
        # Every probe waits for all the others; sequential probing would break the barrier.
        barrier = threading.Barrier(len(ENDPOINTS), timeout=5)

        def fake_probe(ep, timeout_s=None):
            barrier.wait()
            return _ok(ep)

        with patch("healthboard.checks.batch.probe", side_effect=fake_probe):
            records = check_all(ENDPOINTS)

        self.assertEqual(len(records), len(ENDPOINTS))

    def test_failed_endpoint_does_not_fail_the_batch(self) -> None:
        def fake_probe(ep, timeout_s=None):
            if ep.name == "svc-1":
                return HealthRecord.failure(ep.name, ep.url, error="connection refused")
            return _ok(ep)

        with patch("healthboard.checks.batch.probe", side_effect=fake_probe):
            records = check_all(ENDPOINTS)

        self.assertEqual([r.healthy for r in records], [True, False, True, True])
        self.assertEqual(records[1].status, 0)
        self.assertEqual(records[1].error, "connection refused")

    def test_timeout_is_passed_to_every_probe(self) -> None:
        seen: list[float] = []

        def fake_probe(ep, timeout_s=None):
            seen.append(timeout_s)
            return _ok(ep)

        with patch("healthboard.checks.batch.probe", side_effect=fake_probe):
            check_all(ENDPOINTS, timeout_s=2.5)

        self.assertEqual(seen, [2.5] * len(ENDPOINTS))

    def test_empty_endpoint_list(self) -> None:
        with patch("healthboard.checks.batch.probe") as mock_probe:
            self.assertEqual(check_all([]), [])
        mock_probe.assert_not_called()


if __name__ == "__main__":
    unittest.main()
