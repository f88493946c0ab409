import unittest
from unittest.mock import patch

from healthboard.checks.fetch import FetchedResponse, FetchError, FetchTimeout
from healthboard.checks.probe import probe
from healthboard.models import Endpoint

EP = Endpoint(name="Demo API", url="http://demo.local/health")


def _fetched(status_code=200, body=b"", content_type="text/plain", encoding=None, latency_ms=12):
    return FetchedResponse(
        status_code=status_code,
        headers={"content-type": content_type},
        body=body,
        encoding=encoding,
        latency_ms=latency_ms,
    )


class ProbeTests(unittest.TestCase):
    def test_json_200_is_healthy_with_parsed_response(self) -> None:
        fetched = _fetched(body=b'{"status": "ok", "uptime": 42}', content_type="application/json")
        with patch("healthboard.checks.probe.fetch_with_timeout", return_value=fetched):
            record = probe(EP)

        self.assertTrue(record.healthy)
        self.assertEqual(record.status, 200)
        self.assertEqual(record.response, {"status": "ok", "uptime": 42})
        self.assertIsNone(record.error)

        payload = record.to_dict()
        self.assertEqual(payload["latency"], "12ms")
        self.assertEqual(payload["name"], "Demo API")
        self.assertEqual(payload["url"], "http://demo.local/health")
        self.assertNotIn("error", payload)
        self.assertTrue(payload["timestamp"].endswith("Z"))

    def test_json_content_type_with_charset_is_parsed(self) -> None:
        fetched = _fetched(body=b"[1, 2]", content_type="application/json; charset=utf-8")
        with patch("healthboard.checks.probe.fetch_with_timeout", return_value=fetched):
            record = probe(EP)

        self.assertEqual(record.response, [1, 2])

    def test_503_is_unhealthy_without_error(self) -> None:
        fetched = _fetched(status_code=503, body=b"Service Unavailable")
        with patch("healthboard.checks.probe.fetch_with_timeout", return_value=fetched):
            record = probe(EP)

        self.assertFalse(record.healthy)
        self.assertEqual(record.status, 503)
        self.assertIsNone(record.error)
        self.assertEqual(record.response, "Service Unavailable")
        self.assertNotIn("error", record.to_dict())

    def test_redirect_status_is_not_healthy(self) -> None:
        with patch(
            "healthboard.checks.probe.fetch_with_timeout",
            return_value=_fetched(status_code=302),
        ):
            record = probe(EP)

        self.assertFalse(record.healthy)

    def test_timeout_yields_failure_record(self) -> None:
        with patch(
            "healthboard.checks.probe.fetch_with_timeout",
            side_effect=FetchTimeout("request to http://demo.local/health timed out after 5000ms"),
        ):
            with self.assertLogs("healthboard.checks.probe", level="WARNING") as logs:
                record = probe(EP)

        self.assertEqual(record.status, 0)
        self.assertFalse(record.healthy)
        self.assertIn("timed out", record.error)
        payload = record.to_dict()
        self.assertNotIn("latency", payload)
        self.assertNotIn("response", payload)
        self.assertIn("Demo API", logs.output[0])

    def test_network_error_yields_failure_record(self) -> None:
        with patch(
            "healthboard.checks.probe.fetch_with_timeout",
            side_effect=FetchError("Name or service not known"),
        ):
            record = probe(EP)

        self.assertEqual(record.status, 0)
        self.assertEqual(record.error, "Name or service not known")

    def test_invalid_json_body_is_a_failure(self) -> None:
        fetched = _fetched(body=b"<html>oops</html>", content_type="application/json")
        with patch("healthboard.checks.probe.fetch_with_timeout", return_value=fetched):
            record = probe(EP)

        self.assertEqual(record.status, 0)
        self.assertFalse(record.healthy)
        self.assertIsNotNone(record.error)
        self.assertIsNone(record.latency_ms)

    def test_json_null_body_keeps_response_key(self) -> None:
        fetched = _fetched(body=b"null", content_type="application/json")
        with patch("healthboard.checks.probe.fetch_with_timeout", return_value=fetched):
            payload = probe(EP).to_dict()

        self.assertIn("response", payload)
        self.assertIsNone(payload["response"])

    def test_text_without_charset_decodes_as_utf8(self) -> None:
        fetched = _fetched(body="héllo".encode("utf-8"), encoding="ISO-8859-1")
        with patch("healthboard.checks.probe.fetch_with_timeout", return_value=fetched):
            record = probe(EP)

        self.assertEqual(record.response, "héllo")

    def test_timeout_is_forwarded_to_fetcher(self) -> None:
        with patch(
            "healthboard.checks.probe.fetch_with_timeout", return_value=_fetched()
        ) as mock_fetch:
            probe(EP, timeout_s=1.5)

        mock_fetch.assert_called_once_with("http://demo.local/health", timeout_s=1.5)


if __name__ == "__main__":
    unittest.main()
