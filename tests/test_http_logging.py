import unittest

from fastapi.testclient import TestClient

from listquery.core.http_logging import _request_id_from_header
from listquery.main import app


class RequestLoggingTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def tearDown(self):
        self.client.close()

    def test_valid_request_id_is_preserved(self):
        external_request_id = "listing-check-2026_10_18"
        response = self.client.get("/health", headers={"X-Request-ID": external_request_id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers.get("x-request-id"), external_request_id)

    def test_invalid_request_id_is_replaced(self):
        response = self.client.get("/health", headers={"X-Request-ID": "bad id with spaces"})
        request_id = response.headers.get("x-request-id")
        self.assertNotEqual(request_id, "bad id with spaces")
        self.assertRegex(str(request_id), r"^[A-Za-z0-9._-]{1,128}$")

    def test_request_is_logged(self):
        with self.assertLogs("listquery.http", level="INFO") as logs:
            self.client.get("/health")
        self.assertTrue(any("GET /health status=200" in line for line in logs.output))

    def test_blank_header_gets_generated_id(self):
        self.assertEqual(len(_request_id_from_header("  ")), 32)


if __name__ == "__main__":
    unittest.main()
