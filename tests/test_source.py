import tempfile
import unittest
from pathlib import Path

import httpx

from limitrofes.errors import ErrorKind, FetchError
from limitrofes.source import fetch_text, is_url, load_text, read_text


CSV = "NM_MUN,NM_LIM\nPelotas,Arroio Grande\n"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestFetchText(unittest.TestCase):
    def test_ok_returns_text(self):
        client = _client(lambda req: httpx.Response(200, text=CSV))
        self.assertEqual(fetch_text("https://example.test/data.csv", client=client), CSV)

    def test_non_success_status_is_fetch_error(self):
        client = _client(lambda req: httpx.Response(404, text="not found"))
        with self.assertRaises(FetchError) as ctx:
            fetch_text("https://example.test/data.csv", client=client)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertIs(ctx.exception.kind, ErrorKind.FETCH_FAILURE)

    def test_transport_error_is_fetch_error(self):
        def handler(req):
            raise httpx.ConnectError("connection refused", request=req)

        with self.assertRaises(FetchError):
            fetch_text("https://example.test/data.csv", client=_client(handler))

    def test_invalid_url_is_fetch_error(self):
        with self.assertRaises(FetchError) as ctx:
            fetch_text("http://[::1/limites.csv")
        self.assertIs(ctx.exception.kind, ErrorKind.FETCH_FAILURE)


class TestLocalSource(unittest.TestCase):
    def test_read_text(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "limites.csv"
            p.write_text(CSV, encoding="utf-8")
            self.assertEqual(read_text(p), CSV)
            self.assertEqual(load_text(str(p)), CSV)

    def test_missing_file_is_fetch_error(self):
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(FetchError):
                read_text(Path(d) / "missing.csv")

    def test_is_url(self):
        self.assertTrue(is_url("https://raw.githubusercontent.com/x.csv"))
        self.assertTrue(is_url("HTTP://example.test"))
        self.assertFalse(is_url("./data/limites.csv"))


if __name__ == "__main__":
    unittest.main()
