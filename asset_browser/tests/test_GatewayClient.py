"""
Unit tests for GatewayClient.
"""

import unittest
from unittest.mock import MagicMock, Mock

import requests

from asset_browser.GatewayClient import GatewayClient
from utils.Errors import GatewayError


def _response(status_code: int = 200, text: str = "", content: bytes = b"", json_data=None) -> Mock:
    resp = Mock(status_code=status_code, text=text, content=content)
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON")
    else:
        resp.json.return_value = json_data
    return resp


class TestGatewayClientFetch(unittest.TestCase):
    """Test cases for proxied fetches."""

    def setUp(self) -> None:
        self.session = MagicMock(spec=requests.Session)
        self.client = GatewayClient("127.0.0.1", 8081, session=self.session, timeout=5)

    def test_base_url(self) -> None:
        self.assertEqual(self.client.base_url, "http://127.0.0.1:8081")

    def test_fetch_text_goes_through_proxy(self) -> None:
        self.session.get.return_value = _response(text="<a href='red/'>red</a>")
        html = self.client.fetch_text("https://example.com/512/webp/")
        self.assertEqual(html, "<a href='red/'>red</a>")
        self.session.get.assert_called_once_with(
            "http://127.0.0.1:8081/proxy?url=https%3A%2F%2Fexample.com%2F512%2Fwebp%2F",
            timeout=5,
        )

    def test_fetch_bytes(self) -> None:
        self.session.get.return_value = _response(content=b"\x89PNG")
        self.assertEqual(self.client.fetch_bytes("https://example.com/a.png"), b"\x89PNG")

    def test_non_2xx_raises(self) -> None:
        self.session.get.return_value = _response(status_code=502)
        with self.assertRaises(GatewayError) as cm:
            self.client.fetch_text("https://example.com/missing/")
        self.assertEqual(cm.exception.status_code, 502)
        self.assertEqual(cm.exception.url, "https://example.com/missing/")

    def test_network_failure_raises(self) -> None:
        self.session.get.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(GatewayError) as cm:
            self.client.fetch_text("https://example.com/")
        self.assertIsNone(cm.exception.status_code)

    def test_token_appended_to_target(self) -> None:
        client = GatewayClient("localhost", 9000, token="s3cret", session=self.session)
        self.assertEqual(
            client.proxy_url("https://example.com/a/"),
            "http://localhost:9000/proxy?url=https%3A%2F%2Fexample.com%2Fa%2F%3Ftoken%3Ds3cret",
        )


class TestGatewayClientSave(unittest.TestCase):
    """Test cases for save_asset."""

    def setUp(self) -> None:
        self.session = MagicMock(spec=requests.Session)
        self.client = GatewayClient("127.0.0.1", 8081, session=self.session, token="tok")

    def test_save_posts_payload(self) -> None:
        self.session.post.return_value = _response(json_data={"success": True, "path": "/p/a.webp"})
        result = self.client.save_asset("downloaded-matcap", "shiny", "https://example.com/red/01.webp")
        self.assertEqual(result, {"success": True, "path": "/p/a.webp"})
        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], "http://127.0.0.1:8081/download-texture")
        self.assertEqual(kwargs["json"], {
            "targetFolder": "downloaded-matcap",
            "fileName": "shiny",
            "imageUrl": "https://example.com/red/01.webp?token=tok",
        })

    def test_data_uri_sent_unchanged(self) -> None:
        self.session.post.return_value = _response(json_data={"success": True})
        self.client.save_asset("downloaded-map", "m", "data:image/png;base64,AAAA")
        self.assertEqual(self.session.post.call_args[1]["json"]["imageUrl"], "data:image/png;base64,AAAA")

    def test_error_payload_returned(self) -> None:
        self.session.post.return_value = _response(status_code=500, json_data={"success": False, "error": "disk full"})
        self.assertEqual(
            self.client.save_asset("downloaded-map", "m", "data:image/png;base64,AAAA"),
            {"success": False, "error": "disk full"},
        )

    def test_non_json_response_raises(self) -> None:
        self.session.post.return_value = _response(status_code=413)
        with self.assertRaises(GatewayError) as cm:
            self.client.save_asset("downloaded-map", "m", "data:image/png;base64,AAAA")
        self.assertEqual(cm.exception.status_code, 413)

    def test_network_failure_raises(self) -> None:
        self.session.post.side_effect = requests.Timeout("slow")
        with self.assertRaises(GatewayError):
            self.client.save_asset("downloaded-map", "m", "data:image/png;base64,AAAA")


if __name__ == "__main__":
    unittest.main()
