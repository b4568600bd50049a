"""
Unit tests for BrowseSession.
"""

import base64
import json
import sys
import tempfile
import unittest
from io import BytesIO
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock, patch

from PIL import Image

from asset_browser.BrowseSession import BrowseSession, texture_to_data_uri
from asset_browser.RenderingProtocol import SamplingOptions, Texture
from utils.Args import Args
from utils.Errors import GatewayError
from utils.Logger import Logger

BASE = "https://textures.example.com/matcaps"
ROOT = BASE + "/512/webp/"


def png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), (10, 120, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


def fake_client() -> Mock:
    pages = {
        ROOT: '<a href="?C=N;O=D">Name</a><a href="red/">red</a><a href="blue/">blue</a>',
        ROOT + "red/": '<a href="01.png">01</a><a href="02.webp">02</a>',
        ROOT + "blue/": '<a href="notes.txt">notes</a>',
    }
    client = Mock()
    client.fetch_text.side_effect = lambda url: pages[url]
    client.fetch_bytes.return_value = png_bytes()
    client.save_asset.return_value = {"success": True, "path": "/site/public/textures/downloaded-matcap/x.webp"}
    return client


class TestBrowseSessionOpen(unittest.TestCase):
    """Test cases for open() and catalog publication."""

    def setUp(self) -> None:
        Logger.initialize(log_level="WARNING", log_file=False)
        self.client = fake_client()
        self.material = SimpleNamespace(matcap=None)

    def test_open_builds_catalog_from_kind_browse_path(self) -> None:
        ready = Mock()
        session = BrowseSession(self.client, self.material, "matcap", texture_base_url=BASE, on_catalog_ready=ready)
        catalog = session.open()
        self.assertEqual(catalog.folders, {"red": ["01.png", "02.webp"], "blue": []})
        ready.assert_called_once_with(catalog)
        self.assertIs(session.catalog, catalog)

    def test_explicit_browse_root_wins(self) -> None:
        session = BrowseSession(self.client, self.material, texture_base_url="https://other.example.com/")
        session.open(ROOT)
        self.assertEqual(self.client.fetch_text.call_args_list[0][0][0], ROOT)

    def test_missing_browse_root(self) -> None:
        session = BrowseSession(self.client, self.material)
        with self.assertRaises(ValueError):
            session.open()

    def test_root_failure_propagates(self) -> None:
        self.client.fetch_text.side_effect = GatewayError("HTTP 502", status_code=502)
        ready = Mock()
        session = BrowseSession(self.client, self.material, browse_root=ROOT, on_catalog_ready=ready)
        with self.assertRaises(GatewayError):
            session.open()
        ready.assert_not_called()
        self.assertIsNone(session.catalog)

    def test_production_is_noop(self) -> None:
        session = BrowseSession(self.client, self.material, browse_root=ROOT, is_production=True)
        self.assertIsNone(session.open())
        self.client.fetch_text.assert_not_called()

    def test_unknown_kind(self) -> None:
        with self.assertRaises(ValueError):
            BrowseSession(self.client, self.material, "bumpMap")

    def test_dispose_during_crawl_drops_catalog(self) -> None:
        """A crawl that finishes after dispose() never reaches the listener."""
        ready = Mock()
        session = BrowseSession(self.client, self.material, browse_root=ROOT, on_catalog_ready=ready)
        pages = self.client.fetch_text.side_effect

        def fetch_then_dispose(url):
            session.dispose()
            return pages(url)

        self.client.fetch_text.side_effect = fetch_then_dispose
        self.assertIsNone(session.open())
        ready.assert_not_called()
        self.assertIsNone(session.catalog)

    def test_open_after_dispose_raises(self) -> None:
        session = BrowseSession(self.client, self.material, browse_root=ROOT)
        session.dispose()
        with self.assertRaises(RuntimeError):
            session.open()

    def test_context_manager_disposes(self) -> None:
        with BrowseSession(self.client, self.material, browse_root=ROOT) as session:
            session.open()
        self.assertTrue(session.disposed)
        self.assertIsNone(session.catalog)


class TestBrowseSessionSelect(unittest.TestCase):
    """Test cases for select()."""

    def setUp(self) -> None:
        Logger.initialize(log_level="WARNING", log_file=False)
        self.client = fake_client()
        self.material = SimpleNamespace(matcap=None, uniforms={"uMatcapMap": SimpleNamespace(value=None)})

    def test_select_applies_texture(self) -> None:
        session = BrowseSession(self.client, self.material, browse_root=ROOT)
        session.open()
        texture = session.select("red", "02.webp")
        self.client.fetch_bytes.assert_called_once_with(ROOT + "red/02.webp")
        self.assertIs(self.material.matcap, texture)
        self.assertIs(session.current_texture, texture)

    def test_select_into_uniform(self) -> None:
        session = BrowseSession(self.client, self.material, "matcap", uniform="uMatcapMap", browse_root=ROOT)
        session.open()
        texture = session.select("red", "01.png")
        self.assertIs(self.material.uniforms["uMatcapMap"].value, texture)
        self.assertIsNone(self.material.matcap)

    def test_select_before_open(self) -> None:
        session = BrowseSession(self.client, self.material, browse_root=ROOT)
        self.assertIsNone(session.select("red", "01.png"))
        self.client.fetch_bytes.assert_not_called()

    def test_failed_select_keeps_previous_texture(self) -> None:
        session = BrowseSession(self.client, self.material, browse_root=ROOT)
        session.open()
        first = session.select("red", "01.png")
        self.client.fetch_bytes.side_effect = GatewayError("HTTP 502", status_code=502)
        self.assertIsNone(session.select("red", "02.webp"))
        self.assertIs(self.material.matcap, first)
        self.assertIs(session.current_texture, first)

    def test_select_into_missing_uniform(self) -> None:
        """A uniform the material lacks is logged; select() returns None and keeps the current texture."""
        material = {"uniforms": {}}
        session = BrowseSession(self.client, material, "matcap", uniform="uMatcap", browse_root=ROOT)
        session.open()
        self.assertIsNone(session.select("red", "01.png"))
        self.assertIsNone(session.current_texture)
        self.assertEqual(material, {"uniforms": {}})


class TestBrowseSessionSave(unittest.TestCase):
    """Test cases for save_current()."""

    def setUp(self) -> None:
        Logger.initialize(log_level="WARNING", log_file=False)
        self.client = fake_client()
        self.material = SimpleNamespace(map=None)
        self.session = BrowseSession(self.client, self.material, "map", browse_root=ROOT)

    def test_save_without_texture(self) -> None:
        result = self.session.save_current()
        self.assertFalse(result["success"])
        self.client.save_asset.assert_not_called()

    def test_save_sends_source_url(self) -> None:
        self.session.open()
        self.session.select("red", "01.png")
        result = self.session.save_current("shiny")
        self.assertTrue(result["success"])
        self.client.save_asset.assert_called_once_with("downloaded-map", "shiny", ROOT + "red/01.png")

    @patch("asset_browser.BrowseSession.time.time", return_value=1712345678.5)
    def test_save_default_name(self, _mock_time: Mock) -> None:
        self.session.open()
        self.session.select("red", "01.png")
        self.session.save_current()
        self.assertEqual(self.client.save_asset.call_args[0][1], "map-1712345678500")

    def test_save_inline_texture_as_data_uri(self) -> None:
        """A texture without a remote source is sent as a PNG data URI."""
        self.session.open()
        texture = self.session.select("red", "01.png")
        texture.source_url = None
        self.session.save_current("generated")
        image_url = self.client.save_asset.call_args[0][2]
        self.assertTrue(image_url.startswith("data:image/png;base64,"))

    def test_save_gateway_error(self) -> None:
        self.session.open()
        self.session.select("red", "01.png")
        self.client.save_asset.side_effect = GatewayError("Save request failed: refused")
        result = self.session.save_current("x")
        self.assertEqual(result, {"success": False, "error": "Save request failed: refused"})

    def test_save_server_failure_returned(self) -> None:
        self.session.open()
        self.session.select("red", "01.png")
        self.client.save_asset.return_value = {"success": False, "error": "HTTP 404"}
        self.assertFalse(self.session.save_current("x")["success"])


class TestTextureToDataUri(unittest.TestCase):
    """Test cases for texture_to_data_uri."""

    def test_round_trips_pixels(self) -> None:
        image = Image.new("RGB", (2, 2), (1, 2, 3))
        uri = texture_to_data_uri(Texture(image=image, name="t", options=SamplingOptions()))
        payload = uri.split(";base64,", 1)[1]
        decoded = Image.open(BytesIO(base64.b64decode(payload)))
        self.assertEqual(decoded.getpixel((0, 0)), (1, 2, 3))


class TestBrowseSessionFromArgs(unittest.TestCase):
    """Test cases for from_args()."""

    def setUp(self) -> None:
        self._original_argv = sys.argv.copy()
        Args._parsed_args = {}
        Args._config = {}
        Args._initialized = False
        Logger.initialize(log_level="WARNING", log_file=False)

    def tearDown(self) -> None:
        sys.argv = self._original_argv
        Args._initialized = False

    @patch("utils.Args.load_dotenv", lambda: None)
    def test_from_args(self) -> None:
        sys.argv = ["test", "noop", "--kind", "normalMap", "--browse-root", ROOT, "--port", "9123", "--host", "127.0.0.1"]
        Args.initialize()
        session = BrowseSession.from_args(material={})
        self.assertEqual(session.kind.value, "normalMap")
        self.assertEqual(session.resolve_browse_root(), ROOT)

    @patch("utils.Args.load_dotenv", lambda: None)
    @patch("asset_browser.BrowseSession.CatalogCrawler.crawl")
    def test_from_args_production_config(self, mock_crawl: Mock) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            config_path.write_text(json.dumps({"is_production": True, "browse_root": ROOT}), encoding="utf-8")
            sys.argv = ["test", "noop"]
            Args.initialize(config_file=config_path)
        session = BrowseSession.from_args(material={})
        self.assertIsNone(session.open())
        mock_crawl.assert_not_called()


if __name__ == "__main__":
    unittest.main()
