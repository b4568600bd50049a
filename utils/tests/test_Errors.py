"""
Unit tests for utils.Errors helpers.
"""

import unittest
from unittest.mock import Mock, patch

from utils.Errors import GatewayError, record_crash, record_error, record_warning


class TestGatewayError(unittest.TestCase):
    """Test GatewayError."""

    def test_carries_url_and_status(self) -> None:
        err = GatewayError("Failed", url="https://example.com/a/", status_code=502)
        self.assertEqual(str(err), "Failed")
        self.assertEqual(err.url, "https://example.com/a/")
        self.assertEqual(err.status_code, 502)

    def test_defaults_to_none(self) -> None:
        err = GatewayError("offline")
        self.assertIsNone(err.url)
        self.assertIsNone(err.status_code)


class TestRecordCrash(unittest.TestCase):
    """Test record_crash."""

    @patch("utils.Errors.Logger", Mock())
    def test_record_crash_logs_and_raises(self) -> None:
        """record_crash logs at exception level and raises RuntimeError."""
        with self.assertRaises(RuntimeError) as ctx:
            record_crash("fatal")
        self.assertEqual(str(ctx.exception), "fatal")


class TestRecordError(unittest.TestCase):
    """Test record_error."""

    @patch("utils.Errors.Logger")
    def test_record_error_logs_with_context(self, mock_logger: Mock) -> None:
        record_error("download-texture", "boom")
        mock_logger.error.assert_called_once_with("download-texture: boom")
        mock_logger.exception.assert_not_called()

    @patch("utils.Errors.Logger")
    def test_record_error_without_context(self, mock_logger: Mock) -> None:
        record_error("", "boom")
        mock_logger.error.assert_called_once_with("boom")

    @patch("utils.Errors.Logger")
    def test_record_error_with_traceback(self, mock_logger: Mock) -> None:
        """with_traceback=True logs at exception level."""
        record_error("proxy", "boom", with_traceback=True)
        mock_logger.exception.assert_called_once_with("proxy: boom")
        mock_logger.error.assert_not_called()


class TestRecordWarning(unittest.TestCase):
    """Test record_warning."""

    @patch("utils.Errors.Logger")
    def test_record_warning_logs_warning(self, mock_logger: Mock) -> None:
        record_warning("Skipping folder red", "HTTP 404")
        mock_logger.warning.assert_called_once_with("Skipping folder red: HTTP 404")


if __name__ == "__main__":
    unittest.main()
