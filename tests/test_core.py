import os
import unittest
from unittest.mock import patch

from starlette.requests import Request

from cv_analyzer.core import config
from cv_analyzer.core.rate_limit import upload_rate_limit_key


def _request(headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/v1/upload",
            "headers": [(key.lower().encode(), value.encode()) for key, value in headers.items()],
            "client": ("203.0.113.7", 5000),
        }
    )


class UploadRateLimitKeyTests(unittest.TestCase):
    def test_caller_identity_is_the_key(self):
        self.assertEqual(upload_rate_limit_key(_request({"X-User-Id": " user-1 "})), "user:user-1")

    def test_client_address_without_identity(self):
        self.assertEqual(upload_rate_limit_key(_request({})), "203.0.113.7")


class SettingsHelperTests(unittest.TestCase):
    def test_flag_parsing(self):
        with patch.dict(os.environ, {"FLAG_ON": "Yes", "FLAG_OFF": "0", "FLAG_BAD": "maybe"}):
            self.assertTrue(config._env_flag("FLAG_ON", False))
            self.assertFalse(config._env_flag("FLAG_OFF", True))
            self.assertTrue(config._env_flag("FLAG_UNSET_FOR_TEST", True))
            with self.assertRaises(RuntimeError):
                config._env_flag("FLAG_BAD", True)

    def test_upload_size_must_be_positive_number(self):
        with patch.dict(os.environ, {"SIZE_OK": "2048", "SIZE_ZERO": "0", "SIZE_BAD": "ten"}):
            self.assertEqual(config._env_bytes("SIZE_OK", 1), 2048)
            self.assertEqual(config._env_bytes("SIZE_UNSET_FOR_TEST", 7), 7)
            with self.assertRaises(RuntimeError):
                config._env_bytes("SIZE_ZERO", 1)
            with self.assertRaises(RuntimeError):
                config._env_bytes("SIZE_BAD", 1)

    def test_origins_are_trimmed(self):
        with patch.dict(os.environ, {"ORIGINS_FOR_TEST": "https://a.example/, ,http://localhost:3000"}):
            self.assertEqual(
                config._env_origins("ORIGINS_FOR_TEST", ()),
                ("https://a.example", "http://localhost:3000"),
            )


if __name__ == "__main__":
    unittest.main()
