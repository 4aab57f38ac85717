"""Settings validation: a missing signing secret is fatal at startup."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from app.core.config import Settings


class TestSettings(unittest.TestCase):
    def build(self, **env: str) -> Settings:
        with patch.dict(os.environ, env, clear=True):
            return Settings(_env_file=None)

    def test_missing_secret_is_fatal(self) -> None:
        with self.assertRaises(ValidationError):
            self.build()

    def test_blank_secret_is_fatal(self) -> None:
        with self.assertRaises(ValidationError):
            self.build(JWT_SECRET="   ")

    def test_short_secret_rejected_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            self.build(JWT_SECRET="short", APP_ENV="prod")

    def test_defaults(self) -> None:
        s = self.build(JWT_SECRET="dev-secret")
        self.assertEqual(s.JWT_EXPIRE_DAYS, 7)
        self.assertEqual(s.jwt_expire_seconds, 7 * 24 * 60 * 60)
        self.assertEqual(s.AUTH_COOKIE_NAME, "token")
        self.assertFalse(s.secure_cookies)

    def test_prod_uses_secure_cookies(self) -> None:
        s = self.build(JWT_SECRET="p" * 40, APP_ENV="prod")
        self.assertTrue(s.secure_cookies)

    def test_database_url_scheme(self) -> None:
        self.assertEqual(self.build(JWT_SECRET="x", DATABASE_URL="sqlite://").DATABASE_URL, "sqlite://")
        with self.assertRaises(ValidationError):
            self.build(JWT_SECRET="x", DATABASE_URL="mysql://localhost/db")

    def test_secret_is_not_revealed_in_repr(self) -> None:
        s = self.build(JWT_SECRET="do-not-print-me")
        self.assertNotIn("do-not-print-me", repr(s))


if __name__ == "__main__":
    unittest.main()
