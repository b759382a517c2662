import tempfile
import unittest
from dataclasses import replace
from datetime import timedelta

from resumeiq.core.errors import ApiError
from resumeiq.core.security import verify_access_token
from support import make_settings, make_token

OWNER = "3e2d1c0b-a987-4654-8321-0fedcba98765"


class VerifyAccessTokenTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config = make_settings(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _reject(self, authorization, config=None) -> ApiError:
        with self.assertRaises(ApiError) as ctx:
            verify_access_token(authorization, config or self.config)
        return ctx.exception

    def test_valid_token_yields_identity(self):
        token = make_token(OWNER, email="jane@example.com")
        identity = verify_access_token(f"Bearer {token}", self.config)
        self.assertEqual(identity.owner_id, OWNER)
        self.assertEqual(identity.email, "jane@example.com")

    def test_missing_or_malformed_header(self):
        for header in (None, "", "Token abc", "bearer abc"):
            error = self._reject(header)
            self.assertEqual(error.status_code, 401)
            self.assertEqual(error.message, "Missing or malformed Authorization header")

    def test_empty_token(self):
        self.assertEqual(self._reject("Bearer    ").message, "Token is empty")

    def test_expired_token(self):
        token = make_token(OWNER, expires_in=timedelta(minutes=-5))
        error = self._reject(f"Bearer {token}")
        self.assertEqual(error.status_code, 401)
        self.assertEqual(error.code, "SESSION_EXPIRED")

    def test_wrong_secret_and_audience_are_invalid(self):
        forged = make_token(OWNER, secret="another-secret-key-with-at-least-32-bytes")
        wrong_aud = make_token(OWNER, audience="anon")
        for token in (forged, wrong_aud, "not.a.jwt"):
            error = self._reject(f"Bearer {token}")
            self.assertEqual(error.code, "INVALID_TOKEN")

    def test_missing_secret_is_server_error(self):
        error = self._reject(f"Bearer {make_token(OWNER)}", replace(self.config, jwt_secret=None))
        self.assertEqual(error.status_code, 500)


if __name__ == "__main__":
    unittest.main()
