import os
import tempfile
import unittest
from dataclasses import replace
from unittest.mock import patch

from resumeiq.core.config import _get_env_bool, _get_env_int, _get_env_list, load_settings, validate_settings
from support import make_settings


class EnvHelperTests(unittest.TestCase):
    def test_bool_int_and_list_parsing(self):
        env = {"FLAG": "Yes", "COUNT": "12", "BAD_COUNT": "twelve", "ORIGINS": " a.com, ,b.com "}
        with patch.dict(os.environ, env):
            self.assertTrue(_get_env_bool("FLAG", False))
            self.assertEqual(_get_env_int("COUNT", 3), 12)
            self.assertEqual(_get_env_int("BAD_COUNT", 3), 3)
            self.assertEqual(_get_env_list("ORIGINS", []), ("a.com", "b.com"))
            self.assertFalse(_get_env_bool("UNSET_FLAG_FOR_TEST", False))

    def test_provider_defaults(self):
        env = {"AI_PROVIDER": "groq", "AI_MODEL": "", "AI_BASE_URL": ""}
        with patch.dict(os.environ, env):
            config = load_settings()
        self.assertEqual(config.ai_model, "llama-3.3-70b-versatile")
        self.assertEqual(config.ai_base_url, "https://api.groq.com/openai/v1")
        self.assertEqual(config.daily_report_limit, 10)
        self.assertEqual(config.ai_temperature, 0.2)

    def test_provider_key_fallback(self):
        env = {"AI_PROVIDER": "openai", "AI_API_KEY": "", "OPENAI_API_KEY": " sk-openai "}
        with patch.dict(os.environ, env):
            self.assertEqual(load_settings().ai_api_key, "sk-openai")


class ValidateSettingsTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config = make_settings(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_complete_settings_pass(self):
        validate_settings(self.config)

    def test_lists_every_problem(self):
        broken = replace(self.config, jwt_secret=None, ai_api_key=None, quota_scope="team")
        with self.assertRaises(RuntimeError) as ctx:
            validate_settings(broken)
        message = str(ctx.exception)
        self.assertIn("JWT_SECRET", message)
        self.assertIn("AI_API_KEY", message)
        self.assertIn("QUOTA_SCOPE", message)

    def test_unknown_provider(self):
        with self.assertRaises(RuntimeError) as ctx:
            validate_settings(replace(self.config, ai_provider="anthropic-x"))
        self.assertIn("AI_PROVIDER", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
