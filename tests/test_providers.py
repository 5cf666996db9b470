import os
import unittest
from unittest.mock import patch

from howto import providers
from howto.errors import NotConfiguredError, UnknownProviderError
from howto.providers import AuthType


@patch("howto.providers.copilot.is_available", return_value=False)
class TestDetect(unittest.TestCase):
    """Test cases for provider auto-detection."""

    def test_nothing_configured(self, mock_available):
        with patch.dict(os.environ, {}, clear=True):
            provider, key = providers.detect()

        self.assertIsNone(provider)
        self.assertEqual(key, "")

    def test_priority_order(self, mock_available):
        env = {"OPENAI_API_KEY": "openai-key", "ANTHROPIC_API_KEY": "anthropic-key"}
        with patch.dict(os.environ, env, clear=True):
            provider, key = providers.detect()

        self.assertIs(provider, providers.OPENAI)
        self.assertEqual(key, "openai-key")

    def test_each_api_provider(self, mock_available):
        for expected in providers.API_PROVIDERS:
            with self.subTest(provider=expected.name):
                with patch.dict(os.environ, {expected.env_var: "secret"}, clear=True):
                    provider, key = providers.detect()

                self.assertIs(provider, expected)
                self.assertEqual(key, "secret")

    def test_later_provider_when_earlier_unset(self, mock_available):
        env = {"GEMINI_API_KEY": "gemini-key", "DEEPSEEK_API_KEY": "deepseek-key", "OPENAI_API_KEY": ""}
        with patch.dict(os.environ, env, clear=True):
            provider, _ = providers.detect()

        self.assertIs(provider, providers.GEMINI)

    def test_copilot_fallback(self, mock_available):
        mock_available.return_value = True
        with patch.dict(os.environ, {}, clear=True):
            provider, key = providers.detect()

        self.assertIs(provider, providers.GITHUB_COPILOT)
        self.assertEqual(key, "")

    def test_api_key_wins_over_copilot(self, mock_available):
        mock_available.return_value = True
        with patch.dict(os.environ, {"DEEPSEEK_API_KEY": "k"}, clear=True):
            provider, _ = providers.detect()

        self.assertIs(provider, providers.DEEPSEEK)
        mock_available.assert_not_called()


@patch("howto.providers.copilot.is_available", return_value=False)
class TestGetByName(unittest.TestCase):
    """Test cases for looking up a provider by name."""

    def test_configured_provider(self, mock_available):
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "anthropic-key"}, clear=True):
            provider, key = providers.get_by_name("Anthropic")

        self.assertIs(provider, providers.ANTHROPIC)
        self.assertEqual(key, "anthropic-key")

    def test_missing_key(self, mock_available):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(NotConfiguredError) as cm:
                providers.get_by_name("OpenAI")

        self.assertIn("OPENAI_API_KEY", str(cm.exception))

    def test_name_is_case_sensitive(self, mock_available):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "k"}, clear=True):
            with self.assertRaises(UnknownProviderError):
                providers.get_by_name("openai")

    def test_unknown_provider(self, mock_available):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(UnknownProviderError) as cm:
                providers.get_by_name("Mistral")

        self.assertEqual(cm.exception.name, "Mistral")

    def test_copilot_aliases(self, mock_available):
        mock_available.return_value = True
        for alias in ["GitHub Copilot", "Copilot", "copilot"]:
            with self.subTest(alias=alias):
                provider, key = providers.get_by_name(alias)

                self.assertIs(provider, providers.GITHUB_COPILOT)
                self.assertEqual(key, "")

    def test_copilot_unavailable(self, mock_available):
        with self.assertRaises(NotConfiguredError):
            providers.get_by_name("copilot")


@patch("howto.providers.copilot.is_available", return_value=True)
class TestListAll(unittest.TestCase):
    """Test cases for listing providers."""

    def test_one_record_per_provider_copilot_last(self, mock_available):
        with patch.dict(os.environ, {}, clear=True):
            statuses = providers.list_all()

        names = [s.name for s in statuses]
        self.assertEqual(names, ["OpenAI", "Anthropic", "Gemini", "DeepSeek", "GitHub Copilot"])
        self.assertEqual(len(names), len(set(names)))

        copilot_status = statuses[-1]
        self.assertEqual(copilot_status.env_var, "gh copilot (CLI)")
        self.assertEqual(copilot_status.default_model, "gpt-4")
        self.assertTrue(copilot_status.configured)

    def test_configured_flags_follow_environment(self, mock_available):
        with patch.dict(os.environ, {"GEMINI_API_KEY": "k"}, clear=True):
            statuses = {s.name: s for s in providers.list_all()}

        self.assertTrue(statuses["Gemini"].configured)
        self.assertFalse(statuses["OpenAI"].configured)
        self.assertEqual(statuses["Gemini"].env_var, "GEMINI_API_KEY")

        with patch.dict(os.environ, {}, clear=True):
            statuses = {s.name: s for s in providers.list_all()}

        self.assertFalse(statuses["Gemini"].configured)


class TestProviderTable(unittest.TestCase):

    def test_auth_types(self):
        self.assertIs(providers.OPENAI.auth_type, AuthType.BEARER)
        self.assertIs(providers.GEMINI.auth_type, AuthType.BEARER)
        self.assertIs(providers.DEEPSEEK.auth_type, AuthType.BEARER)
        self.assertIs(providers.ANTHROPIC.auth_type, AuthType.API_KEY)
        self.assertIs(providers.GITHUB_COPILOT.auth_type, AuthType.CLI)

    def test_descriptors_are_immutable(self):
        with self.assertRaises(AttributeError):
            providers.OPENAI.name = "Other"


if __name__ == "__main__":
    unittest.main()
