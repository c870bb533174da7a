import unittest
from unittest.mock import Mock, patch

from tutor_relay.config import ConfigResolver
from tutor_relay.constants import DEFAULT_MODEL
from tutor_relay.errors import ConfigError


class ConfigResolverTests(unittest.TestCase):
    def test_environment_credential_wins(self) -> None:
        fetcher = Mock(return_value="from-ssm")
        resolver = ConfigResolver(
            environ={"GEMINI_API_KEY": "from-env", "GEMINI_API_KEY_PARAMETER_NAME": "/p"},
            parameter_fetcher=fetcher,
        )

        config = resolver.resolve()

        self.assertEqual(config.credential, "from-env")
        self.assertEqual(config.model, DEFAULT_MODEL)
        fetcher.assert_not_called()

    def test_falls_back_to_ssm_parameter(self) -> None:
        fetcher = Mock(return_value="from-ssm")
        resolver = ConfigResolver(
            environ={"GEMINI_API_KEY_PARAMETER_NAME": "/tutor/gemini-api-key"},
            parameter_fetcher=fetcher,
        )

        config = resolver.resolve()

        self.assertEqual(config.credential, "from-ssm")
        fetcher.assert_called_once_with("/tutor/gemini-api-key")

    def test_missing_credential_raises_config_error(self) -> None:
        resolver = ConfigResolver(environ={"GEMINI_API_KEY": "  "})

        with self.assertRaises(ConfigError) as ctx:
            resolver.resolve()

        self.assertEqual(ctx.exception.status_code, 500)

    def test_ssm_failure_raises_config_error(self) -> None:
        fetcher = Mock(side_effect=RuntimeError("SSM parameter /p has no value"))
        resolver = ConfigResolver(
            environ={"GEMINI_API_KEY_PARAMETER_NAME": "/p"}, parameter_fetcher=fetcher
        )

        with self.assertRaises(ConfigError):
            resolver.resolve()

    def test_credential_is_rechecked_on_every_resolve(self) -> None:
        environ: dict[str, str] = {}
        resolver = ConfigResolver(environ=environ)

        with self.assertRaises(ConfigError):
            resolver.resolve()

        environ["GEMINI_API_KEY"] = "late-key"
        environ["GEMINI_MODEL"] = "gemini-other"
        config = resolver.resolve()

        self.assertEqual(config.credential, "late-key")
        self.assertEqual(config.model, "gemini-other")

    def test_rotated_ssm_credential_is_read_on_next_resolve(self) -> None:
        ssm_client = Mock()
        ssm_client.get_parameter.side_effect = [
            {"Parameter": {"Value": "old-key"}},
            {"Parameter": {"Value": "rotated-key"}},
        ]
        resolver = ConfigResolver(environ={"GEMINI_API_KEY_PARAMETER_NAME": "/p"})

        with patch("tutor_relay.infra.runtime.get_ssm_client", return_value=ssm_client):
            first = resolver.resolve()
            second = resolver.resolve()

        self.assertEqual(first.credential, "old-key")
        self.assertEqual(second.credential, "rotated-key")
        self.assertEqual(ssm_client.get_parameter.call_count, 2)

    def test_repr_hides_credential(self) -> None:
        config = ConfigResolver(environ={"GEMINI_API_KEY": "top-secret"}).resolve()

        self.assertNotIn("top-secret", repr(config))


if __name__ == "__main__":
    unittest.main()
