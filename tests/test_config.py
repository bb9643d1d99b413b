"""Tests for configuration and gateway construction."""

import pytest

from connect_platform.config import ConfigurationError, Settings, require_secret_key
from connect_platform.providers import build_gateway
from connect_platform.providers.mock_provider import MockProcessorGateway
from connect_platform.providers.stripe_provider import StripeGateway


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSecretKey:
    @pytest.mark.parametrize("key", ["", "   ", "sk_test___PUT_YOUR_KEY_HERE__"])
    def test_missing_or_placeholder_fails_fast(self, key):
        with pytest.raises(ConfigurationError):
            require_secret_key(_settings(stripe_secret_key=key))

    def test_real_key(self):
        assert require_secret_key(_settings(stripe_secret_key=" sk_test_abc ")) == "sk_test_abc"


class TestBuildGateway:
    def test_stripe_without_key_fails(self):
        with pytest.raises(ConfigurationError):
            build_gateway(_settings(processor="stripe", stripe_secret_key=""))

    def test_stripe(self):
        gateway = build_gateway(_settings(processor="stripe", stripe_secret_key="sk_test_abc"))
        assert isinstance(gateway, StripeGateway)
        assert gateway.name == "stripe"

    def test_mock_needs_no_key(self):
        gateway = build_gateway(_settings(processor="mock", stripe_secret_key=""))
        assert isinstance(gateway, MockProcessorGateway)


def test_root_url_trailing_slash_stripped():
    assert _settings(root_url="https://example.test/").root_url == "https://example.test"
