import pytest

from order_agent.domain.exceptions import ValidationError
from order_agent.providers import create_provider
from order_agent.providers.deepseek_client import DeepSeekClient
from order_agent.providers.registry import get_provider_config


class DummySettings:
    default_provider = "deepseek"
    deepseek_api_key = "sk-test-0123456789"
    http_timeout = 1.0
    deepseek_base_url = "https://api.deepseek.com"


def test_create_provider_default(monkeypatch):
    monkeypatch.setattr("order_agent.providers.settings", DummySettings())
    provider = create_provider()
    assert isinstance(provider, DeepSeekClient)
    assert provider.name == "deepseek"


def test_create_provider_explicit_case_insensitive(monkeypatch):
    monkeypatch.setattr("order_agent.providers.settings", DummySettings())
    assert isinstance(create_provider("DeepSeek"), DeepSeekClient)


def test_create_provider_unknown(monkeypatch):
    monkeypatch.setattr("order_agent.providers.settings", DummySettings())
    with pytest.raises(ValidationError) as ei:
        create_provider("kimi")
    assert ei.value.code == "UNKNOWN_PROVIDER"


def test_registry_lookup():
    cfg = get_provider_config("DEEPSEEK")
    assert cfg.model("intent-extract").default_temperature == 0.0
    assert cfg.model("reply-compose").provider_model == "deepseek-chat"
    with pytest.raises(KeyError):
        get_provider_config("glm")
