import pytest
from pydantic import ValidationError

from umami_views.config import DEFAULT_HOST, ConnectionConfig, Settings


class TestSettings:
    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("UMAMI_HOST", "https://stats.example.com/api")
        monkeypatch.setenv("UMAMI_WEBSITE_ID", "abc")
        monkeypatch.setenv("UMAMI_TOKEN", "tok")
        settings = Settings(_env_file=None)
        assert settings.host == "https://stats.example.com/api"
        assert settings.website_id == "abc"
        assert settings.token == "tok"

    def test_defaults(self, monkeypatch):
        for name in ("UMAMI_HOST", "UMAMI_WEBSITE_ID", "UMAMI_TOKEN", "UMAMI_POST_PREFIX"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.host == DEFAULT_HOST
        assert settings.website_id == ""
        assert settings.post_prefix == "/post/"
        assert not ConnectionConfig.from_settings(settings).is_complete


class TestConnectionConfig:
    def test_frozen(self):
        config = ConnectionConfig(endpoint=DEFAULT_HOST, site_id="s", token="t")
        with pytest.raises(ValidationError):
            config.token = "other"

    def test_api_key_only_for_hosted_service(self):
        assert ConnectionConfig(endpoint=DEFAULT_HOST).uses_api_key
        assert not ConnectionConfig(endpoint="https://stats.example.com/api").uses_api_key

    def test_trailing_slash_is_dropped(self):
        settings = Settings(_env_file=None, host=DEFAULT_HOST + "/", website_id="s", token="t")
        config = ConnectionConfig.from_settings(settings)
        assert config.endpoint == DEFAULT_HOST
        assert config.uses_api_key
        assert config.is_complete
