"""Tests for configuration manager."""
import pytest
from src.intake_app.config_manager import ConfigManager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('INTAKE_API_BASE_URL', 'NEXT_PUBLIC_API_URL', 'API_URL', 'INTAKE_API_TIMEOUT', 'INTAKE_SEARCH_DEBOUNCE'):
        monkeypatch.delenv(name, raising=False)


class TestConfigManager:
    """Test configuration manager."""

    def test_default_values(self):
        """Test that default values are set correctly."""
        config = ConfigManager()
        assert config.api_base_url == 'http://localhost:3000/api'
        assert config.get('api_timeout') == 10.0
        assert config.get('search_debounce') == 0.5
        assert config.get('village_search_debounce') == 0.8
        assert config.salesman_min_query == 2
        assert config.village_min_query == 3
        assert config.max_upload_bytes == 10 * 1024 * 1024

    def test_environment_override(self, monkeypatch):
        """Test that prefixed environment variables override defaults."""
        monkeypatch.setenv('INTAKE_API_TIMEOUT', '20.0')
        monkeypatch.setenv('INTAKE_SEARCH_DEBOUNCE', '0.25')

        config = ConfigManager()
        assert config.get('api_timeout') == 20.0
        assert config.get('search_debounce') == 0.25

    def test_legacy_api_url_variable(self, monkeypatch):
        monkeypatch.setenv('NEXT_PUBLIC_API_URL', 'https://intake.example.com/api')
        assert ConfigManager().api_base_url == 'https://intake.example.com/api'

    def test_prefixed_api_url_wins(self, monkeypatch):
        monkeypatch.setenv('NEXT_PUBLIC_API_URL', 'https://legacy.example.com/api')
        monkeypatch.setenv('INTAKE_API_BASE_URL', 'https://new.example.com/api')
        assert ConfigManager().api_base_url == 'https://new.example.com/api'

    def test_explicit_argument_wins(self, monkeypatch):
        monkeypatch.setenv('NEXT_PUBLIC_API_URL', 'https://legacy.example.com/api')
        assert ConfigManager(api_base_url='http://test/api').api_base_url == 'http://test/api'

    def test_get_with_default(self):
        config = ConfigManager()
        assert config.get('nonexistent_key', 'default') == 'default'

    def test_set_value(self):
        config = ConfigManager()
        config.set('max_retries', 5)
        assert config.get('max_retries') == 5

    def test_get_all(self):
        all_config = ConfigManager().get_all()
        assert isinstance(all_config, dict)
        assert 'api_base_url' in all_config
        assert 'location_timeout' in all_config
