from bdtools.core.config import BdToolsConfig
from bdtools.core.config import BlackDuckConfig
from bdtools.core.config import DEFAULT_TIMEOUT


def test_blackduck_config_repr_masks_token():
    """Test the API token is masked in the config repr."""
    config = BlackDuckConfig(url='https://bd.example.com', api_token='secret-token')
    assert 'secret-token' not in repr(config)
    assert '*****' in repr(config)


def test_blackduck_config_from_environment(monkeypatch):
    """Test connection settings are read from BLACKDUCK_* variables."""
    monkeypatch.setenv('BLACKDUCK_URL', 'https://bd.example.com/')
    monkeypatch.setenv('BLACKDUCK_API_TOKEN', 'env-token')
    monkeypatch.setenv('BLACKDUCK_TRUST_CERT', 'true')
    monkeypatch.setenv('BLACKDUCK_TIMEOUT', '60')

    config = BlackDuckConfig()

    assert config.base_url == 'https://bd.example.com'
    assert config.api_token == 'env-token'
    assert config.trust_cert is True
    assert config.timeout == 60


def test_blackduck_config_defaults(monkeypatch):
    """Test defaults apply when no variables are set."""
    for name in ('BLACKDUCK_URL', 'BLACKDUCK_API_TOKEN', 'BLACKDUCK_TRUST_CERT', 'BLACKDUCK_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)

    config = BlackDuckConfig()

    assert config.url is None
    assert config.trust_cert is False
    assert config.timeout == DEFAULT_TIMEOUT
    assert 'api_token=None' in repr(config)


def test_override_applies_command_line_values(monkeypatch):
    """Test command-line values replace environment values."""
    monkeypatch.setenv('BLACKDUCK_URL', 'https://env.example.com')
    monkeypatch.setenv('BLACKDUCK_API_TOKEN', 'env-token')
    config = BdToolsConfig.load()

    config.override(url=' https://cli.example.com ', trust_cert=True, timeout=5)

    assert config.blackduck.url == 'https://cli.example.com'
    assert config.blackduck.api_token == 'env-token'
    assert config.blackduck.trust_cert is True
    assert config.blackduck.timeout == 5


def test_override_ignores_missing_values(monkeypatch):
    """Test unset command-line values keep the environment values."""
    monkeypatch.setenv('BLACKDUCK_URL', 'https://env.example.com')
    monkeypatch.setenv('BLACKDUCK_TRUST_CERT', '1')
    config = BdToolsConfig.load()

    config.override()

    assert config.blackduck.url == 'https://env.example.com'
    assert config.blackduck.trust_cert is True
