"""Configuration management for bdtools."""
import os
from dataclasses import dataclass
from dataclasses import field

# The Black Duck common library defaults to this when no timeout is supplied.
DEFAULT_TIMEOUT = 20000


def _env_flag(name: str) -> bool:
    return os.getenv(name, '').strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class BlackDuckConfig:
    """Connection details for a single Black Duck instance."""
    url: str | None = field(
        default_factory=lambda: os.getenv('BLACKDUCK_URL'),
    )
    api_token: str | None = field(
        default_factory=lambda: os.getenv('BLACKDUCK_API_TOKEN'),
    )
    trust_cert: bool = field(
        default_factory=lambda: _env_flag('BLACKDUCK_TRUST_CERT'),
    )
    timeout: int = field(
        default_factory=lambda: int(
            os.getenv('BLACKDUCK_TIMEOUT', str(DEFAULT_TIMEOUT)),
        ),
    )

    def __repr__(self) -> str:
        token = "'*****'" if self.api_token else 'None'
        return (
            f"BlackDuckConfig(url={self.url!r}, api_token={token}, "
            f"trust_cert={self.trust_cert!r}, timeout={self.timeout!r})"
        )

    @property
    def base_url(self) -> str:
        return (self.url or '').rstrip('/')


@dataclass
class HttpConfig:
    """Transport tuning for the shared requests session."""
    retries: int = 3
    pool_size: int = 10


@dataclass
class BdToolsConfig:
    blackduck: BlackDuckConfig = field(default_factory=BlackDuckConfig)
    http: HttpConfig = field(default_factory=HttpConfig)

    def override(
        self,
        url: str | None = None,
        api_token: str | None = None,
        trust_cert: bool | None = None,
        timeout: int | None = None,
    ) -> None:
        """Apply command-line values on top of the environment defaults."""
        if url:
            self.blackduck.url = url.strip()
        if api_token:
            self.blackduck.api_token = api_token.strip()
        if trust_cert is not None:
            self.blackduck.trust_cert = trust_cert
        if timeout is not None:
            self.blackduck.timeout = timeout

    @classmethod
    def load(cls) -> 'BdToolsConfig':
        return cls()


_config: BdToolsConfig | None = None


def get_config() -> BdToolsConfig:
    global _config
    if _config is None:
        _config = BdToolsConfig.load()
    return _config
