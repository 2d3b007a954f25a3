"""Dependency Injection Container."""
from typing import Optional

from bdtools.core.blackduck import check_connection_settings
from bdtools.core.config import BdToolsConfig
from bdtools.core.config import get_config
from bdtools.services.blackduck_service import BlackDuckService
from bdtools.services.bom_service import BomService
from bdtools.services.copyright_service import CopyrightService
from bdtools.services.project_service import ProjectService


class Container:
    """Simple DI Container to manage service lifecycles."""

    _instance: Optional['Container'] = None

    def __init__(self) -> None:
        self.config: BdToolsConfig = get_config()
        self._blackduck_service: BlackDuckService | None = None

    @classmethod
    def get_instance(cls) -> 'Container':
        if cls._instance is None:
            cls._instance = Container()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    # -- Services --

    def get_blackduck_service(self) -> BlackDuckService:
        """Get the shared connection. URL and token must be configured."""
        if not self._blackduck_service:
            bd = self.config.blackduck
            url, token = check_connection_settings(bd.url, bd.api_token)
            self._blackduck_service = BlackDuckService(
                url,
                token,
                trust_cert=bd.trust_cert,
                timeout=bd.timeout,
                retries=self.config.http.retries,
                pool_size=self.config.http.pool_size,
            )
        return self._blackduck_service

    def get_bom_service(self) -> BomService:
        return BomService(self.get_blackduck_service())

    def get_copyright_service(self) -> CopyrightService:
        return CopyrightService(self.get_blackduck_service())

    def get_project_service(self) -> ProjectService:
        return ProjectService(self.get_blackduck_service())

# Global Accessor


def get_container() -> Container:
    return Container.get_instance()
