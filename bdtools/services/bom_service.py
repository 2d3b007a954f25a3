from urllib.parse import urlparse

import structlog

from bdtools.models.bom import BomEntry
from bdtools.services.blackduck_service import BlackDuckService

logger = structlog.get_logger('bom_service')

# Hide components the user has ignored, directly or through a match.
BOM_FILTERS = [
    ('sort', 'projectName ASC'),
    ('filter', 'bomInclusion:false'),
    ('filter', 'bomMatchInclusion:false'),
]


def validate_resource_url(url: str) -> str:
    """Return the URL without a trailing slash, or raise ValueError."""
    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError(f"Not a valid Black Duck resource URL: {url!r}")
    return url.strip().rstrip('/')


class BomService:
    """Reads the bill of materials of a project version."""

    def __init__(self, service: BlackDuckService):
        self.service = service

    def get_bom_entries(self, project_version_url: str) -> list[BomEntry]:
        """
        All included components of a project version, sorted by name.

        Raises RequestFailed if the BOM cannot be loaded; an empty or
        missing BOM is returned as an empty list.
        """
        base_url = validate_resource_url(project_version_url)
        entries = self.service.get_all(
            f"{base_url}/components",
            params=BOM_FILTERS,
            parser=BomEntry.model_validate,
        )
        logger.debug(
            'Loaded bill of materials',
            project_version=base_url, entries=len(entries),
        )
        return entries
