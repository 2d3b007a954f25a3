from dataclasses import dataclass
from dataclasses import field

import structlog

from bdtools.core.errors import RequestFailed
from bdtools.models.bom import BomEntry
from bdtools.models.origin import Origin
from bdtools.services.blackduck_service import BlackDuckService

logger = structlog.get_logger('origin_service')

ORIGINS_LINK = 'origins'
ORIGIN_LINK = 'origin'


@dataclass
class OriginResolution:
    origins: list[Origin] = field(default_factory=list)
    unresolved: int = 0
    # Origin lists that could not be loaded
    fetch_failures: int = 0

    @property
    def total(self) -> int:
        return len(self.origins) + self.unresolved


class OriginResolver:
    """Works out which origins of a BOM entry need copyright processing."""

    def __init__(self, service: BlackDuckService):
        self.service = service

    def resolve(self, entry: BomEntry) -> OriginResolution:
        if not entry.origins:
            # No origins listed means all of the component's origins apply.
            origins = self.fetch_all_origins(entry)
            if origins is None:
                return OriginResolution(fetch_failures=1)
            return OriginResolution(origins=origins)

        resolution = OriginResolution()
        for bom_origin in entry.origins:
            href = (
                bom_origin.href
                or bom_origin.first_link(ORIGIN_LINK)
                or bom_origin.origin
            )
            if not href:
                logger.error(
                    'Failed to find origin href - skipping this origin',
                    component=entry.component_name, origin=str(bom_origin),
                )
                resolution.unresolved += 1
                continue
            resolution.origins.append(
                Origin(
                    origin_name=bom_origin.name,
                    origin_id=bom_origin.external_id,
                    external_namespace=bom_origin.external_namespace,
                    resolved_href=href,
                ),
            )
        return resolution

    def fetch_all_origins(self, entry: BomEntry) -> list[Origin] | None:
        """All origins of the entry's component, or None if the fetch failed."""
        link = entry.first_link(ORIGINS_LINK)
        if not link:
            logger.warning(
                'Component has no origins link', component=entry.component_name,
            )
            return []
        try:
            return self.service.get_all(link, parser=Origin.model_validate)
        except RequestFailed as e:
            logger.error(
                'Failed to load all origins for component',
                component=entry.component_name, error=str(e),
            )
            return None
