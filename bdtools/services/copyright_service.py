import time
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from typing import NamedTuple

import structlog

from bdtools.core.errors import RequestFailed
from bdtools.models.bom import BomEntry
from bdtools.models.copyright import CopyrightRecord
from bdtools.services.blackduck_service import BlackDuckService
from bdtools.services.bom_service import BomService
from bdtools.services.origin_service import OriginResolver

logger = structlog.get_logger('copyright_service')

# Retries after the first pass when a disabled copyright still reads as active.
MAX_RETRIES = 5


@dataclass
class CopyrightStats:
    components: int = 0
    origins: int = 0
    unresolved_origins: int = 0
    origin_fetch_failures: int = 0
    no_copyrights: int = 0
    copyright_fetch_failures: int = 0
    copyrights: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    validation_failures: int = 0
    failures: list[str] = field(default_factory=list)
    validation_failure_ids: list[str] = field(default_factory=list)
    start_time: float = field(default_factory=time.time)

    @property
    def all_failures(self) -> list[str]:
        """Copyrights that failed to update or failed to validate after updating."""
        return self.failures + self.validation_failure_ids

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time


class CopyrightListing(NamedTuple):
    component_name: str
    origin_name: str
    copyright: str


@dataclass
class ListStats:
    components: int = 0
    origins: int = 0
    origin_fetch_failures: int = 0
    copyright_fetch_failures: int = 0
    copyrights: int = 0


class CopyrightService:
    """Lists and disables the copyrights of a project version's components."""

    def __init__(
        self,
        service: BlackDuckService,
        bom_service: BomService | None = None,
        resolver: OriginResolver | None = None,
    ):
        self.service = service
        self.bom_service = bom_service or BomService(service)
        self.resolver = resolver or OriginResolver(service)

    def get_copyrights(self, origin_url: str) -> list[CopyrightRecord] | None:
        """Copyrights of an origin, or None when they could not be loaded."""
        try:
            return self.service.get_all(
                f"{origin_url.rstrip('/')}/copyrights",
                parser=CopyrightRecord.model_validate,
            )
        except RequestFailed as e:
            logger.error(
                'Failed to load copyrights for component origin',
                origin=origin_url, error=str(e),
            )
            return None

    def disable_copyright(self, copyright: CopyrightRecord, stats: CopyrightStats) -> bool:
        """Set a copyright inactive. Returns True only if a write was made."""
        if copyright.is_inactive:
            logger.debug('Copyright is already inactive - skipping', copyright=copyright.href)
            stats.skipped += 1
            return False

        body = copyright.to_request_body()
        body['active'] = False
        try:
            if not copyright.href:
                raise RequestFailed('Copyright has no href to update')
            self.service.put_json(copyright.href, body)
        except RequestFailed as e:
            stats.failures.append(copyright.href or repr(copyright.text))
            stats.errors += 1
            logger.error(
                'Failed to disable copyright',
                copyright=copyright.href, text=copyright.text, error=str(e),
            )
            return False

        logger.info('Disabled copyright', copyright=copyright.href)
        stats.updated += 1
        return True

    def find_still_active(self, origin_url: str, only_disable_multiple: bool) -> list[str] | None:
        """
        Re-read an origin's copyrights and return those not yet inactive,
        or None when the re-read failed.
        """
        copyrights = self.get_copyrights(origin_url)
        if copyrights is None:
            return None
        # The record count may have changed since the write, so apply the
        # single-copyright policy to what is there now.
        if len(copyrights) == 1 and only_disable_multiple:
            return []
        return [c.href or repr(c.text) for c in copyrights if not c.is_inactive]

    def handle_origin(self, origin_url: str, stats: CopyrightStats, only_disable_multiple: bool) -> None:
        """Disable every copyright of one origin, verifying and retrying the writes."""
        for attempt in range(1, MAX_RETRIES + 2):
            copyrights = self.get_copyrights(origin_url)
            if copyrights is None:
                stats.copyright_fetch_failures += 1
                return
            if not copyrights:
                if attempt == 1:
                    stats.no_copyrights += 1
                logger.info('No copyrights for component origin', origin=origin_url)
                return

            if len(copyrights) == 1 and only_disable_multiple:
                if attempt == 1:
                    stats.copyrights += 1
                    stats.skipped += 1
                    logger.info(
                        "Single copyright - skipping at user's request",
                        origin=origin_url,
                    )
                return

            any_changed = False
            for copyright in copyrights:
                stats.copyrights += 1
                if self.disable_copyright(copyright, stats):
                    any_changed = True

            if not any_changed:
                return

            still_active = self.find_still_active(origin_url, only_disable_multiple)
            if still_active is None:
                stats.copyright_fetch_failures += 1
                logger.error(
                    'Could not verify disabled copyrights - re-read failed',
                    origin=origin_url,
                )
                return
            if not still_active:
                return

            if attempt <= MAX_RETRIES:
                logger.warning(
                    'Copyrights still enabled after disabling them - retrying',
                    origin=origin_url,
                    still_active=len(still_active),
                    retry=attempt,
                )
                continue

            logger.error(
                'Retry maximum reached - copyrights still enabled',
                origin=origin_url,
                still_active=len(still_active),
                retries=MAX_RETRIES,
            )
            for href in still_active:
                stats.validation_failures += 1
                stats.validation_failure_ids.append(href)
                logger.error(
                    'Validation failed - copyright is not disabled after setting active=false',
                    copyright=href,
                )

    def handle_bom_entry(self, entry: BomEntry, stats: CopyrightStats, only_disable_multiple: bool) -> None:
        stats.components += 1
        resolution = self.resolver.resolve(entry)
        stats.origins += resolution.total
        stats.unresolved_origins += resolution.unresolved
        stats.origin_fetch_failures += resolution.fetch_failures

        for origin in resolution.origins:
            if not origin.url:
                logger.error(
                    'Origin has no href - skipping this origin',
                    component=entry.component_name, origin=origin.display_name,
                )
                stats.unresolved_origins += 1
                continue
            self.handle_origin(origin.url, stats, only_disable_multiple)

    def disable_copyrights(self, project_version_url: str, only_disable_multiple: bool = False) -> CopyrightStats:
        """
        Disable the copyrights of every origin of every component in a
        project version's bill of materials.

        Only a failure to load the bill of materials itself is raised;
        everything after that is logged and counted in the returned stats.
        """
        logger.info(
            'Disabling copyrights',
            project_version=project_version_url,
            only_disable_multiple=only_disable_multiple,
        )
        entries = self.bom_service.get_bom_entries(project_version_url)
        stats = CopyrightStats()
        for entry in entries:
            logger.info('Handling component', component=entry.display_name)
            self.handle_bom_entry(entry, stats, only_disable_multiple)
        return stats

    def iter_active_copyrights(self, entries: list[BomEntry], stats: ListStats) -> Iterator[CopyrightListing]:
        """Active copyrights of the given components, one per origin and copyright."""
        for entry in entries:
            stats.components += 1
            resolution = self.resolver.resolve(entry)
            stats.origins += resolution.total
            stats.origin_fetch_failures += resolution.fetch_failures

            for origin in resolution.origins:
                if not origin.url:
                    continue
                copyrights = self.get_copyrights(origin.url)
                if copyrights is None:
                    stats.copyright_fetch_failures += 1
                    continue
                active_count = 0
                for copyright in copyrights:
                    if copyright.is_inactive:
                        continue
                    active_count += 1
                    stats.copyrights += 1
                    yield CopyrightListing(
                        entry.component_name, origin.display_name, copyright.text,
                    )
                if active_count == 0:
                    logger.info(
                        'No active copyrights for component origin',
                        component=entry.component_name, origin=origin.url,
                    )
