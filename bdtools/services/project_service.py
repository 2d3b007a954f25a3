import re
from dataclasses import dataclass

import structlog

from bdtools.core.errors import RequestFailed
from bdtools.models.project import MatchType
from bdtools.models.project import Project
from bdtools.models.project import ProjectMapping
from bdtools.models.resource import BlackDuckView
from bdtools.services.blackduck_service import BlackDuckService

logger = structlog.get_logger('project_service')

VERSIONS_LINK = 'versions'
CODELOCATIONS_LINK = 'codelocations'
PROJECT_MAPPINGS_LINK = 'project-mappings'


@dataclass
class DeleteStats:
    projects: int = 0
    versions: int = 0
    code_locations: int = 0
    failed: int = 0


class ProjectService:
    """Finds and deletes projects."""

    def __init__(self, service: BlackDuckService):
        self.service = service

    def get_application_id(self, project: Project) -> str | None:
        """The application ID of the project's first mapping, if any."""
        link = project.first_link(PROJECT_MAPPINGS_LINK)
        if not link:
            return None
        try:
            mappings = self.service.get_all(link, parser=ProjectMapping.model_validate)
        except RequestFailed as e:
            logger.error(
                'Failed to load application id', project=project.name, error=str(e),
            )
            return None
        return mappings[0].application_id if mappings else None

    def find_matching_projects(
        self,
        pattern: str,
        match_type: MatchType = MatchType.PROJECT_NAME,
    ) -> list[Project]:
        """
        Projects whose whole name, or whole application ID, matches the
        regular expression. Projects without an application ID never match
        by application ID.
        """
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid regular expression {pattern!r}: {e}") from e

        results = []
        for project in self.service.get_projects():
            if match_type == MatchType.PROJECT_NAME:
                value = project.name
            else:
                value = self.get_application_id(project)
                if not value:
                    logger.warning(
                        'Project has no application ID - ignoring',
                        project=project.name,
                    )
                    continue
            if regex.fullmatch(value):
                results.append(project)
        return results

    def _get_linked(self, view: BlackDuckView, rel: str) -> list[BlackDuckView]:
        link = view.first_link(rel)
        if not link:
            return []
        return self.service.get_all(link, parser=BlackDuckView.model_validate)

    def _delete(self, view: BlackDuckView, stats: DeleteStats, **context) -> bool:
        try:
            self.service.delete(view.href)
            return True
        except RequestFailed as e:
            logger.error('Failed to delete', href=view.href, error=str(e), **context)
            stats.failed += 1
            return False

    def delete_project(self, project: Project, stats: DeleteStats) -> None:
        """
        Delete a project's scans, all but its first version, and then the
        project itself together with its final version.
        """
        try:
            versions = self._get_linked(project, VERSIONS_LINK)
        except RequestFailed as e:
            logger.error('Failed to load project versions', project=project.name, error=str(e))
            versions = []

        for version in versions:
            version_name = getattr(version, 'versionName', version.id)
            try:
                code_locations = self._get_linked(version, CODELOCATIONS_LINK)
            except RequestFailed as e:
                logger.error(
                    'Failed to load mapped code locations',
                    project=project.name, version=version_name, error=str(e),
                )
                continue
            for code_location in code_locations:
                logger.info(
                    'Deleting code location',
                    project=project.name, version=version_name,
                    code_location=getattr(code_location, 'name', code_location.id),
                )
                if self._delete(code_location, stats, project=project.name):
                    stats.code_locations += 1

        for version in versions[1:]:
            version_name = getattr(version, 'versionName', version.id)
            logger.info('Deleting project version', project=project.name, version=version_name)
            if self._delete(version, stats, project=project.name):
                stats.versions += 1

        logger.info('Deleting project and final version', project=project.name)
        if self._delete(project, stats, project=project.name):
            stats.projects += 1
