from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field
from pydantic import field_validator

from bdtools.models.resource import BlackDuckView


class MatchType(str, Enum):
    """What a project selection regex is matched against."""
    PROJECT_NAME = 'PROJECT_NAME'
    APPLICATION_ID = 'APPLICATION_ID'

    def __str__(self) -> str:
        return self.value


class ProjectMapping(BlackDuckView):
    """Links a project to an external application."""
    application_id: str | None = Field(alias='applicationId', default=None)


class Project(BlackDuckView):
    name: str
    description: str | None = None
    created_by: str | None = Field(alias='createdBy', default=None)
    created_at: datetime | None = Field(alias='createdAt', default=None)
    project_owner: str | None = Field(alias='projectOwner', default=None)

    @field_validator('created_at', mode='before')
    @classmethod
    def parse_datetime(cls, v: Any) -> datetime | None:
        if not v:
            return None
        if isinstance(v, datetime):
            return v
        try:
            return datetime.fromisoformat(str(v).replace('Z', '+00:00'))
        except (ValueError, TypeError):
            return None

    def to_row(self) -> list[str]:
        return [
            self.name,
            self.description or '',
            self.href or '',
            self.created_by or '',
            self.created_at.isoformat() if self.created_at else '',
            self.project_owner or '',
        ]


PROJECT_COLUMNS = [
    'name', 'description', 'href',
    'created_by', 'created_at', 'project_owner',
]


PROJECT_APPLICATION_COLUMNS = [
    'name', 'application_id', 'href',
    'created_by', 'created_at', 'project_owner',
]


def application_row(project: Project, application_id: str | None) -> list[str]:
    """A project row with its application ID in place of the description."""
    row = project.to_row()
    row[1] = application_id or ''
    return row
