from datetime import datetime
from typing import Any

from pydantic import Field
from pydantic import field_validator

from bdtools.models.resource import BlackDuckView


class CopyrightRecord(BlackDuckView):
    """A single copyright statement detected for a component origin."""
    active: bool | None = None
    kb_copyright: str | None = Field(alias='kbCopyright', default=None)
    updated_copyright: str | None = Field(
        alias='updatedCopyright', default=None,
    )
    file_sha1s: list[str] = Field(alias='fileSha1s', default_factory=list)
    source: str | None = None
    updated_at: datetime | None = Field(alias='updatedAt', default=None)
    updated_by: str | None = Field(alias='updatedBy', default=None)

    @field_validator('updated_at', mode='before')
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

    @property
    def is_inactive(self) -> bool:
        """Only an explicit false counts; a missing flag is treated as active."""
        return self.active is False

    @property
    def text(self) -> str:
        """Copyright text on a single line, preferring the user's edit."""
        raw = self.updated_copyright or self.kb_copyright or ''
        return raw.replace('\r', ' ').replace('\n', ' ')

    def to_request_body(self) -> dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)
