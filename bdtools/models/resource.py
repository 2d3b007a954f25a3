from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ResourceLink(BaseModel):
    rel: str
    href: str

    model_config = ConfigDict(extra='ignore')


class ResourceMeta(BaseModel):
    """The `_meta` block every Black Duck resource carries."""
    href: str | None = None
    allow: list[str] = Field(default_factory=list)
    links: list[ResourceLink] = Field(default_factory=list)

    model_config = ConfigDict(extra='allow')

    def first_link(self, rel: str) -> str | None:
        for link in self.links:
            if link.rel == rel:
                return link.href
        return None


class BlackDuckView(BaseModel):
    """Base for any resource returned by the Black Duck REST API."""
    meta: ResourceMeta | None = Field(alias='_meta', default=None)

    model_config = ConfigDict(
        populate_by_name=True,
        extra='allow',
    )

    @property
    def href(self) -> str | None:
        return self.meta.href if self.meta else None

    @property
    def id(self) -> str | None:
        """The last path segment of the resource URL."""
        if not self.href:
            return None
        return self.href.rstrip('/').rsplit('/', 1)[-1]

    def first_link(self, rel: str) -> str | None:
        return self.meta.first_link(rel) if self.meta else None

    @property
    def links(self) -> list[ResourceLink]:
        return self.meta.links if self.meta else []
