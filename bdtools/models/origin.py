from pydantic import Field

from bdtools.models.resource import BlackDuckView


class Origin(BlackDuckView):
    """A provenance record tying a component version to its evidence."""
    origin_name: str | None = Field(alias='originName', default=None)
    origin_id: str | None = Field(alias='originId', default=None)
    external_namespace: str | None = Field(
        alias='externalNamespace', default=None,
    )
    # Set for origins resolved from a BOM entry rather than fetched
    resolved_href: str | None = Field(default=None, exclude=True)

    @property
    def url(self) -> str | None:
        return self.resolved_href or self.href

    @property
    def display_name(self) -> str:
        return self.origin_name or self.origin_id or self.url or '<unknown>'
