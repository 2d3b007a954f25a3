from pydantic import Field

from bdtools.models.resource import BlackDuckView


class BomOrigin(BlackDuckView):
    """An origin reference embedded in a bill-of-materials entry."""
    name: str | None = None
    external_namespace: str | None = Field(
        alias='externalNamespace', default=None,
    )
    external_id: str | None = Field(alias='externalId', default=None)
    # URL of the origin resource, when the server includes it
    origin: str | None = None

    def __str__(self) -> str:
        label = self.name or self.external_id or '<unnamed>'
        return f"{label} ({self.external_namespace or 'unknown'})"


class BomEntry(BlackDuckView):
    """A component included in a project version's bill of materials."""
    component_name: str = Field(alias='componentName', default='')
    component_version_name: str | None = Field(
        alias='componentVersionName', default=None,
    )
    component: str | None = None
    component_version: str | None = Field(
        alias='componentVersion', default=None,
    )
    origins: list[BomOrigin] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        if self.component_version_name:
            return f"{self.component_name} {self.component_version_name}"
        return self.component_name
