from pydantic import Field

from bdtools.models.resource import BlackDuckView


class User(BlackDuckView):
    user_name: str = Field(alias='userName')
    email: str | None = None
    first_name: str | None = Field(alias='firstName', default=None)
    last_name: str | None = Field(alias='lastName', default=None)
    external_user_name: str | None = Field(
        alias='externalUserName', default=None,
    )
    active: bool = True

    def to_row(self) -> list[str]:
        return [
            self.user_name,
            self.email or '',
            self.first_name or '',
            self.last_name or '',
            self.external_user_name or '',
            str(self.active).lower(),
        ]


USER_COLUMNS = [
    'username', 'email', 'first_name',
    'last_name', 'external_username', 'active',
]
