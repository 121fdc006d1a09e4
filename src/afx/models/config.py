"""
Config document — the root of every afx YAML file.
"""

from __future__ import annotations

from pydantic import Field

from afx.models.package import HTTP, Gist, GitHub, Local, Schema


class Filter(Schema):
    """Command-line fuzzy finder used for package selection, e.g. fzf."""

    command: str = ""
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)


class AppConfig(Schema):
    """Settings of afx itself."""

    shell: str = ""
    filter: Filter = Field(default_factory=Filter)


DEFAULT_APP_CONFIG = AppConfig(
    shell="bash",
    filter=Filter(
        command="fzf",
        args=["--ansi", "--no-preview", "--height=50%", "--reverse"],
    ),
)


def merge_app_config(user: AppConfig | None) -> AppConfig:
    """Overlay the fields a user actually set on top of the defaults."""
    data = DEFAULT_APP_CONFIG.model_dump()
    if user is None:
        return AppConfig.model_validate(data)

    override = user.model_dump(exclude_unset=True)
    data["filter"].update(override.pop("filter", {}))
    data.update(override)
    return AppConfig.model_validate(data)


class Config(Schema):
    github: list[GitHub] = Field(default_factory=list)
    gist: list[Gist] = Field(default_factory=list)
    local: list[Local] = Field(default_factory=list)
    http: list[HTTP] = Field(default_factory=list)

    app_config: AppConfig | None = Field(default=None, alias="config")

    def extend(self, other: Config) -> None:
        """Append another document's packages; its app config wins if declared."""
        self.github.extend(other.github)
        self.gist.extend(other.gist)
        self.local.extend(other.local)
        self.http.extend(other.http)
        if other.app_config is not None:
            self.app_config = other.app_config
