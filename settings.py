# settings.py
"""Centralized configuration using Pydantic settings."""

from __future__ import annotations

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from models import BotIdentity

load_dotenv()

DEFAULT_BOT_USERNAME = "JiraBot"


class BotSettings(BaseSettings):
    display_name: str = Field(alias="JIRABOT_USERNAME", default=DEFAULT_BOT_USERNAME)


class SlackSettings(BaseSettings):
    api_key: str = Field(alias="SLACK_API_KEY")
    app_token: str = Field(alias="SLACK_APP_TOKEN")
    latency_warning_seconds: float = Field(alias="SLACK_LATENCY_WARNING_SECONDS", default=5.0)


class JiraSettings(BaseSettings):
    base_url: str = Field(alias="JIRA_BASEURL")
    username: str = Field(alias="JIRA_USERNAME")
    password: str = Field(alias="JIRA_PASSWORD")
    api_path: str = Field(alias="JIRA_API_PATH", default="/rest/api/latest")
    timeout_seconds: int = Field(alias="JIRA_TIMEOUT", default=10)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class LoggingSettings(BaseSettings):
    level: str = Field(alias="JIRABOT_LOG_LEVEL", default="INFO")
    json_enabled: bool = Field(alias="JIRABOT_LOG_JSON", default=False)


class RelaySettings(BaseSettings):
    bot: BotSettings
    slack: SlackSettings
    jira: JiraSettings
    logging: LoggingSettings

    @property
    def identity(self) -> BotIdentity:
        return BotIdentity(display_name=self.bot.display_name)

    @classmethod
    def load(cls) -> RelaySettings:
        """Read every settings group from the environment, once, at startup."""
        try:
            return cls(
                bot=BotSettings(),  # type: ignore[call-arg]
                slack=SlackSettings(),  # type: ignore[call-arg]
                jira=JiraSettings(),  # type: ignore[call-arg]
                logging=LoggingSettings(),  # type: ignore[call-arg]
            )
        except ValidationError as exc:
            missing = [error["loc"][0] for error in exc.errors() if error.get("type") == "missing"]
            if not missing:
                raise RuntimeError(f"Invalid configuration: {exc}") from exc
            msg = "Missing required configuration values: " + ", ".join(
                sorted({str(loc) for loc in missing})
            )
            raise RuntimeError(msg) from exc
