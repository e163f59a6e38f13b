from __future__ import annotations
from typing import List, Optional, Tuple, Type

from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    PydanticBaseSettingsSource,
    YamlConfigSettingsSource,
)
from typing_extensions import Annotated
from pydantic import Field
from dotenv import load_dotenv

load_dotenv()


class ChatLiteLLMConfig(BaseModel):
    model: Annotated[str, Field(default="gpt-4o-mini")]
    api_key: Annotated[Optional[str], Field(default=None)]
    api_base: Annotated[Optional[str], Field(default=None)]

    def to_litellm_params(self) -> dict:
        """
        Convert to litellm acompletion() parameters.
        """
        params = {"model": self.model}

        if self.api_key:
            params["api_key"] = self.api_key

        if self.api_base:
            params["api_base"] = self.api_base

        return params


class FeedConfig(BaseModel):
    """arXiv export API polling"""
    endpoint: Annotated[str, Field(default="https://export.arxiv.org/api/query")]
    max_results: Annotated[int, Field(default=10, ge=1)]
    timeout_seconds: Annotated[float, Field(default=15.0, gt=0)]
    max_attempts: Annotated[int, Field(default=3, ge=1)]
    backoff_base_ms: Annotated[int, Field(default=1000, ge=0)]
    backoff_cap_ms: Annotated[int, Field(default=10000, ge=0)]
    user_agent: Annotated[str, Field(default="Paper-Catcher/1.0 (academic research tool)")]


class SchedulerConfig(BaseModel):
    enabled: Annotated[bool, Field(default=False)]
    timezone: Annotated[str, Field(default="Asia/Tokyo")]
    fetch_job: Annotated[str, Field(default="0 */6 * * *")]


class LogConfig(BaseModel):
    level: Annotated[str, Field(default="INFO")]
    dir: Annotated[str, Field(default="logs")]
    file: Annotated[str, Field(default="papercatcher.log")]


class Settings(BaseSettings):
    # message locale and translation target
    language: Annotated[str, Field(default="ja")]
    source_list: Annotated[List[str], Field(default=["arXiv"])]

    database_url: Annotated[str, Field(default="sqlite+aiosqlite:///./papercatcher.db")]

    related_limit: Annotated[int, Field(default=5, ge=1)]

    chat_litellm: ChatLiteLLMConfig = Field(default_factory=ChatLiteLLMConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # e.g. FEED__MAX_RESULTS=20
        yaml_file="settings.yaml",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """
        Priority (high to low):
        1. init kwargs
        2. environment variables
        3. .env file
        4. settings.yaml
        5. secrets directory
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


Config = Settings()
