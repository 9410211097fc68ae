from enum import Enum

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from notion import NOTION_VERSION, TIMEOUT


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    env: Env = Env.local
    log_level: str = "INFO"

    notion_key: str = ""
    notion_version: str = NOTION_VERSION
    request_timeout: float = TIMEOUT

    recipes_database_id: str = Field(
        default="",
        validation_alias=AliasChoices("RECIPES_DATABASE_ID", "RECIPIES_DATABASE_ID"),
    )
    trigger_block_id: str = ""
    selection_block_id: str = ""
    filter_list_block_id: str | None = None
    tags_property: str = "Tags"

    cache_ttl: float = 60 * 5
    poll_interval: float = 0

    def missing(self) -> list[str]:
        """Names of required settings that are empty."""
        required = (
            "notion_key",
            "recipes_database_id",
            "trigger_block_id",
            "selection_block_id",
        )
        return [name for name in required if not getattr(self, name)]
