# (c) Nelen & Schuurmans

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from stuff_tracker import PaginationConfig

__all__ = ["InventoryConfig"]


class InventoryConfig(BaseSettings):
    """Settings read from STUFF_TRACKER_* environment variables.

    Example: STUFF_TRACKER_DATABASE_URL=postgres:postgres@localhost:5432/stuff
    """

    title: str = "Stuff Tracker"
    # None means: keep the records in memory
    database_url: str | None = None
    seed: bool = True
    default_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=1000, ge=1)
    include_total_count: bool = True

    model_config = SettingsConfigDict(
        env_prefix="STUFF_TRACKER_",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @property
    def pagination(self) -> PaginationConfig:
        return PaginationConfig(
            default_page_size=self.default_page_size,
            max_page_size=self.max_page_size,
            include_total_count=self.include_total_count,
        )
