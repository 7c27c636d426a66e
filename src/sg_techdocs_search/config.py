"""Settings for building and querying the documentation search index."""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    """Typed configuration loaded from environment variables.

    The path prefix keeps the variable name used by the site build so the
    same deployment environment drives both.
    """

    model_config = SettingsConfigDict(
        env_prefix="TECHDOCS_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
        extra="ignore",
    )

    path_prefix: str = Field(
        default="/",
        validation_alias=AliasChoices("path_prefix", "ELEVENTY_PATH_PREFIX", "PATH_PREFIX"),
        description="Base path the site is served from",
    )
    content_dir: Path = Field(default=Path("src"), description="Directory holding the Markdown pages")
    index_path: Path = Field(default=Path("_site/search-index.json"), description="Serialized index location")

    threshold: float = Field(default=0.3, ge=0.0, le=1.0, description="Fuzzy tolerance, 0 is exact substring")
    title_weight: float = Field(default=2.0, gt=0.0, description="Relative weight of title matches")
    content_weight: float = Field(default=1.0, gt=0.0, description="Relative weight of body matches")
    keywords_weight: float | None = Field(
        default=None, gt=0.0, description="Relative weight of heading keyword matches, unset to skip the field"
    )
    min_query_length: int = Field(default=2, ge=1, description="Shortest query that triggers a search")

    summary_length: int = Field(default=200, ge=1, description="Characters kept in a record summary")
    snippet_padding: int = Field(default=40, ge=0, description="Context characters either side of a match")
    fallback_summary_length: int = Field(default=120, ge=1, description="Preview length when no match is found")

    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", description="Logging level"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    def field_weights(self) -> dict[str, float]:
        """Return the weighted fields the fuzzy index is built over."""
        weights = {"title": self.title_weight, "content": self.content_weight}
        if self.keywords_weight is not None:
            weights["keywords"] = self.keywords_weight
        return weights
