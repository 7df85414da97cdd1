"""Pagination settings.

Centralized defaults for cursor pagination: the page size used when a
caller does not ask for one, the largest page a caller may ask for, and
whether cursors are checked against the row they point at.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_FIRST=50, PAGINATION_MAX_FIRST=100
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_first: Page size when the request does not specify one.
        max_first: Largest page size a request may ask for.
        validate_cursor: Default for re-checking that a cursor still points
            at the entity it was minted for.

    Example:
        settings = PaginationSettings()
        if find_options.first > settings.max_first:
            ...
    """

    default_first: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Default page size when first is not specified",
    )
    max_first: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    validate_cursor: bool = Field(
        default=False,
        description="Reject cursors whose entity moved since the cursor was issued",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_default_within_max(self) -> PaginationSettings:
        if self.default_first > self.max_first:
            raise ValueError(
                f"default_first ({self.default_first}) must not exceed max_first ({self.max_first})"
            )
        return self
