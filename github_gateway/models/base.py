# =============================================================================
# GitHub Gateway - Base Record
# =============================================================================
"""
Shared base class for every record decoded from a GitHub payload.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class GitHubRecord(BaseModel):
    """
    Immutable value snapshot decoded from a GitHub JSON payload.

    Field names are matched case-insensitively and keys whose value is
    JSON ``null`` are dropped before validation, so a missing or null
    field always takes the declared default.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Lower-case payload keys and drop null values."""
        if not isinstance(data, dict):
            return data
        return {
            (key.lower() if isinstance(key, str) else key): value
            for key, value in data.items()
            if value is not None
        }
