"""Console configuration model.

This module defines the ConsoleConfig schema used to parse the console's JSON
configuration into the parameters consumed by the sync controller, the
production gate and the HTTP adapter.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from order_console.core.views.filter_engine import ALKANSYA_TOKEN


class ConsoleConfig(BaseModel):
    """Structured console configuration.

    JSON example:
        {
          "base_url": "https://shop.example.com/api",
          "api_token": "...",
          "refresh_interval_seconds": 30,
          "gate_max_attempts": 2,
          "initial_query": "?status=processing"
        }
    """

    base_url: str = Field(..., min_length=1)
    api_token: str | None = None
    request_timeout_seconds: float = Field(10.0, gt=0)

    # Periodic snapshot refresh, independent of operator activity.
    refresh_interval_seconds: float = Field(30.0, gt=0)

    # Production gate: bounded retry, then fail closed.
    gate_max_attempts: int = Field(2, ge=1)
    gate_retry_delay_seconds: float = Field(0.5, ge=0)
    gate_timeout_seconds: float = Field(10.0, gt=0)

    # Product-name token used when an item carries no explicit category.
    alkansya_token: str = Field(ALKANSYA_TOKEN, min_length=1)

    # Navigation query used once to pre-seed the fulfillment-status filter.
    initial_query: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_json_obj(cls, config_obj: dict[str, Any]) -> ConsoleConfig:
        """Create a ConsoleConfig instance from a JSON-compatible object."""
        return cls.model_validate(config_obj)

    @classmethod
    def from_json_file(cls, path: str | Path) -> ConsoleConfig:
        """Load a ConsoleConfig from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        return cls.from_json_obj(json.loads(path.read_text(encoding="utf-8")))
