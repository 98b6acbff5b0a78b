"""Game configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field, model_validator


class GameConfig(BaseModel):
    """Defaults and limits for new games."""

    default_rows: int = Field(default=8, gt=0)
    default_cols: int = Field(default=8, gt=0)
    min_dimension: int = Field(default=4, gt=0)
    max_dimension: int = Field(default=20, gt=0)
    max_placement_attempts: int = Field(default=10_000, gt=0)
    seed: int | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "GameConfig":
        if self.min_dimension > self.max_dimension:
            raise ValueError("min_dimension must not exceed max_dimension")
        return self

    def clamp_dimension(self, value: int) -> int:
        """Pull a requested grid dimension into the allowed input range."""
        return max(self.min_dimension, min(self.max_dimension, value))

    @classmethod
    def from_env(cls, **overrides: Any) -> "GameConfig":
        """Construct config from `BATTLESHIP_*` env vars."""

        data: Dict[str, Any] = {}
        int_fields = {
            "default_rows": "BATTLESHIP_ROWS",
            "default_cols": "BATTLESHIP_COLS",
            "max_placement_attempts": "BATTLESHIP_MAX_PLACEMENT_ATTEMPTS",
            "seed": "BATTLESHIP_SEED",
        }
        for field, env_name in int_fields.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[field] = int(value)
        data.update(overrides)
        return cls(**data)


@lru_cache(maxsize=1)
def load_game_config() -> GameConfig:
    """Load and cache game config from the environment."""

    return GameConfig.from_env()
