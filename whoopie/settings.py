"""Validation schema for per-game settings."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .mechanics import MAX_PLAYERS, MIN_PLAYERS


class GameSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_players: int = Field(MAX_PLAYERS, ge=MIN_PLAYERS, le=MAX_PLAYERS, description="Seats available at the table.")
    min_players_to_start: int = Field(
        MIN_PLAYERS,
        ge=MIN_PLAYERS,
        le=MAX_PLAYERS,
        description="Players required before the host may start.",
    )
    is_public: bool = Field(True, description="Whether the game is listed in the lobby.")
    allow_spectators: bool = Field(True, description="Whether non-players may watch.")

    @model_validator(mode="after")
    def ensure_start_threshold_fits(self) -> "GameSettings":
        if self.min_players_to_start > self.max_players:
            raise ValueError("min_players_to_start cannot exceed max_players.")
        return self


SettingsInput = Union[GameSettings, Mapping[str, Any], None]


def resolve_settings(settings: SettingsInput = None, **overrides: Any) -> GameSettings:
    """Merge a partial mapping (or an existing model) over the defaults."""
    if isinstance(settings, GameSettings):
        base: dict[str, Any] = settings.model_dump()
    elif settings is None:
        base = {}
    else:
        base = dict(settings)
    base.update(overrides)
    return GameSettings(**base)


def settings_to_dict(settings: GameSettings) -> dict[str, Any]:
    return settings.model_dump()


def settings_from_dict(payload: Optional[Mapping[str, Any]]) -> GameSettings:
    return resolve_settings(payload)
