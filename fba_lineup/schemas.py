"""Pydantic schemas for JSON config and run reports."""

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_CALENDAR_WINDOW_DAYS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REQUEST_DELAY_SECONDS,
    SPORT_GAME_CODES,
)


class SlotOverrides(BaseModel):
    """Per-league slot id overrides for leagues that use a different numbering."""

    bench_slot_id: int | None = Field(None, ge=0)
    ir_slot_id: int | None = Field(None, ge=0)
    starting_slot_order: list[int] | None = None

    class Config:
        extra = 'forbid'


class LineupConfig(BaseModel):
    """Lineup bot configuration settings."""

    league_id: int = Field(..., gt=0)
    season: int = Field(..., ge=2000, le=2100)
    team_id: int | None = Field(None, gt=0)
    sport: str = 'basketball'
    schedule_source: str = Field(default='scoreboard', pattern=r'^(scoreboard|pro_team_schedule)$')
    calendar_window_days: int = Field(default=DEFAULT_CALENDAR_WINDOW_DAYS, ge=1, le=366)
    request_delay_seconds: float = Field(default=DEFAULT_REQUEST_DELAY_SECONDS, ge=0)
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1, le=64)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    dry_run: bool = False
    slots: SlotOverrides = Field(default_factory=SlotOverrides)

    @field_validator('sport')
    @classmethod
    def validate_sport(cls, v):
        """Ensure the sport has a registered ESPN game code."""
        if v not in SPORT_GAME_CODES:
            raise ValueError(f'Unsupported sport: {v}')
        return v

    class Config:
        extra = 'forbid'


class RunReport(BaseModel):
    """Saved summary of a season setup run."""

    league_id: int
    team_id: int
    season: int
    started_at: str
    finished_at: str
    submitted: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)
    errors: list[str] = Field(default_factory=list)
    dry_run: bool = False

    class Config:
        extra = 'forbid'
