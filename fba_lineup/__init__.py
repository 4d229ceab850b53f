from .models import (
    DayLineup,
    GameDay,
    InjuryStatus,
    IRAssignment,
    LeagueSettings,
    LineupChangeItem,
    Player,
    SeasonPreview,
    SeasonRunResult,
)
from .slots import SlotTable, build_starting_slots, get_slot_table, resolve_current_slot
from .ir_assigner import assign_ir_slots, get_ir_player_ids
from .optimizer import compute_tier, optimize_lineup
from .schedule import build_game_days_from_periods, build_remaining_game_days
from .espn_client import (
    ESPNAuth,
    ESPNClient,
    ESPNClientError,
    LineupLockedError,
    TeamNotFoundError,
)
from .submitter import RunOptions, preview_season, run_season_setup

__all__ = [
    # Models
    'DayLineup',
    'GameDay',
    'InjuryStatus',
    'IRAssignment',
    'LeagueSettings',
    'LineupChangeItem',
    'Player',
    'SeasonPreview',
    'SeasonRunResult',
    # Slots
    'SlotTable',
    'build_starting_slots',
    'get_slot_table',
    'resolve_current_slot',
    # Lineup decisions
    'assign_ir_slots',
    'get_ir_player_ids',
    'compute_tier',
    'optimize_lineup',
    # Schedule
    'build_game_days_from_periods',
    'build_remaining_game_days',
    # ESPN
    'ESPNAuth',
    'ESPNClient',
    'ESPNClientError',
    'LineupLockedError',
    'TeamNotFoundError',
    # Orchestration
    'RunOptions',
    'preview_season',
    'run_season_setup',
]
