"""Configuration management.

League settings come from a JSON file validated against LineupConfig.
ESPN credentials come only from the environment (or a .env file) and
are never written to disk.
"""

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from .espn_client import ESPNAuth
from .schemas import LineupConfig
from .slots import SlotTable, get_slot_table
from .utils import load_json

CONFIG_ENV_VAR = 'FBA_LINEUP_CONFIG'
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'lineup_config.json'


def get_config_path() -> Path:
    """Config file path: $FBA_LINEUP_CONFIG if set, else data/lineup_config.json."""
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))


@lru_cache(maxsize=1)
def get_config() -> LineupConfig:
    """
    Load lineup bot configuration.

    Configuration is cached after first load.

    Returns:
        LineupConfig object with validated settings

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file has invalid structure

    Example:
        from fba_lineup.config import get_config
        config = get_config()
        print(f"League {config.league_id}, season {config.season}")
    """
    return load_json(get_config_path(), schema=LineupConfig)


def get_slot_table_for(config: LineupConfig) -> SlotTable:
    """Resolve the slot table for a config, applying its overrides."""
    return get_slot_table(
        config.sport,
        bench_slot_id=config.slots.bench_slot_id,
        ir_slot_id=config.slots.ir_slot_id,
        starting_order=config.slots.starting_slot_order,
    )


def get_auth() -> ESPNAuth:
    """
    Read ESPN cookies from ESPN_S2 and ESPN_SWID.

    Raises:
        RuntimeError: If either variable is missing
    """
    load_dotenv()
    espn_s2 = os.environ.get('ESPN_S2', '')
    swid = os.environ.get('ESPN_SWID', '')
    if not espn_s2 or not swid:
        raise RuntimeError('ESPN_S2 and ESPN_SWID must be set (environment or .env file)')
    return ESPNAuth(espn_s2=espn_s2, swid=swid)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
