"""Constants and mappings for the ESPN lineup bot."""

# ESPN fantasy API hosts
READ_BASE = 'https://lm-api-reads.fantasy.espn.com/apis/v3/games'
WRITE_BASE = 'https://lm-api-writes.fantasy.espn.com/apis/v3/games'
SCOREBOARD_BASE = 'https://site.api.espn.com/apis/site/v2/sports'

# Sport -> ESPN game code and public scoreboard path
SPORT_GAME_CODES = {
    'basketball': 'fba',
}

SCOREBOARD_PATHS = {
    'basketball': 'basketball/nba',
}

# Basketball lineup slot ids
BASKETBALL_SLOTS = {
    'PG': 0,
    'SG': 1,
    'SF': 2,
    'PF': 3,
    'C': 4,
    'G': 5,
    'F': 6,
    'UTIL': 11,
    'BENCH': 12,
    'IR': 13,
}

# Starting slots in fill order
BASKETBALL_STARTING_ORDER = ('PG', 'SG', 'SF', 'PF', 'C', 'G', 'F', 'UTIL')

# Headers the ESPN web client sends with every request
FANTASY_HEADERS = {
    'X-Fantasy-Source': 'kona',
    'X-Fantasy-Platform': 'kona-PROD-m.fantasy.espn.com-android',
}

# Transaction tags
TRANSACTION_TODAY = 'ROSTER'
TRANSACTION_FUTURE = 'FUTURE_ROSTER'
LINEUP_ITEM_TYPE = 'LINEUP'

# Error code ESPN returns when a period's lineup can no longer be edited
LINEUP_LOCKED_CODE = 'TRAN_LINEUP_LOCKED'

# Injury status aliases from the provider
INJURY_STATUS_ALIASES = {
    'O': 'OUT',
    'IL': 'OUT',
}

# Run defaults
DEFAULT_CALENDAR_WINDOW_DAYS = 60
DEFAULT_REQUEST_DELAY_SECONDS = 0.3
DEFAULT_FINAL_SCORING_PERIOD = 154
DEFAULT_MAX_WORKERS = 8
