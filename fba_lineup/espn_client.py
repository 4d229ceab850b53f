"""
ESPN Fantasy API client.

Thin requests-based wrapper around the read, write and public scoreboard
endpoints the lineup bot needs. Responses are returned as raw JSON; see
normalizer.py for the conversion to domain models.
"""

import json
import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Optional

import requests
from requests.exceptions import RequestException

from .constants import (
    FANTASY_HEADERS,
    LINEUP_LOCKED_CODE,
    READ_BASE,
    SCOREBOARD_BASE,
    SCOREBOARD_PATHS,
    SPORT_GAME_CODES,
    TRANSACTION_FUTURE,
    TRANSACTION_TODAY,
    WRITE_BASE,
)
from .models import LineupChangeItem

logger = logging.getLogger('fba_lineup.espn_client')


# =============================================================================
# Exceptions
# =============================================================================

class ESPNClientError(Exception):
    """Base exception for ESPN client errors."""
    pass


class ESPNAuthenticationError(ESPNClientError):
    """Raised when ESPN rejects the espn_s2/SWID cookies."""
    pass


class ESPNLeagueNotFoundError(ESPNClientError):
    """Raised when the league does not exist for the season."""
    pass


class ESPNRateLimitError(ESPNClientError):
    """Raised when ESPN rate limits our requests."""
    pass


class ESPNConnectionError(ESPNClientError):
    """Raised when ESPN cannot be reached after retries."""
    pass


class LineupLockedError(ESPNClientError):
    """Raised when a period's lineup is locked for editing."""
    pass


class TeamNotFoundError(ESPNClientError):
    """Raised when the caller's team is not part of the league."""
    pass


# =============================================================================
# Retry Decorator
# =============================================================================

def retry_on_failure(max_retries: int = 3, delay: float = 1.0, backoff: float = 2.0):
    """
    Decorator to retry a function on transport failure with exponential backoff.

    Only requests transport errors are retried; ESPNClientError subclasses
    (bad credentials, locked lineups, ...) propagate immediately.

    Args:
        max_retries: Maximum number of retry attempts
        delay: Initial delay between retries in seconds
        backoff: Multiplier for delay after each retry
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None
            current_delay = delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except RequestException as e:
                    last_exception = e
                    if attempt < max_retries:
                        logger.warning(
                            f'Attempt {attempt + 1}/{max_retries + 1} failed for {func.__name__}: {e}. '
                            f'Retrying in {current_delay:.1f}s...'
                        )
                        time.sleep(current_delay)
                        current_delay *= backoff
                    else:
                        logger.error(f'All {max_retries + 1} attempts failed for {func.__name__}')

            raise ESPNConnectionError(f'Failed after {max_retries + 1} attempts: {last_exception}')
        return wrapper
    return decorator


# =============================================================================
# Credentials and payloads
# =============================================================================

@dataclass(frozen=True)
class ESPNAuth:
    """ESPN session cookies."""
    espn_s2: str
    swid: str

    def __repr__(self) -> str:
        return f'ESPNAuth(swid={self.swid!r}, espn_s2=<redacted>)'


def build_lineup_payload(
    team_id: int,
    scoring_period_id: int,
    items: list[LineupChangeItem],
    is_future: bool,
    member_id: str,
) -> dict:
    """Build the transaction body for a lineup submission."""
    return {
        'isLeagueManager': False,
        'teamId': team_id,
        'type': TRANSACTION_FUTURE if is_future else TRANSACTION_TODAY,
        'memberId': member_id,
        'scoringPeriodId': scoring_period_id,
        'executionType': 'EXECUTE',
        'items': [item.to_payload() for item in items],
    }


# =============================================================================
# Client
# =============================================================================

class ESPNClient:
    """
    ESPN Fantasy API client.

    Usage:
        client = ESPNClient(ESPNAuth(espn_s2='...', swid='{...}'))
        raw = client.fetch_league(12345, 2026)
    """

    def __init__(
        self,
        auth: ESPNAuth,
        sport: str = 'basketball',
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        if sport not in SPORT_GAME_CODES:
            raise ValueError(f'Unsupported sport: {sport!r}')

        self.auth = auth
        self.sport = sport
        self.timeout = timeout
        self.game_code = SPORT_GAME_CODES[sport]
        self.session = session or requests.Session()
        self.session.headers.update(FANTASY_HEADERS)
        self.session.cookies.set('espn_s2', auth.espn_s2, domain='.espn.com')
        self.session.cookies.set('SWID', auth.swid, domain='.espn.com')

    def _league_url(self, base: str, league_id: int, season: int) -> str:
        return f'{base}/{self.game_code}/seasons/{season}/segments/0/leagues/{league_id}'

    def _check_response(self, response: requests.Response, url: str) -> None:
        if response.ok:
            return

        body = (response.text or '')[:500]
        status = response.status_code

        if LINEUP_LOCKED_CODE in body:
            raise LineupLockedError(f'{LINEUP_LOCKED_CODE}: {body[:200]}')
        if status in (401, 403):
            logger.error(f'ESPN rejected credentials ({status}) for {url}')
            raise ESPNAuthenticationError(
                'ESPN authentication failed. Verify your espn_s2 and SWID cookies are correct and not expired.'
            )
        if status == 404:
            raise ESPNLeagueNotFoundError(f'Not found: {url}')
        if status == 429:
            raise ESPNRateLimitError(f'Rate limited by ESPN: {url}')

        raise ESPNClientError(f'ESPN API {status}: {response.reason} - {url}\n{body[:200]}')

    @retry_on_failure(max_retries=3, delay=1.0, backoff=2.0)
    def _get(self, url: str, params: Any = None) -> Any:
        logger.debug(f'GET {url} {params or ""}')
        response = self.session.get(url, params=params, timeout=self.timeout)
        self._check_response(response, url)
        return response.json()

    # Writes are not retried; a timed-out POST may already have been applied
    @retry_on_failure(max_retries=0)
    def _post(self, url: str, payload: dict) -> Any:
        logger.debug(f'POST {url} period={payload.get("scoringPeriodId")} items={len(payload.get("items", []))}')
        response = self.session.post(
            url,
            data=json.dumps(payload),
            headers={'Content-Type': 'application/json'},
            timeout=self.timeout,
        )
        self._check_response(response, url)
        return response.json() if response.content else {}

    def fetch_league(self, league_id: int, season: int) -> dict:
        """Fetch league settings, teams and rosters."""
        url = self._league_url(READ_BASE, league_id, season)
        return self._get(url, params=[('view', 'mRoster'), ('view', 'mTeam'), ('view', 'mSettings')])

    def fetch_roster_snapshot(self, league_id: int, season: int, scoring_period_id: int) -> dict:
        """Fetch rosters as of a specific scoring period."""
        url = self._league_url(READ_BASE, league_id, season)
        return self._get(url, params=[('view', 'mRoster'), ('scoringPeriodId', scoring_period_id)])

    def fetch_pro_schedule(self, league_id: int, season: int) -> dict:
        """Fetch the provider's per-period pro team schedule."""
        url = self._league_url(READ_BASE, league_id, season)
        return self._get(url, params=[('view', 'proTeamSchedules_wl')])

    def fetch_scoreboard_day(self, date_key: str) -> Optional[dict]:
        """
        Fetch the public scoreboard for one YYYYMMDD date.

        Returns None on any failure so a missing day degrades to "no games".
        """
        url = f'{SCOREBOARD_BASE}/{SCOREBOARD_PATHS[self.sport]}/scoreboard'
        try:
            response = requests.get(url, params={'dates': date_key}, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (RequestException, ValueError) as e:
            logger.warning(f'Scoreboard fetch failed for {date_key}: {e}')
            return None

    def submit_lineup(self, league_id: int, season: int, payload: dict) -> dict:
        """POST a lineup transaction."""
        url = self._league_url(WRITE_BASE, league_id, season) + '/transactions/'
        return self._post(url, payload)
