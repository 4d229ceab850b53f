"""Raw ESPN JSON -> domain models.

Nothing outside this module looks at provider response shapes.
"""

import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional

from .constants import DEFAULT_FINAL_SCORING_PERIOD, INJURY_STATUS_ALIASES
from .models import InjuryStatus, LeagueSettings, Player
from .slots import SlotTable

logger = logging.getLogger('fba_lineup.normalizer')


def normalize_injury_status(value: Optional[str]) -> Optional[InjuryStatus]:
    """Map a provider injury string to InjuryStatus; unknown values become None."""
    if not value:
        return None
    value = INJURY_STATUS_ALIASES.get(str(value).upper(), str(value).upper())
    try:
        return InjuryStatus(value)
    except ValueError:
        return None


def parse_return_date(value: Any) -> Optional[date]:
    """
    Parse an estimated return date.

    Accepts ISO dates/datetimes (with or without a trailing Z) and epoch
    milliseconds. Anything else is treated as indefinite (None).
    """
    if value is None or value == '' or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000).date()
        text = str(value).replace('Z', '+00:00')
        return datetime.fromisoformat(text).date()
    except (ValueError, OverflowError, OSError):
        logger.debug(f'Unparseable return date: {value!r}')
        return None


def _projected_points(pool_entry: dict) -> float:
    stats = (pool_entry.get('player') or {}).get('stats') or pool_entry.get('stats') or []
    for s in stats:
        if s.get('statSplitTypeId') == 1 and s.get('seasonId') and s.get('appliedTotal') is not None:
            points = s.get('appliedAverage')
            if points is None:
                points = s.get('appliedTotal')
            try:
                return max(float(points or 0), 0.0)
            except (TypeError, ValueError):
                return 0.0
    return 0.0


def _slot_counts(raw: dict) -> dict[int, int]:
    settings = raw.get('settings') or {}
    counts = (settings.get('rosterSettings') or {}).get('lineupSlotCounts') or {}
    return {int(k): int(v or 0) for k, v in counts.items()}


def extract_settings(raw: dict, table: SlotTable) -> LeagueSettings:
    """Read league settings from a league blob."""
    status = raw.get('status') or {}
    roster_slots = _slot_counts(raw)

    current = raw.get('scoringPeriodId') or status.get('currentMatchupPeriod') or 1
    final = (
        status.get('finalScoringPeriod')
        or status.get('finalMatchupPeriod')
        or DEFAULT_FINAL_SCORING_PERIOD
    )

    return LeagueSettings(
        current_scoring_period_id=int(current),
        final_scoring_period_id=int(final),
        ir_slot_count=roster_slots.get(table.ir, 0),
        roster_slots=roster_slots,
    )


def extract_players(raw: dict) -> list[Player]:
    """Read every rostered player from a league blob."""
    players = []
    for team in raw.get('teams') or []:
        team_id = team.get('id')
        for entry in (team.get('roster') or {}).get('entries') or []:
            pool_entry = entry.get('playerPoolEntry') or {}
            player_data = pool_entry.get('player') or {}

            player_id = player_data.get('id', entry.get('playerId'))
            eligible = player_data.get('eligibleSlots') or pool_entry.get('eligibleSlots') or []
            injury = pool_entry.get('injuryStatus') or player_data.get('injuryStatus')

            players.append(Player(
                player_id=player_id,
                name=player_data.get('fullName') or f'Player {player_id}',
                team_id=team_id,
                pro_team_id=player_data.get('proTeamId') or 0,
                injury_status=normalize_injury_status(injury),
                lineup_slot_id=entry.get('lineupSlotId', 0),
                eligible_slots=tuple(eligible) if isinstance(eligible, list) else (),
                projected_points=_projected_points(pool_entry),
                estimated_return_date=parse_return_date(pool_entry.get('injuryDate')),
            ))
    return players


def normalize_league(raw: dict, table: SlotTable) -> tuple[LeagueSettings, list[Player]]:
    """Convert a league blob into (settings, players)."""
    return extract_settings(raw, table), extract_players(raw)


def normalize_roster_slots(raw: dict, team_id: int) -> dict[int, int]:
    """Return player_id -> lineup slot for one team from a per-period roster blob."""
    for team in raw.get('teams') or []:
        if team.get('id') != team_id:
            continue
        return {
            entry['playerId']: entry['lineupSlotId']
            for entry in (team.get('roster') or {}).get('entries') or []
            if 'playerId' in entry and 'lineupSlotId' in entry
        }
    logger.warning(f'Team {team_id} missing from roster snapshot')
    return {}


def normalize_public_schedule(day_results: Iterable[tuple[str, Optional[dict]]]) -> dict[str, frozenset[int]]:
    """
    Parse per-day public scoreboard responses.

    Args:
        day_results: (YYYYMMDD, raw scoreboard or None) pairs

    Returns:
        YYYYMMDD -> pro team ids with a game that date. Dates with no
        games or a failed fetch are omitted.
    """
    date_to_teams = {}
    for date_str, raw in day_results:
        if not raw or not raw.get('events'):
            continue

        teams = set()
        for event in raw['events']:
            competitions = event.get('competitions') or [{}]
            for comp in competitions[0].get('competitors') or []:
                team_id = comp.get('id') or (comp.get('team') or {}).get('id')
                try:
                    if team_id and int(team_id):
                        teams.add(int(team_id))
                except (TypeError, ValueError):
                    continue
        if teams:
            date_to_teams[date_str] = frozenset(teams)

    dates = sorted(date_to_teams)
    if dates:
        logger.info(f'Public schedule: {len(dates)} dates with games, {dates[0]}-{dates[-1]}')
    else:
        logger.warning('Public schedule: no dates with games')
    return date_to_teams


def normalize_pro_schedule(raw: dict) -> dict[int, frozenset[int]]:
    """Parse a proTeamSchedules_wl blob into scoring period -> pro team ids."""
    period_to_teams: dict[int, set[int]] = {}
    for pro_team in (raw.get('settings') or {}).get('proTeams') or []:
        team_id = pro_team.get('id')
        if not team_id:
            continue
        for period in (pro_team.get('proGamesByScoringPeriod') or {}):
            period_to_teams.setdefault(int(period), set()).add(team_id)
    return {period: frozenset(teams) for period, teams in period_to_teams.items()}


def find_team_id(raw: dict, swid: str) -> Optional[int]:
    """Find the team owned by the given SWID (with or without braces)."""
    bare = swid.strip('{}')
    for team in raw.get('teams') or []:
        owners = team.get('owners') or []
        if any(owner.strip('{}') == bare for owner in owners if isinstance(owner, str)):
            return team.get('id')
    return None


def team_display_name(raw: dict, team_id: int) -> str:
    """Best-effort display name for a team."""
    for team in raw.get('teams') or []:
        if team.get('id') != team_id:
            continue
        location_nickname = f'{team.get("location") or ""} {team.get("nickname") or ""}'.strip()
        return team.get('name') or location_nickname or team.get('abbrev') or f'Team {team_id}'
    return f'Team {team_id}'
