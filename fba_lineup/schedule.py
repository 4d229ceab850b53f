"""Remaining-season game day schedule.

ESPN basketball scoring periods are one calendar day each, so period
``current + k`` is played on ``today + k``.
"""

from datetime import date, timedelta
from typing import AbstractSet, Mapping, Optional

from .models import GameDay


def date_key(day: date) -> str:
    """Format a date as the 8-digit YYYYMMDD key used by the scoreboard API."""
    return day.strftime('%Y%m%d')


def calendar_dates(start: date, days: int) -> list[str]:
    """Return YYYYMMDD keys for ``days`` consecutive dates starting at ``start``."""
    return [date_key(start + timedelta(days=i)) for i in range(days)]


def period_anchor_date(period: int, league_period: int, today: date) -> date:
    """Calendar date of ``period``, given that the league's ``league_period`` is played ``today``."""
    return today + timedelta(days=period - league_period)


def build_remaining_game_days(
    date_to_teams: Mapping[str, AbstractSet[int]],
    current_period: int,
    final_period: int,
    today: Optional[date] = None,
) -> list[GameDay]:
    """
    Build one GameDay per scoring period in [current_period, final_period].

    Args:
        date_to_teams: YYYYMMDD -> pro team ids with a game that date
        current_period: First period (inclusive), played today
        final_period: Last period (inclusive)
        today: Anchor date for current_period (default: date.today())

    Returns:
        GameDays in period order. Dates with no recorded games get an
        empty team set.
    """
    anchor = today or date.today()
    days = []
    for offset, period in enumerate(range(current_period, final_period + 1)):
        day = anchor + timedelta(days=offset)
        days.append(GameDay(
            scoring_period_id=period,
            playing_team_ids=frozenset(date_to_teams.get(date_key(day), ())),
            date=day.isoformat(),
        ))
    return days


def build_game_days_from_periods(
    period_to_teams: Mapping[int, AbstractSet[int]],
    current_period: int,
    final_period: int,
    today: Optional[date] = None,
) -> list[GameDay]:
    """Same as build_remaining_game_days, but from a schedule keyed by scoring period."""
    anchor = today or date.today()
    return [
        GameDay(
            scoring_period_id=period,
            playing_team_ids=frozenset(period_to_teams.get(period, ())),
            date=(anchor + timedelta(days=period - current_period)).isoformat(),
        )
        for period in range(current_period, final_period + 1)
    ]
