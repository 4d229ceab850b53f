"""Season setup orchestrator.

Fetches league data and the pro schedule, assigns IR slots once, then for
each remaining game day optimizes the lineup against a fresh roster
snapshot and submits the changes to ESPN, pausing between days.
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from .constants import (
    DEFAULT_CALENDAR_WINDOW_DAYS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REQUEST_DELAY_SECONDS,
)
from .espn_client import (
    ESPNAuth,
    ESPNClient,
    LineupLockedError,
    TeamNotFoundError,
    build_lineup_payload,
)
from .ir_assigner import assign_ir_slots, get_ir_player_ids
from .models import GameDay, LeagueSettings, Player, SeasonPreview, SeasonRunResult
from .normalizer import (
    find_team_id,
    normalize_league,
    normalize_pro_schedule,
    normalize_public_schedule,
    normalize_roster_slots,
    team_display_name,
)
from .optimizer import optimize_lineup, summarize_lineup
from .schedule import (
    build_game_days_from_periods,
    build_remaining_game_days,
    calendar_dates,
    period_anchor_date,
)
from .slots import SlotTable, build_starting_slots, get_slot_table

logger = logging.getLogger('fba_lineup.submitter')

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class RunOptions:
    """Tunables for a season setup run."""
    schedule_source: str = 'scoreboard'  # or 'pro_team_schedule'
    calendar_window_days: int = DEFAULT_CALENDAR_WINDOW_DAYS
    request_delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS
    max_workers: int = DEFAULT_MAX_WORKERS
    dry_run: bool = False

    @classmethod
    def from_config(cls, config) -> 'RunOptions':
        """Build options from a LineupConfig."""
        return cls(
            schedule_source=config.schedule_source,
            calendar_window_days=config.calendar_window_days,
            request_delay_seconds=config.request_delay_seconds,
            max_workers=config.max_workers,
            dry_run=config.dry_run,
        )


@dataclass
class _SeasonData:
    raw_league: dict
    settings: LeagueSettings
    players: list[Player]
    date_to_teams: dict
    period_to_teams: Optional[dict]


def _result_or_none(future: Future, label: str):
    """Future result, or None if the fetch raised."""
    try:
        return future.result()
    except Exception as e:
        logger.warning(f'{label} fetch failed, treating as no games: {e}')
        return None


def _gather_season_data(
    client,
    league_id: int,
    season: int,
    table: SlotTable,
    options: RunOptions,
    today: date,
) -> _SeasonData:
    """
    Fetch the league blob and the schedule window concurrently.

    League fetch errors propagate; schedule fetch errors degrade to
    "no games" for the affected dates.
    """
    use_scoreboard = options.schedule_source == 'scoreboard'
    dates = calendar_dates(today, options.calendar_window_days) if use_scoreboard else []

    with ThreadPoolExecutor(max_workers=options.max_workers) as executor:
        league_future = executor.submit(client.fetch_league, league_id, season)
        pro_future = None if use_scoreboard else executor.submit(client.fetch_pro_schedule, league_id, season)
        day_futures = [(d, executor.submit(client.fetch_scoreboard_day, d)) for d in dates]

        raw_league = league_future.result()
        day_results = [(d, _result_or_none(f, f'Scoreboard {d}')) for d, f in day_futures]
        raw_pro = _result_or_none(pro_future, 'Pro schedule') if pro_future else None

    settings, players = normalize_league(raw_league, table)
    period_to_teams = None if use_scoreboard else normalize_pro_schedule(raw_pro or {})

    return _SeasonData(
        raw_league=raw_league,
        settings=settings,
        players=players,
        date_to_teams=normalize_public_schedule(day_results) if use_scoreboard else {},
        period_to_teams=period_to_teams,
    )


def _build_game_days(data: _SeasonData, current_period: int, today: date) -> list[GameDay]:
    final_period = data.settings.final_scoring_period_id
    if data.period_to_teams is not None:
        return build_game_days_from_periods(data.period_to_teams, current_period, final_period, today)
    return build_remaining_game_days(data.date_to_teams, current_period, final_period, today)


def _resolve_team(raw_league: dict, team_id: Optional[int], swid: str) -> int:
    """Validate an explicit team id, or find the caller's team by SWID."""
    if team_id is None:
        team_id = find_team_id(raw_league, swid)
        if team_id is None:
            raise TeamNotFoundError('Could not find your team in this league.')
        return team_id
    team_ids = {team.get('id') for team in raw_league.get('teams') or []}
    if team_id not in team_ids:
        raise TeamNotFoundError(f'Team {team_id} is not in this league')
    return team_id


def _report_progress(on_progress: Optional[ProgressCallback], completed: int, total: int) -> None:
    if on_progress is None:
        return
    try:
        on_progress(completed, total)
    except Exception as e:
        # A broken listener must not abort the run
        logger.warning(f'Progress callback failed: {e}')


def run_season_setup(
    league_id: int,
    team_id: Optional[int],
    season: int,
    current_scoring_period_id: Optional[int],
    auth: ESPNAuth,
    on_progress: Optional[ProgressCallback] = None,
    client=None,
    table: Optional[SlotTable] = None,
    options: Optional[RunOptions] = None,
    today: Optional[date] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SeasonRunResult:
    """
    Set the lineup for every remaining day of the season.

    Args:
        league_id: ESPN league id
        team_id: Caller's fantasy team id (None: found by SWID)
        season: Season year
        current_scoring_period_id: First period to set (None: the league's
            current period)
        auth: ESPN cookies (SWID doubles as the transaction member id)
        on_progress: Called with (completed, total) after every day
        client: ESPNClient-like object (default: ESPNClient(auth))
        table: Slot table (default: basketball)
        options: Run tunables (default: RunOptions())
        today: Calendar date of current_scoring_period_id (default: today,
            shifted by the distance from the league's current period)
        cancel_event: When set, the run stops before the next day

    Returns:
        SeasonRunResult with submitted/skipped counts, per-day errors and
        the resolved team id

    Raises:
        TeamNotFoundError: If the team is not in the league
        ESPNClientError: If the initial league fetch fails
    """
    client = client or ESPNClient(auth)
    table = table or get_slot_table()
    options = options or RunOptions()
    window_start = today or date.today()

    data = _gather_season_data(client, league_id, season, table, options, window_start)
    team_id = _resolve_team(data.raw_league, team_id, auth.swid)

    league_period = data.settings.current_scoring_period_id
    if current_scoring_period_id is None:
        current_scoring_period_id = league_period
    if today is None:
        today = period_anchor_date(current_scoring_period_id, league_period, window_start)
        if current_scoring_period_id != league_period:
            logger.info(
                f'Starting at period {current_scoring_period_id} '
                f'(league is on {league_period}), anchored to {today.isoformat()}'
            )

    starting_slots = build_starting_slots(data.settings.roster_slots, table)
    logger.info(
        f'Roster slots {data.settings.roster_slots} -> starting slots '
        f'{[table.name(s) for s in starting_slots]}'
    )
    my_players = [p for p in data.players if p.team_id == team_id]

    # IR placement is decided once for the whole run
    ir_ids = get_ir_player_ids(my_players, data.settings.ir_slot_count, table)
    active_players = [p for p in my_players if p.player_id not in ir_ids]
    ir_players = [p for p in my_players if p.player_id in ir_ids]

    game_days = _build_game_days(data, current_scoring_period_id, today)
    days_with_games = sum(1 for d in game_days if d.playing_team_ids)
    logger.info(f'Game days: {len(game_days)} total, {days_with_games} with at least one game')

    result = SeasonRunResult(team_id=team_id)
    total = len(game_days)

    for i, day in enumerate(game_days):
        if cancel_event is not None and cancel_event.is_set():
            logger.warning(f'Run cancelled before period {day.scoring_period_id}')
            break

        period = day.scoring_period_id
        try:
            # Fresh per-period snapshot: ESPN may have moved players itself
            raw_roster = client.fetch_roster_snapshot(league_id, season, period)
            current_slots = normalize_roster_slots(raw_roster, team_id)

            lineup = optimize_lineup(
                active_players,
                ir_players,
                day.playing_team_ids,
                period,
                current_scoring_period_id,
                current_slots,
                starting_slots,
                table,
            )
            changes = lineup.changes

            if not changes:
                summary = summarize_lineup(active_players, ir_players, current_slots, day.playing_team_ids, table)
                logger.info(f'[{day.date}] period {period}: lineup already optimal - {summary}')
                result.skipped += 1
            else:
                is_future = period > current_scoring_period_id
                payload = build_lineup_payload(team_id, period, changes, is_future, auth.swid)
                if options.dry_run:
                    logger.info(f'[{day.date}] period {period}: dry run, would submit {len(changes)} moves')
                else:
                    client.submit_lineup(league_id, season, payload)
                    logger.info(f'[{day.date}] period {period}: submitted {len(changes)} moves')
                result.submitted += 1

        except LineupLockedError as e:
            logger.warning(f'[{day.date}] period {period} locked ({e}). Continuing...')
        except Exception as e:
            logger.error(f'[{day.date}] period {period} error: {e}')
            result.errors.append(f'[{day.date}] period {period}: {e}')

        _report_progress(on_progress, result.submitted + result.skipped, total)

        if i < total - 1 and options.request_delay_seconds > 0:
            time.sleep(options.request_delay_seconds)

    logger.info(
        f'Season setup finished: {result.submitted} submitted, '
        f'{result.skipped} skipped, {len(result.errors)} errors'
    )
    return result


def preview_season(
    league_id: int,
    season: int,
    auth: ESPNAuth,
    client=None,
    table: Optional[SlotTable] = None,
    options: Optional[RunOptions] = None,
    today: Optional[date] = None,
    team_id: Optional[int] = None,
) -> SeasonPreview:
    """
    Summarize what a run would do without writing anything.

    The caller's team is found by SWID unless team_id is given.

    Raises:
        TeamNotFoundError: If no team in the league belongs to the caller
    """
    client = client or ESPNClient(auth)
    table = table or get_slot_table()
    options = options or RunOptions()
    today = today or date.today()

    data = _gather_season_data(client, league_id, season, table, options, today)
    team_id = _resolve_team(data.raw_league, team_id, auth.swid)

    my_players = [p for p in data.players if p.team_id == team_id]
    current_period = data.settings.current_scoring_period_id
    game_days = _build_game_days(data, current_period, today)

    return SeasonPreview(
        team_id=team_id,
        team_name=team_display_name(data.raw_league, team_id),
        game_day_count=len(game_days),
        current_scoring_period_id=current_period,
        ir_assignments=assign_ir_slots(my_players, data.settings.ir_slot_count, table),
        injured_players=[p for p in my_players if p.is_out],
    )
