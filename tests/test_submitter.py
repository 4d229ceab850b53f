"""Integration tests for the season setup orchestrator with a fake ESPN client."""

import threading
from datetime import date
from unittest.mock import patch

import pytest

from fba_lineup.espn_client import (
    ESPNAuth,
    ESPNAuthenticationError,
    ESPNClientError,
    LineupLockedError,
    TeamNotFoundError,
)
from fba_lineup.slots import get_slot_table
from fba_lineup.submitter import RunOptions, preview_season, run_season_setup

TABLE = get_slot_table('basketball')
PG, UTIL, BENCH, IR = 0, 11, 12, 13
TODAY = date(2026, 1, 10)
AUTH = ESPNAuth(espn_s2='s2', swid='{OWNER-1}')
NO_DELAY = RunOptions(request_delay_seconds=0, max_workers=4)


def roster_entry(player_id, name, slot, pro_team, points, eligible=(PG, UTIL, BENCH, IR), injury=None, injury_date=None):
    return {
        'playerId': player_id,
        'lineupSlotId': slot,
        'playerPoolEntry': {
            'injuryStatus': injury,
            'injuryDate': injury_date,
            'player': {
                'id': player_id,
                'fullName': name,
                'proTeamId': pro_team,
                'eligibleSlots': list(eligible),
                'stats': [{'statSplitTypeId': 1, 'seasonId': 2026, 'appliedTotal': points * 20, 'appliedAverage': points}],
            },
        },
    }


def league_blob(entries, ir_slots=0, current=10, final=14):
    return {
        'scoringPeriodId': current,
        'status': {'finalScoringPeriod': final},
        'settings': {'rosterSettings': {'lineupSlotCounts': {'0': 1, '11': 1, '12': 4, '13': ir_slots}}},
        'teams': [
            {'id': 1, 'name': 'Ballers', 'owners': ['{OWNER-1}'], 'roster': {'entries': entries}},
            {'id': 2, 'name': 'Others', 'owners': ['{OWNER-2}'], 'roster': {'entries': [
                roster_entry(900, 'Other Guy', BENCH, 1, 99),
            ]}},
        ],
    }


def scoreboard(*team_ids):
    return {'events': [{'competitions': [{'competitors': [{'id': str(t)} for t in team_ids]}]}]}


class FakeClient:
    """In-memory stand-in for ESPNClient."""

    def __init__(self, league, slots=None, boards=None, submit_errors=None, pro_schedule=None):
        self.league = league
        self.slots = slots or {}
        self.boards = boards or {}
        self.submit_errors = submit_errors or {}
        self.pro_schedule = pro_schedule
        self.submitted = []
        self.snapshot_periods = []
        self.scoreboard_calls = []
        self.league_fetches = 0

    def fetch_league(self, league_id, season):
        self.league_fetches += 1
        return self.league

    def fetch_scoreboard_day(self, date_key):
        self.scoreboard_calls.append(date_key)
        board = self.boards.get(date_key)
        if isinstance(board, Exception):
            raise board
        return board

    def fetch_pro_schedule(self, league_id, season):
        return self.pro_schedule

    def fetch_roster_snapshot(self, league_id, season, period):
        self.snapshot_periods.append(period)
        entries = [{'playerId': pid, 'lineupSlotId': slot} for pid, slot in self.slots.items()]
        return {'teams': [{'id': 1, 'roster': {'entries': entries}}]}

    def submit_lineup(self, league_id, season, payload):
        error = self.submit_errors.get(payload['scoringPeriodId'])
        if error:
            raise error
        self.submitted.append(payload)
        return {}


@pytest.fixture
def entries():
    return [
        roster_entry(1, 'Alpha One', BENCH, 1, 30),
        roster_entry(2, 'Bravo Two', BENCH, 2, 20),
        roster_entry(3, 'Charlie Three', BENCH, 3, 10, eligible=(UTIL, BENCH, IR)),
    ]


@pytest.fixture
def boards():
    return {f'202601{d}': scoreboard(1, 2) for d in range(10, 15)}


def run(client, progress=None, options=NO_DELAY, team_id=1, **kwargs):
    return run_season_setup(
        league_id=555,
        team_id=team_id,
        season=2026,
        current_scoring_period_id=10,
        auth=AUTH,
        on_progress=progress.append_call if progress is not None else None,
        client=client,
        table=TABLE,
        options=options,
        today=TODAY,
        **kwargs,
    )


class ProgressLog(list):
    def append_call(self, completed, total):
        self.append((completed, total))


class TestSeasonRun:
    """Tests for the day-by-day submission loop."""

    def test_submits_every_day(self, entries, boards):
        """Test that each day with changes is submitted with the right tag."""
        client = FakeClient(league_blob(entries), slots={1: BENCH, 2: BENCH, 3: BENCH}, boards=boards)
        progress = ProgressLog()

        result = run(client, progress)

        assert result.to_dict() == {'submitted': 5, 'skipped': 0, 'errors': []}
        assert client.snapshot_periods == [10, 11, 12, 13, 14]
        assert [p['type'] for p in client.submitted] == ['ROSTER'] + ['FUTURE_ROSTER'] * 4
        assert all(p['memberId'] == '{OWNER-1}' for p in client.submitted)
        assert progress == [(1, 5), (2, 5), (3, 5), (4, 5), (5, 5)]

    def test_only_changes_submitted(self, entries, boards):
        """Test that no-op items are left out of the payload."""
        client = FakeClient(league_blob(entries), slots={1: BENCH, 2: BENCH, 3: BENCH}, boards=boards)

        run(client)

        items = client.submitted[0]['items']
        assert {(i['playerId'], i['toLineupSlotId']) for i in items} == {(1, PG), (2, UTIL)}

    def test_optimal_days_skipped(self, entries, boards):
        """Test that already-optimal days are skipped without a write."""
        client = FakeClient(league_blob(entries), slots={1: PG, 2: UTIL, 3: BENCH}, boards=boards)
        progress = ProgressLog()

        result = run(client, progress)

        assert result.to_dict() == {'submitted': 0, 'skipped': 5, 'errors': []}
        assert client.submitted == []
        assert progress[-1] == (5, 5)

    def test_day_error_does_not_abort(self, entries, boards):
        """Test that a failure on day 3 is recorded and days 4-5 still run."""
        client = FakeClient(
            league_blob(entries),
            slots={1: BENCH, 2: BENCH, 3: BENCH},
            boards=boards,
            submit_errors={12: ESPNClientError('validation failed')},
        )
        progress = ProgressLog()

        result = run(client, progress)

        assert result.submitted == 4
        assert result.skipped == 0
        assert result.errors == ['[2026-01-12] period 12: validation failed']
        assert [p['scoringPeriodId'] for p in client.submitted] == [10, 11, 13, 14]
        assert progress == [(1, 5), (2, 5), (2, 5), (3, 5), (4, 5)]

    def test_locked_day_is_soft(self, entries, boards):
        """Test that a locked day is neither an error nor a submission."""
        client = FakeClient(
            league_blob(entries),
            slots={1: BENCH, 2: BENCH, 3: BENCH},
            boards=boards,
            submit_errors={10: LineupLockedError('TRAN_LINEUP_LOCKED')},
        )

        result = run(client)

        assert result.to_dict() == {'submitted': 4, 'skipped': 0, 'errors': []}

    def test_snapshot_failure_recorded(self, entries, boards):
        """Test that a failed roster read only costs that day."""
        client = FakeClient(league_blob(entries), slots={1: BENCH, 2: BENCH, 3: BENCH}, boards=boards)
        original = client.fetch_roster_snapshot

        def flaky(league_id, season, period):
            if period == 11:
                raise ESPNClientError('ESPN API 500')
            return original(league_id, season, period)

        client.fetch_roster_snapshot = flaky
        result = run(client)

        assert result.submitted == 4
        assert result.errors == ['[2026-01-11] period 11: ESPN API 500']

    def test_progress_callback_failure_ignored(self, entries, boards):
        client = FakeClient(league_blob(entries), slots={1: PG, 2: UTIL, 3: BENCH}, boards=boards)

        def broken(completed, total):
            raise RuntimeError('listener gone')

        result = run_season_setup(
            555, 1, 2026, 10, AUTH, on_progress=broken,
            client=client, table=TABLE, options=NO_DELAY, today=TODAY,
        )
        assert result.skipped == 5

    def test_dry_run_does_not_write(self, entries, boards):
        client = FakeClient(league_blob(entries), slots={1: BENCH, 2: BENCH, 3: BENCH}, boards=boards)

        result = run(client, options=RunOptions(request_delay_seconds=0, dry_run=True))

        assert result.submitted == 5
        assert client.submitted == []

    def test_cancel_stops_loop(self, entries, boards):
        """Test that setting the cancel event stops before the next day."""
        client = FakeClient(league_blob(entries), slots={1: PG, 2: UTIL, 3: BENCH}, boards=boards)
        cancel = threading.Event()

        def cancel_after_first(completed, total):
            cancel.set()

        result = run_season_setup(
            555, 1, 2026, 10, AUTH, on_progress=cancel_after_first,
            client=client, table=TABLE, options=NO_DELAY, today=TODAY, cancel_event=cancel,
        )
        assert result.skipped == 1
        assert client.snapshot_periods == [10]

    @patch('fba_lineup.submitter.time.sleep')
    def test_delay_between_days(self, mock_sleep, entries, boards):
        """Test pacing between days, skipped after the last one."""
        client = FakeClient(league_blob(entries), slots={1: PG, 2: UTIL, 3: BENCH}, boards=boards)

        run(client, options=RunOptions(request_delay_seconds=0.3))

        assert mock_sleep.call_count == 4
        mock_sleep.assert_called_with(0.3)


class TestInitialFetch:
    """Tests for the concurrent initial data gathering."""

    def test_fetches_full_window(self, entries, boards):
        client = FakeClient(league_blob(entries), slots={1: PG, 2: UTIL, 3: BENCH}, boards=boards)

        run(client, options=RunOptions(request_delay_seconds=0, calendar_window_days=60))

        assert len(client.scoreboard_calls) == 60
        assert sorted(client.scoreboard_calls)[0] == '20260110'

    def test_failed_scoreboard_day_degrades(self, entries, boards):
        """Test that a failed calendar fetch means no games, not a failed run."""
        boards['20260111'] = RuntimeError('timeout')
        client = FakeClient(league_blob(entries), slots={1: PG, 2: UTIL, 3: BENCH}, boards=boards)

        result = run(client)

        assert result.errors == []
        assert result.skipped + result.submitted == 5

    def test_unknown_team_fails_before_work(self, entries, boards):
        client = FakeClient(league_blob(entries), boards=boards)

        with pytest.raises(TeamNotFoundError):
            run(client, team_id=99)
        assert client.snapshot_periods == []
        assert client.submitted == []

    def test_auth_failure_propagates(self, boards):
        client = FakeClient({}, boards=boards)

        def denied(league_id, season):
            raise ESPNAuthenticationError('bad cookies')

        client.fetch_league = denied
        with pytest.raises(ESPNAuthenticationError):
            run(client)
        assert client.snapshot_periods == []

    def test_pro_team_schedule_source(self, entries):
        """Test using the provider's per-period schedule instead of scoreboards."""
        pro = {'settings': {'proTeams': [
            {'id': 1, 'proGamesByScoringPeriod': {str(p): [{}] for p in range(10, 15)}},
        ]}}
        client = FakeClient(league_blob(entries), slots={1: BENCH, 2: BENCH, 3: BENCH}, pro_schedule=pro)

        result = run(client, options=RunOptions(request_delay_seconds=0, schedule_source='pro_team_schedule'))

        assert client.scoreboard_calls == []
        assert result.submitted == 5
        # Only team 1 plays, so Alpha starts at PG and Bravo/Charlie compete for UTIL on points
        assert {(i['playerId'], i['toLineupSlotId']) for i in client.submitted[0]['items']} == {(1, PG), (2, UTIL)}


class TestTeamAndPeriodResolution:
    """Tests for runs that let the league supply the team and starting period."""

    def test_team_found_by_swid(self, entries, boards):
        client = FakeClient(league_blob(entries), slots={1: BENCH, 2: BENCH, 3: BENCH}, boards=boards)

        result = run(client, team_id=None)

        assert result.team_id == 1
        assert result.submitted == 5
        assert client.league_fetches == 1

    def test_unknown_owner(self, entries, boards):
        client = FakeClient(league_blob(entries), boards=boards)
        stranger = ESPNAuth(espn_s2='s2', swid='{NOBODY}')

        with pytest.raises(TeamNotFoundError):
            run_season_setup(555, None, 2026, None, stranger, client=client, table=TABLE, options=NO_DELAY, today=TODAY)
        assert client.snapshot_periods == []

    def test_league_period_used_by_default(self, entries, boards):
        client = FakeClient(league_blob(entries), slots={1: PG, 2: UTIL, 3: BENCH}, boards=boards)

        result = run_season_setup(555, 1, 2026, None, AUTH, client=client, table=TABLE, options=NO_DELAY, today=TODAY)

        assert result.skipped == 5
        assert client.snapshot_periods == [10, 11, 12, 13, 14]

    @patch('fba_lineup.submitter.date')
    def test_later_start_period_keeps_calendar_alignment(self, mock_date, entries, boards):
        """Test that starting two periods ahead also starts two days ahead."""
        mock_date.today.return_value = TODAY
        client = FakeClient(
            league_blob(entries),
            slots={1: BENCH, 2: BENCH, 3: BENCH},
            boards=boards,
            submit_errors={12: ESPNClientError('boom')},
        )

        result = run_season_setup(555, 1, 2026, 12, AUTH, client=client, table=TABLE, options=NO_DELAY)

        assert client.snapshot_periods == [12, 13, 14]
        assert result.errors == ['[2026-01-12] period 12: boom']
        assert min(client.scoreboard_calls) == '20260110'

    @patch('fba_lineup.submitter.date')
    def test_shifted_period_reads_matching_schedule(self, mock_date, entries):
        """Test that a shifted start looks up games on the shifted dates."""
        mock_date.today.return_value = TODAY
        # Only 2026-01-12 has games, and only for Charlie's team
        boards = {'20260112': scoreboard(3)}
        client = FakeClient(league_blob(entries), slots={1: BENCH, 2: BENCH, 3: BENCH}, boards=boards)

        run_season_setup(555, 1, 2026, 12, AUTH, client=client, table=TABLE, options=NO_DELAY)

        first = client.submitted[0]
        assert first['scoringPeriodId'] == 12
        assert (3, UTIL) in {(i['playerId'], i['toLineupSlotId']) for i in first['items']}


class TestEndToEnd:
    """Full scenario: one indefinitely-OUT player and one IR slot."""

    @pytest.fixture
    def client(self, boards):
        entries = [
            roster_entry(1, 'Alpha One', BENCH, 1, 30),
            roster_entry(2, 'Bravo Two', BENCH, 2, 25),
            roster_entry(3, 'Charlie Three', BENCH, 3, 40),
            roster_entry(4, 'Delta Four', UTIL, 1, 50, injury='OUT'),
        ]
        return FakeClient(
            league_blob(entries, ir_slots=1),
            slots={1: BENCH, 2: BENCH, 3: BENCH, 4: UTIL},
            boards=boards,
        )

    def test_today_moves_out_player_to_ir(self, client):
        run(client)

        today_items = {(i['playerId'], i['toLineupSlotId']) for i in client.submitted[0]['items']}
        assert (4, IR) in today_items
        assert (1, PG) in today_items
        assert (2, UTIL) in today_items

    def test_future_days_never_target_ir(self, client):
        result = run(client)

        assert result.errors == []
        for payload in client.submitted[1:]:
            assert payload['type'] == 'FUTURE_ROSTER'
            assert all(i['toLineupSlotId'] != IR for i in payload['items'])
            assert all(i['playerId'] != 4 for i in payload['items'])

    def test_playing_players_start_by_points(self, client):
        run(client)

        future = {(i['playerId'], i['toLineupSlotId']) for i in client.submitted[1]['items']}
        # Charlie has the most points but his team is idle
        assert future == {(1, PG), (2, UTIL)}


class TestPreview:
    """Tests for the read-only preview."""

    def test_preview_finds_team_by_swid(self, boards):
        entries = [
            roster_entry(1, 'Alpha One', BENCH, 1, 30),
            roster_entry(4, 'Delta Four', BENCH, 1, 50, injury='OUT'),
            roster_entry(5, 'Echo Five', BENCH, 2, 10, injury='OUT', injury_date='2026-02-01'),
        ]
        client = FakeClient(league_blob(entries, ir_slots=1), boards=boards)

        preview = preview_season(555, 2026, AUTH, client=client, table=TABLE, options=NO_DELAY, today=TODAY)

        assert preview.team_id == 1
        assert preview.team_name == 'Ballers'
        assert preview.game_day_count == 5
        assert preview.current_scoring_period_id == 10
        assert [(a.player.player_id, a.assigned_slot) for a in preview.ir_assignments] == [(4, IR), (5, BENCH)]
        assert {p.player_id for p in preview.injured_players} == {4, 5}
        assert client.submitted == []

    def test_preview_unknown_owner(self, boards):
        client = FakeClient(league_blob([]), boards=boards)
        stranger = ESPNAuth(espn_s2='s2', swid='{NOBODY}')

        with pytest.raises(TeamNotFoundError):
            preview_season(555, 2026, stranger, client=client, table=TABLE, options=NO_DELAY, today=TODAY)
