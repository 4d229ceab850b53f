"""Per-day lineup optimizer.

Priority tiers (lower = better):
    1: healthy + has game
    2: OUT + has game
    3: healthy + no game
    4: OUT + no game

"Injured" means injury status OUT only; DOUBTFUL, QUESTIONABLE, PROBABLE
and unknown are all treated as healthy.
"""

import logging
from typing import AbstractSet, Mapping

from .models import DayLineup, LineupChangeItem, Player
from .slots import SlotTable, resolve_current_slot, slot_name

logger = logging.getLogger('fba_lineup.optimizer')


def compute_tier(player: Player, playing_team_ids: AbstractSet[int]) -> int:
    """Rank a player for one day by health and whether their team plays."""
    has_game = player.pro_team_id in playing_team_ids
    if not player.is_out and has_game:
        return 1
    if player.is_out and has_game:
        return 2
    if not player.is_out:
        return 3
    return 4


def optimize_lineup(
    active_players: list[Player],
    ir_players: list[Player],
    playing_team_ids: AbstractSet[int],
    scoring_period_id: int,
    current_scoring_period_id: int,
    current_slots: Mapping[int, int],
    starting_slots: list[int],
    table: SlotTable,
) -> DayLineup:
    """
    Build the lineup for a single scoring period.

    Args:
        active_players: Rostered players not assigned to IR
        ir_players: Players assigned to IR slots
        playing_team_ids: Pro team ids with a game this period
        scoring_period_id: Period being optimized
        current_scoring_period_id: The league's "today"
        current_slots: player_id -> slot as of this period
        starting_slots: Ordered starting slot instances to fill
        table: Slot table for the league's sport

    Returns:
        DayLineup whose items are, in order: filled starting slots, bench
        moves for unassigned active players, then IR moves (today or past
        only). Items whose slot does not change are included; use
        DayLineup.changes for the moves to submit.
    """
    is_future = scoring_period_id > current_scoring_period_id

    candidates = []
    for player in active_players:
        from_slot = resolve_current_slot(player, current_slots)
        if is_future and from_slot == table.ir:
            # ESPN rejects IR transitions on non-today periods
            logger.debug(f'Period {scoring_period_id}: {player.name} locked in IR')
            continue
        candidates.append((player, from_slot))

    # sorted() is stable, so equal tier/points keep roster order
    ranked = sorted(
        candidates,
        key=lambda c: (compute_tier(c[0], playing_team_ids), -c[0].projected_points),
    )

    used: set[int] = set()
    items: list[LineupChangeItem] = []

    for slot_id in starting_slots:
        for player, from_slot in ranked:
            if player.player_id in used or not player.is_eligible_for(slot_id):
                continue
            used.add(player.player_id)
            items.append(LineupChangeItem(player.player_id, from_slot, slot_id))
            break

    for player, from_slot in ranked:
        if player.player_id not in used:
            items.append(LineupChangeItem(player.player_id, from_slot, table.bench))

    if not is_future:
        for player in ir_players:
            from_slot = resolve_current_slot(player, current_slots)
            items.append(LineupChangeItem(player.player_id, from_slot, table.ir))

    return DayLineup(scoring_period_id=scoring_period_id, items=tuple(items))


def _last_name(name: str) -> str:
    parts = name.split(' ')
    return ' '.join(parts[1:]) or name


def summarize_lineup(
    active_players: list[Player],
    ir_players: list[Player],
    current_slots: Mapping[int, int],
    playing_team_ids: AbstractSet[int],
    table: SlotTable,
) -> str:
    """One-line description of a lineup, e.g. 'PG=Curry(game) Bench=James(no game) IR=Durant'."""
    labels = {1: 'game', 2: 'inj+game', 3: 'no game', 4: 'inj+no game'}
    parts = []
    for player in active_players:
        slot_id = resolve_current_slot(player, current_slots)
        tier = labels[compute_tier(player, playing_team_ids)]
        parts.append(f'{slot_name(slot_id, table)}={_last_name(player.name)}({tier})')
    for player in ir_players:
        parts.append(f'IR={_last_name(player.name)}')
    return ' '.join(parts)
