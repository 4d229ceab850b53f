"""Lineup slot tables and slot helpers.

Slot ids mean different things per sport (and ESPN has renumbered them
between seasons), so every comparison goes through a SlotTable resolved
once at startup instead of hard-coded numbers.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import BASKETBALL_SLOTS, BASKETBALL_STARTING_ORDER
from .models import Player

logger = logging.getLogger('fba_lineup.slots')


@dataclass(frozen=True)
class SlotTable:
    """Slot id layout for one sport."""
    sport: str
    bench: int
    ir: int
    starting_order: tuple[int, ...]
    names: tuple[tuple[int, str], ...] = ()

    def name(self, slot_id: int) -> str:
        for known_id, label in self.names:
            if known_id == slot_id:
                return label
        return f'Slot{slot_id}'


def _basketball_table() -> SlotTable:
    return SlotTable(
        sport='basketball',
        bench=BASKETBALL_SLOTS['BENCH'],
        ir=BASKETBALL_SLOTS['IR'],
        starting_order=tuple(BASKETBALL_SLOTS[s] for s in BASKETBALL_STARTING_ORDER),
        names=tuple(
            (slot_id, 'Bench' if label == 'BENCH' else label)
            for label, slot_id in BASKETBALL_SLOTS.items()
        ),
    )


SLOT_TABLES: dict[str, SlotTable] = {
    'basketball': _basketball_table(),
}


def get_slot_table(
    sport: str = 'basketball',
    bench_slot_id: Optional[int] = None,
    ir_slot_id: Optional[int] = None,
    starting_order: Optional[list[int]] = None,
) -> SlotTable:
    """
    Resolve the slot table for a sport, applying any configured overrides.

    Args:
        sport: Registered sport name (e.g. 'basketball')
        bench_slot_id: Override for the bench slot id
        ir_slot_id: Override for the IR slot id
        starting_order: Override for the starting slot fill order

    Returns:
        SlotTable for the sport

    Raises:
        ValueError: If the sport is not registered
    """
    if sport not in SLOT_TABLES:
        raise ValueError(f'Unsupported sport: {sport!r} (known: {", ".join(sorted(SLOT_TABLES))})')

    table = SLOT_TABLES[sport]
    if bench_slot_id is None and ir_slot_id is None and starting_order is None:
        return table

    names = dict(table.names)
    if bench_slot_id is not None:
        names.pop(table.bench, None)
        names[bench_slot_id] = 'Bench'
    if ir_slot_id is not None:
        names.pop(table.ir, None)
        names[ir_slot_id] = 'IR'

    return SlotTable(
        sport=table.sport,
        bench=table.bench if bench_slot_id is None else bench_slot_id,
        ir=table.ir if ir_slot_id is None else ir_slot_id,
        starting_order=table.starting_order if starting_order is None else tuple(starting_order),
        names=tuple(sorted(names.items())),
    )


def build_starting_slots(roster_slots: Mapping, table: SlotTable) -> list[int]:
    """
    Expand league slot counts into the ordered list of starting slot instances.

    Each starting slot type is repeated by its configured count, in the
    table's fill order. Keys may be ints or strings.
    """
    result = []
    for slot_id in table.starting_order:
        count = roster_slots.get(slot_id, roster_slots.get(str(slot_id), 0))
        result.extend([slot_id] * int(count or 0))
    return result


def slot_name(slot_id: int, table: SlotTable) -> str:
    """Human-readable slot label."""
    return table.name(slot_id)


def resolve_current_slot(player: Player, fresh_slots: Mapping[int, int]) -> int:
    """
    Return the slot a player occupies for a specific scoring period.

    Lookup order:
        1. fresh_slots (the per-period roster snapshot)
        2. player.lineup_slot_id (as of the initial league fetch)
    """
    if player.player_id in fresh_slots:
        return fresh_slots[player.player_id]
    logger.debug(
        f'No fresh slot for {player.name} ({player.player_id}); '
        f'falling back to slot {player.lineup_slot_id}'
    )
    return player.lineup_slot_id
