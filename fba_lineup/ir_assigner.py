"""IR slot assignment.

Players who will be out the longest take the scarce IR slots, freeing
active roster spots for shorter-term injuries. Only status OUT is a
candidate; DOUBTFUL/QUESTIONABLE/PROBABLE count as healthy here.
"""

from .models import IRAssignment, Player
from .slots import SlotTable


def _ir_sort_key(player: Player, table: SlotTable) -> tuple:
    in_ir = 0 if player.lineup_slot_id == table.ir else 1
    if player.estimated_return_date is None:
        return (in_ir, 0, 0)
    # Later return date first
    return (in_ir, 1, -player.estimated_return_date.toordinal())


def assign_ir_slots(players: list[Player], ir_count: int, table: SlotTable) -> list[IRAssignment]:
    """
    Assign IR or bench to every OUT player.

    Sort order (stable, ties keep input order):
        1. Players already in IR before those who are not
        2. No return date (indefinitely out) before a dated return
        3. Later return date before earlier

    Args:
        players: All rostered players for one team
        ir_count: Number of IR slots in the league
        table: Slot table for the league's sport

    Returns:
        One IRAssignment per OUT player, in priority order. The first
        ir_count get the IR slot, the rest the bench.
    """
    capacity = max(ir_count, 0)
    injured = [p for p in players if p.is_out]
    ranked = sorted(injured, key=lambda p: _ir_sort_key(p, table))

    return [
        IRAssignment(player=player, assigned_slot=table.ir if i < capacity else table.bench)
        for i, player in enumerate(ranked)
    ]


def get_ir_player_ids(players: list[Player], ir_count: int, table: SlotTable) -> set[int]:
    """Return the ids of players that should occupy IR slots."""
    return {
        a.player.player_id
        for a in assign_ir_slots(players, ir_count, table)
        if a.assigned_slot == table.ir
    }
