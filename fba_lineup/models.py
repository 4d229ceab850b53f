"""Data models for the ESPN lineup bot."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from .constants import LINEUP_ITEM_TYPE


class InjuryStatus(str, Enum):
    """Provider injury designations. Unknown statuses are stored as None."""
    ACTIVE = 'ACTIVE'
    OUT = 'OUT'
    DOUBTFUL = 'DOUBTFUL'
    QUESTIONABLE = 'QUESTIONABLE'
    PROBABLE = 'PROBABLE'


@dataclass(frozen=True)
class Player:
    """A rostered player as seen at fetch time."""
    player_id: int
    name: str
    team_id: int
    pro_team_id: int = 0  # 0 = no real-world team
    injury_status: Optional[InjuryStatus] = None
    lineup_slot_id: int = 0
    eligible_slots: Tuple[int, ...] = ()
    projected_points: float = 0.0
    estimated_return_date: Optional[date] = None

    @property
    def is_out(self) -> bool:
        return self.injury_status is InjuryStatus.OUT

    def is_eligible_for(self, slot_id: int) -> bool:
        return slot_id in self.eligible_slots


@dataclass(frozen=True)
class LeagueSettings:
    """League configuration relevant to lineup decisions."""
    current_scoring_period_id: int
    final_scoring_period_id: int
    ir_slot_count: int = 0
    roster_slots: Dict[int, int] = field(default_factory=dict)  # slot id -> starting count


@dataclass(frozen=True)
class GameDay:
    """One scoring period and the pro teams that play in it."""
    scoring_period_id: int
    playing_team_ids: FrozenSet[int]
    date: str  # YYYY-MM-DD


@dataclass(frozen=True)
class LineupChangeItem:
    """A single proposed lineup move."""
    player_id: int
    from_slot_id: int
    to_slot_id: int
    type: str = LINEUP_ITEM_TYPE

    @property
    def is_noop(self) -> bool:
        return self.from_slot_id == self.to_slot_id

    def to_payload(self) -> dict:
        """Serialize to the provider's transaction item shape."""
        return {
            'playerId': self.player_id,
            'type': self.type,
            'fromLineupSlotId': self.from_slot_id,
            'toLineupSlotId': self.to_slot_id,
        }


@dataclass(frozen=True)
class IRAssignment:
    """An OUT player and the slot (IR or bench) chosen for them."""
    player: Player
    assigned_slot: int


@dataclass(frozen=True)
class DayLineup:
    """Optimizer output for one scoring period."""
    scoring_period_id: int
    items: Tuple[LineupChangeItem, ...] = ()

    @property
    def changes(self) -> List[LineupChangeItem]:
        """Items that actually move a player."""
        return [item for item in self.items if not item.is_noop]


@dataclass
class SeasonRunResult:
    """Aggregate outcome of a season setup run."""
    submitted: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)
    team_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'submitted': self.submitted,
            'skipped': self.skipped,
            'errors': list(self.errors),
        }


@dataclass
class SeasonPreview:
    """Read-only summary of what a run would do."""
    team_id: int
    team_name: str
    game_day_count: int
    current_scoring_period_id: int
    ir_assignments: List[IRAssignment] = field(default_factory=list)
    injured_players: List[Player] = field(default_factory=list)
