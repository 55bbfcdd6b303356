from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


MIN_PLAYERS = 1
MAX_PLAYERS = 5

ARMIES_BY_PLAYER_COUNT: Dict[int, int] = {
    1: 45,
    2: 40,
    3: 35,
    4: 30,
    5: 25,
}

DIE_FACES = 6
MAX_ATTACK_DICE = 3
MAX_DEFEND_DICE = 2

MIN_REINFORCEMENTS = 3
TERRITORIES_PER_REINFORCEMENT = 3


class PlacementMode(str, Enum):
    EVEN = "even"
    MANUAL = "manual"


@dataclass(frozen=True)
class GameConfig:
    seed: int | None = None
    shuffle_territories: bool = False
    # None means the interface is asked during setup.
    placement: PlacementMode | None = None
    choose_forces: bool = False
