from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .map import Territory, TerritoryGraph


class Color(str, Enum):
    RED = "Red"
    BLUE = "Blue"
    GREEN = "Green"
    YELLOW = "Yellow"
    INDIGO = "Indigo"


PLAYER_COLORS = (Color.RED, Color.BLUE, Color.GREEN, Color.YELLOW, Color.INDIGO)


def color_for(index: int) -> Color:
    if 0 <= index < len(PLAYER_COLORS):
        return PLAYER_COLORS[index]
    return PLAYER_COLORS[0]


@dataclass
class Player:
    name: str
    color: Color
    # Insertion order is the order armies are handed out in.
    armies: Dict[Territory, int] = field(default_factory=dict)

    def owns(self, territory: Territory) -> bool:
        return territory in self.armies

    @property
    def territory_count(self) -> int:
        return len(self.armies)

    @property
    def total_armies(self) -> int:
        return sum(self.armies.values())

    def owned_territories(self) -> List[Territory]:
        return list(self.armies)


@dataclass
class GameState:
    graph: TerritoryGraph
    players: List[Player]

    def player(self, name: str) -> Player:
        for player in self.players:
            if player.name == name:
                return player
        raise KeyError(name)

    def owner_of(self, territory: Territory) -> Optional[Player]:
        for player in self.players:
            if player.owns(territory):
                return player
        return None

    def armies_on(self, territory: Territory) -> int:
        owner = self.owner_of(territory)
        return 0 if owner is None else owner.armies[territory]

    def total_armies(self) -> int:
        return sum(player.total_armies for player in self.players)

    def winner(self) -> Optional[Player]:
        total = len(self.graph)
        for player in self.players:
            if player.territory_count == total:
                return player
        return None

    def check_game_over(self) -> bool:
        return self.winner() is not None


def create_players(names: Sequence[str]) -> List[Player]:
    return [Player(name=name, color=color_for(index)) for index, name in enumerate(names)]
