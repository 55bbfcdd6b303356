from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from hazard.config import PlacementMode
from hazard.game.actions import AttackDecision
from hazard.game.events import Event
from hazard.game.map import Territory
from hazard.game.state import GameState, Player


class GameInterface(ABC):
    """Everything the game asks of the outside world.

    Implementations do the prompting and printing. Values they return are
    validated by the game, which asks again after a rejection.
    """

    @abstractmethod
    def request_player_count(self) -> int: ...

    @abstractmethod
    def request_player_name(self, index: int) -> str: ...

    @abstractmethod
    def request_placement_mode(self) -> PlacementMode: ...

    @abstractmethod
    def request_manual_placement(
        self, player: Player, owned: Sequence[Territory], remaining: int
    ) -> int: ...

    @abstractmethod
    def request_attack_decision(self, player: Player, state: GameState) -> AttackDecision: ...

    @abstractmethod
    def request_conquest_transfer(self, minimum: int, maximum: int) -> int: ...

    def request_force(self, role: str, player: Player, cap: int) -> int:
        return cap

    @abstractmethod
    def notify(self, event: Event) -> None: ...
