"""Shared helpers: scripted dice, a scripted interface and state builders."""

from collections import deque
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import pytest

from hazard.config import PlacementMode
from hazard.game.actions import AttackDecision, EndTurn
from hazard.game.dice import Dice
from hazard.game.map import Territory, TerritoryGraph, build_world_map
from hazard.game.state import GameState, Player, create_players
from hazard.interface import GameInterface


class ScriptedDice(Dice):
    """Returns pre-recorded rolls; shuffles with a seeded generator."""

    def __init__(self, rolls: Iterable[Sequence[int]] = (), seed: int = 0):
        super().__init__(seed=seed)
        self.rolls = deque(list(r) for r in rolls)
        self.calls: List[int] = []

    def roll(self, count: int) -> List[int]:
        self.calls.append(count)
        if not self.rolls:
            raise AssertionError(f"Unexpected roll of {count} dice.")
        values = self.rolls.popleft()
        assert len(values) == count, f"scripted {values} for a roll of {count}"
        return list(values)


class AlternatingDice(Dice):
    """Attacker always rolls ``high``, defender always rolls ``low``."""

    def __init__(self, high: int = 6, low: int = 1):
        super().__init__(seed=0)
        self.high = high
        self.low = low
        self._attacker_next = True

    def roll(self, count: int) -> List[int]:
        value = self.high if self._attacker_next else self.low
        self._attacker_next = not self._attacker_next
        return [value] * count


class ScriptedInterface(GameInterface):
    def __init__(
        self,
        names: Sequence[str] = ("Alice", "Bob"),
        count: Optional[int] = None,
        mode: PlacementMode = PlacementMode.EVEN,
        placements: Iterable[int] = (),
        decisions: Iterable[AttackDecision] = (),
        transfers: Iterable[int] = (),
        forces: Iterable[int] = (),
        decide: Optional[Callable[[Player, GameState], AttackDecision]] = None,
    ):
        self.names = list(names)
        self.count = len(self.names) if count is None else count
        self.mode = mode
        self.placements = deque(placements)
        self.decisions = deque(decisions)
        self.transfers = deque(transfers)
        self.forces = deque(forces)
        self.decide = decide
        self.events: List[object] = []
        self.transfer_requests: List[tuple] = []
        self.placement_requests = 0

    def request_player_count(self) -> int:
        return self.count

    def request_player_name(self, index: int) -> str:
        return self.names[index]

    def request_placement_mode(self) -> PlacementMode:
        return self.mode

    def request_manual_placement(self, player, owned, remaining) -> int:
        self.placement_requests += 1
        return self.placements.popleft()

    def request_attack_decision(self, player, state) -> AttackDecision:
        if self.decide is not None:
            return self.decide(player, state)
        if self.decisions:
            return self.decisions.popleft()
        return EndTurn()

    def request_conquest_transfer(self, minimum: int, maximum: int) -> int:
        self.transfer_requests.append((minimum, maximum))
        if self.transfers:
            return self.transfers.popleft()
        return minimum

    def request_force(self, role, player, cap) -> int:
        return self.forces.popleft()

    def notify(self, event) -> None:
        self.events.append(event)

    def of_type(self, kind) -> list:
        return [e for e in self.events if isinstance(e, kind)]


def make_state(
    ledgers: Dict[str, Dict[str, int]],
    graph: Optional[TerritoryGraph] = None,
) -> GameState:
    """Build a state from ``{player: {territory name: armies}}``."""
    graph = graph or build_world_map()
    by_name = {t.name: t for t in graph}
    players = create_players(list(ledgers))
    for player, ledger in zip(players, ledgers.values()):
        for name, armies in ledger.items():
            player.armies[by_name[name]] = armies
    return GameState(graph=graph, players=players)


def territory(state: GameState, name: str) -> Territory:
    for t in state.graph:
        if t.name == name:
            return t
    raise KeyError(name)


@pytest.fixture
def world() -> TerritoryGraph:
    return build_world_map()


@pytest.fixture
def interface() -> ScriptedInterface:
    return ScriptedInterface()
