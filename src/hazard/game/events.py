"""Records emitted through ``GameInterface.notify``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .map import Territory
from .state import Color


@dataclass(frozen=True)
class Event:
    pass


@dataclass(frozen=True)
class PlayerJoined(Event):
    player: str
    color: Color


@dataclass(frozen=True)
class TerritoriesAssigned(Event):
    player: str
    territories: Tuple[Territory, ...]


@dataclass(frozen=True)
class ArmiesPlaced(Event):
    player: str
    placement: Dict[Territory, int]


@dataclass(frozen=True)
class TurnStarted(Event):
    player: str
    turn: int


@dataclass(frozen=True)
class ReinforcementsGranted(Event):
    player: str
    count: int


@dataclass(frozen=True)
class AttackDeclared(Event):
    attacker: str
    defender: str
    source: Territory
    target: Territory
    source_armies: int
    target_armies: int


@dataclass(frozen=True)
class ForceAdjusted(Event):
    player: str
    role: str
    requested: int
    used: int


@dataclass(frozen=True)
class DiceRolled(Event):
    attack_dice: Tuple[int, ...]
    defend_dice: Tuple[int, ...]


@dataclass(frozen=True)
class CombatResolved(Event):
    source: Territory
    target: Territory
    attacker_losses: int
    defender_losses: int
    source_armies: int
    target_armies: int


@dataclass(frozen=True)
class TerritoryConquered(Event):
    attacker: str
    defender: str
    territory: Territory
    moved: int


@dataclass(frozen=True)
class AttackExhausted(Event):
    player: str
    target: Territory


@dataclass(frozen=True)
class MoveRejected(Event):
    player: str
    reason: str


@dataclass(frozen=True)
class TurnEnded(Event):
    player: str


@dataclass(frozen=True)
class GameOver(Event):
    winner: Optional[str]
