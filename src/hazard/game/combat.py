from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from hazard.config import MAX_ATTACK_DICE, MAX_DEFEND_DICE
from hazard.errors import IllegalMoveError, InvariantViolation

from .dice import Dice
from .events import (
    AttackDeclared,
    AttackExhausted,
    CombatResolved,
    DiceRolled,
    Event,
    ForceAdjusted,
    MoveRejected,
    TerritoryConquered,
)
from .map import Territory
from .state import GameState, Player

logger = logging.getLogger(__name__)

ATTACKER = "attacker"
DEFENDER = "defender"

Notify = Callable[[Event], None]
TransferChooser = Callable[[int, int], int]


class ForcePolicy(ABC):
    """Decides how many armies each side commits, up to the cap."""

    @abstractmethod
    def attacking_force(self, player: Player, cap: int) -> int: ...

    @abstractmethod
    def defending_force(self, player: Player, cap: int) -> int: ...


class MaxForcePolicy(ForcePolicy):
    def attacking_force(self, player: Player, cap: int) -> int:
        return cap

    def defending_force(self, player: Player, cap: int) -> int:
        return cap


class PromptedForcePolicy(ForcePolicy):
    """Asks each side for its force.

    A request above the cap is reduced to the cap and a request below one
    is raised to one; both adjustments are reported.
    """

    def __init__(
        self,
        ask: Callable[[str, Player, int], int],
        notify: Optional[Notify] = None,
    ):
        self.ask = ask
        self.notify = notify

    def attacking_force(self, player: Player, cap: int) -> int:
        return self._choose(ATTACKER, player, cap)

    def defending_force(self, player: Player, cap: int) -> int:
        return self._choose(DEFENDER, player, cap)

    def _choose(self, role: str, player: Player, cap: int) -> int:
        requested = self.ask(role, player, cap)
        used = min(max(requested, 1), cap)
        if used != requested:
            logger.info("%s asked for %d %s armies, using %d", player.name, requested, role, used)
            if self.notify is not None:
                self.notify(ForceAdjusted(player.name, role, requested, used))
        return used


@dataclass(frozen=True)
class AttackResult:
    attacking_force: int
    defending_force: int
    attack_dice: Tuple[int, ...]
    defend_dice: Tuple[int, ...]
    attacker_losses: int
    defender_losses: int
    conquered: bool
    moved: int
    finished: bool

    @property
    def comparisons(self) -> int:
        return min(self.attacking_force, self.defending_force)


def attack_cap(source_armies: int) -> int:
    return min(source_armies - 1, MAX_ATTACK_DICE)


def defend_cap(target_armies: int) -> int:
    return min(target_armies, MAX_DEFEND_DICE)


def compare_dice(attack_dice: Sequence[int], defend_dice: Sequence[int]) -> Tuple[int, int]:
    """Return (attacker_losses, defender_losses); ties go to the defender."""
    attacker_losses = 0
    defender_losses = 0
    for attack_die, defend_die in zip(
        sorted(attack_dice, reverse=True), sorted(defend_dice, reverse=True)
    ):
        if attack_die > defend_die:
            defender_losses += 1
        else:
            attacker_losses += 1
    return attacker_losses, defender_losses


def validate_attack(
    state: GameState,
    attacker: Player,
    defender: Player,
    source: Territory,
    target: Territory,
) -> None:
    if not attacker.owns(source):
        raise IllegalMoveError(f"{attacker.name} does not own {source.name}.")
    if attacker.armies[source] < 2:
        raise IllegalMoveError(f"Not enough armies in {source.name} to attack.")
    if not state.graph.are_adjacent(source, target):
        raise IllegalMoveError(f"{target.name} does not border {source.name}.")
    if attacker.owns(target):
        raise IllegalMoveError(f"{attacker.name} already owns {target.name}.")
    if attacker is defender or not defender.owns(target):
        raise IllegalMoveError(f"{target.name} is not held by {defender.name}.")


def resolve_attack(
    state: GameState,
    attacker: Player,
    defender: Player,
    source: Territory,
    target: Territory,
    dice: Dice,
    choose_transfer: TransferChooser,
    policy: Optional[ForcePolicy] = None,
    notify: Optional[Notify] = None,
) -> AttackResult:
    """Fight one round of dice between ``source`` and ``target``.

    Nothing is changed until the dice and, on a conquest, the number of
    armies to move in are known, so a rejected attack leaves the ledgers
    exactly as they were.
    """
    validate_attack(state, attacker, defender, source, target)
    policy = policy or MaxForcePolicy()
    emit = notify or (lambda event: None)

    source_armies = attacker.armies[source]
    target_armies = defender.armies[target]
    emit(AttackDeclared(attacker.name, defender.name, source, target, source_armies, target_armies))

    attacking_force = policy.attacking_force(attacker, attack_cap(source_armies))
    defending_force = policy.defending_force(defender, defend_cap(target_armies))
    if not 1 <= attacking_force <= attack_cap(source_armies):
        raise InvariantViolation(f"Attacking force {attacking_force} outside of 1..{attack_cap(source_armies)}.")
    if not 1 <= defending_force <= defend_cap(target_armies):
        raise InvariantViolation(f"Defending force {defending_force} outside of 1..{defend_cap(target_armies)}.")

    attack_dice = tuple(sorted(dice.roll(attacking_force), reverse=True))
    defend_dice = tuple(sorted(dice.roll(defending_force), reverse=True))
    logger.debug("Attacker rolled %s, defender rolled %s", attack_dice, defend_dice)
    emit(DiceRolled(attack_dice, defend_dice))

    attacker_losses, defender_losses = compare_dice(attack_dice, defend_dice)
    source_after = source_armies - attacker_losses
    target_after = target_armies - defender_losses
    conquered = target_after == 0

    moved = 0
    if conquered:
        moved = _ask_transfer(attacking_force, source_after - 1, choose_transfer, attacker, emit)

    attacker.armies[source] = source_after
    defender.armies[target] = target_after
    emit(CombatResolved(source, target, attacker_losses, defender_losses, source_after, target_after))

    if conquered:
        del defender.armies[target]
        attacker.armies[target] = moved
        attacker.armies[source] -= moved
        logger.info("%s conquered %s from %s", attacker.name, target.name, defender.name)
        emit(TerritoryConquered(attacker.name, defender.name, target, moved))

    if source_after == 1:
        emit(AttackExhausted(attacker.name, target))

    return AttackResult(
        attacking_force=attacking_force,
        defending_force=defending_force,
        attack_dice=attack_dice,
        defend_dice=defend_dice,
        attacker_losses=attacker_losses,
        defender_losses=defender_losses,
        conquered=conquered,
        moved=moved,
        finished=conquered or source_after == 1,
    )


def _ask_transfer(
    minimum: int,
    maximum: int,
    choose_transfer: TransferChooser,
    attacker: Player,
    emit: Notify,
) -> int:
    if maximum < minimum:
        raise InvariantViolation(f"Cannot move between {minimum} and {maximum} armies.")
    while True:
        moved = choose_transfer(minimum, maximum)
        if minimum <= moved <= maximum:
            return moved
        logger.warning("Rejected transfer of %d armies (allowed %d..%d)", moved, minimum, maximum)
        emit(MoveRejected(attacker.name, f"Move between {minimum} and {maximum} armies, not {moved}."))
