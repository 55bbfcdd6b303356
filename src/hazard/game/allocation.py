from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from hazard.config import ARMIES_BY_PLAYER_COUNT, MAX_PLAYERS, MIN_PLAYERS, PlacementMode
from hazard.errors import ConfigurationError, IllegalMoveError, InvariantViolation

from .dice import Dice
from .events import ArmiesPlaced, MoveRejected, TerritoriesAssigned
from .map import Territory
from .state import GameState, Player

if TYPE_CHECKING:
    from hazard.interface import GameInterface

logger = logging.getLogger(__name__)


def validate_player_count(num_players: int) -> int:
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        raise ConfigurationError(
            f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {num_players}."
        )
    return num_players


def armies_per_player(num_players: int) -> int:
    validate_player_count(num_players)
    return ARMIES_BY_PLAYER_COUNT[num_players]


def assign_territories(state: GameState, dice: Optional[Dice] = None, shuffle: bool = False) -> None:
    """Deal every territory round-robin, in id order or in a shuffled order.

    New entries start with zero armies until the starting pool is placed.
    """
    if any(player.armies for player in state.players):
        raise InvariantViolation("Territories have already been assigned.")
    if not state.players:
        raise InvariantViolation("Cannot assign territories without players.")

    order = list(range(len(state.graph)))
    if shuffle:
        dice = dice or Dice()
        order = dice.permutation(len(order))

    for position, index in enumerate(order):
        player = state.players[position % len(state.players)]
        player.armies[state.graph.territory(index)] = 0

    for player in state.players:
        logger.debug("%s receives %d territories", player.name, player.territory_count)


def distribute_evenly(player: Player, count: int) -> Dict[Territory, int]:
    """Hand out ``count`` armies one at a time, cycling over the ledger."""
    placed: Dict[Territory, int] = {}
    if count <= 0:
        return placed
    owned = player.owned_territories()
    if not owned:
        raise InvariantViolation(f"{player.name} owns no territory to place armies on.")
    for step in range(count):
        territory = owned[step % len(owned)]
        player.armies[territory] += 1
        placed[territory] = placed.get(territory, 0) + 1
    return placed


def place_army(player: Player, territory: Territory) -> None:
    if not player.owns(territory):
        raise IllegalMoveError(f"{player.name} does not own {territory.name}.")
    player.armies[territory] += 1


def place_starting_armies(
    state: GameState,
    mode: PlacementMode,
    interface: Optional["GameInterface"] = None,
) -> None:
    pool = armies_per_player(len(state.players))
    for player in state.players:
        if interface is not None:
            interface.notify(TerritoriesAssigned(player.name, tuple(player.owned_territories())))
        if mode is PlacementMode.EVEN:
            placed = distribute_evenly(player, pool)
        else:
            if interface is None:
                raise InvariantViolation("Manual placement needs an interface to ask.")
            placed = _place_manually(state, player, pool, interface)
        logger.info("%s placed %d starting armies", player.name, pool)
        if interface is not None:
            interface.notify(ArmiesPlaced(player.name, placed))


def _place_manually(
    state: GameState, player: Player, pool: int, interface: "GameInterface"
) -> Dict[Territory, int]:
    # Every territory gets its first army up front so none is left empty.
    placed = distribute_evenly(player, min(pool, player.territory_count))
    remaining = pool - sum(placed.values())
    while remaining > 0:
        owned: List[Territory] = player.owned_territories()
        index = interface.request_manual_placement(player, owned, remaining)
        try:
            if not state.graph.has(index):
                raise IllegalMoveError(f"There is no territory with index {index}.")
            territory = state.graph.territory(index)
            place_army(player, territory)
        except IllegalMoveError as exc:
            logger.warning("Rejected placement by %s: %s", player.name, exc)
            interface.notify(MoveRejected(player.name, str(exc)))
            continue
        placed[territory] = placed.get(territory, 0) + 1
        remaining -= 1
    return placed
