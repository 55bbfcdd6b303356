from __future__ import annotations

import argparse
import logging
from typing import Callable, List, Optional, Sequence

from hazard.config import MAX_PLAYERS, MIN_PLAYERS, GameConfig, PlacementMode
from hazard.errors import ConfigurationError
from hazard.game.actions import AttackDecision, AttackNew, EndTurn, RepeatLast
from hazard.game.events import (
    ArmiesPlaced,
    AttackDeclared,
    AttackExhausted,
    CombatResolved,
    DiceRolled,
    Event,
    ForceAdjusted,
    GameOver,
    MoveRejected,
    PlayerJoined,
    ReinforcementsGranted,
    TerritoriesAssigned,
    TerritoryConquered,
    TurnEnded,
    TurnStarted,
)
from hazard.game.map import Territory, TerritoryGraph, build_world_map
from hazard.game.state import GameState, Player
from hazard.game.turn import create_game
from hazard.interface import GameInterface


def format_event(event: Event) -> str:
    if isinstance(event, PlayerJoined):
        return f"{event.player} has been assigned color {event.color.value}"
    if isinstance(event, TerritoriesAssigned):
        names = ", ".join(t.name for t in event.territories)
        return f"{event.player} receives {len(event.territories)} territories: {names}"
    if isinstance(event, ArmiesPlaced):
        lines = [f"Player: {event.player}"]
        lines.extend(f"  Territory: {t.name}, Armies: {n}" for t, n in event.placement.items())
        return "\n".join(lines)
    if isinstance(event, TurnStarted):
        return f"\n==== Turn {event.turn}: {event.player}'s turn ===="
    if isinstance(event, ReinforcementsGranted):
        return f"{event.player} receives {event.count} additional armies to deploy."
    if isinstance(event, AttackDeclared):
        return (
            f"{event.attacker} is attacking from {event.source.name} ({event.source_armies}) "
            f"to {event.target.name} held by {event.defender} ({event.target_armies})"
        )
    if isinstance(event, ForceAdjusted):
        return f"{event.player} requested {event.requested} {event.role} armies, using {event.used}"
    if isinstance(event, DiceRolled):
        return f"Attacker rolled {list(event.attack_dice)}, defender rolled {list(event.defend_dice)}"
    if isinstance(event, CombatResolved):
        return (
            f"Attacker lost {event.attacker_losses}, defender lost {event.defender_losses}: "
            f"{event.source.name} {event.source_armies}, {event.target.name} {event.target_armies}"
        )
    if isinstance(event, TerritoryConquered):
        return f"{event.attacker} conquered {event.territory.name} and moved in {event.moved} armies!"
    if isinstance(event, AttackExhausted):
        return f"{event.player} only has one army left, attack on {event.target.name} cannot continue"
    if isinstance(event, MoveRejected):
        return f"Rejected: {event.reason}"
    if isinstance(event, TurnEnded):
        return f"==== {event.player}'s turn is over ===="
    if isinstance(event, GameOver):
        return f"Game Over! {event.winner} has conquered all territories."
    return repr(event)


def format_map(graph: TerritoryGraph) -> str:
    lines = [f"World with {len(graph)} territories:"]
    for territory in graph:
        neighbors = ", ".join(n.name for n in graph.sorted_neighbors(territory))
        lines.append(f"  [{territory.id}] {territory.name}: {neighbors}")
    return "\n".join(lines)


class ConsoleInterface(GameInterface):
    def __init__(
        self,
        input_fn: Optional[Callable[[str], str]] = None,
        output_fn: Optional[Callable[[str], None]] = None,
    ):
        self.input = input_fn or input
        self.output = output_fn or print
        self.can_repeat = False

    def ask_int(self, prompt: str, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
        while True:
            raw = self.input(prompt).strip()
            try:
                value = int(raw)
            except ValueError:
                self.output(f"'{raw}' is not a number.")
                continue
            if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
                self.output(f"Please enter a number between {minimum} and {maximum}.")
                continue
            return value

    def ask_yes_no(self, prompt: str) -> bool:
        while True:
            answer = self.input(prompt).strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self.output("Please answer y or n.")

    def request_player_count(self) -> int:
        return self.ask_int(
            f"Please enter the number of players between {MIN_PLAYERS} and {MAX_PLAYERS}: ",
            MIN_PLAYERS,
            MAX_PLAYERS,
        )

    def request_player_name(self, index: int) -> str:
        while True:
            name = self.input(f"Enter name for Player {index + 1}: ").strip()
            if name:
                return name
            self.output("Name cannot be empty.")

    def request_placement_mode(self) -> PlacementMode:
        while True:
            answer = self.input("Place starting armies (e)venly or (m)anually? ").strip().lower()
            if answer in ("e", "even"):
                return PlacementMode.EVEN
            if answer in ("m", "manual"):
                return PlacementMode.MANUAL
            self.output("Please answer e or m.")

    def request_manual_placement(
        self, player: Player, owned: Sequence[Territory], remaining: int
    ) -> int:
        self.output(f"{player.name}, {remaining} armies left to place:")
        for territory in owned:
            self.output(f"  [{territory.id}] {territory.name}: {player.armies[territory]}")
        return self.ask_int("Territory index to reinforce: ")

    def request_attack_decision(self, player: Player, state: GameState) -> AttackDecision:
        self.output(f"\n{player.name} ({player.color.value}) holds:")
        for territory, armies in player.armies.items():
            self.output(f"  [{territory.id}] {territory.name}: {armies}")

        if self.can_repeat and self.ask_yes_no("Do you want to attack the same territory again? (y/n): "):
            return RepeatLast()

        while self.ask_yes_no("Do you want to attack any territory? (y/n): "):
            source = self.ask_int("Attacking from territory index: ")
            targets = self._targets(state, player, source)
            if not targets:
                self.output("No target territories available from there.")
                continue
            for territory in targets:
                owner = state.owner_of(territory)
                self.output(
                    f"  [{territory.id}] {territory.name} held by {owner.name if owner else '-'}"
                    f" ({state.armies_on(territory)})"
                )
            target = self.ask_int("Targeting territory index: ")
            return AttackNew(source, target)
        return EndTurn()

    def request_conquest_transfer(self, minimum: int, maximum: int) -> int:
        if minimum == maximum:
            self.output(f"Moving {minimum} armies into the conquered territory.")
            return minimum
        return self.ask_int(
            f"Choose number of armies to move into conquered territory (between {minimum} and {maximum}): ",
            minimum,
            maximum,
        )

    def request_force(self, role: str, player: Player, cap: int) -> int:
        return self.ask_int(f"{player.name}, choose number of {role} armies (1 to {cap}): ")

    def notify(self, event: Event) -> None:
        # Mirrors the orchestrator: only an unfinished attack may be repeated.
        if isinstance(event, CombatResolved):
            self.can_repeat = True
        elif isinstance(event, (TerritoryConquered, AttackExhausted, TurnStarted)):
            self.can_repeat = False
        self.output(format_event(event))

    @staticmethod
    def _targets(state: GameState, player: Player, source_index: int) -> List[Territory]:
        if not state.graph.has(source_index):
            return []
        source = state.graph.territory(source_index)
        if not player.owns(source):
            return []
        return [t for t in state.graph.sorted_neighbors(source) if not player.owns(t)]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Hazard, a Risk-like strategy game.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--shuffle", action="store_true", help="Deal territories in random order.")
    parser.add_argument(
        "--placement",
        choices=[mode.value for mode in PlacementMode],
        default=None,
        help="Starting army placement; asked interactively when omitted.",
    )
    parser.add_argument(
        "--choose-forces",
        action="store_true",
        help="Ask both sides how many armies to commit instead of using the maximum.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = GameConfig(
        seed=args.seed,
        shuffle_territories=args.shuffle,
        placement=PlacementMode(args.placement) if args.placement else None,
        choose_forces=args.choose_forces,
    )
    interface = ConsoleInterface()
    interface.output("\n==== Welcome to Hazard, the Risk-like strategy game! ====")
    interface.output(format_map(build_world_map()))
    try:
        game = create_game(interface, config)
        winner = game.run()
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc
    except (KeyboardInterrupt, EOFError):
        interface.output("\nGame aborted.")
        raise SystemExit(1)
    interface.output(f"{winner.name} wins after {game.turn.turn} turns.")


if __name__ == "__main__":
    main()
