from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from hazard.config import GameConfig
from hazard.errors import IllegalMoveError, InvariantViolation

from .actions import AttackDecision, AttackNew, EndTurn, RepeatLast
from .allocation import assign_territories, place_starting_armies, validate_player_count
from .combat import AttackResult, ForcePolicy, MaxForcePolicy, PromptedForcePolicy, resolve_attack
from .dice import Dice
from .events import GameOver, MoveRejected, PlayerJoined, ReinforcementsGranted, TurnEnded, TurnStarted
from .map import Territory, TerritoryGraph, build_world_map
from .reinforcement import grant
from .state import GameState, Player, create_players

if TYPE_CHECKING:
    from hazard.interface import GameInterface

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    REINFORCEMENT = "reinforcement"
    ATTACKING = "attacking"
    NEXT_PLAYER = "next_player"
    GAME_OVER = "game_over"


@dataclass
class TurnState:
    phase: Phase = Phase.REINFORCEMENT
    player_index: int = 0
    turn: int = 1
    attack_round: int = 0
    last_attack: Optional[Tuple[Territory, Territory]] = None
    last_attack_finished: bool = True
    winner: Optional[str] = None


@dataclass
class StepResult:
    accepted: bool
    attack: Optional[AttackResult] = None
    done: bool = False
    info: Dict[str, object] = field(default_factory=dict)


class TurnOrchestrator:
    """Runs reinforcement, attacks and hand-over for each player in turn."""

    def __init__(
        self,
        state: GameState,
        interface: "GameInterface",
        dice: Dice | None = None,
        policy: ForcePolicy | None = None,
    ):
        self.state = state
        self.interface = interface
        self.dice = dice or Dice()
        self.policy = policy or MaxForcePolicy()
        self.turn = TurnState()

    @property
    def current_player(self) -> Player:
        return self.state.players[self.turn.player_index]

    @property
    def done(self) -> bool:
        return self.turn.phase is Phase.GAME_OVER

    def start_turn(self) -> int:
        self._require(Phase.REINFORCEMENT)
        player = self.current_player
        self.interface.notify(TurnStarted(player.name, self.turn.turn))
        count = grant(player)
        self.interface.notify(ReinforcementsGranted(player.name, count))
        self.turn.attack_round = 0
        self.turn.last_attack = None
        self.turn.last_attack_finished = True
        self.turn.phase = Phase.ATTACKING
        return count

    def handle(self, decision: AttackDecision) -> StepResult:
        self._require(Phase.ATTACKING)
        player = self.current_player

        if isinstance(decision, EndTurn):
            self.turn.phase = Phase.NEXT_PLAYER
            self.interface.notify(TurnEnded(player.name))
            return StepResult(accepted=True)

        try:
            source, target = self._attack_pair(decision)
            defender = self.state.owner_of(target)
            if defender is None:
                raise IllegalMoveError(f"{target.name} has no owner.")
            result = resolve_attack(
                self.state,
                player,
                defender,
                source,
                target,
                self.dice,
                self.interface.request_conquest_transfer,
                policy=self.policy,
                notify=self.interface.notify,
            )
        except IllegalMoveError as exc:
            logger.warning("Rejected attack by %s: %s", player.name, exc)
            self.interface.notify(MoveRejected(player.name, str(exc)))
            return StepResult(accepted=False, info={"reason": str(exc)})

        self.turn.attack_round += 1
        self.turn.last_attack = (source, target)
        self.turn.last_attack_finished = result.finished

        info: Dict[str, object] = {}
        if self.state.check_game_over():
            winner = self.state.winner()
            self._finish(winner)
            info["winner"] = winner.name
        return StepResult(accepted=True, attack=result, done=self.done, info=info)

    def end_turn(self) -> None:
        self._require(Phase.NEXT_PLAYER)
        self.turn.player_index = (self.turn.player_index + 1) % len(self.state.players)
        self.turn.turn += 1
        self.turn.phase = Phase.REINFORCEMENT

    def play_turn(self) -> None:
        self.start_turn()
        while self.turn.phase is Phase.ATTACKING:
            decision = self.interface.request_attack_decision(self.current_player, self.state)
            self.handle(decision)
        if self.turn.phase is Phase.NEXT_PLAYER:
            self.end_turn()

    def run(self) -> Player:
        if self.state.check_game_over():
            self._finish(self.state.winner())
        while not self.done:
            self.play_turn()
        return self.state.player(self.turn.winner)

    def _attack_pair(self, decision: AttackDecision) -> Tuple[Territory, Territory]:
        if isinstance(decision, RepeatLast):
            if self.turn.last_attack is None or self.turn.last_attack_finished:
                raise IllegalMoveError("There is no unfinished attack to repeat.")
            return self.turn.last_attack
        if isinstance(decision, AttackNew):
            graph = self.state.graph
            for index in (decision.source, decision.target):
                if not graph.has(index):
                    raise IllegalMoveError(f"There is no territory with index {index}.")
            return graph.territory(decision.source), graph.territory(decision.target)
        raise InvariantViolation(f"Unknown attack decision {decision!r}.")

    def _finish(self, winner: Player) -> None:
        self.turn.phase = Phase.GAME_OVER
        self.turn.winner = winner.name
        logger.info("Game over, %s holds every territory", winner.name)
        self.interface.notify(GameOver(winner.name))

    def _require(self, phase: Phase) -> None:
        if self.turn.phase is not phase:
            raise InvariantViolation(f"Expected phase {phase.value}, in {self.turn.phase.value}.")


def setup_game(
    interface: "GameInterface",
    config: GameConfig | None = None,
    dice: Dice | None = None,
    graph: TerritoryGraph | None = None,
) -> GameState:
    config = config or GameConfig()
    num_players = validate_player_count(interface.request_player_count())
    names = [interface.request_player_name(index) for index in range(num_players)]

    players = create_players(names)
    for player in players:
        interface.notify(PlayerJoined(player.name, player.color))

    state = GameState(graph=graph or build_world_map(), players=players)
    assign_territories(state, dice, shuffle=config.shuffle_territories)
    mode = config.placement or interface.request_placement_mode()
    place_starting_armies(state, mode, interface)
    logger.info("Game set up for %d players with %d armies", num_players, state.total_armies())
    return state


def create_game(interface: "GameInterface", config: GameConfig | None = None) -> TurnOrchestrator:
    config = config or GameConfig()
    dice = Dice(seed=config.seed)
    state = setup_game(interface, config, dice)
    policy: ForcePolicy
    if config.choose_forces:
        policy = PromptedForcePolicy(interface.request_force, interface.notify)
    else:
        policy = MaxForcePolicy()
    return TurnOrchestrator(state, interface, dice=dice, policy=policy)
