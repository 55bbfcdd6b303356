from .actions import AttackDecision, AttackNew, EndTurn, RepeatLast
from .combat import AttackResult, MaxForcePolicy, PromptedForcePolicy, resolve_attack
from .dice import Dice
from .map import Territory, TerritoryGraph, build_world_map
from .state import GameState, Player
from .turn import Phase, TurnOrchestrator, create_game, setup_game

__all__ = [
    "AttackDecision",
    "AttackNew",
    "EndTurn",
    "RepeatLast",
    "AttackResult",
    "MaxForcePolicy",
    "PromptedForcePolicy",
    "resolve_attack",
    "Dice",
    "Territory",
    "TerritoryGraph",
    "build_world_map",
    "GameState",
    "Player",
    "Phase",
    "TurnOrchestrator",
    "create_game",
    "setup_game",
]
