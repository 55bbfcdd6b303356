from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class AttackNew:
    source: int
    target: int


@dataclass(frozen=True)
class RepeatLast:
    pass


@dataclass(frozen=True)
class EndTurn:
    pass


AttackDecision = Union[AttackNew, RepeatLast, EndTurn]
