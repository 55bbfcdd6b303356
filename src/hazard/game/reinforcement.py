from __future__ import annotations

import logging

from hazard.config import MIN_REINFORCEMENTS, TERRITORIES_PER_REINFORCEMENT

from .allocation import distribute_evenly
from .state import Player

logger = logging.getLogger(__name__)


def reinforcement_count(owned: int) -> int:
    return max(MIN_REINFORCEMENTS, owned // TERRITORIES_PER_REINFORCEMENT)


def grant(player: Player) -> int:
    count = reinforcement_count(player.territory_count)
    distribute_evenly(player, count)
    logger.info("%s receives %d additional armies", player.name, count)
    return count
