"""
Tests for the combat resolver.

Dice are scripted so that every outcome is deterministic. Covers force
sizing, dice comparison (ties go to the defender), casualty application,
conquest transfer bounds, the termination signal and validation before any
dice are drawn.
"""

import pytest

from conftest import ScriptedDice, make_state, territory
from hazard.errors import IllegalMoveError, InvariantViolation
from hazard.game.allocation import assign_territories, place_starting_armies
from hazard.config import PlacementMode
from hazard.game.combat import (
    MaxForcePolicy,
    PromptedForcePolicy,
    attack_cap,
    compare_dice,
    defend_cap,
    resolve_attack,
    validate_attack,
)
from hazard.game.events import DiceRolled, ForceAdjusted, MoveRejected, TerritoryConquered
from hazard.game.map import build_world_map
from hazard.game.state import GameState, create_players


def attack(state, source_name, target_name, dice, transfer=lambda lo, hi: lo, **kwargs):
    attacker, defender = state.players[0], state.players[1]
    return resolve_attack(
        state,
        attacker,
        defender,
        territory(state, source_name),
        territory(state, target_name),
        dice,
        transfer,
        **kwargs,
    )


def armies(state, name):
    return state.armies_on(territory(state, name))


class TestForceSizing:

    @pytest.mark.parametrize("source, expected", [(2, 1), (3, 2), (4, 3), (10, 3)])
    def test_attack_cap(self, source, expected):
        assert attack_cap(source) == expected

    @pytest.mark.parametrize("target, expected", [(1, 1), (2, 2), (9, 2)])
    def test_defend_cap(self, target, expected):
        assert defend_cap(target) == expected

    def test_max_policy_uses_caps(self):
        policy = MaxForcePolicy()
        assert policy.attacking_force(None, 3) == 3
        assert policy.defending_force(None, 2) == 2


class TestCompareDice:

    def test_attacker_needs_strictly_higher(self):
        assert compare_dice([6, 5, 4], [6, 5]) == (2, 0)

    def test_pairs_are_sorted_descending(self):
        assert compare_dice([1, 6, 3], [5, 2]) == (0, 2)

    def test_split(self):
        assert compare_dice([6, 1], [5, 3]) == (1, 1)

    def test_top_attack_die_meets_top_defend_die(self):
        assert compare_dice([2], [1, 6]) == (1, 0)

    def test_extra_defend_die_not_compared(self):
        assert compare_dice([6], [5, 1]) == (0, 1)


class TestResolution:

    def test_defender_wins_ties(self):
        state = make_state({"A": {"India": 5}, "B": {"China": 3}})
        result = attack(state, "India", "China", ScriptedDice([[4, 4, 4], [4, 4]]))
        assert (result.attacker_losses, result.defender_losses) == (2, 0)
        assert armies(state, "India") == 3
        assert armies(state, "China") == 3
        assert not result.conquered

    def test_losses_equal_comparisons(self):
        state = make_state({"A": {"India": 6}, "B": {"China": 5}})
        before = state.total_armies()
        result = attack(state, "India", "China", ScriptedDice([[6, 2, 1], [5, 3]]))
        assert result.comparisons == 2
        assert result.attacker_losses + result.defender_losses == 2
        assert before - state.total_armies() == 2
        assert armies(state, "India") == 5
        assert armies(state, "China") == 4

    def test_dice_are_reported_sorted(self):
        state = make_state({"A": {"India": 4}, "B": {"China": 2}})
        events = []
        result = attack(state, "India", "China", ScriptedDice([[2, 6, 4], [1, 3]]), notify=events.append)
        assert result.attack_dice == (6, 4, 2)
        assert result.defend_dice == (3, 1)
        assert [e for e in events if isinstance(e, DiceRolled)] == [DiceRolled((6, 4, 2), (3, 1))]

    def test_minimum_legal_attack_rolls_one_die(self):
        state = make_state({"A": {"India": 2}, "B": {"China": 4}})
        dice = ScriptedDice([[3], [5, 2]])
        result = attack(state, "India", "China", dice)
        assert dice.calls == [1, 2]
        assert result.attacking_force == 1
        assert result.comparisons == 1
        assert armies(state, "India") == 1
        assert result.finished

    def test_unfinished_attack(self):
        state = make_state({"A": {"India": 5}, "B": {"China": 4}})
        result = attack(state, "India", "China", ScriptedDice([[6, 6, 1], [2, 2]]))
        assert armies(state, "China") == 2
        assert armies(state, "India") == 5
        assert not result.finished


class TestConquest:

    def test_four_armies_against_one(self):
        state = GameState(graph=build_world_map(), players=create_players(["Alice", "Bob"]))
        assign_territories(state, ScriptedDice(seed=7), shuffle=True)
        place_starting_armies(state, PlacementMode.EVEN)
        alice, bob = state.players
        source, target = next(
            (s, t)
            for s in alice.armies
            for t in state.graph.neighbors(s)
            if bob.owns(t)
        )
        alice.armies[source] = 4
        bob.armies[target] = 1
        requests = []

        def transfer(lo, hi):
            requests.append((lo, hi))
            return hi

        result = resolve_attack(
            state, alice, bob, source, target, ScriptedDice([[6, 5, 4], [1]]), transfer
        )
        assert result.comparisons == 1
        assert result.defender_losses == 1
        assert result.conquered and result.finished
        assert requests == [(3, 3)]
        assert not bob.owns(target)
        assert alice.armies[target] == 3
        assert alice.armies[source] == 1

    def test_transfer_between_bounds(self):
        state = make_state({"A": {"India": 10}, "B": {"China": 2, "Japan": 3}})
        events = []
        result = attack(
            state,
            "India",
            "China",
            ScriptedDice([[6, 6, 1], [5, 5]]),
            transfer=lambda lo, hi: 5,
            notify=events.append,
        )
        assert result.moved == 5
        assert armies(state, "China") == 5
        assert armies(state, "India") == 5
        assert state.owner_of(territory(state, "China")) is state.players[0]
        assert state.players[1].territory_count == 1
        assert TerritoryConquered("A", "B", territory(state, "China"), 5) in events

    def test_out_of_range_transfer_is_asked_again(self):
        state = make_state({"A": {"India": 10}, "B": {"China": 1}})
        answers = iter([0, 10, 4])
        events = []
        result = attack(
            state,
            "India",
            "China",
            ScriptedDice([[6, 6, 6], [1]]),
            transfer=lambda lo, hi: next(answers),
            notify=events.append,
        )
        assert result.moved == 4
        assert len([e for e in events if isinstance(e, MoveRejected)]) == 2
        assert armies(state, "India") == 6

    def test_armies_conserved_on_conquest(self):
        state = make_state({"A": {"India": 7}, "B": {"China": 1}})
        result = attack(state, "India", "China", ScriptedDice([[6, 3, 2], [5]]), transfer=lambda lo, hi: hi)
        assert state.players[0].total_armies == 7
        assert armies(state, "India") == 1
        assert armies(state, "China") == result.moved == 6


class TestValidation:

    @pytest.mark.parametrize(
        "ledgers, source, target",
        [
            ({"A": {"India": 5}, "B": {"China": 1, "Japan": 1}}, "Japan", "China"),
            ({"A": {"India": 1}, "B": {"China": 1}}, "India", "China"),
            ({"A": {"India": 5}, "B": {"Japan": 1}}, "India", "Japan"),
            ({"A": {"India": 5, "China": 1}, "B": {"Japan": 1}}, "India", "China"),
            ({"A": {"India": 5}, "B": {"Japan": 1}, "C": {"China": 1}}, "India", "China"),
        ],
        ids=["unowned-source", "one-army", "not-adjacent", "own-target", "wrong-defender"],
    )
    def test_rejected_before_dice(self, ledgers, source, target):
        state = make_state(ledgers)
        snapshot = [dict(p.armies) for p in state.players]
        dice = ScriptedDice()
        with pytest.raises(IllegalMoveError):
            attack(state, source, target, dice)
        assert dice.calls == []
        assert [dict(p.armies) for p in state.players] == snapshot

    def test_attacker_cannot_defend(self):
        state = make_state({"A": {"India": 5, "China": 2}})
        player = state.players[0]
        with pytest.raises(IllegalMoveError):
            validate_attack(state, player, player, territory(state, "India"), territory(state, "China"))


class TestPromptedForces:

    def test_requests_are_clamped(self):
        state = make_state({"A": {"India": 3}, "B": {"China": 4}})
        answers = iter([5, 0])
        events = []
        policy = PromptedForcePolicy(lambda role, player, cap: next(answers), events.append)
        dice = ScriptedDice([[6, 6], [1]])
        result = attack(state, "India", "China", dice, policy=policy)
        assert (result.attacking_force, result.defending_force) == (2, 1)
        assert dice.calls == [2, 1]
        assert events == [ForceAdjusted("A", "attacker", 5, 2), ForceAdjusted("B", "defender", 0, 1)]

    def test_smaller_force_accepted(self):
        state = make_state({"A": {"India": 8}, "B": {"China": 4}})
        policy = PromptedForcePolicy(lambda role, player, cap: 1)
        result = attack(state, "India", "China", ScriptedDice([[2], [1]]), policy=policy)
        assert result.attacking_force == 1
        assert armies(state, "China") == 3

    def test_broken_policy_is_an_invariant_violation(self):
        class Greedy(MaxForcePolicy):
            def attacking_force(self, player, cap):
                return cap + 1

        state = make_state({"A": {"India": 8}, "B": {"China": 4}})
        with pytest.raises(InvariantViolation):
            attack(state, "India", "China", ScriptedDice(), policy=Greedy())
