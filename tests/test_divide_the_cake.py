"""Tests for the divide-the-cake payoff rule and strategy claims."""

from __future__ import annotations

import random

import pytest

from agents.player import Player
from agents.strategy import Strategy, fixed_claim, random_claim
from engine.component_registry import create_strategy
from games.cake import DivideTheCake, divide_the_cake


def test_compatible_claims_are_paid() -> None:
    fair = create_strategy("Fair")
    first, second = Player(fair), Player(fair)

    assert divide_the_cake(first, second) is True
    assert first.points == pytest.approx(0.5)
    assert second.points == pytest.approx(0.5)


def test_greedy_pair_spoils_the_cake() -> None:
    greedy = create_strategy("Greedy")
    first, second = Player(greedy, points=1.0), Player(greedy)

    assert divide_the_cake.play(first, second) is False
    assert first.points == 1.0
    assert second.points == 0.0


def test_each_player_keeps_its_own_claim() -> None:
    first = Player(create_strategy("Quarter"))
    second = Player(create_strategy("Fair"))

    divide_the_cake(first, second)

    assert first.points == pytest.approx(0.25)
    assert second.points == pytest.approx(0.5)


def test_cake_size_is_configurable() -> None:
    game = DivideTheCake(cake_size=1.5)
    greedy = create_strategy("Greedy")
    first, second = Player(greedy), Player(greedy)

    assert game(first, second) is True
    assert first.points == pytest.approx(2 / 3)


def test_mixed_strategy_draws_from_fixed_set() -> None:
    mixed = create_strategy("Mixed", random.Random(4))

    draws = {mixed.contribution() for _ in range(200)}

    assert draws == {1 / 3, 2 / 3}


def test_strategies_compare_by_name_only() -> None:
    assert Strategy("Fair", color="#fff", claim_rule=fixed_claim(0.1)) == create_strategy("Fair")
    assert Strategy("Fair") != Strategy("Greedy")
    assert len({create_strategy("Fair"), create_strategy("Fair")}) == 1


def test_random_claim_requires_choices() -> None:
    with pytest.raises(ValueError):
        random_claim([], random.Random(0))
