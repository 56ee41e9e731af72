"""가중 편집 거리 채점 테스트"""

import pytest

from src.core.brewing.models import (
    Action,
    ActionKind,
    Ingredient,
    ItemType,
    Potion,
    PotionEffect,
    Recipe,
    RecipeIngredient,
)
from src.core.brewing.scoring import (
    ActionLogDesyncError,
    EditScore,
    ingredient_penalty,
    score_actions,
)
from src.core.brewing.tuning import BrewTuning

TUNING = BrewTuning()

HEAT = ActionKind.MODIFY_HEAT
WAIT = ActionKind.WAIT
ADD = ActionKind.ADD_INGREDIENT
STIR = ActionKind.STIR


def _make_recipe(steps: list[tuple[ActionKind, int]]) -> Recipe:
    return Recipe(
        effect=PotionEffect.SPEED,
        name="Test",
        max_effect=3.0,
        max_duration=180,
        final_color=(0, 255, 255),
        ingredients=(
            RecipeIngredient(ItemType.COFFEE_BEANS, 5, 1.0),
            RecipeIngredient(ItemType.MAGICAL_FRUIT, 3, 0.0),
        ),
        steps=tuple(Action(kind, value) for kind, value in steps),
    )


def _actions(pairs: list[tuple[ActionKind, int]]) -> list[Action]:
    return [Action(kind, value) for kind, value in pairs]


SPEED_STEPS = [(HEAT, 100), (WAIT, 2), (ADD, 0), (ADD, 1), (STIR, 3), (WAIT, 6)]
HELD = [
    Ingredient(ItemType.COFFEE_BEANS, amount=5, fineness=1.0),
    Ingredient(ItemType.MAGICAL_FRUIT, amount=3, fineness=0.0),
]


class TestEmptySides:
    def test_both_empty(self):
        recipe = _make_recipe(SPEED_STEPS)
        score = score_actions([], recipe, [], TUNING)
        assert score == EditScore(len(SPEED_STEPS), 0.0)

    def test_player_longer(self):
        recipe = _make_recipe([(STIR, 1)])
        score = score_actions(_actions([(STIR, 1), (WAIT, 1), (WAIT, 1)]), recipe, [], TUNING)
        assert score.edits == 2


class TestMatching:
    def test_perfect_sequence(self):
        recipe = _make_recipe(SPEED_STEPS)
        score = score_actions(_actions(SPEED_STEPS), recipe, HELD, TUNING)
        assert score.edits == 0
        assert score.penalty == pytest.approx(0.0)

    def test_missing_final_step(self):
        recipe = _make_recipe(SPEED_STEPS)
        score = score_actions(_actions(SPEED_STEPS[:-1]), recipe, HELD, TUNING)
        assert score.edits == 1
        assert score.penalty == pytest.approx(0.0)

    def test_value_penalties(self):
        """같은 종류 행동의 값 차이만큼 종류별 가중치"""
        recipe = _make_recipe([(HEAT, 100), (WAIT, 2), (STIR, 3)])
        score = score_actions(
            _actions([(HEAT, 90), (WAIT, 4), (STIR, 1)]), recipe, [], TUNING
        )
        assert score.edits == 0
        assert score.penalty == pytest.approx(10 * 0.01 + 2 * 0.2 + 2 * 0.1)

    def test_mismatch_keeps_branch_penalty(self):
        """종류가 다르면 편집 1 + 선택된 분기의 페널티"""
        recipe = _make_recipe([(STIR, 3)])
        score = score_actions(_actions([(WAIT, 1), (STIR, 1)]), recipe, [], TUNING)
        assert score.edits == 1
        assert score.penalty == pytest.approx(0.2)

    def test_swapped_ingredients(self):
        recipe = _make_recipe(SPEED_STEPS)
        held = [HELD[1], HELD[0]]
        score = score_actions(_actions(SPEED_STEPS), recipe, held, TUNING)
        assert score.edits == 0
        assert score.penalty == pytest.approx(2 * TUNING.ingredient_type_penalty)

    def test_long_logs_are_fast(self):
        """(i, j) 표 없이 분기마다 다시 풀면 끝나지 않는 길이"""
        recipe = _make_recipe([(STIR, 1), (WAIT, 1)] * 15)
        actions = _actions([(WAIT, 1), (STIR, 1)] * 15)
        score = score_actions(actions, recipe, [], TUNING)
        assert score.edits == 2


class TestLongLogs:
    def test_thousands_of_actions_do_not_exhaust_stack(self):
        recipe = _make_recipe([(STIR, 1)])
        score = score_actions(_actions([(STIR, 1)] * 1500), recipe, [], TUNING)
        assert score == EditScore(1499, 0.0)

    def test_alternating_log_against_full_recipe(self):
        recipe = _make_recipe(SPEED_STEPS)
        actions = _actions([(ADD, 0), (ADD, 1)] + [(STIR, 1), (HEAT, 50)] * 600)
        score = score_actions(actions, recipe, HELD, TUNING)
        assert score.edits >= len(actions) - len(SPEED_STEPS)
        assert score.edits <= len(actions)


class TestIngredientPenalty:
    def test_type_mismatch_only(self):
        held = Ingredient(ItemType.MAGICAL_FRUIT, amount=9, fineness=0.0)
        required = RecipeIngredient(ItemType.COFFEE_BEANS, 5, 1.0)
        assert ingredient_penalty(held, required, TUNING) == TUNING.ingredient_type_penalty

    def test_amount_and_fineness(self):
        held = Ingredient(ItemType.COFFEE_BEANS, amount=3, fineness=0.5)
        required = RecipeIngredient(ItemType.COFFEE_BEANS, 5, 1.0)
        assert ingredient_penalty(held, required, TUNING) == pytest.approx(
            2 * 0.1 + 0.5 * 0.5
        )

    def test_unpreparable_skips_fineness(self):
        held = Ingredient(ItemType.POTION, amount=1, fineness=-1.0, potion=Potion())
        required = RecipeIngredient(ItemType.POTION, 1, 0.0)
        assert ingredient_penalty(held, required, TUNING) == pytest.approx(0.0)

    def test_any_potion_satisfies_potion_requirement(self):
        healing = Potion(effect=PotionEffect.HEALING, potency=10.0)
        held = Ingredient(ItemType.POTION, amount=1, fineness=-1.0, potion=healing)
        required = RecipeIngredient(ItemType.POTION, 1, -1.0)
        assert ingredient_penalty(held, required, TUNING) == pytest.approx(0.0)


class TestDesync:
    def test_out_of_range_index_raises(self):
        recipe = _make_recipe([(ADD, 0)])
        with pytest.raises(ActionLogDesyncError):
            score_actions(_actions([(ADD, 2)]), recipe, HELD[:1], TUNING)
