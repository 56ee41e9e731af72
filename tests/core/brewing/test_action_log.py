"""행동 기록 압축 규칙 테스트"""

from src.core.brewing.action_log import (
    append_action,
    can_merge_ingredients,
    last_action,
)
from src.core.brewing.models import Action, ActionKind, Ingredient, ItemType, Potion


class TestAppendAction:
    def test_first_action_appended(self):
        actions: list[Action] = []
        merged = append_action(actions, Action(ActionKind.MODIFY_HEAT, 50))
        assert merged is False
        assert actions == [Action(ActionKind.MODIFY_HEAT, 50)]

    def test_heat_replaces_not_sums(self):
        actions: list[Action] = []
        append_action(actions, Action(ActionKind.MODIFY_HEAT, 40))
        merged = append_action(actions, Action(ActionKind.MODIFY_HEAT, 70))
        assert merged is True
        assert actions == [Action(ActionKind.MODIFY_HEAT, 70)]

    def test_stir_accumulates(self):
        actions: list[Action] = []
        append_action(actions, Action(ActionKind.STIR, 2))
        append_action(actions, Action(ActionKind.STIR, 1))
        assert actions == [Action(ActionKind.STIR, 3)]

    def test_wait_accumulates(self):
        actions: list[Action] = []
        append_action(actions, Action(ActionKind.WAIT, 1))
        append_action(actions, Action(ActionKind.WAIT, 4))
        assert actions == [Action(ActionKind.WAIT, 5)]

    def test_different_kind_appends(self):
        actions: list[Action] = []
        append_action(actions, Action(ActionKind.STIR, 2))
        append_action(actions, Action(ActionKind.WAIT, 1))
        append_action(actions, Action(ActionKind.STIR, 1))
        assert [a.kind for a in actions] == [
            ActionKind.STIR,
            ActionKind.WAIT,
            ActionKind.STIR,
        ]

    def test_add_ingredient_never_merges(self):
        """재료 투입 행동끼리는 합치지 않음 (재료 병합은 서비스 쪽 판단)"""
        actions: list[Action] = []
        append_action(actions, Action(ActionKind.ADD_INGREDIENT, 0))
        merged = append_action(actions, Action(ActionKind.ADD_INGREDIENT, 1))
        assert merged is False
        assert len(actions) == 2

    def test_last_action(self):
        assert last_action([]) is None
        actions = [Action(ActionKind.STIR, 1), Action(ActionKind.WAIT, 2)]
        assert last_action(actions) == Action(ActionKind.WAIT, 2)


class TestCanMergeIngredients:
    def test_same_type_and_fineness(self):
        a = Ingredient(ItemType.COFFEE_BEANS, amount=2, fineness=0.5)
        b = Ingredient(ItemType.COFFEE_BEANS, amount=3, fineness=0.5)
        assert can_merge_ingredients(a, b) is True

    def test_different_fineness(self):
        a = Ingredient(ItemType.COFFEE_BEANS, fineness=0.5)
        b = Ingredient(ItemType.COFFEE_BEANS, fineness=0.75)
        assert can_merge_ingredients(a, b) is False

    def test_different_type(self):
        a = Ingredient(ItemType.COFFEE_BEANS)
        b = Ingredient(ItemType.MAGICAL_FRUIT)
        assert can_merge_ingredients(a, b) is False

    def test_float_noise_tolerated(self):
        a = Ingredient(ItemType.GLOWSHROOM, fineness=0.1 + 0.2)
        b = Ingredient(ItemType.GLOWSHROOM, fineness=0.3)
        assert can_merge_ingredients(a, b) is True

    def test_potions_never_merge(self):
        a = Ingredient(ItemType.POTION, fineness=-1.0, potion=Potion())
        b = Ingredient(ItemType.POTION, fineness=-1.0, potion=Potion())
        assert can_merge_ingredients(a, b) is False
