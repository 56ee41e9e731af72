"""RecipeRegistry 로드/매칭 테스트"""

import json

from src.core.brewing.models import ActionKind, ItemType, PotionEffect
from src.core.brewing.recipes import RecipeRegistry


class TestLoad:
    def test_default_recipe_book(self, recipes):
        assert recipes.count() == 5
        speed = recipes.get_by_effect(PotionEffect.SPEED)
        assert speed is not None
        assert speed.name == "Potion of Swiftness"
        assert [s.kind for s in speed.steps] == [
            ActionKind.MODIFY_HEAT,
            ActionKind.WAIT,
            ActionKind.ADD_INGREDIENT,
            ActionKind.ADD_INGREDIENT,
            ActionKind.STIR,
            ActionKind.WAIT,
        ]
        assert speed.final_color == (0, 255, 255)

    def test_bad_rows_skipped(self, tmp_path):
        """잘못된 행은 건너뛰고 나머지는 로드"""
        rows = [
            {
                "effect": "speed",
                "name": "Ok",
                "max_effect": 1.0,
                "max_duration": 10,
                "final_color": [1, 2, 3],
                "ingredients": [{"item_type": "coffee_beans", "amount": 1}],
                "steps": [{"kind": "add_ingredient", "value": 0}],
            },
            {
                "effect": "speed",
                "name": "Index out of range",
                "max_effect": 1.0,
                "max_duration": 10,
                "final_color": [1, 2, 3],
                "ingredients": [{"item_type": "coffee_beans", "amount": 1}],
                "steps": [{"kind": "add_ingredient", "value": 3}],
            },
            {"effect": "not_an_effect", "name": "Bad enum"},
            {
                "effect": "healing",
                "name": "No steps",
                "max_effect": 1.0,
                "max_duration": 10,
                "final_color": [1, 2, 3],
                "ingredients": [],
                "steps": [],
            },
        ]
        path = tmp_path / "recipes.json"
        path.write_text(json.dumps(rows), encoding="utf-8")

        registry = RecipeRegistry()
        assert registry.load_from_json(path) == 1
        assert registry.get_all()[0].name == "Ok"


class TestMatch:
    def test_exact_type_set(self, recipes):
        recipe = recipes.match([ItemType.MAGICAL_FRUIT, ItemType.COFFEE_BEANS])
        assert recipe is not None
        assert recipe.effect == PotionEffect.SPEED

    def test_duplicates_ignored(self, recipes):
        recipe = recipes.match(
            [ItemType.COFFEE_BEANS, ItemType.MAGICAL_FRUIT, ItemType.COFFEE_BEANS]
        )
        assert recipe is not None
        assert recipe.effect == PotionEffect.SPEED

    def test_subset_does_not_match(self, recipes):
        assert recipes.match([ItemType.COFFEE_BEANS]) is None

    def test_superset_does_not_match(self, recipes):
        held = [ItemType.COFFEE_BEANS, ItemType.MAGICAL_FRUIT, ItemType.HEALING_LILY]
        assert recipes.match(held) is None

    def test_potion_requirement(self, recipes):
        recipe = recipes.match([ItemType.POTION, ItemType.SWIFT_POWDER])
        assert recipe is not None
        assert recipe.effect == PotionEffect.AMPLIFIER
