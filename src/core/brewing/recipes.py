"""레시피 저장소 — JSON 로드 + 재료 종류 집합 매칭"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from .models import (
    Action,
    ActionKind,
    ItemType,
    PotionEffect,
    Recipe,
    RecipeIngredient,
)

logger = logging.getLogger(__name__)

DEFAULT_RECIPES_PATH = Path(__file__).resolve().parents[2] / "data" / "recipes.json"


def _parse_recipe(raw: dict) -> Recipe:
    ingredients = tuple(
        RecipeIngredient(
            item_type=ItemType(ri["item_type"]),
            amount=int(ri["amount"]),
            fineness=float(ri.get("fineness", 0.0)),
        )
        for ri in raw["ingredients"]
    )
    steps = tuple(
        Action(kind=ActionKind(s["kind"]), value=int(s.get("value", 0)))
        for s in raw["steps"]
    )
    for step in steps:
        if step.kind == ActionKind.ADD_INGREDIENT and not (
            0 <= step.value < len(ingredients)
        ):
            raise ValueError(
                f"step references ingredient #{step.value} "
                f"but recipe has {len(ingredients)}"
            )
    if not steps:
        raise ValueError("recipe has no steps")

    r, g, b = raw["final_color"]
    return Recipe(
        effect=PotionEffect(raw["effect"]),
        name=raw["name"],
        max_effect=float(raw["max_effect"]),
        max_duration=int(raw["max_duration"]),
        final_color=(int(r), int(g), int(b)),
        ingredients=ingredients,
        steps=steps,
        description=raw.get("description", ""),
    )


class RecipeRegistry:
    """
    레시피 저장소.
    프로세스 시작 시 1회 로드, 런타임 변경 없음. 등록 순서 = 매칭 우선순위.
    """

    def __init__(self, recipes: Iterable[Recipe] = ()) -> None:
        self._recipes: list[Recipe] = list(recipes)

    def load_from_json(self, path: str | Path = DEFAULT_RECIPES_PATH) -> int:
        """recipes.json 로드. 반환: 로드된 수량.

        잘못된 행은 경고 후 건너뛴다.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw_list: list[dict] = json.load(f)

        count = 0
        for raw in raw_list:
            try:
                self._recipes.append(_parse_recipe(raw))
                count += 1
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(
                    "Failed to load recipe %s: %s", raw.get("name", "?"), e
                )

        logger.info("Loaded %d recipes from %s", count, path)
        return count

    def match(self, held_types: Iterable[ItemType]) -> Optional[Recipe]:
        """들고 있는 재료 종류 집합과 정확히 같은 첫 레시피. 없으면 None.

        수량, 중복, 순서는 무시한다.
        """
        held = frozenset(held_types)
        for recipe in self._recipes:
            if recipe.item_types() == held:
                return recipe
        return None

    def get_by_effect(self, effect: PotionEffect) -> Optional[Recipe]:
        for recipe in self._recipes:
            if recipe.effect == effect:
                return recipe
        return None

    def get_all(self) -> list[Recipe]:
        return list(self._recipes)

    def count(self) -> int:
        return len(self._recipes)
