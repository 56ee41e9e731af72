"""품질 산출 파이프라인

(편집 횟수, 페널티) → 0~1 품질 → 효력/지속시간/색.

공식:
    quality  = clamp((steps - (edits + penalty) * difficulty) / steps, 0, 1)
    potency  = min_potency + (max_effect - min_potency) * quality
    duration = min_duration + (max_duration - min_duration) * quality
    color    = 채널별 보간(base_color → final_color, quality)
    min_* = max_* × min_*_fraction

재료로 넣은 포션이 있으면:
    quality    *= 넣은 포션(물/실패 제외) 품질의 평균
    base_color  = 넣은 포션 색의 채널별 정수 평균 (없으면 DEFAULT_COLOR)
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from .models import (
    DEFAULT_COLOR,
    RGB,
    Action,
    Ingredient,
    Potion,
    PotionEffect,
    Recipe,
)
from .recipes import RecipeRegistry
from .scoring import EditScore, score_actions
from .tuning import BrewTuning

logger = logging.getLogger(__name__)

# (하한, 이름), 높은 순. 이름 표시 전용, 품질 값은 바꾸지 않는다
QUALITY_TIERS: tuple[tuple[float, str], ...] = (
    (0.9, "Masterful"),
    (0.7, "Potent"),
    (0.4, "Standard"),
    (0.0, "Weak"),
)


def default_potion() -> Potion:
    """아무 재료도 없는 솥의 결과물"""
    return Potion(
        effect=PotionEffect.WATER,
        duration=0,
        potency=0.0,
        quality=1.0,
        color=DEFAULT_COLOR,
    )


def failed_potion() -> Potion:
    """재료 조합이 어떤 레시피와도 맞지 않음. 품질은 기본값 유지."""
    return Potion(
        effect=PotionEffect.FAILED,
        duration=0,
        potency=0.0,
        quality=1.0,
        color=DEFAULT_COLOR,
    )


def interpolate_color(init: RGB, end: RGB, ratio: float) -> RGB:
    """채널별로 init에서 end 방향으로 |차이| × ratio 만큼 (정수 절삭) 이동"""
    ratio = min(max(ratio, 0.0), 1.0)
    channels = []
    for a, b in zip(init, end):
        step = int(abs(a - b) * ratio)
        channels.append(a + step if b > a else a - step)
    return (channels[0], channels[1], channels[2])


def compute_quality(score: EditScore, steps: int, difficulty: float) -> float:
    if steps <= 0:
        return 1.0
    raw = (steps - score.total * difficulty) / steps
    return min(max(raw, 0.0), 1.0)


def input_quality_cap(held: Sequence[Ingredient]) -> float:
    """넣은 포션 품질 평균. 물/실패 포션은 건너뛰고, 하나도 없으면 1.0"""
    qualities = [
        ing.potion.quality
        for ing in held
        if ing.potion is not None
        and ing.potion.effect not in (PotionEffect.WATER, PotionEffect.FAILED)
    ]
    if not qualities:
        return 1.0
    return sum(qualities) / len(qualities)


def input_base_color(held: Sequence[Ingredient]) -> RGB:
    colors = [ing.potion.color for ing in held if ing.potion is not None]
    if not colors:
        return DEFAULT_COLOR
    n = len(colors)
    return (
        sum(c[0] for c in colors) // n,
        sum(c[1] for c in colors) // n,
        sum(c[2] for c in colors) // n,
    )


def derive_potion(
    recipe: Recipe,
    quality: float,
    tuning: BrewTuning,
    base_color: RGB = DEFAULT_COLOR,
) -> Potion:
    """품질로부터 결과물 수치 산출. 값은 항상 [최소 비율 × 최대, 최대] 범위."""
    min_potency, max_potency = recipe.potency_range(tuning.min_potency_fraction)
    min_duration, max_duration = recipe.duration_range(tuning.min_duration_fraction)

    potency = min_potency + (max_potency - min_potency) * quality
    duration = min_duration + (max_duration - min_duration) * quality

    return Potion(
        effect=recipe.effect,
        # 올림 → 최소 비율 밑으로 내려가지 않음
        duration=min(max_duration, math.ceil(duration)),
        potency=min(max_potency, max(min_potency, potency)),
        quality=quality,
        color=interpolate_color(base_color, recipe.final_color, quality),
    )


def evaluate_potion(
    actions: Sequence[Action],
    held: Sequence[Ingredient],
    recipes: RecipeRegistry,
    tuning: BrewTuning,
) -> Potion:
    """솥 상태 스냅샷 → 현재 시점 결과물.

    1. 재료 없음 → 기본 결과물
    2. 재료 종류 집합과 정확히 일치하는 레시피 없음 → 실패 결과물
    3. 일치 → 편집 거리 채점 후 품질 산출. 넣은 포션이 있으면 그 품질 평균이 상한
    """
    if not held:
        return default_potion()

    recipe = recipes.match(ing.item_type for ing in held)
    if recipe is None:
        return failed_potion()

    score = score_actions(actions, recipe, held, tuning)
    quality = compute_quality(score, len(recipe.steps), tuning.difficulty)
    quality *= input_quality_cap(held)
    logger.debug(
        "Scored %s: edits=%d penalty=%.3f quality=%.3f",
        recipe.effect.value,
        score.edits,
        score.penalty,
        quality,
    )
    return derive_potion(recipe, quality, tuning, base_color=input_base_color(held))


def quality_tier(quality: float) -> str:
    for threshold, name in QUALITY_TIERS:
        if quality >= threshold:
            return name
    return QUALITY_TIERS[-1][1]


def describe_potion(potion: Potion, recipes: RecipeRegistry) -> str:
    """표시 이름. 예: 'Potent Potion of Swiftness'"""
    if potion.effect == PotionEffect.WATER:
        return "Flask of Water"
    if potion.effect == PotionEffect.FAILED:
        return "Failed Potion"

    recipe: Optional[Recipe] = recipes.get_by_effect(potion.effect)
    name = recipe.name if recipe else potion.effect.value.replace("_", " ").title()
    return f"{quality_tier(potion.quality)} {name}"


def describe_ingredient(ingredient: Ingredient, recipes: RecipeRegistry) -> str:
    """재료 표시 이름. 손질 진행 중이면 '(NN% Refined)' 추가."""
    if ingredient.is_potion and ingredient.potion is not None:
        return describe_potion(ingredient.potion, recipes)

    name = ingredient.item_type.value.replace("_", " ").title()
    if ingredient.is_preparable:
        percent = int(ingredient.fineness * 100)
        if percent > 0:
            name += f" ({percent}% Refined)"
    return name
