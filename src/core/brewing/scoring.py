"""레시피 일치도 채점 — 가중 편집 거리

플레이어 행동 기록과 레시피 단계 목록 사이의 (편집 횟수, 페널티) 쌍을 계산한다.

규칙:
- 한쪽이 비면: 편집 = 다른 쪽 길이, 페널티 0
- 머리 행동 종류가 다르면: 1 + min(삭제, 삽입, 교체). 페널티는 선택된 분기 것을 그대로
  (동점이면 교체 → 삭제 → 삽입 순서로 먼저 본 것 유지)
- 머리 행동 종류가 같으면: 편집 없이 대각선 진행 + 종류별 값 차이 페널티
- (player_index, recipe_index) 표를 (n, m)에서 (0, 0) 방향으로 채운다. 결과는 재귀 정의와 동일하고
  행동 기록 길이와 무관하게 스택 깊이가 일정하다
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .models import Action, ActionKind, Ingredient, Recipe, RecipeIngredient
from .tuning import BrewTuning

logger = logging.getLogger(__name__)


class ActionLogDesyncError(RuntimeError):
    """ADD_INGREDIENT 인덱스가 솥 재료 목록 밖을 가리킴 (기록/재료 불일치)"""


@dataclass(frozen=True)
class EditScore:
    edits: int
    penalty: float = 0.0

    @property
    def total(self) -> float:
        return self.edits + self.penalty


def ingredient_penalty(
    held: Ingredient, required: RecipeIngredient, tuning: BrewTuning
) -> float:
    """투입 재료 1묶음과 레시피 요구 재료의 차이.

    종류가 다르면 종류 페널티만 주고 끝.
    POTION 요구는 효과와 무관하게 아무 포션이나 통과한다.
    """
    if held.item_type != required.item_type:
        return tuning.ingredient_type_penalty

    penalty = abs(held.amount - required.amount) * tuning.ingredient_amount_penalty
    if held.is_preparable:
        penalty += abs(held.fineness - required.fineness) * tuning.ingredient_fineness_penalty
    return penalty


def pair_penalty(
    player: Action,
    step: Action,
    recipe: Recipe,
    held: Sequence[Ingredient],
    tuning: BrewTuning,
) -> float:
    """종류가 같은 행동 쌍의 값 차이 페널티"""
    if player.kind == ActionKind.ADD_INGREDIENT:
        if not 0 <= player.value < len(held):
            logger.error(
                "ADD_INGREDIENT index %d outside held ingredients (%d)",
                player.value,
                len(held),
            )
            raise ActionLogDesyncError(
                f"action log points at ingredient #{player.value}, "
                f"cauldron holds {len(held)}"
            )
        return ingredient_penalty(held[player.value], recipe.ingredients[step.value], tuning)

    diff = abs(player.value - step.value)
    if player.kind == ActionKind.WAIT:
        return diff * tuning.wait_penalty
    if player.kind == ActionKind.MODIFY_HEAT:
        return diff * tuning.heat_penalty
    return diff * tuning.stir_penalty


def score_actions(
    actions: Sequence[Action],
    recipe: Recipe,
    held: Sequence[Ingredient],
    tuning: BrewTuning,
) -> EditScore:
    """행동 기록 vs 레시피 단계 편집 거리.

    Args:
        actions: 솥 행동 기록 스냅샷
        recipe: 매칭된 레시피
        held: 솥 재료 스냅샷 (ADD_INGREDIENT value가 가리키는 목록)
    """
    steps = recipe.steps
    n, m = len(actions), len(steps)

    # table[i][j] = actions[i:] vs steps[j:]
    table: list[list[EditScore]] = [[EditScore(0)] * (m + 1) for _ in range(n + 1)]
    for j in range(m + 1):
        table[n][j] = EditScore(m - j)
    for i in range(n):
        table[i][m] = EditScore(n - i)

    for i in range(n - 1, -1, -1):
        row, below = table[i], table[i + 1]
        pa = actions[i]
        for j in range(m - 1, -1, -1):
            ra = steps[j]
            if pa.kind != ra.kind:
                # 동점이면 교체 → 삭제 → 삽입 순서
                best = below[j + 1]
                for alt in (below[j], row[j + 1]):
                    if alt.edits < best.edits:
                        best = alt
                row[j] = EditScore(best.edits + 1, best.penalty)
            else:
                penalty = pair_penalty(pa, ra, recipe, held, tuning)
                nxt = below[j + 1]
                row[j] = EditScore(nxt.edits, nxt.penalty + penalty)

    return table[0][0]
