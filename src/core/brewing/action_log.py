"""행동 기록 압축 규칙

- MODIFY_HEAT / STIR / WAIT: 직전 행동과 종류가 같으면 새로 추가하지 않고 병합
  - MODIFY_HEAT: 값 교체 (화력은 누적되지 않음)
  - STIR / WAIT: 값 합산
- ADD_INGREDIENT: 행동끼리는 병합하지 않는다. 재료 병합은 can_merge_ingredients로 판단
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Optional

from .models import Action, ActionKind, Ingredient

FINENESS_EPSILON = 1e-6

_REPLACING_KINDS = frozenset({ActionKind.MODIFY_HEAT})
_ACCUMULATING_KINDS = frozenset({ActionKind.STIR, ActionKind.WAIT})


def append_action(actions: list[Action], action: Action) -> bool:
    """행동을 기록에 추가하거나 마지막 행동에 병합.

    Returns:
        True = 병합됨, False = 새로 추가됨
    """
    if actions and action.kind != ActionKind.ADD_INGREDIENT:
        last = actions[-1]
        if last.kind == action.kind:
            if action.kind in _REPLACING_KINDS:
                actions[-1] = replace(last, value=action.value)
                return True
            if action.kind in _ACCUMULATING_KINDS:
                actions[-1] = replace(last, value=last.value + action.value)
                return True

    actions.append(action)
    return False


def last_action(actions: list[Action]) -> Optional[Action]:
    return actions[-1] if actions else None


def can_merge_ingredients(previous: Ingredient, incoming: Ingredient) -> bool:
    """연속 투입된 두 재료를 한 묶음으로 합칠 수 있는지.

    종류와 손질 정도가 같아야 한다. 포션은 합치지 않는다.
    """
    if incoming.is_potion or previous.is_potion:
        return False
    if previous.item_type != incoming.item_type:
        return False
    return math.isclose(previous.fineness, incoming.fineness, abs_tol=FINENESS_EPSILON)
