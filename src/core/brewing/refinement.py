"""재료 손질 (갈기) 시스템"""

import logging

from .models import FULLY_REFINED, UNPREPARABLE, Ingredient, ItemType
from .tuning import BrewTuning

logger = logging.getLogger(__name__)

# 원재료 → 완전 손질 결과물
REFINED_TYPES: dict[ItemType, ItemType] = {
    ItemType.COFFEE_BEANS: ItemType.SWIFT_POWDER,
    ItemType.PETRIFIED_BONE: ItemType.BONE_DUST,
    ItemType.CACTUS_PULP: ItemType.CACTUS_EXTRACT,
    ItemType.GLOWSHROOM: ItemType.GLOWSPORE,
    ItemType.CRYSTAL_SHARD: ItemType.CRYSTAL_MEPH,
    ItemType.STORM_BARK: ItemType.STORM_SAP,
}


def refined_type_of(item_type: ItemType) -> ItemType:
    """손질 결과 종류. 표에 없으면 REFINED_RESIDUE."""
    return REFINED_TYPES.get(item_type, ItemType.REFINED_RESIDUE)


def advance_fineness(ingredient: Ingredient, tuning: BrewTuning) -> dict:
    """손질 1단계 진행.

    Returns:
        {
            "advanced": bool,          # fineness가 올랐는지
            "refined": bool,           # 이번 단계에서 종류 치환이 일어났는지
            "fineness": float,
            "item_type": ItemType,
        }

    fineness == -1 (손질 불가) 또는 이미 1 이상이면 변화 없음.
    1에 도달하는 순간 1회만: 종류 치환, 옮기기 가능, 크기 배율 적용.
    """
    if not ingredient.is_preparable or ingredient.fineness >= FULLY_REFINED:
        return {
            "advanced": False,
            "refined": False,
            "fineness": ingredient.fineness,
            "item_type": ingredient.item_type,
        }

    ingredient.fineness = min(FULLY_REFINED, ingredient.fineness + tuning.fineness_step)
    if ingredient.fineness < FULLY_REFINED:
        return {
            "advanced": True,
            "refined": False,
            "fineness": ingredient.fineness,
            "item_type": ingredient.item_type,
        }

    raw_type = ingredient.item_type
    if raw_type not in REFINED_TYPES:
        logger.warning("No refine result for %s, using residue", raw_type.value)
    ingredient.item_type = refined_type_of(raw_type)
    ingredient.transferable = True
    ingredient.footprint *= tuning.refined_footprint_scale

    logger.info("Ingredient refined: %s -> %s", raw_type.value, ingredient.item_type.value)
    return {
        "advanced": True,
        "refined": True,
        "fineness": ingredient.fineness,
        "item_type": ingredient.item_type,
    }


def default_fineness(item_type: ItemType) -> float:
    """새로 만든 재료의 초기 fineness.

    갈 수 있는 원재료 = 0, 이미 손질된 결과물 = 1, 그 외 = -1 (손질 불가)
    """
    if item_type in REFINED_TYPES:
        return 0.0
    if item_type in REFINED_TYPES.values() or item_type == ItemType.REFINED_RESIDUE:
        return FULLY_REFINED
    return UNPREPARABLE
