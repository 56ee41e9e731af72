"""양조 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from src.core.store import Handle

RGB = tuple[int, int, int]

DEFAULT_COLOR: RGB = (36, 110, 178)  # 맑은 물 색
UNPREPARABLE = -1.0  # 손질 불가 재료의 fineness
FULLY_REFINED = 1.0


class ActionKind(str, Enum):
    WAIT = "wait"
    ADD_INGREDIENT = "add_ingredient"
    MODIFY_HEAT = "modify_heat"
    STIR = "stir"


class PotionEffect(str, Enum):
    WATER = "water"  # 아무것도 넣지 않은 기본 결과물
    FAILED = "failed"  # 어떤 레시피와도 재료 조합이 맞지 않음
    SPEED = "speed"
    HEALING = "healing"
    NIGHT_VISION = "night_vision"
    STORMWARD = "stormward"
    AMPLIFIER = "amplifier"


class ItemType(str, Enum):
    POTION = "potion"

    # 원재료
    COFFEE_BEANS = "coffee_beans"
    MAGICAL_FRUIT = "magical_fruit"
    HEALING_LILY = "healing_lily"
    PETRIFIED_BONE = "petrified_bone"
    CACTUS_PULP = "cactus_pulp"
    GLOWSHROOM = "glowshroom"
    CRYSTAL_SHARD = "crystal_shard"
    STORM_BARK = "storm_bark"

    # 손질 결과물
    SWIFT_POWDER = "swift_powder"
    BONE_DUST = "bone_dust"
    CACTUS_EXTRACT = "cactus_extract"
    GLOWSPORE = "glowspore"
    CRYSTAL_MEPH = "crystal_meph"
    STORM_SAP = "storm_sap"
    REFINED_RESIDUE = "refined_residue"


@dataclass(frozen=True)
class Action:
    """솥에 기록되는 행동 1건.

    value 의미:
        WAIT: 대기 단위 수
        ADD_INGREDIENT: 솥 재료 목록의 인덱스
        MODIFY_HEAT: 화력 1~100
        STIR: 젓기 횟수
    """

    kind: ActionKind
    value: int = 0


@dataclass(frozen=True)
class Potion:
    """양조 결과물. 행동마다 통째로 교체된다 (부분 갱신 금지)."""

    effect: PotionEffect = PotionEffect.WATER
    duration: int = 0  # 레시피 시간 단위 (초)
    potency: float = 0.0
    quality: float = 1.0  # 0~1
    color: RGB = DEFAULT_COLOR

    @property
    def duration_ms(self) -> int:
        return self.duration * 1000


@dataclass
class Ingredient:
    """솥/절구에 들어가는 아이템 1묶음"""

    item_type: ItemType
    amount: int = 1
    fineness: float = 0.0  # -1 = 손질 불가, 0~1 = 원재료~완전 손질
    transferable: bool = False  # 손질 완료 후 집어 옮길 수 있음
    footprint: float = 1.0  # 화면상 크기 배율
    potion: Optional[Potion] = None  # item_type == POTION 일 때만

    @property
    def is_preparable(self) -> bool:
        return self.fineness != UNPREPARABLE

    @property
    def is_potion(self) -> bool:
        return self.item_type == ItemType.POTION


@dataclass(frozen=True)
class RecipeIngredient:
    item_type: ItemType
    amount: int
    fineness: float = 0.0


@dataclass(frozen=True)
class Recipe:
    """레시피 — 불변. recipes.json에서 로드."""

    effect: PotionEffect
    name: str
    max_effect: float
    max_duration: int
    final_color: RGB
    ingredients: tuple[RecipeIngredient, ...]
    steps: tuple[Action, ...]
    description: str = ""

    def item_types(self) -> frozenset[ItemType]:
        """수량/손질 정도를 무시한 재료 종류 집합"""
        return frozenset(ri.item_type for ri in self.ingredients)

    def potency_range(self, min_fraction: float) -> tuple[float, float]:
        return self.max_effect * min_fraction, self.max_effect

    def duration_range(self, min_fraction: float) -> tuple[float, int]:
        return self.max_duration * min_fraction, self.max_duration


@dataclass
class Cauldron:
    """솥 상태. 병입 후에도 엔티티는 유지된다 (재사용)."""

    color: RGB = DEFAULT_COLOR
    heat_level: int = 0  # 0~100
    is_active: bool = True  # 물이 채워져 있음
    ms_since_fill: int = 0
    ms_since_last_action: int = 0
    ms_color_fade: int = 0
    stir_flash_ms: int = 0
    fade_from: RGB = DEFAULT_COLOR  # 마지막 행동 시점의 색 (선형 보간 시작점)
    actions: list[Action] = field(default_factory=list)


@dataclass
class Inventory:
    """솥/절구가 들고 있는 재료 핸들 목록 (순서 = ADD_INGREDIENT 인덱스)"""

    items: list[Handle] = field(default_factory=list)


@dataclass
class Mortar:
    """절구. 첫 번째 재료만 갈 수 있다."""

    items: list[Handle] = field(default_factory=list)
