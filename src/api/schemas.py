"""API request/response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from src.core.brewing.models import ActionKind, ItemType, PotionEffect


# === Request Schemas ===


class CreateCauldronRequest(BaseModel):
    """솥 생성 요청"""

    filled: bool = Field(True, description="생성 즉시 물을 채울지 여부")


class CreateIngredientRequest(BaseModel):
    """재료 생성 요청"""

    item_type: ItemType
    amount: int = Field(1, ge=1, description="수량")
    fineness: Optional[float] = Field(
        None, ge=-1.0, le=1.0, description="손질 정도. 미지정 시 종류별 기본값"
    )


class HeatRequest(BaseModel):
    value: int = Field(..., ge=0, le=100, description="화력 0~100")


class StirRequest(BaseModel):
    count: int = Field(1, ge=1, description="젓기 횟수")


class AddIngredientRequest(BaseModel):
    ingredient_id: str = Field(..., description="재료 핸들 token")


class TickRequest(BaseModel):
    elapsed_ms: int = Field(..., ge=0, description="경과 시간 (ms)")


class SaveRequest(BaseModel):
    slot: str = Field(..., min_length=1, max_length=50, description="저장 슬롯 이름")


# === Response Schemas ===


class ActionInfo(BaseModel):
    kind: ActionKind
    value: int


class PotionInfo(BaseModel):
    """결과물 정보"""

    effect: PotionEffect
    name: str
    duration: int
    duration_ms: int
    potency: float
    quality: float
    quality_tier: str
    color: tuple[int, int, int]


class IngredientInfo(BaseModel):
    """재료 정보"""

    ingredient_id: str
    item_type: ItemType
    name: str
    amount: int
    fineness: float
    transferable: bool
    footprint: float


class CauldronStateResponse(BaseModel):
    """솥 상태 응답"""

    cauldron_id: str
    is_active: bool
    heat_level: int
    color: tuple[int, int, int]
    ms_since_fill: int
    ms_since_last_action: int
    stir_flash_ms: int
    actions: list[ActionInfo] = []
    ingredients: list[IngredientInfo] = []
    potion: PotionInfo


class CreatedResponse(BaseModel):
    id: str


class RecipeInfo(BaseModel):
    effect: PotionEffect
    name: str
    description: str
    max_effect: float
    max_duration: int
    final_color: tuple[int, int, int]
    ingredients: list[dict[str, Any]]
    steps: list[ActionInfo]


class TickResponse(BaseModel):
    tick: int
    cauldrons: int


class LoadResponse(BaseModel):
    cauldron_id: str
    slot: str
