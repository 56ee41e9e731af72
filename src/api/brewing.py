"""Brewing API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.schemas import (
    ActionInfo,
    AddIngredientRequest,
    CauldronStateResponse,
    CreateCauldronRequest,
    CreatedResponse,
    CreateIngredientRequest,
    HeatRequest,
    IngredientInfo,
    LoadResponse,
    PotionInfo,
    RecipeInfo,
    SaveRequest,
    StirRequest,
    TickRequest,
    TickResponse,
)
from src.core.brewing.models import Ingredient, Potion
from src.core.brewing.quality import describe_ingredient, describe_potion, quality_tier
from src.core.logging import get_logger
from src.core.store import Handle
from src.modules.brewing.module import BrewingModule
from src.modules.module_manager import ModuleManager
from src.services.brewing_service import BrewingService
from src.services.persistence_service import PersistenceService

logger = get_logger(__name__)

router = APIRouter(prefix="/brewing", tags=["brewing"])


def get_brewing_service(request: Request) -> BrewingService:
    """BrewingService 인스턴스 반환 (의존성 주입)"""
    service: BrewingService = request.app.state.brewing_service
    return service


def get_persistence_service(request: Request) -> PersistenceService:
    """PersistenceService 인스턴스 반환 (의존성 주입)"""
    service: PersistenceService = request.app.state.persistence_service
    return service


def get_module_manager(request: Request) -> ModuleManager:
    manager: ModuleManager = request.app.state.module_manager
    return manager


def get_brewing_module(request: Request) -> BrewingModule:
    module: BrewingModule = request.app.state.brewing_module
    return module


def _parse_handle(token: str) -> Handle:
    try:
        return Handle.parse(token)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Malformed id: {token}")


def _require_cauldron(service: BrewingService, token: str) -> Handle:
    handle = _parse_handle(token)
    if service.cauldron_state(handle) is None:
        raise HTTPException(status_code=404, detail=f"Cauldron not found: {token}")
    return handle


def _require_ingredient(service: BrewingService, token: str) -> Handle:
    handle = _parse_handle(token)
    if not service.store.ingredients.has(handle):
        raise HTTPException(status_code=404, detail=f"Ingredient not found: {token}")
    return handle


def _require_mortar(service: BrewingService, token: str) -> Handle:
    handle = _parse_handle(token)
    if not service.store.mortars.has(handle):
        raise HTTPException(status_code=404, detail=f"Mortar not found: {token}")
    return handle


def _build_potion_info(potion: Potion, service: BrewingService) -> PotionInfo:
    return PotionInfo(
        effect=potion.effect,
        name=describe_potion(potion, service.recipes),
        duration=potion.duration,
        duration_ms=potion.duration_ms,
        potency=potion.potency,
        quality=potion.quality,
        quality_tier=quality_tier(potion.quality),
        color=potion.color,
    )


def _build_ingredient_info(
    handle: Handle, ing: Ingredient, service: BrewingService
) -> IngredientInfo:
    return IngredientInfo(
        ingredient_id=handle.token(),
        item_type=ing.item_type,
        name=describe_ingredient(ing, service.recipes),
        amount=ing.amount,
        fineness=ing.fineness,
        transferable=ing.transferable,
        footprint=ing.footprint,
    )


def _build_state(handle: Handle, service: BrewingService) -> CauldronStateResponse:
    cc = service.cauldron_state(handle)
    if cc is None:
        raise HTTPException(
            status_code=404, detail=f"Cauldron not found: {handle.token()}"
        )
    return CauldronStateResponse(
        cauldron_id=handle.token(),
        is_active=cc.is_active,
        heat_level=cc.heat_level,
        color=cc.color,
        ms_since_fill=cc.ms_since_fill,
        ms_since_last_action=cc.ms_since_last_action,
        stir_flash_ms=cc.stir_flash_ms,
        actions=[ActionInfo(kind=a.kind, value=a.value) for a in cc.actions],
        ingredients=[
            _build_ingredient_info(h, ing, service)
            for h, ing in service.held_ingredients(handle)
        ],
        potion=_build_potion_info(service.current_potion(handle), service),
    )


# === 생성 ===


@router.post("/cauldrons", response_model=CreatedResponse)
def create_cauldron(
    body: CreateCauldronRequest,
    service: BrewingService = Depends(get_brewing_service),
    module: BrewingModule = Depends(get_brewing_module),
) -> CreatedResponse:
    handle = service.create_cauldron(filled=body.filled)
    module.track_cauldron(handle)
    return CreatedResponse(id=handle.token())


@router.post("/ingredients", response_model=CreatedResponse)
def create_ingredient(
    body: CreateIngredientRequest,
    service: BrewingService = Depends(get_brewing_service),
) -> CreatedResponse:
    handle = service.create_ingredient(body.item_type, body.amount, body.fineness)
    return CreatedResponse(id=handle.token())


@router.post("/mortars", response_model=CreatedResponse)
def create_mortar(
    service: BrewingService = Depends(get_brewing_service),
    module: BrewingModule = Depends(get_brewing_module),
) -> CreatedResponse:
    handle = service.create_mortar()
    module.track_mortar(handle)
    return CreatedResponse(id=handle.token())


# === 솥 조작 ===


@router.get("/cauldrons/{cauldron_id}", response_model=CauldronStateResponse)
def get_cauldron(
    cauldron_id: str, service: BrewingService = Depends(get_brewing_service)
) -> CauldronStateResponse:
    handle = _require_cauldron(service, cauldron_id)
    return _build_state(handle, service)


@router.post("/cauldrons/{cauldron_id}/fill", response_model=CauldronStateResponse)
def fill_cauldron(
    cauldron_id: str, service: BrewingService = Depends(get_brewing_service)
) -> CauldronStateResponse:
    handle = _require_cauldron(service, cauldron_id)
    service.fill(handle)
    return _build_state(handle, service)


@router.post("/cauldrons/{cauldron_id}/heat", response_model=CauldronStateResponse)
def heat_cauldron(
    cauldron_id: str,
    body: HeatRequest,
    service: BrewingService = Depends(get_brewing_service),
) -> CauldronStateResponse:
    handle = _require_cauldron(service, cauldron_id)
    service.record_heat(handle, body.value)
    return _build_state(handle, service)


@router.post("/cauldrons/{cauldron_id}/stir", response_model=CauldronStateResponse)
def stir_cauldron(
    cauldron_id: str,
    body: StirRequest,
    service: BrewingService = Depends(get_brewing_service),
) -> CauldronStateResponse:
    handle = _require_cauldron(service, cauldron_id)
    service.record_stir(handle, body.count)
    return _build_state(handle, service)


@router.post(
    "/cauldrons/{cauldron_id}/ingredients", response_model=CauldronStateResponse
)
def add_ingredient(
    cauldron_id: str,
    body: AddIngredientRequest,
    service: BrewingService = Depends(get_brewing_service),
) -> CauldronStateResponse:
    handle = _require_cauldron(service, cauldron_id)
    ingredient = _require_ingredient(service, body.ingredient_id)
    service.record_ingredient(handle, ingredient)
    return _build_state(handle, service)


@router.post("/cauldrons/{cauldron_id}/bottle", response_model=PotionInfo)
def bottle_cauldron(
    cauldron_id: str, service: BrewingService = Depends(get_brewing_service)
) -> PotionInfo:
    handle = _require_cauldron(service, cauldron_id)
    potion = service.extract(handle)
    return _build_potion_info(potion, service)


# === 손질 ===


@router.post("/ingredients/{ingredient_id}/refine", response_model=IngredientInfo)
def refine_ingredient(
    ingredient_id: str, service: BrewingService = Depends(get_brewing_service)
) -> IngredientInfo:
    handle = _require_ingredient(service, ingredient_id)
    service.advance_fineness(handle)
    return _build_ingredient_info(handle, service.store.ingredients.get(handle), service)


@router.post("/mortars/{mortar_id}/ingredients", response_model=CreatedResponse)
def store_in_mortar(
    mortar_id: str,
    body: AddIngredientRequest,
    service: BrewingService = Depends(get_brewing_service),
) -> CreatedResponse:
    mortar = _require_mortar(service, mortar_id)
    ingredient = _require_ingredient(service, body.ingredient_id)
    if not service.store_in_mortar(mortar, ingredient):
        raise HTTPException(status_code=409, detail="Ingredient already held")
    return CreatedResponse(id=ingredient.token())


@router.post("/mortars/{mortar_id}/grind", response_model=list[IngredientInfo])
def grind_mortar(
    mortar_id: str, service: BrewingService = Depends(get_brewing_service)
) -> list[IngredientInfo]:
    mortar = _require_mortar(service, mortar_id)
    service.grind(mortar)
    mc = service.store.mortars.get(mortar)
    return [
        _build_ingredient_info(h, service.store.ingredients.get(h), service)
        for h in mc.items
        if service.store.ingredients.has(h)
    ]


# === 시뮬레이션 ===


@router.post("/tick", response_model=TickResponse)
def tick(
    body: TickRequest,
    manager: ModuleManager = Depends(get_module_manager),
    module: BrewingModule = Depends(get_brewing_module),
) -> TickResponse:
    context = manager.process_tick(body.elapsed_ms)
    return TickResponse(tick=context.tick, cauldrons=len(module.cauldrons))


@router.get("/recipes", response_model=list[RecipeInfo])
def list_recipes(
    service: BrewingService = Depends(get_brewing_service),
) -> list[RecipeInfo]:
    return [
        RecipeInfo(
            effect=r.effect,
            name=r.name,
            description=r.description,
            max_effect=r.max_effect,
            max_duration=r.max_duration,
            final_color=r.final_color,
            ingredients=[
                {
                    "item_type": ri.item_type.value,
                    "amount": ri.amount,
                    "fineness": ri.fineness,
                }
                for ri in r.ingredients
            ],
            steps=[ActionInfo(kind=s.kind, value=s.value) for s in r.steps],
        )
        for r in service.recipes.get_all()
    ]


# === 저장 ===


@router.post("/cauldrons/{cauldron_id}/save", response_model=LoadResponse)
def save_cauldron(
    cauldron_id: str,
    body: SaveRequest,
    service: BrewingService = Depends(get_brewing_service),
    persistence: PersistenceService = Depends(get_persistence_service),
) -> LoadResponse:
    handle = _require_cauldron(service, cauldron_id)
    if not persistence.save_cauldron(body.slot, handle):
        raise HTTPException(status_code=409, detail="Cauldron state inconsistent")
    return LoadResponse(cauldron_id=handle.token(), slot=body.slot)


@router.post("/saves/{slot}/load", response_model=LoadResponse)
def load_cauldron(
    slot: str,
    persistence: PersistenceService = Depends(get_persistence_service),
    module: BrewingModule = Depends(get_brewing_module),
) -> LoadResponse:
    handle = persistence.load_cauldron(slot)
    if handle is None:
        raise HTTPException(status_code=404, detail=f"Save slot not found: {slot}")
    module.track_cauldron(handle)
    logger.info("Cauldron %s restored from %s", handle.token(), slot)
    return LoadResponse(cauldron_id=handle.token(), slot=slot)
