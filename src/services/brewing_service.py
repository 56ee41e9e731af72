"""양조 Service — 핸들 기반 공개 연산, EventBus 통신

architecture: Service → Core 허용. 저장소(EntityStore)는 핸들로만 접근하고
전체 순회하지 않는다.

무효 핸들에 대한 기록 연산은 조용히 무시한다 (UI 쪽에서 이미 걸러진 호출).
단, 행동 기록과 솥 재료 목록이 어긋난 경우는 결함이므로 ActionLogDesyncError.
"""

from dataclasses import replace
from typing import Optional

from src.core.brewing.action_log import append_action, can_merge_ingredients, last_action
from src.core.brewing.models import (
    DEFAULT_COLOR,
    UNPREPARABLE,
    Action,
    ActionKind,
    Cauldron,
    Ingredient,
    Inventory,
    ItemType,
    Mortar,
    Potion,
)
from src.core.brewing.quality import default_potion, evaluate_potion, interpolate_color
from src.core.brewing.recipes import RecipeRegistry
from src.core.brewing.refinement import advance_fineness, default_fineness
from src.core.brewing.scoring import ActionLogDesyncError
from src.core.brewing.tuning import BrewTuning
from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes
from src.core.logging import get_logger
from src.core.store import EntityStore, Handle

logger = get_logger(__name__)

NEUTRAL_HEAT = 0
MAX_HEAT = 100


class BrewingService:
    """솥 행동 기록 + 결과물 재계산 + 재료 손질"""

    SOURCE = "brewing_service"

    def __init__(
        self,
        store: EntityStore,
        recipes: RecipeRegistry,
        event_bus: EventBus,
        tuning: BrewTuning,
    ):
        self._store = store
        self._recipes = recipes
        self._bus = event_bus
        self._tuning = tuning

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def recipes(self) -> RecipeRegistry:
        return self._recipes

    # === 엔티티 생성 ===

    def create_cauldron(self, filled: bool = True) -> Handle:
        """솥 엔티티 생성 (Cauldron + Inventory 컴포넌트)."""
        handle = self._store.create()
        self._store.cauldrons.insert(handle, Cauldron(is_active=filled))
        self._store.inventories.insert(handle, Inventory())
        logger.debug("Created cauldron %s (filled=%s)", handle.token(), filled)
        return handle

    def create_ingredient(
        self,
        item_type: ItemType,
        amount: int = 1,
        fineness: Optional[float] = None,
    ) -> Handle:
        """재료 엔티티 생성. fineness 미지정 시 종류별 기본값."""
        if fineness is None:
            fineness = default_fineness(item_type)
        handle = self._store.create()
        self._store.ingredients.insert(
            handle,
            Ingredient(item_type=item_type, amount=amount, fineness=fineness),
        )
        return handle

    def create_potion_item(self, potion: Potion, amount: int = 1) -> Handle:
        """병입된 포션을 재료로 쓸 수 있는 아이템으로 생성."""
        handle = self._store.create()
        self._store.ingredients.insert(
            handle,
            Ingredient(
                item_type=ItemType.POTION,
                amount=amount,
                fineness=UNPREPARABLE,
                transferable=True,
                potion=potion,
            ),
        )
        return handle

    def create_mortar(self) -> Handle:
        handle = self._store.create()
        self._store.mortars.insert(handle, Mortar())
        return handle

    # === 솥 상태 전이 ===

    def fill(self, cauldron: Handle) -> None:
        """빈 솥에 물 채우기 (Empty → Active). 이미 활성이면 무시."""
        cc = self._store.cauldrons.get(cauldron)
        if cc is None or cc.is_active:
            return
        cc.is_active = True
        cc.ms_since_fill = 0
        self._emit(EventTypes.CAULDRON_FILLED, {"cauldron": cauldron.token()})

    def record_heat(self, cauldron: Handle, value: int) -> None:
        """화력 조절 기록. 기록이 비어있는데 중립값(0)이면 무시."""
        cc = self._active_cauldron(cauldron)
        if cc is None:
            return

        value = min(MAX_HEAT, max(NEUTRAL_HEAT, int(value)))
        if not cc.actions and value == NEUTRAL_HEAT:
            return

        cc.heat_level = value
        self._record(cauldron, cc, Action(ActionKind.MODIFY_HEAT, value))

    def record_stir(self, cauldron: Handle, count: int = 1) -> None:
        """젓기 기록. 재료가 없으면 무시. 기록 시 깜빡임 타이머 시작."""
        cc = self._active_cauldron(cauldron)
        if cc is None or count <= 0:
            return

        inv = self._store.inventories.get(cauldron)
        if inv is None or not inv.items:
            logger.debug("Stir ignored: cauldron %s holds nothing", cauldron.token())
            return

        cc.stir_flash_ms = self._tuning.stir_flash_ms
        self._record(cauldron, cc, Action(ActionKind.STIR, count))

    def record_ingredient(self, cauldron: Handle, ingredient: Handle) -> None:
        """재료 투입 기록.

        직전 행동도 재료 투입이고 종류/손질 정도가 같으면 새 행동 없이 수량만 합친다.
        합쳐진 쪽 재료 엔티티는 제거된다.
        """
        cc = self._active_cauldron(cauldron)
        inv = self._store.inventories.get(cauldron)
        ing = self._store.ingredients.get(ingredient)
        if cc is None or inv is None or ing is None:
            logger.debug(
                "Ingredient add ignored: cauldron=%s ingredient=%s",
                cauldron.token(),
                ingredient.token(),
            )
            return
        if not self._claim_for_cauldron(cauldron, ingredient):
            return

        last = last_action(cc.actions)
        if last is not None and last.kind == ActionKind.ADD_INGREDIENT:
            previous = self._held_at(inv, last.value)
            if can_merge_ingredients(previous, ing):
                previous.amount += ing.amount
                self._store.destroy(ingredient)
                self._refresh(cauldron, cc)
                self._emit(
                    EventTypes.ACTION_RECORDED,
                    {
                        "cauldron": cauldron.token(),
                        "kind": ActionKind.ADD_INGREDIENT.value,
                        "merged": True,
                    },
                )
                return

        inv.items.append(ingredient)
        self._store.holders.insert(ingredient, cauldron)
        self._record(
            cauldron, cc, Action(ActionKind.ADD_INGREDIENT, len(inv.items) - 1)
        )

    def extract(self, cauldron: Handle) -> Potion:
        """병입. 현재 결과물을 값으로 돌려주고 솥을 비운다.

        활성 솥이 아니면 기본 결과물을 돌려주고 아무것도 바꾸지 않는다.
        솥에 든 재료 엔티티는 모두 제거된다.
        """
        cc = self._store.cauldrons.get(cauldron)
        if cc is None or not cc.is_active:
            return default_potion()

        potion = self.current_potion(cauldron)

        cc.color = DEFAULT_COLOR
        cc.fade_from = DEFAULT_COLOR
        cc.heat_level = NEUTRAL_HEAT
        cc.ms_since_fill = 0
        cc.ms_since_last_action = 0
        cc.ms_color_fade = 0
        cc.stir_flash_ms = 0
        cc.actions.clear()

        inv = self._store.inventories.get(cauldron)
        if inv is not None:
            for item in inv.items:
                self._store.destroy(item)
            inv.items.clear()
        self._store.potions.remove(cauldron)

        logger.info(
            "Bottled %s from %s (quality=%.3f)",
            potion.effect.value,
            cauldron.token(),
            potion.quality,
        )
        self._emit(
            EventTypes.POTION_BOTTLED,
            {
                "cauldron": cauldron.token(),
                "effect": potion.effect.value,
                "quality": potion.quality,
            },
        )
        return potion

    def current_potion(self, cauldron: Handle) -> Potion:
        """현재 결과물 스냅샷. 없으면 기본 결과물."""
        potion = self._store.potions.get(cauldron)
        return potion if potion is not None else default_potion()

    def cauldron_state(self, cauldron: Handle) -> Optional[Cauldron]:
        return self._store.cauldrons.get(cauldron)

    def held_ingredients(self, cauldron: Handle) -> list[tuple[Handle, Ingredient]]:
        """솥 재료 목록 (투입 순서). 무효 핸들이면 빈 목록."""
        inv = self._store.inventories.get(cauldron)
        if inv is None:
            return []
        result = []
        for handle in inv.items:
            ing = self._store.ingredients.get(handle)
            if ing is not None:
                result.append((handle, ing))
        return result

    # === 틱 ===

    def advance(self, cauldron: Handle, elapsed_ms: int) -> None:
        """시뮬레이션 1프레임.

        1. 젓기 깜빡임 타이머 감소
        2. 기록이 비어있으면 종료 (아무 시간도 누적하지 않음)
        3. 색 보간: 마지막 행동 시점 색 → 결과물 색, COLOR_FADE_MS에 걸쳐 선형
        4. 유휴 시간이 임계값을 넘으면 WAIT 행동 자동 기록
        """
        cc = self._active_cauldron(cauldron)
        if cc is None:
            return
        elapsed_ms = int(elapsed_ms)
        if elapsed_ms <= 0:
            return

        if cc.stir_flash_ms > 0:
            cc.stir_flash_ms = max(0, cc.stir_flash_ms - elapsed_ms)

        if not cc.actions:
            return

        cc.ms_since_fill += elapsed_ms
        cc.ms_since_last_action += elapsed_ms

        fade_ms = self._tuning.color_fade_ms
        if cc.ms_color_fade < fade_ms:
            cc.ms_color_fade = min(fade_ms, cc.ms_color_fade + elapsed_ms)
            target = self.current_potion(cauldron).color
            cc.color = interpolate_color(cc.fade_from, target, cc.ms_color_fade / fade_ms)

        if cc.ms_since_last_action >= self._tuning.idle_action_threshold_ms:
            units = cc.ms_since_last_action // self._tuning.wait_unit_ms
            if units > 0:
                logger.debug("Idle wait recorded on %s: %d units", cauldron.token(), units)
                self._record(cauldron, cc, Action(ActionKind.WAIT, units))

    # === 재료 손질 ===

    def advance_fineness(self, ingredient: Handle) -> None:
        """재료 1단계 손질. 무효 핸들이면 무시."""
        ing = self._store.ingredients.get(ingredient)
        if ing is None:
            return
        result = advance_fineness(ing, self._tuning)
        if result["refined"]:
            self._emit(
                EventTypes.INGREDIENT_REFINED,
                {
                    "ingredient": ingredient.token(),
                    "item_type": result["item_type"].value,
                },
            )

    def store_in_mortar(self, mortar: Handle, ingredient: Handle) -> bool:
        """절구에 재료 넣기. 반환: 성공 여부.

        솥에 든 재료와 이미 이 절구에 든 재료는 거절한다.
        다른 절구에 든 재료는 그 절구에서 빼서 옮긴다.
        """
        mc = self._store.mortars.get(mortar)
        ing = self._store.ingredients.get(ingredient)
        if mc is None or ing is None:
            return False
        holder = self._holder_of(ingredient)
        if holder == mortar or (
            holder is not None and not self._store.mortars.has(holder)
        ):
            logger.debug(
                "Mortar store refused: %s already held by %s",
                ingredient.token(),
                holder.token(),
            )
            return False
        if holder is not None:
            self._release_from_mortar(holder, ingredient)
        ing.transferable = True
        mc.items.append(ingredient)
        self._store.holders.insert(ingredient, mortar)
        return True

    def take_from_mortar(self, mortar: Handle) -> Optional[Handle]:
        """절구의 첫 재료를 꺼낸다. 비어있으면 None."""
        mc = self._store.mortars.get(mortar)
        if mc is None:
            return None
        self._prune_mortar(mc)
        if not mc.items:
            return None
        ingredient = mc.items.pop(0)
        self._store.holders.remove(ingredient)
        return ingredient

    def grind(self, mortar: Handle) -> None:
        """절구의 첫 번째 재료만 1단계 손질."""
        mc = self._store.mortars.get(mortar)
        if mc is not None:
            self._prune_mortar(mc)
        if mc is None or not mc.items:
            logger.debug("Grind ignored: mortar %s empty or invalid", mortar.token())
            return
        self.advance_fineness(mc.items[0])

    # === 내부 ===

    def _active_cauldron(self, cauldron: Handle) -> Optional[Cauldron]:
        cc = self._store.cauldrons.get(cauldron)
        if cc is None:
            logger.debug("Unknown cauldron handle %s", cauldron.token())
            return None
        if not cc.is_active:
            logger.debug("Cauldron %s is not filled", cauldron.token())
            return None
        return cc

    def _holder_of(self, ingredient: Handle) -> Optional[Handle]:
        """재료를 담고 있는 살아있는 솥/절구. 없으면 None."""
        holder = self._store.holders.get(ingredient)
        if holder is None or not self._store.is_alive(holder):
            return None
        return holder

    def _claim_for_cauldron(self, cauldron: Handle, ingredient: Handle) -> bool:
        """솥 투입 가능 여부. 절구에 든 재료는 절구에서 빼낸다.

        다른 솥(또는 이 솥)에 이미 든 재료는 거절한다. 솥 재료 목록의 위치는
        ADD_INGREDIENT 기록이 가리키므로 빼낼 수 없다.
        """
        holder = self._holder_of(ingredient)
        if holder is None:
            return True
        if self._store.mortars.has(holder):
            self._release_from_mortar(holder, ingredient)
            return True
        logger.debug(
            "Ingredient add refused: %s already held by %s",
            ingredient.token(),
            holder.token(),
        )
        return False

    def _release_from_mortar(self, mortar: Handle, ingredient: Handle) -> None:
        mc = self._store.mortars.get(mortar)
        if mc is not None and ingredient in mc.items:
            mc.items.remove(ingredient)
        self._store.holders.remove(ingredient)

    def _prune_mortar(self, mc: Mortar) -> None:
        """제거된 재료 핸들을 절구 목록에서 뺀다."""
        mc.items[:] = [h for h in mc.items if self._store.ingredients.has(h)]

    def _held_at(self, inv: Inventory, index: int) -> Ingredient:
        if not 0 <= index < len(inv.items):
            logger.error(
                "ADD_INGREDIENT index %d outside held ingredients (%d)",
                index,
                len(inv.items),
            )
            raise ActionLogDesyncError(
                f"action log points at ingredient #{index}, cauldron holds {len(inv.items)}"
            )
        ing = self._store.ingredients.get(inv.items[index])
        if ing is None:
            logger.error("Held ingredient %s vanished", inv.items[index].token())
            raise ActionLogDesyncError(
                f"held ingredient {inv.items[index].token()} no longer exists"
            )
        return ing

    def _held_snapshot(self, inv: Inventory) -> list[Ingredient]:
        return [replace(self._held_at(inv, i)) for i in range(len(inv.items))]

    def _record(self, cauldron: Handle, cc: Cauldron, action: Action) -> None:
        merged = append_action(cc.actions, action)
        self._refresh(cauldron, cc)
        self._emit(
            EventTypes.ACTION_RECORDED,
            {
                "cauldron": cauldron.token(),
                "kind": action.kind.value,
                "merged": merged,
            },
        )

    def _refresh(self, cauldron: Handle, cc: Cauldron) -> None:
        """결과물 재계산 후 통째로 교체 (부분 갱신된 결과물은 노출하지 않음).

        모든 행동이 유휴 타이머와 색 보간을 처음부터 다시 시작시킨다.
        """
        inv = self._store.inventories.get(cauldron)
        held = self._held_snapshot(inv) if inv is not None else []
        potion = evaluate_potion(tuple(cc.actions), held, self._recipes, self._tuning)
        self._store.potions.insert(cauldron, potion)

        cc.ms_since_last_action = 0
        cc.ms_color_fade = 0
        cc.fade_from = cc.color

        self._emit(
            EventTypes.POTION_UPDATED,
            {
                "cauldron": cauldron.token(),
                "effect": potion.effect.value,
                "quality": potion.quality,
            },
        )

    def _emit(self, event_type: str, data: dict) -> None:
        self._bus.emit(GameEvent(event_type=event_type, data=data, source=self.SOURCE))
