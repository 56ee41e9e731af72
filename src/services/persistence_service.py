"""솥 저장/불러오기 Service — EntityStore ↔ DB 스냅샷

저장 대상: 솥 상태(화력, 색, 타이머, 행동 기록), 투입 재료 목록(손질 정도 포함),
현재 결과물. 불러온 솥에서 병입하면 저장 전과 같은 결과물이 나와야 한다.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.core.brewing.models import (
    Action,
    ActionKind,
    Cauldron,
    Ingredient,
    Inventory,
    ItemType,
    Potion,
    PotionEffect,
)
from src.core.logging import get_logger
from src.core.store import EntityStore, Handle
from src.db.models import CauldronSnapshotModel

logger = get_logger(__name__)

SCHEMA_VERSION = 1


def _potion_to_dict(potion: Potion) -> dict[str, Any]:
    return {
        "effect": potion.effect.value,
        "duration": potion.duration,
        "potency": potion.potency,
        "quality": potion.quality,
        "color": list(potion.color),
    }


def _dict_to_potion(data: dict[str, Any]) -> Potion:
    r, g, b = data["color"]
    return Potion(
        effect=PotionEffect(data["effect"]),
        duration=int(data["duration"]),
        potency=float(data["potency"]),
        quality=float(data["quality"]),
        color=(int(r), int(g), int(b)),
    )


def _ingredient_to_dict(ing: Ingredient) -> dict[str, Any]:
    return {
        "item_type": ing.item_type.value,
        "amount": ing.amount,
        "fineness": ing.fineness,
        "transferable": ing.transferable,
        "footprint": ing.footprint,
        "potion": _potion_to_dict(ing.potion) if ing.potion is not None else None,
    }


def _dict_to_ingredient(data: dict[str, Any]) -> Ingredient:
    potion_data = data.get("potion")
    return Ingredient(
        item_type=ItemType(data["item_type"]),
        amount=int(data["amount"]),
        fineness=float(data["fineness"]),
        transferable=bool(data.get("transferable", False)),
        footprint=float(data.get("footprint", 1.0)),
        potion=_dict_to_potion(potion_data) if potion_data else None,
    )


def _cauldron_to_dict(cc: Cauldron) -> dict[str, Any]:
    return {
        "color": list(cc.color),
        "heat_level": cc.heat_level,
        "is_active": cc.is_active,
        "ms_since_fill": cc.ms_since_fill,
        "ms_since_last_action": cc.ms_since_last_action,
        "ms_color_fade": cc.ms_color_fade,
        "stir_flash_ms": cc.stir_flash_ms,
        "fade_from": list(cc.fade_from),
        "actions": [{"kind": a.kind.value, "value": a.value} for a in cc.actions],
    }


def _dict_to_cauldron(data: dict[str, Any]) -> Cauldron:
    return Cauldron(
        color=tuple(int(c) for c in data["color"]),
        heat_level=int(data["heat_level"]),
        is_active=bool(data["is_active"]),
        ms_since_fill=int(data["ms_since_fill"]),
        ms_since_last_action=int(data["ms_since_last_action"]),
        ms_color_fade=int(data["ms_color_fade"]),
        stir_flash_ms=int(data.get("stir_flash_ms", 0)),
        fade_from=tuple(int(c) for c in data["fade_from"]),
        actions=[
            Action(kind=ActionKind(a["kind"]), value=int(a["value"]))
            for a in data["actions"]
        ],
    )


class PersistenceService:
    """솥 스냅샷 저장/복원"""

    def __init__(self, db: Session, store: EntityStore):
        self._db = db
        self._store = store

    def save_cauldron(self, slot: str, cauldron: Handle) -> bool:
        """솥 상태를 slot 이름으로 저장 (덮어쓰기). 반환: 성공 여부."""
        cc = self._store.cauldrons.get(cauldron)
        inv = self._store.inventories.get(cauldron)
        if cc is None or inv is None:
            logger.warning("Save failed: cauldron %s not found", cauldron.token())
            return False

        held = []
        for handle in inv.items:
            ing = self._store.ingredients.get(handle)
            if ing is None:
                logger.warning(
                    "Save failed: held ingredient %s missing", handle.token()
                )
                return False
            held.append(_ingredient_to_dict(ing))

        potion = self._store.potions.get(cauldron)
        state = {
            "cauldron": _cauldron_to_dict(cc),
            "ingredients": held,
            "potion": _potion_to_dict(potion) if potion is not None else None,
        }

        orm = self._db.get(CauldronSnapshotModel, slot)
        if orm is None:
            orm = CauldronSnapshotModel(slot=slot)
            self._db.add(orm)
        orm.state = state
        orm.schema_version = SCHEMA_VERSION
        orm.saved_at = datetime.utcnow()
        self._db.commit()

        logger.info("Saved cauldron %s to slot %s", cauldron.token(), slot)
        return True

    def load_cauldron(self, slot: str) -> Optional[Handle]:
        """slot의 스냅샷으로 새 엔티티들을 만들고 솥 핸들 반환. 없으면 None."""
        orm = self._db.get(CauldronSnapshotModel, slot)
        if orm is None:
            return None

        state = orm.state
        cauldron = self._store.create()
        self._store.cauldrons.insert(cauldron, _dict_to_cauldron(state["cauldron"]))

        inv = Inventory()
        for raw in state["ingredients"]:
            handle = self._store.create()
            self._store.ingredients.insert(handle, _dict_to_ingredient(raw))
            inv.items.append(handle)
            self._store.holders.insert(handle, cauldron)
        self._store.inventories.insert(cauldron, inv)

        if state.get("potion") is not None:
            self._store.potions.insert(cauldron, _dict_to_potion(state["potion"]))

        logger.info("Loaded slot %s into cauldron %s", slot, cauldron.token())
        return cauldron

    def list_slots(self) -> list[str]:
        rows = self._db.query(CauldronSnapshotModel.slot).order_by(
            CauldronSnapshotModel.slot
        )
        return [r.slot for r in rows]

    def delete_slot(self, slot: str) -> bool:
        orm = self._db.get(CauldronSnapshotModel, slot)
        if orm is None:
            return False
        self._db.delete(orm)
        self._db.commit()
        return True
