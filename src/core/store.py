"""엔티티/컴포넌트 저장소 — 세대(generation) 검사 핸들 기반 arena

규칙:
- 엔티티는 (index, generation) 핸들로만 참조한다
- destroy 시 슬롯 세대가 올라가므로 옛 핸들은 자동으로 무효가 된다
- 모든 컴포넌트 조회는 세대를 검사한다 (무효 핸들 = 없음)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Iterator, List, Optional, TypeVar, TYPE_CHECKING

from src.core.logging import get_logger

if TYPE_CHECKING:
    from src.core.brewing.models import Cauldron, Ingredient, Inventory, Mortar, Potion

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Handle:
    """엔티티 핸들. 외부(API, 저장)에는 token 문자열로 노출."""

    index: int
    generation: int

    def token(self) -> str:
        return f"{self.index}:{self.generation}"

    @classmethod
    def parse(cls, token: str) -> "Handle":
        """'index:generation' → Handle. 형식 오류 시 ValueError."""
        index_str, sep, gen_str = token.partition(":")
        if not sep:
            raise ValueError(f"Malformed handle token: {token!r}")
        return cls(index=int(index_str), generation=int(gen_str))


class ComponentTable(Generic[T]):
    """컴포넌트 종류 1개의 저장 테이블"""

    def __init__(self, store: "EntityStore", name: str) -> None:
        self._store = store
        self._name = name
        self._rows: Dict[int, T] = {}

    @property
    def name(self) -> str:
        return self._name

    def insert(self, handle: Handle, component: T) -> T:
        """컴포넌트 부착. 이미 있으면 교체."""
        if not self._store.is_alive(handle):
            raise KeyError(f"Cannot attach {self._name} to dead entity {handle.token()}")
        self._rows[handle.index] = component
        return component

    def has(self, handle: Handle) -> bool:
        return self._store.is_alive(handle) and handle.index in self._rows

    def get(self, handle: Handle) -> Optional[T]:
        """없거나 무효 핸들이면 None."""
        if not self.has(handle):
            return None
        return self._rows[handle.index]

    def remove(self, handle: Handle) -> Optional[T]:
        if not self.has(handle):
            return None
        return self._rows.pop(handle.index)

    def _drop_slot(self, index: int) -> None:
        self._rows.pop(index, None)

    def __len__(self) -> int:
        return len(self._rows)


class EntityStore:
    """ECS 스타일 저장소.

    사용 패턴:
        store = EntityStore()
        h = store.create()
        store.cauldrons.insert(h, Cauldron())
        store.cauldrons.get(h)
    """

    def __init__(self) -> None:
        self._generations: List[int] = []
        self._alive: List[bool] = []
        self._free: List[int] = []

        self.cauldrons: ComponentTable["Cauldron"] = ComponentTable(self, "cauldron")
        self.ingredients: ComponentTable["Ingredient"] = ComponentTable(self, "ingredient")
        self.potions: ComponentTable["Potion"] = ComponentTable(self, "potion")
        self.inventories: ComponentTable["Inventory"] = ComponentTable(self, "inventory")
        self.mortars: ComponentTable["Mortar"] = ComponentTable(self, "mortar")
        # 재료 → 담고 있는 솥/절구. 재료 하나는 한 곳에만 담긴다
        self.holders: ComponentTable["Handle"] = ComponentTable(self, "holder")

    def _tables(self) -> Iterator[ComponentTable]:
        yield self.cauldrons
        yield self.ingredients
        yield self.potions
        yield self.inventories
        yield self.mortars
        yield self.holders

    def create(self) -> Handle:
        """새 엔티티. 해제된 슬롯을 우선 재사용."""
        if self._free:
            index = self._free.pop()
            self._alive[index] = True
        else:
            index = len(self._generations)
            self._generations.append(0)
            self._alive.append(True)
        return Handle(index=index, generation=self._generations[index])

    def is_alive(self, handle: Handle) -> bool:
        index = handle.index
        if index < 0 or index >= len(self._generations):
            return False
        return self._alive[index] and self._generations[index] == handle.generation

    def destroy(self, handle: Handle) -> bool:
        """모든 컴포넌트 제거 + 세대 증가. 무효 핸들이면 False."""
        if not self.is_alive(handle):
            logger.debug("destroy ignored for stale handle %s", handle.token())
            return False
        for table in self._tables():
            table._drop_slot(handle.index)
        self._generations[handle.index] += 1
        self._alive[handle.index] = False
        self._free.append(handle.index)
        return True

    @property
    def entity_count(self) -> int:
        """살아있는 엔티티 수"""
        return sum(1 for alive in self._alive if alive)
