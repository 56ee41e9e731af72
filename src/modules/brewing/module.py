"""BrewingModule — GameModule 인터페이스

매 틱 추적 중인 솥을 진행시키고 양조 조작 목록을 제공한다.
저장소를 순회하지 않고 등록된 핸들만 다룬다.
"""

import logging
from typing import List

from src.core.store import Handle
from src.modules.base import Action, GameContext, GameModule
from src.services.brewing_service import BrewingService

logger = logging.getLogger(__name__)


class BrewingModule(GameModule):
    """양조 모듈

    담당:
    - 추적 중인 솥마다 BrewingService.advance 호출 (유휴 WAIT 기록, 색 보간)
    - 양조 관련 조작 제공 (heat, stir, add_ingredient, bottle, grind)
    """

    def __init__(self, brewing_service: BrewingService) -> None:
        super().__init__()
        self._service = brewing_service
        self._cauldrons: list[Handle] = []
        self._mortars: list[Handle] = []

    @property
    def name(self) -> str:
        return "brewing"

    @property
    def cauldrons(self) -> list[Handle]:
        return list(self._cauldrons)

    def track_cauldron(self, cauldron: Handle) -> None:
        if cauldron not in self._cauldrons:
            self._cauldrons.append(cauldron)

    def untrack_cauldron(self, cauldron: Handle) -> None:
        if cauldron in self._cauldrons:
            self._cauldrons.remove(cauldron)

    def track_mortar(self, mortar: Handle) -> None:
        if mortar not in self._mortars:
            self._mortars.append(mortar)

    def on_enable(self) -> None:
        pass

    def on_disable(self) -> None:
        pass

    def on_tick(self, context: GameContext) -> None:
        """틱 처리: 솥 시간 진행. 제거된 솥 핸들은 추적에서 뺀다."""
        store = self._service.store
        alive: list[Handle] = []
        for cauldron in self._cauldrons:
            if not store.cauldrons.has(cauldron):
                logger.debug("Dropping stale cauldron %s", cauldron.token())
                continue
            self._service.advance(cauldron, context.elapsed_ms)
            alive.append(cauldron)
        self._cauldrons = alive

    def get_available_actions(self, context: GameContext) -> List[Action]:
        """양조 관련 조작 반환. 솥/절구가 없으면 해당 조작도 없다."""
        actions: List[Action] = []
        if self._cauldrons:
            actions.extend(
                [
                    Action(
                        name="heat",
                        display_name="Turn Heat Dial",
                        module_name="brewing",
                        description="화력 조절 (0~100)",
                        params={"cauldron_id": "str", "value": "int"},
                    ),
                    Action(
                        name="stir",
                        display_name="Stir",
                        module_name="brewing",
                        description="국자로 젓기",
                        params={"cauldron_id": "str", "count": "int"},
                    ),
                    Action(
                        name="add_ingredient",
                        display_name="Add Ingredient",
                        module_name="brewing",
                        description="재료 투입",
                        params={"cauldron_id": "str", "ingredient_id": "str"},
                    ),
                    Action(
                        name="bottle",
                        display_name="Bottle",
                        module_name="brewing",
                        description="병입 후 솥 비우기",
                        params={"cauldron_id": "str"},
                    ),
                ]
            )
        if self._mortars:
            actions.append(
                Action(
                    name="grind",
                    display_name="Grind",
                    module_name="brewing",
                    description="절구의 첫 재료 갈기",
                    params={"mortar_id": "str"},
                )
            )
        return actions
