"""모듈 관리자 - 등록, 활성화/비활성화, 틱 전파"""

from typing import Dict, List, Optional

from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes
from src.core.logging import get_logger
from src.modules.base import Action, GameContext, GameModule

logger = get_logger(__name__)


class ModuleManager:
    """모듈 토글 및 생명주기 관리. 바깥 루프 1개가 process_tick을 부른다."""

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self._modules: Dict[str, GameModule] = {}
        self._event_bus: EventBus = event_bus or EventBus()
        self._tick: int = 0

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def current_tick(self) -> int:
        return self._tick

    def register(self, module: GameModule) -> None:
        """모듈 등록. 같은 이름 중복 등록 시 경고 후 덮어쓰기."""
        if module.name in self._modules:
            logger.warning("Module overwritten: %s", module.name)
        self._modules[module.name] = module
        logger.info("Module registered: %s", module.name)

    def enable(self, name: str) -> bool:
        """모듈 활성화. 등록되지 않은 이름이면 False."""
        module = self._modules.get(name)
        if not module:
            logger.error("Module not registered: %s", name)
            return False

        if not module.enabled:
            module.on_enable()
            module.enabled = True
            logger.info("Module enabled: %s", name)
        return True

    def disable(self, name: str) -> bool:
        module = self._modules.get(name)
        if not module:
            logger.error("Module not registered: %s", name)
            return False

        if module.enabled:
            module.on_disable()
            module.enabled = False
            logger.info("Module disabled: %s", name)
        return True

    def process_tick(self, elapsed_ms: int) -> GameContext:
        """활성 모듈의 on_tick 순차 호출 + 틱 종료 시 이벤트 체인 초기화"""
        self._tick += 1
        context = GameContext(tick=self._tick, elapsed_ms=elapsed_ms)
        for module in self._modules.values():
            if module.enabled:
                module.on_tick(context)

        self._event_bus.emit(
            GameEvent(
                event_type=EventTypes.TICK_PROCESSED,
                data={"tick": self._tick, "elapsed_ms": elapsed_ms},
                source="module_manager",
            )
        )
        self._event_bus.reset_chain()
        return context

    def get_all_actions(self, context: GameContext) -> List[Action]:
        """모든 활성 모듈에서 가능한 조작 수집"""
        actions: List[Action] = []
        for module in self._modules.values():
            if module.enabled:
                actions.extend(module.get_available_actions(context))
        return actions

    def is_enabled(self, name: str) -> bool:
        module = self._modules.get(name)
        return module.enabled if module else False
