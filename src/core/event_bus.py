"""EventBus - 서비스/모듈 간 동기 이벤트 통신

규칙:
- 서비스/모듈은 다른 서비스/모듈을 직접 import하지 않는다
- 이벤트는 식별자(핸들 token)와 작은 값만 전달한다
- 한 연쇄(cascade)의 전파 깊이는 최대 MAX_DEPTH 단계
- 한 연쇄 안에서 동일 source의 동일 이벤트 재발행 금지
- 연쇄는 최상위 emit 호출에서 시작한다. 같은 틱에 같은 행동을 여러 번
  기록해도 각각 독립된 연쇄다
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Set

from src.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5  # 한 연쇄 내 이벤트 전파 최대 깊이


@dataclass
class GameEvent:
    """이벤트 데이터 컨테이너

    Args:
        event_type: 이벤트 유형 (예: "potion_bottled")
        data: 이벤트 데이터 (핸들 token 위주, 컴포넌트 객체 금지)
        source: 발행한 모듈/서비스 이름
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    # 내부 추적용 (외부에서 설정하지 않음)
    _depth: int = field(default=0, repr=False)


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """동기식 이벤트 버스

    사용 패턴:
        bus = EventBus()
        bus.subscribe("potion_bottled", shelf.handle_bottled)
        bus.emit(GameEvent(event_type="potion_bottled", data={"cauldron": "0:0"}, source="brewing"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._current_depth: int = 0
        self._emitted_in_chain: Set[str] = set()  # "source:event_type"

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("EventBus subscribe: %s -> %s", event_type, handler.__qualname__)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            logger.warning(
                "EventBus handler not registered: %s -> %s",
                event_type,
                handler.__qualname__,
            )

    def emit(self, event: GameEvent) -> None:
        """이벤트 발행. 등록된 핸들러를 순서대로 동기 호출.

        핸들러 예외는 로그만 남기고 다음 핸들러로 진행한다.
        """
        if self._current_depth == 0:
            # 최상위 발행 = 새 연쇄
            self._emitted_in_chain.clear()

        if self._current_depth >= MAX_DEPTH:
            logger.warning(
                "EventBus depth limit (%d): %s:%s dropped",
                MAX_DEPTH,
                event.source,
                event.event_type,
            )
            return

        chain_key = f"{event.source}:{event.event_type}"
        if chain_key in self._emitted_in_chain:
            logger.warning("EventBus duplicate in chain dropped: %s", chain_key)
            return
        self._emitted_in_chain.add(chain_key)
        event._depth = self._current_depth

        handlers = list(self._handlers.get(event.event_type, []))
        if not handlers:
            return

        self._current_depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "EventBus handler error: %s (event=%s)",
                        handler.__qualname__,
                        event.event_type,
                    )
        finally:
            self._current_depth -= 1

    def reset_chain(self) -> None:
        """틱 종료 시 호출. 연쇄 추적 초기화."""
        self._emitted_in_chain.clear()
        self._current_depth = 0

    def clear(self) -> None:
        """모든 구독 해제 (테스트용)"""
        self._handlers.clear()
        self.reset_chain()

    @property
    def handler_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())
