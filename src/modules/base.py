"""모듈 기반 인터페이스"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class GameContext:
    """매 틱 모듈에 전달되는 시뮬레이션 컨텍스트"""

    tick: int
    elapsed_ms: int

    # 모듈이 추가 데이터를 넣을 수 있는 확장 슬롯
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """모듈이 UI에 제공하는 조작"""

    name: str  # 조작 식별자 (예: "stir", "bottle")
    display_name: str  # 표시 이름 (예: "Stir")
    module_name: str  # 제공한 모듈 이름
    description: str = ""
    params: Dict[str, Any] = field(default_factory=dict)  # 필요한 파라미터


class GameModule(ABC):
    """모든 시뮬레이션 모듈의 기반 인터페이스

    규칙:
    - 모듈은 다른 모듈을 직접 import하지 않는다
    - 모듈 간 통신은 EventBus를 경유한다
    - Module → Service, Module → Core는 허용
    - 한 틱 안에서 on_tick은 동기 실행, 다음 모듈 호출 전에 끝난다
    """

    _enabled: bool

    def __init__(self) -> None:
        self._enabled = False

    @property
    @abstractmethod
    def name(self) -> str:
        """모듈 고유 이름 (예: 'brewing')"""
        ...

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @abstractmethod
    def on_enable(self) -> None:
        """모듈 활성화 시 초기화 작업"""
        ...

    @abstractmethod
    def on_disable(self) -> None:
        """모듈 비활성화 시 정리 작업"""
        ...

    @abstractmethod
    def on_tick(self, context: GameContext) -> None:
        """매 프레임 호출. context.elapsed_ms 만큼 시간 진행."""
        ...

    @abstractmethod
    def get_available_actions(self, context: GameContext) -> List[Action]:
        """현재 상황에서 이 모듈이 제공하는 조작 목록 반환."""
        ...
