"""양조 수치 상수 묶음.

Core는 설정 모듈을 import하지 않는다. Service가 Settings.brew_tuning()으로
만든 인스턴스를 명시적으로 넘긴다.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BrewTuning:
    # 품질 공식
    difficulty: float = 1.0  # 1.0 = 중립, 클수록 실수에 가혹
    min_potency_fraction: float = 0.25
    min_duration_fraction: float = 0.25

    # 같은 종류 행동 간 값 차이 페널티
    ingredient_type_penalty: float = 1.0
    ingredient_amount_penalty: float = 0.1
    ingredient_fineness_penalty: float = 0.5
    wait_penalty: float = 0.2
    heat_penalty: float = 0.01
    stir_penalty: float = 0.1

    # 시간 (ms)
    color_fade_ms: int = 1000
    wait_unit_ms: int = 1000
    idle_action_threshold_ms: int = 1000
    stir_flash_ms: int = 300

    # 손질
    fineness_step: float = 0.25
    refined_footprint_scale: float = 1.5
