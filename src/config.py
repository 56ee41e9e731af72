"""Application configuration loaded from environment variables and .env file."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.brewing.recipes import DEFAULT_RECIPES_PATH
from src.core.brewing.tuning import BrewTuning


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DATABASE_URL: str = "sqlite:///./dev.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    RECIPES_PATH: str = str(DEFAULT_RECIPES_PATH)

    # 품질 공식
    BREW_DIFFICULTY: float = 1.0
    MIN_POTENCY_FRACTION: float = 0.25
    MIN_DURATION_FRACTION: float = 0.25

    # 채점 페널티 가중치
    INGREDIENT_TYPE_PENALTY: float = 1.0
    INGREDIENT_AMOUNT_PENALTY: float = 0.1
    INGREDIENT_FINENESS_PENALTY: float = 0.5
    WAIT_PENALTY: float = 0.2
    HEAT_PENALTY: float = 0.01
    STIR_PENALTY: float = 0.1

    # 시간 (ms)
    COLOR_FADE_MS: int = 1000
    WAIT_UNIT_MS: int = 1000
    IDLE_ACTION_THRESHOLD_MS: int = 1000
    STIR_FLASH_MS: int = 300

    # 손질
    FINENESS_STEP: float = 0.25
    REFINED_FOOTPRINT_SCALE: float = 1.5

    def brew_tuning(self) -> BrewTuning:
        """Core에 넘길 불변 상수 묶음"""
        return BrewTuning(
            difficulty=self.BREW_DIFFICULTY,
            min_potency_fraction=self.MIN_POTENCY_FRACTION,
            min_duration_fraction=self.MIN_DURATION_FRACTION,
            ingredient_type_penalty=self.INGREDIENT_TYPE_PENALTY,
            ingredient_amount_penalty=self.INGREDIENT_AMOUNT_PENALTY,
            ingredient_fineness_penalty=self.INGREDIENT_FINENESS_PENALTY,
            wait_penalty=self.WAIT_PENALTY,
            heat_penalty=self.HEAT_PENALTY,
            stir_penalty=self.STIR_PENALTY,
            color_fade_ms=self.COLOR_FADE_MS,
            wait_unit_ms=self.WAIT_UNIT_MS,
            idle_action_threshold_ms=self.IDLE_ACTION_THRESHOLD_MS,
            stir_flash_ms=self.STIR_FLASH_MS,
            fineness_step=self.FINENESS_STEP,
            refined_footprint_scale=self.REFINED_FOOTPRINT_SCALE,
        )


settings = Settings()
