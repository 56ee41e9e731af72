"""양조 시스템 Core — 순수 Python, DB 무관"""

from .models import (
    DEFAULT_COLOR,
    Action,
    ActionKind,
    Cauldron,
    Ingredient,
    Inventory,
    ItemType,
    Mortar,
    Potion,
    PotionEffect,
    Recipe,
    RecipeIngredient,
)
from .recipes import RecipeRegistry
from .scoring import ActionLogDesyncError, EditScore, score_actions
from .tuning import BrewTuning

__all__ = [
    "DEFAULT_COLOR",
    "Action",
    "ActionKind",
    "Cauldron",
    "Ingredient",
    "Inventory",
    "ItemType",
    "Mortar",
    "Potion",
    "PotionEffect",
    "Recipe",
    "RecipeIngredient",
    "RecipeRegistry",
    "ActionLogDesyncError",
    "EditScore",
    "score_actions",
    "BrewTuning",
]
