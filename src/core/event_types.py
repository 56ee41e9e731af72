"""이벤트 유형 상수

payload에는 핸들 token과 작은 스칼라 값만 담는다.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # cauldron
    CAULDRON_FILLED = "cauldron_filled"
    ACTION_RECORDED = "action_recorded"
    POTION_UPDATED = "potion_updated"
    POTION_BOTTLED = "potion_bottled"

    # ingredient
    INGREDIENT_REFINED = "ingredient_refined"

    # engine
    TICK_PROCESSED = "tick_processed"
