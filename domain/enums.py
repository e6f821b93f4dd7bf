"""
Domain enums for the DietPlan application.
Contains all enumeration types used across the domain models and engines.
"""

import enum


class MealType(str, enum.Enum):
    """Fixed meal vocabulary used by the distribution heuristics"""

    BREAKFAST = "breakfast"
    SNACK_1 = "snack_1"
    LUNCH = "lunch"
    SNACK_2 = "snack_2"
    DINNER = "dinner"
    PRE_WORKOUT = "pre_workout"
    POST_WORKOUT = "post_workout"


class DistributionStrategy(str, enum.Enum):
    """How daily macro targets are split across meals"""

    BALANCED = "balanced"
    PROTEIN_FOCUSED = "protein_focused"
    CARB_STRATEGIC = "carb_strategic"


class WarningSeverity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WarningType(str, enum.Enum):
    """Advisory findings; never block a save"""

    MISSING_MACRO = "missing_macro"
    MISSING_FOODS = "missing_foods"
    LOW_MEAL_COUNT = "low_meal_count"
    REPEATED_FOOD = "repeated_food"
    IMBALANCED_DISTRIBUTION = "imbalanced_distribution"


class ErrorType(str, enum.Enum):
    """Structural findings; a plan carrying any of these is not valid"""

    TOTAL_MISMATCH = "total_mismatch"
    INVALID_MACRO = "invalid_macro"
    MISSING_REQUIRED = "missing_required"
