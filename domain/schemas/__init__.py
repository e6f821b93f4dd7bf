"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.plan_schemas import (
    FoodItem,
    Meal,
    Plan,
    FoodItemCreate,
    MealCreate,
    PlanCreate,
    PlanUpdate,
    ProportionalAdjustment,
    AdjustCaloriesRequest,
)
from domain.schemas.analysis_schemas import NutritionalAnalysisReport
from domain.schemas.distribution_schemas import (
    MacroDistribution,
    PartialMacros,
    MealMacroTarget,
    DistributionValidation,
    DistributionRequest,
    NormalizeDistributionRequest,
    ValidateDistributionRequest,
    AdjustDistributionRequest,
)
from domain.schemas.substitution_schemas import (
    SubstitutionRequest,
    FoodSubstitution,
    SubstituteFoodRequest,
    FoodCatalogEntryResponse,
)
from domain.schemas.suggestion_schemas import (
    MealContext,
    SuggestionRequest,
    FoodSuggestion,
    FoodUsageRequest,
    FoodUsageResponse,
    FavoriteFoodRequest,
    FavoriteFoodResponse,
)
from domain.schemas.validation_schemas import (
    ValidationWarning,
    ValidationErrorItem,
    ValidationResult,
)
from domain.schemas.version_schemas import (
    CreateVersionRequest,
    PlanVersionResponse,
    RestoreVersionResponse,
)

__all__ = [
    # Plan records
    "FoodItem",
    "Meal",
    "Plan",
    "FoodItemCreate",
    "MealCreate",
    "PlanCreate",
    "PlanUpdate",
    "ProportionalAdjustment",
    "AdjustCaloriesRequest",
    # Analysis
    "NutritionalAnalysisReport",
    # Distribution
    "MacroDistribution",
    "PartialMacros",
    "MealMacroTarget",
    "DistributionValidation",
    "DistributionRequest",
    "NormalizeDistributionRequest",
    "ValidateDistributionRequest",
    "AdjustDistributionRequest",
    # Substitution
    "SubstitutionRequest",
    "FoodSubstitution",
    "SubstituteFoodRequest",
    "FoodCatalogEntryResponse",
    # Suggestions
    "MealContext",
    "SuggestionRequest",
    "FoodSuggestion",
    "FoodUsageRequest",
    "FoodUsageResponse",
    "FavoriteFoodRequest",
    "FavoriteFoodResponse",
    # Validation
    "ValidationWarning",
    "ValidationErrorItem",
    "ValidationResult",
    # Versions
    "CreateVersionRequest",
    "PlanVersionResponse",
    "RestoreVersionResponse",
]
