"""Services package - Business logic layer"""

from services.nutritional_analysis_service import NutritionalAnalysisService
from services.macro_distribution_service import MacroDistributionService
from services.food_substitution_service import FoodSubstitutionService
from services.plan_validation_service import PlanValidationService
from services.version_history_service import VersionHistoryService
from services.proportional_adjustment_service import ProportionalAdjustmentService
from services.diet_plan_service import DietPlanService

# Note: unit_converter and numeric contain plain functions, not classes

__all__ = [
    "NutritionalAnalysisService",
    "MacroDistributionService",
    "FoodSubstitutionService",
    "PlanValidationService",
    "VersionHistoryService",
    "ProportionalAdjustmentService",
    "DietPlanService",
]
