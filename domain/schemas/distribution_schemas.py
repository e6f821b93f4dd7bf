from typing import List, Optional

from pydantic import BaseModel, Field

from domain.enums import DistributionStrategy, MealType


class MacroDistribution(BaseModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0


class PartialMacros(BaseModel):
    """Manual override for one meal target; unset fields are left alone"""

    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None


class MealMacroTarget(BaseModel):
    meal_type: str
    meal_name: str
    target: MacroDistribution


class DistributionValidation(BaseModel):
    valid: bool
    differences: MacroDistribution = Field(
        ..., description="Signed totals minus distribution sums"
    )


class DistributionRequest(BaseModel):
    totals: MacroDistribution
    meal_types: List[MealType]
    strategy: DistributionStrategy = DistributionStrategy.BALANCED


class NormalizeDistributionRequest(BaseModel):
    distribution: List[MealMacroTarget]
    totals: MacroDistribution


class ValidateDistributionRequest(BaseModel):
    distribution: List[MealMacroTarget]
    totals: MacroDistribution
    tolerance: float = Field(50, ge=0, description="Calorie tolerance")


class AdjustDistributionRequest(BaseModel):
    distribution: List[MealMacroTarget]
    meal_index: int = Field(..., ge=0)
    macros: PartialMacros
