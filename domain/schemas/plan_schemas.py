from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import MealType


class FoodItem(BaseModel):
    """A food line as seen by the engines.

    The macro snapshot is optional; when all four values are present it is
    authoritative for aggregation, otherwise the catalog is consulted.
    """

    food_id: Optional[UUID] = None
    food_name: str
    quantity: float
    unit: str = "g"
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None
    order: int = 0
    notes: Optional[str] = None

    model_config = {"from_attributes": True}

    @property
    def has_macro_snapshot(self) -> bool:
        return None not in (self.calories, self.protein, self.carbs, self.fats)


class Meal(BaseModel):
    """A meal as seen by the engines"""

    meal_id: Optional[UUID] = None
    meal_type: str
    meal_name: str
    order: int = 0
    suggested_time: Optional[str] = None
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None
    instructions: Optional[str] = None
    foods: List[FoodItem] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @property
    def has_macro_snapshot(self) -> bool:
        return any((self.calories, self.protein, self.carbs, self.fats))


class Plan(BaseModel):
    """Root aggregate consumed by analysis, validation and adjustment"""

    plan_id: Optional[UUID] = None
    name: Optional[str] = None
    total_calories: Optional[float] = None
    total_protein: Optional[float] = None
    total_carbs: Optional[float] = None
    total_fats: Optional[float] = None
    notes: Optional[str] = None
    meals: List[Meal] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    def has_declared_totals(self) -> bool:
        return any(
            v is not None
            for v in (
                self.total_calories,
                self.total_protein,
                self.total_carbs,
                self.total_fats,
            )
        )


# =============================================================================
# Write requests
# =============================================================================


class FoodItemCreate(BaseModel):
    food_name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0, description="Amount expressed in `unit`")
    unit: str = Field(default="g", description="Free-form unit, e.g. 'g', 'colher de sopa'")
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)
    order: Optional[int] = Field(None, description="Defaults to the position in the request")
    notes: Optional[str] = None


class MealCreate(BaseModel):
    meal_type: MealType
    meal_name: str = Field(..., min_length=1)
    order: Optional[int] = Field(None, description="Defaults to the position in the request")
    suggested_time: Optional[str] = None
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)
    instructions: Optional[str] = None
    foods: List[FoodItemCreate] = Field(default_factory=list)


class PlanCreate(BaseModel):
    name: Optional[str] = None
    total_calories: Optional[float] = Field(None, ge=0)
    total_protein: Optional[float] = Field(None, ge=0)
    total_carbs: Optional[float] = Field(None, ge=0)
    total_fats: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    meals: List[MealCreate] = Field(default_factory=list)


class PlanUpdate(PlanCreate):
    """Full replacement of totals, notes and meals"""


# =============================================================================
# Proportional adjustment
# =============================================================================


class ProportionalAdjustment(BaseModel):
    percentage: float = Field(..., gt=-100, description="+20 scales up by 20%, -10 scales down by 10%")
    adjust_calories: bool = True
    adjust_protein: bool = True
    adjust_carbs: bool = True
    adjust_fats: bool = True
    maintain_ratios: bool = False


class AdjustCaloriesRequest(BaseModel):
    target_calories: float = Field(..., gt=0)
