from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.enums import MealType


class MealContext(BaseModel):
    """The meal being filled in: its type, optional macro targets and what to avoid"""

    meal_type: MealType
    target_calories: Optional[float] = Field(None, ge=0)
    target_protein: Optional[float] = Field(None, ge=0)
    target_carbs: Optional[float] = Field(None, ge=0)
    target_fats: Optional[float] = Field(None, ge=0)
    existing_foods: List[str] = Field(
        default_factory=list, description="Foods already in the meal; never suggested"
    )
    restrictions: List[str] = Field(
        default_factory=list, description="Words matched against food name and category"
    )


class SuggestionRequest(MealContext):
    limit: Optional[int] = Field(None, ge=1, le=100)


class FoodSuggestion(BaseModel):
    food_name: str
    category: Optional[str] = None
    calories_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fats_per_100g: float
    match_score: float = Field(..., ge=0, le=100)
    reason: str


class FoodUsageRequest(BaseModel):
    food_name: str = Field(..., min_length=1)
    meal_type: MealType


class FoodUsageResponse(BaseModel):
    food_name: str
    meal_type: str
    usage_count: int
    last_used_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FavoriteFoodRequest(BaseModel):
    food_name: str = Field(..., min_length=1)


class FavoriteFoodResponse(BaseModel):
    food_name: str
    usage_count: int
    last_used_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
