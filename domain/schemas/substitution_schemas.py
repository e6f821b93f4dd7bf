from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SubstitutionRequest(BaseModel):
    """The food to replace, with macro totals for the given quantity"""

    food_name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = "g"
    calories: float = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fats: float = Field(..., ge=0)
    limit: Optional[int] = Field(None, ge=1, le=100)


class FoodSubstitution(BaseModel):
    food_name: str
    category: Optional[str] = None
    calories_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fats_per_100g: float
    similarity_score: float = Field(..., ge=0, le=100)
    quantity_adjustment: float = Field(
        ..., description="Grams of the candidate delivering the original calories"
    )


class SubstituteFoodRequest(BaseModel):
    new_food_name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = "g"


class FoodCatalogEntryResponse(BaseModel):
    food_id: UUID
    name: str
    category: Optional[str] = None
    calories_per_100g: Optional[float] = None
    protein_per_100g: Optional[float] = None
    carbs_per_100g: Optional[float] = None
    fats_per_100g: Optional[float] = None
    fiber_per_100g: Optional[float] = None
    sodium_per_100g: Optional[float] = None

    model_config = {"from_attributes": True}
