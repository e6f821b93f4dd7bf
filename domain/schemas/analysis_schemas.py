from typing import List

from pydantic import BaseModel, Field


class NutritionalAnalysisReport(BaseModel):
    """Aggregated nutrition of a plan; plain data, safe to serialize"""

    total_calories: float = 0
    total_protein: float = 0
    total_carbs: float = 0
    total_fats: float = 0
    total_fiber: float = 0
    total_sodium: float = Field(0, description="Milligrams")
    protein_percentage: float = Field(0, description="Share of macro-calories, 0-100")
    carbs_percentage: float = 0
    fats_percentage: float = 0
    fiber_per_1000kcal: float = 0
    nutritional_density_score: int = Field(50, ge=0, le=100)
    recommendations: List[str] = Field(default_factory=list)
    unmatched_foods: List[str] = Field(
        default_factory=list,
        description="Names with neither a catalog match nor a macro snapshot",
    )
