"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.food_catalog_repository import FoodCatalog, FoodCatalogRepository
from repositories.diet_plan_repository import DietPlanRepository
from repositories.plan_version_repository import PlanVersionRepository
from repositories.food_preference_repository import FavoriteFoodRepository, FoodUsageRepository

__all__ = [
    "BaseRepository",
    "FoodCatalog",
    "FoodCatalogRepository",
    "DietPlanRepository",
    "PlanVersionRepository",
    "FavoriteFoodRepository",
    "FoodUsageRepository",
]
