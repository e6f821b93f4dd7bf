"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.food import FoodCatalogEntry
from domain.models.food_preference import UserFavoriteFood, FoodUsageStat
from domain.models.diet_plan import (
    DietPlan,
    DietMeal,
    DietFood,
    PlanVersion,
    PlanVersionMeal,
    PlanVersionFood,
)

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Catalog
    "FoodCatalogEntry",
    # Preferences
    "UserFavoriteFood",
    "FoodUsageStat",
    # Live plan
    "DietPlan",
    "DietMeal",
    "DietFood",
    # Version snapshots
    "PlanVersion",
    "PlanVersionMeal",
    "PlanVersionFood",
]
