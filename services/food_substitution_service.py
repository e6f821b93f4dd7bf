from __future__ import annotations

import logging
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.models import DietFood
from domain.models.food import FoodCatalogEntry
from domain.schemas.plan_schemas import FoodItem
from domain.schemas.substitution_schemas import FoodSubstitution, SubstitutionRequest
from repositories import DietPlanRepository
from repositories.food_catalog_repository import FoodCatalog
from services.diet_plan_service import recalculate_meal_snapshot
from services.numeric import as_number
from services.nutritional_analysis_service import food_macro_snapshot
from services.unit_converter import grams

logger = logging.getLogger("dietplan.substitution")

CALORIES_WEIGHT = 0.4
PROTEIN_WEIGHT = 0.25
CARBS_WEIGHT = 0.2
FATS_WEIGHT = 0.15

# Floor of the relative-difference denominator; two zero values compare as identical.
MIN_DENOMINATOR = 1

OriginalFood = Union[SubstitutionRequest, FoodItem]


def _relative_difference(a: float, b: float) -> float:
    return abs(a - b) / max(a, b, MIN_DENOMINATOR)


class FoodSubstitutionService:
    @staticmethod
    def per_100g(original: OriginalFood) -> dict:
        """
        Scale the original's macro totals to a 100 g basis.

        Raises:
            ServiceValidationError: if the quantity converts to zero or negative grams
        """
        original_grams = grams(original.quantity, original.unit)
        if original_grams <= 0:
            raise ServiceValidationError(
                f"Cannot compare '{original.food_name}': quantity must convert to a positive gram amount",
                details={"quantity": original.quantity, "unit": original.unit},
            )
        return {
            "calories": as_number(original.calories) * 100 / original_grams,
            "protein": as_number(original.protein) * 100 / original_grams,
            "carbs": as_number(original.carbs) * 100 / original_grams,
            "fats": as_number(original.fats) * 100 / original_grams,
        }

    @staticmethod
    def calculate_similarity(profile: dict, candidate: FoodCatalogEntry) -> float:
        """Weighted macro distance turned into a 0-100 score"""
        distance = (
            _relative_difference(profile["calories"], candidate.calories_per_100g or 0) * CALORIES_WEIGHT
            + _relative_difference(profile["protein"], candidate.protein_per_100g or 0) * PROTEIN_WEIGHT
            + _relative_difference(profile["carbs"], candidate.carbs_per_100g or 0) * CARBS_WEIGHT
            + _relative_difference(profile["fats"], candidate.fats_per_100g or 0) * FATS_WEIGHT
        )
        return max(0.0, min(100.0, (1 - distance) * 100))

    @staticmethod
    def calculate_quantity_adjustment(
        original_grams: float, original_kcal_per_100g: float, candidate: FoodCatalogEntry
    ) -> float:
        """
        Grams of the candidate that deliver the original calories.

        A candidate without calories keeps the original gram quantity.
        """
        candidate_kcal = candidate.calories_per_100g or 0
        if candidate_kcal <= 0:
            return original_grams
        return original_grams * original_kcal_per_100g / candidate_kcal

    @staticmethod
    def find_substitutions(
        original: OriginalFood,
        catalog: FoodCatalog,
        limit: Optional[int] = None,
    ) -> List[FoodSubstitution]:
        """
        Rank every other active catalog food by macro similarity to `original`.

        Args:
            original: food to replace, with macro totals for its quantity
            catalog: lookup providing the candidates
            limit: how many results to return (default from settings)

        Returns:
            Up to `limit` substitutions, best first. Equal scores keep catalog order.
        """
        if limit is None:
            limit = settings.default_substitution_limit

        profile = FoodSubstitutionService.per_100g(original)
        original_grams = grams(original.quantity, original.unit)

        scored = []
        for candidate in catalog.find_similar(original.food_name):
            score = FoodSubstitutionService.calculate_similarity(profile, candidate)
            adjustment = FoodSubstitutionService.calculate_quantity_adjustment(
                original_grams, profile["calories"], candidate
            )
            scored.append((score, adjustment, candidate))

        scored.sort(key=lambda item: item[0], reverse=True)

        logger.debug(
            "Scored %d candidates for '%s'", len(scored), original.food_name
        )
        return [
            FoodSubstitution(
                food_name=candidate.name,
                category=candidate.category,
                calories_per_100g=candidate.calories_per_100g or 0,
                protein_per_100g=candidate.protein_per_100g or 0,
                carbs_per_100g=candidate.carbs_per_100g or 0,
                fats_per_100g=candidate.fats_per_100g or 0,
                similarity_score=score,
                quantity_adjustment=adjustment,
            )
            for score, adjustment, candidate in scored[:limit]
        ]

    @staticmethod
    def substitute_food(
        db: Session,
        food_id: UUID,
        new_food_name: str,
        quantity: float,
        unit: str,
        catalog: FoodCatalog,
    ) -> DietFood:
        """
        Replace one live food with a catalog food and refresh the snapshots.

        The food line gets the catalog macros for the new quantity and the owning
        meal is re-summed. Both writes are committed together.

        Raises:
            NotFoundError: unknown food id, or no active catalog entry named `new_food_name`
        """
        plan_repo = DietPlanRepository(db)

        food = plan_repo.get_food(food_id)
        if not food:
            raise NotFoundError(f"Food not found: {food_id}", details={"food_id": str(food_id)})

        entry = catalog.get_by_name(new_food_name)
        if not entry:
            raise NotFoundError(
                f"Catalog food not found: {new_food_name}",
                details={"food_name": new_food_name},
            )

        try:
            previous = food.food_name
            food.food_name = entry.name
            food.quantity = quantity
            food.unit = unit
            for field, value in food_macro_snapshot(entry, quantity, unit).items():
                setattr(food, field, value)

            meal = plan_repo.get_meal(food.meal_id)
            recalculate_meal_snapshot(meal)

            db.commit()
            db.refresh(food)
        except Exception:
            db.rollback()
            logger.exception("Error substituting food %s", food_id)
            raise

        logger.info(f"Substituted '{previous}' with '{entry.name}' on food {food_id}")
        return food
