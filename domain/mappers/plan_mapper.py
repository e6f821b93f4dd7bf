"""
Plan domain mappers.
Single place where stored rows become the optional-field records the engines read.
"""

from typing import Iterable, List

from domain.models import DietPlan, DietMeal, PlanVersion
from domain.schemas.plan_schemas import FoodItem, Meal, Plan
from domain.schemas.version_schemas import PlanVersionResponse


class PlanMapper:
    """Mapper for plan and version snapshot transformations."""

    @staticmethod
    def to_food_items(foods: Iterable) -> List[FoodItem]:
        """Works for both DietFood and PlanVersionFood rows."""
        ordered = sorted(foods, key=lambda f: f.food_order or 0)
        return [
            FoodItem(
                food_id=getattr(f, "food_id", None),
                food_name=f.food_name,
                quantity=f.quantity,
                unit=f.unit,
                calories=f.calories,
                protein=f.protein,
                carbs=f.carbs,
                fats=f.fats,
                order=f.food_order or 0,
                notes=f.notes,
            )
            for f in ordered
        ]

    @staticmethod
    def to_meals(meals: Iterable) -> List[Meal]:
        """Works for both DietMeal and PlanVersionMeal rows."""
        ordered = sorted(meals, key=lambda m: m.meal_order or 0)
        return [
            Meal(
                meal_id=m.meal_id if isinstance(m, DietMeal) else None,
                meal_type=m.meal_type,
                meal_name=m.meal_name,
                order=m.meal_order or 0,
                suggested_time=m.suggested_time,
                calories=m.calories,
                protein=m.protein,
                carbs=m.carbs,
                fats=m.fats,
                instructions=m.instructions,
                foods=PlanMapper.to_food_items(m.foods),
            )
            for m in ordered
        ]

    @staticmethod
    def to_plan(plan: DietPlan) -> Plan:
        """
        Convert DietPlan ORM model to the Plan record.

        Args:
            plan: DietPlan ORM instance with meals and foods loaded

        Returns:
            Plan with meals and foods ordered by their `order` values
        """
        return Plan(
            plan_id=plan.plan_id,
            name=plan.name,
            total_calories=plan.total_calories,
            total_protein=plan.total_protein,
            total_carbs=plan.total_carbs,
            total_fats=plan.total_fats,
            notes=plan.notes,
            meals=PlanMapper.to_meals(plan.meals),
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )

    @staticmethod
    def to_version_response(version: PlanVersion) -> PlanVersionResponse:
        return PlanVersionResponse(
            version_id=version.version_id,
            plan_id=version.plan_id,
            version_number=version.version_number,
            name=version.name,
            total_calories=version.total_calories,
            total_protein=version.total_protein,
            total_carbs=version.total_carbs,
            total_fats=version.total_fats,
            notes=version.notes,
            created_by=version.created_by,
            created_at=version.created_at,
            meals=PlanMapper.to_meals(version.meals),
        )
