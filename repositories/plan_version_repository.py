"""
Plan Version Repository - Data access layer for immutable plan snapshots
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from domain.models import DietPlan, PlanVersion, PlanVersionMeal, PlanVersionFood
from repositories.base import BaseRepository


class PlanVersionRepository(BaseRepository[PlanVersion]):
    """Repository for plan version data access. Versions are only ever inserted."""

    def __init__(self, db: Session):
        super().__init__(db, PlanVersion)

    def get_by_id(self, version_id: UUID) -> Optional[PlanVersion]:
        """Get version by ID"""
        return (
            self.db.query(PlanVersion)
            .filter(PlanVersion.version_id == version_id)
            .first()
        )

    def list_by_plan(self, plan_id: UUID) -> List[PlanVersion]:
        """All versions of a plan, newest first"""
        return (
            self.db.query(PlanVersion)
            .filter(PlanVersion.plan_id == plan_id)
            .order_by(PlanVersion.version_number.desc())
            .all()
        )

    def max_version_number(self, plan_id: UUID) -> int:
        """Highest allocated version number for a plan, 0 if none"""
        value = (
            self.db.query(func.max(PlanVersion.version_number))
            .filter(PlanVersion.plan_id == plan_id)
            .scalar()
        )
        return int(value or 0)

    def count_by_plan(self, plan_id: UUID) -> int:
        return (
            self.db.query(func.count(PlanVersion.version_id))
            .filter(PlanVersion.plan_id == plan_id)
            .scalar()
        )

    def add_snapshot(
        self,
        plan: DietPlan,
        version_number: int,
        name: str,
        created_by: Optional[str] = None,
    ) -> PlanVersion:
        """
        Stage a deep copy of the plan's current totals, meals and foods.
        Does not commit; the caller owns the transaction.
        """
        version = PlanVersion(
            plan_id=plan.plan_id,
            version_number=version_number,
            name=name,
            total_calories=plan.total_calories,
            total_protein=plan.total_protein,
            total_carbs=plan.total_carbs,
            total_fats=plan.total_fats,
            notes=plan.notes,
            created_by=created_by,
            meals=[
                PlanVersionMeal(
                    meal_type=meal.meal_type,
                    meal_name=meal.meal_name,
                    meal_order=meal.meal_order,
                    suggested_time=meal.suggested_time,
                    calories=meal.calories,
                    protein=meal.protein,
                    carbs=meal.carbs,
                    fats=meal.fats,
                    instructions=meal.instructions,
                    foods=[
                        PlanVersionFood(
                            food_name=food.food_name,
                            quantity=food.quantity,
                            unit=food.unit,
                            calories=food.calories,
                            protein=food.protein,
                            carbs=food.carbs,
                            fats=food.fats,
                            notes=food.notes,
                            food_order=food.food_order,
                        )
                        for food in meal.foods
                    ],
                )
                for meal in plan.meals
            ],
        )
        return self.add(version)
