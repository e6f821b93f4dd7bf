"""
Diet Plan Repository - Data access layer for live plans, meals and foods
"""

from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import DietPlan, DietMeal, DietFood
from domain.schemas.plan_schemas import Meal
from repositories.base import BaseRepository


class DietPlanRepository(BaseRepository[DietPlan]):
    """Repository for diet plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, DietPlan)

    def get_by_id(self, plan_id: UUID) -> Optional[DietPlan]:
        """Get plan by ID"""
        return (
            self.db.query(DietPlan)
            .filter(DietPlan.plan_id == plan_id)
            .first()
        )

    def get_meal(self, meal_id: UUID) -> Optional[DietMeal]:
        return self.db.query(DietMeal).filter(DietMeal.meal_id == meal_id).first()

    def get_food(self, food_id: UUID) -> Optional[DietFood]:
        return self.db.query(DietFood).filter(DietFood.food_id == food_id).first()

    def get_meals(self, plan_id: UUID) -> List[DietMeal]:
        return (
            self.db.query(DietMeal)
            .filter(DietMeal.plan_id == plan_id)
            .order_by(DietMeal.meal_order)
            .all()
        )

    def delete_meals(self, plan: DietPlan) -> int:
        """Stage deletion of every live meal (foods cascade). Does not commit."""
        count = len(plan.meals)
        for meal in list(plan.meals):
            self.db.delete(meal)
        plan.meals.clear()
        self.db.flush()
        return count

    def add_meals(self, plan: DietPlan, meals: Iterable[Meal]) -> List[DietMeal]:
        """
        Stage meals and foods built from records, preserving their order values.
        Does not commit.
        """
        created: List[DietMeal] = []
        for meal in meals:
            row = DietMeal(
                meal_type=meal.meal_type,
                meal_name=meal.meal_name,
                meal_order=meal.order,
                suggested_time=meal.suggested_time,
                calories=meal.calories,
                protein=meal.protein,
                carbs=meal.carbs,
                fats=meal.fats,
                instructions=meal.instructions,
                foods=[
                    DietFood(
                        food_name=food.food_name,
                        quantity=food.quantity,
                        unit=food.unit,
                        calories=food.calories,
                        protein=food.protein,
                        carbs=food.carbs,
                        fats=food.fats,
                        notes=food.notes,
                        food_order=food.order,
                    )
                    for food in meal.foods
                ],
            )
            plan.meals.append(row)
            created.append(row)
        self.db.flush()
        return created
