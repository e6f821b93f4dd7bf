from typing import List
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.models import DietMeal, DietPlan
from domain.schemas.plan_schemas import FoodItem, Meal, MealCreate, PlanCreate, PlanUpdate
from repositories import DietPlanRepository
from repositories.food_catalog_repository import FoodCatalog
from services.numeric import as_number, round_grams, round_kcal
from services.nutritional_analysis_service import food_macro_snapshot

logger = logging.getLogger("dietplan.plans")


def recalculate_meal_snapshot(meal: DietMeal) -> None:
    """Meal macros become the sum of its food snapshots"""
    meal.calories = round_kcal(sum(as_number(f.calories) for f in meal.foods))
    meal.protein = round_grams(sum(as_number(f.protein) for f in meal.foods))
    meal.carbs = round_grams(sum(as_number(f.carbs) for f in meal.foods))
    meal.fats = round_grams(sum(as_number(f.fats) for f in meal.foods))


class DietPlanService:
    @staticmethod
    def to_meal_records(meals: List[MealCreate]) -> List[Meal]:
        """
        Request meals as engine records. A meal or food without an explicit
        order takes its position in the request.
        """
        return [
            Meal(
                meal_type=m.meal_type.value,
                meal_name=m.meal_name,
                order=position if m.order is None else m.order,
                suggested_time=m.suggested_time,
                calories=m.calories,
                protein=m.protein,
                carbs=m.carbs,
                fats=m.fats,
                instructions=m.instructions,
                foods=[
                    FoodItem(
                        **f.model_dump(exclude={"order"}),
                        order=food_position if f.order is None else f.order,
                    )
                    for food_position, f in enumerate(m.foods)
                ],
            )
            for position, m in enumerate(meals)
        ]

    @staticmethod
    def create_plan(db: Session, data: PlanCreate) -> DietPlan:
        plan_repo = DietPlanRepository(db)
        try:
            plan = plan_repo.add(
                DietPlan(
                    name=data.name,
                    total_calories=data.total_calories,
                    total_protein=data.total_protein,
                    total_carbs=data.total_carbs,
                    total_fats=data.total_fats,
                    notes=data.notes,
                )
            )
            plan_repo.add_meals(plan, DietPlanService.to_meal_records(data.meals))
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error creating plan")
            raise

        logger.info(f"Created plan {plan.plan_id} with {len(data.meals)} meals")
        return plan_repo.get_by_id(plan.plan_id)

    @staticmethod
    def get_plan(db: Session, plan_id: UUID) -> DietPlan:
        plan = DietPlanRepository(db).get_by_id(plan_id)
        if not plan:
            raise NotFoundError(f"Plan not found: {plan_id}", details={"plan_id": str(plan_id)})
        return plan

    @staticmethod
    def update_plan(db: Session, plan_id: UUID, data: PlanUpdate) -> DietPlan:
        """
        Replace totals, notes and meals of a plan in one transaction.

        Stored versions are untouched.
        """
        plan_repo = DietPlanRepository(db)
        plan = DietPlanService.get_plan(db, plan_id)

        try:
            plan.name = data.name
            plan.total_calories = data.total_calories
            plan.total_protein = data.total_protein
            plan.total_carbs = data.total_carbs
            plan.total_fats = data.total_fats
            plan.notes = data.notes
            plan_repo.delete_meals(plan)
            plan_repo.add_meals(plan, DietPlanService.to_meal_records(data.meals))
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error updating plan %s", plan_id)
            raise

        logger.info(f"Updated plan {plan_id}")
        db.expire_all()
        return plan_repo.get_by_id(plan_id)

    @staticmethod
    def recalculate_macros(db: Session, plan_id: UUID, catalog: FoodCatalog) -> DietPlan:
        """
        Fill food snapshots from the catalog and re-sum every meal.

        Foods without a catalog match keep whatever snapshot they already have.
        Declared plan totals are left alone so validation can still compare them.
        """
        plan = DietPlanService.get_plan(db, plan_id)
        names = {food.food_name for meal in plan.meals for food in meal.foods}
        entries = catalog.find_by_names(names) if names else {}

        try:
            for meal in plan.meals:
                for food in meal.foods:
                    entry = entries.get(food.food_name)
                    if entry is None:
                        logger.debug(f"No catalog entry for '{food.food_name}', keeping snapshot")
                        continue
                    for field, value in food_macro_snapshot(entry, food.quantity, food.unit).items():
                        setattr(food, field, value)
                recalculate_meal_snapshot(meal)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error recalculating macros for plan %s", plan_id)
            raise

        logger.info(f"Recalculated macros for plan {plan_id} ({len(entries)} catalog matches)")
        return DietPlanRepository(db).get_by_id(plan_id)

    @staticmethod
    def delete_plan(db: Session, plan_id: UUID) -> None:
        """Delete a plan with its meals, foods and versions"""
        if not DietPlanRepository(db).delete(plan_id):
            raise NotFoundError(f"Plan not found: {plan_id}", details={"plan_id": str(plan_id)})
        logger.info(f"Deleted plan {plan_id}")
