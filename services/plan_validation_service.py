"""
Plan validation - classifies structural problems (errors) and advisory findings
(warnings). Never raises for plan content and never blocks anything itself.
"""

import logging
from collections import Counter
from typing import List, Optional, Tuple

from app.config import settings
from domain.enums import ErrorType, WarningSeverity, WarningType
from domain.schemas.plan_schemas import Meal, Plan
from domain.schemas.validation_schemas import (
    ValidationErrorItem,
    ValidationResult,
    ValidationWarning,
)
from services.numeric import as_number, round_grams, round_kcal

logger = logging.getLogger("dietplan.validation")

MIN_RECOMMENDED_MEALS = 3
MAX_MEAL_CALORIE_SHARE = 50
MIN_MEAL_CALORIE_SHARE = 5

MACRO_LABELS = {
    "calories": "Calories",
    "protein": "Protein",
    "carbs": "Carbohydrates",
    "fats": "Fats",
}

Findings = Tuple[List[ValidationWarning], List[ValidationErrorItem]]


def _fmt(value: float) -> str:
    return f"{value:g}"


class PlanValidationService:
    @staticmethod
    def sum_meals(meals: List[Meal]) -> dict:
        """Summed meal snapshots; missing values count as zero"""
        return {
            "calories": sum(as_number(m.calories) for m in meals),
            "protein": sum(as_number(m.protein) for m in meals),
            "carbs": sum(as_number(m.carbs) for m in meals),
            "fats": sum(as_number(m.fats) for m in meals),
        }

    @staticmethod
    def validate_totals(plan: Plan) -> Findings:
        """
        Declared totals against the sum of meal snapshots.

        Calories beyond the calorie tolerance are an error; the other macros
        beyond the macro tolerance are warnings. Undeclared fields are skipped.
        """
        warnings: List[ValidationWarning] = []
        errors: List[ValidationErrorItem] = []
        if not plan.meals:
            return warnings, errors

        summed = PlanValidationService.sum_meals(plan.meals)

        if plan.total_calories is not None:
            if abs(plan.total_calories - summed["calories"]) > settings.calorie_tolerance:
                errors.append(
                    ValidationErrorItem(
                        type=ErrorType.TOTAL_MISMATCH,
                        message=(
                            f"Total calories ({_fmt(plan.total_calories)}) does not match "
                            f"the sum of meals ({round_kcal(summed['calories'])})"
                        ),
                        fix=f"Set total calories to {round_kcal(summed['calories'])}",
                    )
                )

        for field in ("protein", "carbs", "fats"):
            declared = getattr(plan, f"total_{field}")
            if declared is None:
                continue
            if abs(declared - summed[field]) > settings.macro_tolerance:
                warnings.append(
                    ValidationWarning(
                        type=WarningType.IMBALANCED_DISTRIBUTION,
                        message=(
                            f"Total {MACRO_LABELS[field].lower()} ({_fmt(declared)}g) does not match "
                            f"the sum of meals ({_fmt(round_grams(summed[field]))}g)"
                        ),
                        severity=WarningSeverity.MEDIUM,
                    )
                )

        return warnings, errors

    @staticmethod
    def validate_meals(plan: Plan) -> Findings:
        warnings: List[ValidationWarning] = []
        errors: List[ValidationErrorItem] = []

        if not plan.meals:
            errors.append(
                ValidationErrorItem(
                    type=ErrorType.MISSING_REQUIRED,
                    message="Plan must have at least one meal",
                    fix="Add a meal to the plan",
                )
            )
            return warnings, errors

        if len(plan.meals) < MIN_RECOMMENDED_MEALS:
            warnings.append(
                ValidationWarning(
                    type=WarningType.LOW_MEAL_COUNT,
                    message=(
                        f"Plan has only {len(plan.meals)} meal(s). "
                        f"At least {MIN_RECOMMENDED_MEALS} meals per day are recommended"
                    ),
                    severity=WarningSeverity.MEDIUM,
                    suggestion="Consider adding meals for a better nutrient distribution",
                )
            )

        for meal in plan.meals:
            if not meal.foods:
                warnings.append(
                    ValidationWarning(
                        type=WarningType.MISSING_FOODS,
                        message=f'Meal "{meal.meal_name}" has no foods',
                        severity=WarningSeverity.HIGH,
                        suggestion="Add foods to this meal",
                    )
                )
            elif not meal.has_macro_snapshot:
                warnings.append(
                    ValidationWarning(
                        type=WarningType.MISSING_MACRO,
                        message=f'Meal "{meal.meal_name}" has no calculated macros',
                        severity=WarningSeverity.MEDIUM,
                        suggestion="Macros are calculated when the plan is recalculated",
                    )
                )

        return warnings, errors

    @staticmethod
    def validate_distribution(plan: Plan) -> List[ValidationWarning]:
        """Calorie share of each meal relative to the summed meal calories"""
        warnings: List[ValidationWarning] = []
        total = PlanValidationService.sum_meals(plan.meals)["calories"]
        if total <= 0:
            return warnings

        for meal in plan.meals:
            calories = as_number(meal.calories)
            share = calories / total * 100
            if share > MAX_MEAL_CALORIE_SHARE:
                warnings.append(
                    ValidationWarning(
                        type=WarningType.IMBALANCED_DISTRIBUTION,
                        message=f'Meal "{meal.meal_name}" holds {round_kcal(share)}% of total calories',
                        severity=WarningSeverity.MEDIUM,
                        suggestion="Consider spreading calories across meals",
                    )
                )
            elif share < MIN_MEAL_CALORIE_SHARE and calories > 0:
                warnings.append(
                    ValidationWarning(
                        type=WarningType.IMBALANCED_DISTRIBUTION,
                        message=f'Meal "{meal.meal_name}" holds only {round_kcal(share)}% of total calories',
                        severity=WarningSeverity.LOW,
                        suggestion="This meal may be too small",
                    )
                )
        return warnings

    @staticmethod
    def find_repeated_foods(plan: Plan, threshold: Optional[int] = None) -> List[str]:
        """Food names appearing more than `threshold` times, in order of first appearance"""
        if threshold is None:
            threshold = settings.repeated_food_threshold
        counts = Counter(food.food_name for meal in plan.meals for food in meal.foods)
        return [name for name, count in counts.items() if count > threshold]

    @staticmethod
    def validate_macro_signs(plan: Plan) -> List[ValidationErrorItem]:
        """One error per negative field, wherever it appears"""
        errors: List[ValidationErrorItem] = []

        def check(where: str, **values) -> None:
            for field, value in values.items():
                if value is not None and value < 0:
                    label = MACRO_LABELS.get(field, field.capitalize())
                    errors.append(
                        ValidationErrorItem(
                            type=ErrorType.INVALID_MACRO,
                            message=f"{label} cannot be negative ({where})",
                        )
                    )

        check(
            "plan totals",
            calories=plan.total_calories,
            protein=plan.total_protein,
            carbs=plan.total_carbs,
            fats=plan.total_fats,
        )
        for meal in plan.meals:
            check(
                f'meal "{meal.meal_name}"',
                calories=meal.calories,
                protein=meal.protein,
                carbs=meal.carbs,
                fats=meal.fats,
            )
            for food in meal.foods:
                check(
                    f'food "{food.food_name}" in meal "{meal.meal_name}"',
                    quantity=food.quantity,
                    calories=food.calories,
                    protein=food.protein,
                    carbs=food.carbs,
                    fats=food.fats,
                )
        return errors

    @staticmethod
    def validate_plan(plan: Plan) -> ValidationResult:
        """
        Run every rule independently and collect the findings.

        `valid` is True exactly when no errors were found; warnings never
        affect it.
        """
        warnings: List[ValidationWarning] = []
        errors: List[ValidationErrorItem] = []

        if plan.has_declared_totals():
            total_warnings, total_errors = PlanValidationService.validate_totals(plan)
            warnings.extend(total_warnings)
            errors.extend(total_errors)

        meal_warnings, meal_errors = PlanValidationService.validate_meals(plan)
        warnings.extend(meal_warnings)
        errors.extend(meal_errors)

        warnings.extend(PlanValidationService.validate_distribution(plan))

        repeated = PlanValidationService.find_repeated_foods(plan)
        if repeated:
            warnings.append(
                ValidationWarning(
                    type=WarningType.REPEATED_FOOD,
                    message=f"Foods repeated too often: {', '.join(repeated)}",
                    severity=WarningSeverity.MEDIUM,
                    suggestion="Consider varying foods to improve nutritional quality",
                )
            )

        errors.extend(PlanValidationService.validate_macro_signs(plan))

        result = ValidationResult(valid=not errors, warnings=warnings, errors=errors)
        logger.debug(
            "Validated plan %s: %d errors, %d warnings",
            plan.plan_id,
            len(errors),
            len(warnings),
        )
        return result
