"""Scales a whole plan up or down by a percentage."""

import logging
from typing import Optional

from app.exceptions import ServiceValidationError
from domain.schemas.plan_schemas import Plan, ProportionalAdjustment
from services.numeric import as_number, round_grams, round_kcal

logger = logging.getLogger("dietplan.adjustment")


def _scale_kcal(value: Optional[float], multiplier: float, enabled: bool) -> Optional[float]:
    if not enabled or not value:
        return value
    return round_kcal(value * multiplier)


def _scale_grams(value: Optional[float], multiplier: float, enabled: bool) -> Optional[float]:
    if not enabled or not value:
        return value
    return round_grams(value * multiplier)


class ProportionalAdjustmentService:
    @staticmethod
    def calculate_adjustment_percentage(current: float, target: float) -> float:
        """Percentage that takes `current` to `target`; 0 when there is nothing to scale"""
        if current == 0:
            return 0.0
        return (target - current) / current * 100

    @staticmethod
    def adjust_plan(plan: Plan, adjustment: ProportionalAdjustment) -> Plan:
        """
        Return a scaled copy of the plan. The input record is not modified.

        Each selected macro is multiplied by 1 + percentage/100 on the declared
        totals, on every meal snapshot and on every food snapshot; missing and
        zero values stay as they are. Food quantities are always scaled.

        With maintain_ratios the scaled totals are reset to the sum of the
        scaled meals so that validation sees no mismatch.
        """
        multiplier = 1 + adjustment.percentage / 100
        adjusted = plan.model_copy(deep=True)

        adjusted.total_calories = _scale_kcal(plan.total_calories, multiplier, adjustment.adjust_calories)
        adjusted.total_protein = _scale_grams(plan.total_protein, multiplier, adjustment.adjust_protein)
        adjusted.total_carbs = _scale_grams(plan.total_carbs, multiplier, adjustment.adjust_carbs)
        adjusted.total_fats = _scale_grams(plan.total_fats, multiplier, adjustment.adjust_fats)

        for meal in adjusted.meals:
            meal.calories = _scale_kcal(meal.calories, multiplier, adjustment.adjust_calories)
            meal.protein = _scale_grams(meal.protein, multiplier, adjustment.adjust_protein)
            meal.carbs = _scale_grams(meal.carbs, multiplier, adjustment.adjust_carbs)
            meal.fats = _scale_grams(meal.fats, multiplier, adjustment.adjust_fats)
            for food in meal.foods:
                food.quantity = round_grams(food.quantity * multiplier)
                food.calories = _scale_kcal(food.calories, multiplier, adjustment.adjust_calories)
                food.protein = _scale_grams(food.protein, multiplier, adjustment.adjust_protein)
                food.carbs = _scale_grams(food.carbs, multiplier, adjustment.adjust_carbs)
                food.fats = _scale_grams(food.fats, multiplier, adjustment.adjust_fats)

        if adjustment.maintain_ratios:
            if adjustment.adjust_calories:
                adjusted.total_calories = round_kcal(sum(as_number(m.calories) for m in adjusted.meals))
            if adjustment.adjust_protein:
                adjusted.total_protein = round_grams(sum(as_number(m.protein) for m in adjusted.meals))
            if adjustment.adjust_carbs:
                adjusted.total_carbs = round_grams(sum(as_number(m.carbs) for m in adjusted.meals))
            if adjustment.adjust_fats:
                adjusted.total_fats = round_grams(sum(as_number(m.fats) for m in adjusted.meals))

        logger.debug("Adjusted plan %s by %s%%", plan.plan_id, adjustment.percentage)
        return adjusted

    @staticmethod
    def adjust_calories_only(plan: Plan, target_calories: float) -> Plan:
        """
        Scale every macro so the declared calories hit `target_calories`.

        Raises:
            ServiceValidationError: If the plan declares no total calories
        """
        if not plan.total_calories:
            raise ServiceValidationError(
                "Plan has no total calories to adjust from",
                details={"plan_id": str(plan.plan_id) if plan.plan_id else None},
            )

        percentage = ProportionalAdjustmentService.calculate_adjustment_percentage(
            plan.total_calories, target_calories
        )
        return ProportionalAdjustmentService.adjust_plan(
            plan,
            ProportionalAdjustment(
                percentage=percentage,
                adjust_calories=True,
                adjust_protein=True,
                adjust_carbs=True,
                adjust_fats=True,
                maintain_ratios=True,
            ),
        )
