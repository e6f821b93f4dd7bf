"""Splits daily macro targets across meals."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Union

from app.config import settings
from domain.enums import DistributionStrategy, MealType
from domain.schemas.distribution_schemas import (
    DistributionValidation,
    MacroDistribution,
    MealMacroTarget,
    PartialMacros,
)
from services.numeric import round_grams, round_kcal

logger = logging.getLogger("dietplan.distribution")

MAIN_MEAL_TYPES = frozenset({MealType.LUNCH.value, MealType.DINNER.value})
WORKOUT_MEAL_TYPES = frozenset({MealType.PRE_WORKOUT.value, MealType.POST_WORKOUT.value})

# A partition with no meals still divides by 1; its share is simply never used.
EMPTY_PARTITION_DIVISOR = 1

MEAL_TYPE_NAMES = {
    MealType.BREAKFAST.value: "Breakfast",
    MealType.SNACK_1.value: "Morning Snack",
    MealType.LUNCH.value: "Lunch",
    MealType.SNACK_2.value: "Afternoon Snack",
    MealType.DINNER.value: "Dinner",
    MealType.PRE_WORKOUT.value: "Pre-Workout",
    MealType.POST_WORKOUT.value: "Post-Workout",
}

MealTypeTag = Union[MealType, str]


def _tag(meal_type: MealTypeTag) -> str:
    return meal_type.value if isinstance(meal_type, MealType) else str(meal_type)


def _rounded(calories: float, protein: float, carbs: float, fats: float) -> MacroDistribution:
    return MacroDistribution(
        calories=round_kcal(calories),
        protein=round_grams(protein),
        carbs=round_grams(carbs),
        fats=round_grams(fats),
    )


def _sum_targets(distribution: Iterable[MealMacroTarget]) -> MacroDistribution:
    totals = MacroDistribution()
    for meal in distribution:
        totals.calories += meal.target.calories
        totals.protein += meal.target.protein
        totals.carbs += meal.target.carbs
        totals.fats += meal.target.fats
    return totals


def _differences(distribution: Sequence[MealMacroTarget], totals: MacroDistribution) -> MacroDistribution:
    summed = _sum_targets(distribution)
    return MacroDistribution(
        calories=totals.calories - summed.calories,
        protein=totals.protein - summed.protein,
        carbs=totals.carbs - summed.carbs,
        fats=totals.fats - summed.fats,
    )


class MacroDistributionService:
    """
    Distribution strategies:
    - balanced: every meal gets 1/n of every macro
    - protein_focused: lunch/dinner share 40% of kcal/carbs/fats and 50% of protein
    - carb_strategic: pre/post workout share 50% of carbs and 30% of kcal/protein/fats

    Partition shares come from settings. Each meal target is rounded on its
    own (kcal to integers, grams to one decimal); the rounding drift is not
    redistributed unless normalize_distribution is called.
    """

    @staticmethod
    def get_meal_name(meal_type: MealTypeTag, index: int) -> str:
        return MEAL_TYPE_NAMES.get(_tag(meal_type), f"Meal {index + 1}")

    @staticmethod
    def distribute_macros(
        totals: MacroDistribution,
        meal_types: Sequence[MealTypeTag],
        strategy: Union[DistributionStrategy, str] = DistributionStrategy.BALANCED,
    ) -> List[MealMacroTarget]:
        if not meal_types:
            return []

        strategy = DistributionStrategy(strategy)
        logger.debug("Distributing %s across %d meals (%s)", totals, len(meal_types), strategy.value)

        if strategy == DistributionStrategy.PROTEIN_FOCUSED:
            return MacroDistributionService.protein_focused_distribution(totals, meal_types)
        if strategy == DistributionStrategy.CARB_STRATEGIC:
            return MacroDistributionService.carb_strategic_distribution(totals, meal_types)
        return MacroDistributionService.balanced_distribution(totals, meal_types)

    @staticmethod
    def balanced_distribution(
        totals: MacroDistribution, meal_types: Sequence[MealTypeTag]
    ) -> List[MealMacroTarget]:
        if not meal_types:
            return []
        portion = 1 / len(meal_types)
        return [
            MealMacroTarget(
                meal_type=_tag(meal_type),
                meal_name=MacroDistributionService.get_meal_name(meal_type, index),
                target=_rounded(
                    totals.calories * portion,
                    totals.protein * portion,
                    totals.carbs * portion,
                    totals.fats * portion,
                ),
            )
            for index, meal_type in enumerate(meal_types)
        ]

    @staticmethod
    def _partitioned(
        totals: MacroDistribution,
        meal_types: Sequence[MealTypeTag],
        in_partition: Callable[[str], bool],
        calories_share: float,
        protein_share: float,
        carbs_share: float,
        fats_share: float,
    ) -> List[MealMacroTarget]:
        """
        Give the partition selected by `in_partition` the given shares of each
        macro and the remaining meals the complements, split evenly inside each
        partition.
        """
        tags = [_tag(m) for m in meal_types]
        inside = sum(1 for t in tags if in_partition(t)) or EMPTY_PARTITION_DIVISOR
        outside = sum(1 for t in tags if not in_partition(t)) or EMPTY_PARTITION_DIVISOR

        def per_meal(total: float, share: float, is_inside: bool) -> float:
            if is_inside:
                return total * share / inside
            return total * (1 - share) / outside

        result: List[MealMacroTarget] = []
        for index, tag in enumerate(tags):
            flag = in_partition(tag)
            result.append(
                MealMacroTarget(
                    meal_type=tag,
                    meal_name=MacroDistributionService.get_meal_name(tag, index),
                    target=_rounded(
                        per_meal(totals.calories, calories_share, flag),
                        per_meal(totals.protein, protein_share, flag),
                        per_meal(totals.carbs, carbs_share, flag),
                        per_meal(totals.fats, fats_share, flag),
                    ),
                )
            )
        return result

    @staticmethod
    def protein_focused_distribution(
        totals: MacroDistribution, meal_types: Sequence[MealTypeTag]
    ) -> List[MealMacroTarget]:
        share = settings.protein_focused_main_share
        return MacroDistributionService._partitioned(
            totals,
            meal_types,
            lambda t: t in MAIN_MEAL_TYPES,
            calories_share=share,
            protein_share=settings.protein_focused_main_protein_share,
            carbs_share=share,
            fats_share=share,
        )

    @staticmethod
    def carb_strategic_distribution(
        totals: MacroDistribution, meal_types: Sequence[MealTypeTag]
    ) -> List[MealMacroTarget]:
        share = settings.carb_strategic_workout_share
        return MacroDistributionService._partitioned(
            totals,
            meal_types,
            lambda t: t in WORKOUT_MEAL_TYPES,
            calories_share=share,
            protein_share=share,
            carbs_share=settings.carb_strategic_workout_carbs_share,
            fats_share=share,
        )

    @staticmethod
    def adjust_distribution(
        distribution: Sequence[MealMacroTarget],
        meal_index: int,
        macros: PartialMacros,
    ) -> List[MealMacroTarget]:
        """
        Manual override of one meal's target.

        Returns a new list; the input is not touched and nothing is re-validated.
        An index outside the list yields an unchanged copy.
        """
        updated = [meal.model_copy(deep=True) for meal in distribution]
        if 0 <= meal_index < len(updated):
            meal = updated[meal_index]
            changes = macros.model_dump(exclude_none=True)
            meal.target = meal.target.model_copy(update=changes)
        return updated

    @staticmethod
    def validate_distribution(
        distribution: Sequence[MealMacroTarget],
        totals: MacroDistribution,
        tolerance: Optional[float] = None,
    ) -> DistributionValidation:
        """
        Check summed targets against totals: kcal within `tolerance` (default 50)
        and each macro within 5 g. Signed differences (totals - sums) are always
        returned.
        """
        if tolerance is None:
            tolerance = settings.calorie_tolerance
        differences = _differences(distribution, totals)
        valid = (
            abs(differences.calories) <= tolerance
            and abs(differences.protein) <= settings.macro_tolerance
            and abs(differences.carbs) <= settings.macro_tolerance
            and abs(differences.fats) <= settings.macro_tolerance
        )
        return DistributionValidation(valid=valid, differences=differences)

    @staticmethod
    def normalize_distribution(
        distribution: Sequence[MealMacroTarget], totals: MacroDistribution
    ) -> List[MealMacroTarget]:
        """Spread the residual of each macro evenly over all meals, rounding as usual"""
        if not distribution:
            return []
        differences = _differences(distribution, totals)
        portion = 1 / len(distribution)

        normalized = [
            meal.model_copy(
                update={
                    "target": _rounded(
                        meal.target.calories + differences.calories * portion,
                        meal.target.protein + differences.protein * portion,
                        meal.target.carbs + differences.carbs * portion,
                        meal.target.fats + differences.fats * portion,
                    )
                }
            )
            for meal in distribution
        ]
        logger.debug("Normalized distribution, residual was %s", differences)
        return normalized
