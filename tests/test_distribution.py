"""
Tests for the macro distribution engine: strategies, manual adjustment,
validation and normalization.
"""

import pytest

from domain.enums import DistributionStrategy, MealType
from domain.schemas.distribution_schemas import MacroDistribution, PartialMacros
from services.macro_distribution_service import MacroDistributionService

TOTALS = MacroDistribution(calories=2000, protein=150, carbs=200, fats=60)

FOUR_MEALS = [MealType.BREAKFAST, MealType.LUNCH, MealType.SNACK_2, MealType.DINNER]


def _sum_calories(distribution):
    return sum(m.target.calories for m in distribution)


# =============================================================================
# STRATEGIES
# =============================================================================


def test_balanced_distribution_splits_evenly():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)

    assert len(distribution) == 4
    for meal in distribution:
        assert meal.target.calories == 500
        assert meal.target.protein == pytest.approx(37.5)
        assert meal.target.carbs == pytest.approx(50)
        assert meal.target.fats == pytest.approx(15)
    assert [m.meal_name for m in distribution] == ["Breakfast", "Lunch", "Afternoon Snack", "Dinner"]
    assert [m.meal_type for m in distribution] == ["breakfast", "lunch", "snack_2", "dinner"]


def test_balanced_then_normalized_sums_exactly():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)

    normalized = MacroDistributionService.normalize_distribution(distribution, TOTALS)

    assert _sum_calories(normalized) == 2000


def test_targets_are_rounded_per_meal():
    distribution = MacroDistributionService.distribute_macros(
        MacroDistribution(calories=2000, protein=100, carbs=100, fats=50),
        [MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER],
    )

    for meal in distribution:
        assert meal.target.calories == 667
        assert meal.target.protein == pytest.approx(33.3)
        assert meal.target.fats == pytest.approx(16.7)


def test_protein_focused_distribution():
    distribution = MacroDistributionService.distribute_macros(
        TOTALS, FOUR_MEALS, DistributionStrategy.PROTEIN_FOCUSED
    )
    by_type = {m.meal_type: m.target for m in distribution}

    # lunch/dinner: 40% kcal/carbs/fats, 50% protein split between 2
    assert by_type["lunch"].calories == 400
    assert by_type["lunch"].protein == pytest.approx(37.5)
    assert by_type["dinner"].carbs == pytest.approx(40)
    assert by_type["dinner"].fats == pytest.approx(12)
    # the rest: 60% kcal/carbs/fats, 50% protein split between 2
    assert by_type["breakfast"].calories == 600
    assert by_type["breakfast"].protein == pytest.approx(37.5)
    assert by_type["snack_2"].carbs == pytest.approx(60)
    assert by_type["snack_2"].fats == pytest.approx(18)
    assert _sum_calories(distribution) == 2000


def test_carb_strategic_distribution():
    meal_types = [MealType.BREAKFAST, MealType.PRE_WORKOUT, MealType.POST_WORKOUT, MealType.DINNER]

    distribution = MacroDistributionService.distribute_macros(TOTALS, meal_types, "carb_strategic")
    by_type = {m.meal_type: m.target for m in distribution}

    assert by_type["pre_workout"].calories == 300
    assert by_type["pre_workout"].protein == pytest.approx(22.5)
    assert by_type["post_workout"].carbs == pytest.approx(50)
    assert by_type["post_workout"].fats == pytest.approx(9)
    assert by_type["breakfast"].calories == 700
    assert by_type["breakfast"].protein == pytest.approx(52.5)
    assert by_type["dinner"].carbs == pytest.approx(50)
    assert by_type["dinner"].fats == pytest.approx(21)
    assert by_type["pre_workout"].carbs > by_type["pre_workout"].protein


def test_empty_partition_divides_by_one():
    """Without lunch or dinner the main-meal share is simply never handed out"""
    distribution = MacroDistributionService.distribute_macros(
        TOTALS, [MealType.BREAKFAST, MealType.SNACK_1], DistributionStrategy.PROTEIN_FOCUSED
    )

    assert [m.target.calories for m in distribution] == [600, 600]
    assert _sum_calories(distribution) == 1200


def test_only_partition_members():
    distribution = MacroDistributionService.distribute_macros(
        TOTALS, [MealType.LUNCH, MealType.DINNER], DistributionStrategy.PROTEIN_FOCUSED
    )

    assert [m.target.calories for m in distribution] == [400, 400]


def test_no_meals_gives_no_targets():
    assert MacroDistributionService.distribute_macros(TOTALS, []) == []
    assert MacroDistributionService.normalize_distribution([], TOTALS) == []


def test_unknown_meal_type_gets_positional_name():
    assert MacroDistributionService.get_meal_name("brunch", 2) == "Meal 3"
    assert MacroDistributionService.get_meal_name(MealType.PRE_WORKOUT, 0) == "Pre-Workout"
    assert MacroDistributionService.get_meal_name("snack_1", 5) == "Morning Snack"


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS, "keto")


# =============================================================================
# ADJUST / VALIDATE / NORMALIZE
# =============================================================================


def test_adjust_distribution_returns_new_list():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)

    adjusted = MacroDistributionService.adjust_distribution(
        distribution, 1, PartialMacros(calories=600)
    )

    assert adjusted[1].target.calories == 600
    assert adjusted[1].target.protein == pytest.approx(37.5)
    assert distribution[1].target.calories == 500
    assert [m.target for m in adjusted[:1] + adjusted[2:]] == [
        m.target for m in distribution[:1] + distribution[2:]
    ]


def test_adjust_distribution_out_of_range_is_a_copy():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)

    adjusted = MacroDistributionService.adjust_distribution(
        distribution, 10, PartialMacros(calories=1)
    )

    assert adjusted == distribution
    assert adjusted is not distribution


def test_validate_distribution():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)

    result = MacroDistributionService.validate_distribution(distribution, TOTALS)

    assert result.valid is True
    assert result.differences.calories == 0


def test_validate_after_manual_adjust_reports_signed_difference():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)
    adjusted = MacroDistributionService.adjust_distribution(
        distribution, 0, PartialMacros(calories=600)
    )

    result = MacroDistributionService.validate_distribution(adjusted, TOTALS)

    assert result.valid is False
    assert result.differences.calories == -100
    assert result.differences.protein == pytest.approx(0)


def test_validate_with_custom_tolerance():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)
    adjusted = MacroDistributionService.adjust_distribution(
        distribution, 0, PartialMacros(calories=600)
    )

    assert MacroDistributionService.validate_distribution(adjusted, TOTALS, tolerance=150).valid


def test_macro_gap_beyond_five_grams_is_invalid():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)
    adjusted = MacroDistributionService.adjust_distribution(
        distribution, 0, PartialMacros(protein=45)
    )

    result = MacroDistributionService.validate_distribution(adjusted, TOTALS)

    assert result.valid is False
    assert result.differences.protein == pytest.approx(-7.5)


def test_normalize_spreads_residual_evenly():
    distribution = MacroDistributionService.distribute_macros(TOTALS, FOUR_MEALS)
    adjusted = MacroDistributionService.adjust_distribution(
        distribution, 0, PartialMacros(calories=600)
    )

    normalized = MacroDistributionService.normalize_distribution(adjusted, TOTALS)

    assert [m.target.calories for m in normalized] == [575, 475, 475, 475]
    assert _sum_calories(normalized) == 2000
    assert MacroDistributionService.validate_distribution(normalized, TOTALS).valid
