"""
Tests for plan validation.

Covers:
- Declared totals vs summed meals
- Meal count, empty meals and meals without macros
- Per-meal calorie share
- Repeated foods
- Negative values
"""

from test_fixtures import balanced_plan, make_food, make_meal, make_plan
from domain.enums import ErrorType, WarningSeverity, WarningType
from services.plan_validation_service import PlanValidationService


def _types(items):
    return [item.type for item in items]


def test_balanced_plan_is_clean():
    result = PlanValidationService.validate_plan(balanced_plan())

    assert result.valid is True
    assert result.errors == []
    assert result.warnings == []


# =============================================================================
# TOTALS
# =============================================================================


def test_calorie_mismatch_is_an_error():
    plan = balanced_plan()
    plan.meals[0].calories = 700

    result = PlanValidationService.validate_plan(plan)

    assert result.valid is False
    assert _types(result.errors) == [ErrorType.TOTAL_MISMATCH]
    assert "2000" in result.errors[0].message
    assert "2200" in result.errors[0].message
    assert result.errors[0].fix == "Set total calories to 2200"


def test_calorie_gap_within_tolerance_passes():
    plan = balanced_plan()
    plan.meals[0].calories = 550

    assert PlanValidationService.validate_plan(plan).valid is True


def test_macro_mismatch_is_only_a_warning():
    plan = balanced_plan()
    plan.total_protein = 180

    result = PlanValidationService.validate_plan(plan)

    assert result.valid is True
    assert _types(result.warnings) == [WarningType.IMBALANCED_DISTRIBUTION]
    assert result.warnings[0].severity == WarningSeverity.MEDIUM
    assert "protein" in result.warnings[0].message


def test_undeclared_totals_are_not_compared():
    plan = balanced_plan()
    plan.total_calories = None
    plan.meals[0].calories = 900

    result = PlanValidationService.validate_plan(plan)

    assert ErrorType.TOTAL_MISMATCH not in _types(result.errors)


# =============================================================================
# MEALS
# =============================================================================


def test_plan_without_meals():
    result = PlanValidationService.validate_plan(make_plan(total_calories=2000))

    assert result.valid is False
    assert _types(result.errors) == [ErrorType.MISSING_REQUIRED]
    assert result.warnings == []


def test_low_meal_count():
    plan = balanced_plan()
    plan.meals = plan.meals[:2]
    plan.total_calories = None
    plan.total_protein = None
    plan.total_carbs = None
    plan.total_fats = None

    result = PlanValidationService.validate_plan(plan)

    assert result.valid is True
    assert _types(result.warnings) == [WarningType.LOW_MEAL_COUNT]


def test_meal_without_foods_is_high_severity():
    plan = balanced_plan()
    plan.meals[2].foods = []

    result = PlanValidationService.validate_plan(plan)

    assert _types(result.warnings) == [WarningType.MISSING_FOODS]
    assert result.warnings[0].severity == WarningSeverity.HIGH
    assert "Afternoon Snack" in result.warnings[0].message


def test_meal_without_macros():
    plan = make_plan(
        [
            make_meal("Breakfast", "breakfast", foods=[make_food("Ovo cozido")]),
            make_meal("Lunch", "lunch", foods=[make_food("Arroz branco")], calories=600),
            make_meal("Dinner", "dinner", foods=[make_food("Frango grelhado")], calories=600),
        ]
    )

    result = PlanValidationService.validate_plan(plan)

    missing = [w for w in result.warnings if w.type == WarningType.MISSING_MACRO]
    assert len(missing) == 1
    assert missing[0].severity == WarningSeverity.MEDIUM
    assert "Breakfast" in missing[0].message


# =============================================================================
# DISTRIBUTION
# =============================================================================


def test_skewed_meals_warn_both_ways():
    plan = make_plan(
        [
            make_meal("Breakfast", "breakfast", calories=1100, foods=[make_food("Ovo cozido")]),
            make_meal("Lunch", "lunch", calories=850, foods=[make_food("Arroz branco")]),
            make_meal("Snack", "snack_1", calories=50, foods=[make_food("Banana prata")]),
        ]
    )

    result = PlanValidationService.validate_plan(plan)

    assert result.valid is True
    assert _types(result.warnings) == [
        WarningType.IMBALANCED_DISTRIBUTION,
        WarningType.IMBALANCED_DISTRIBUTION,
    ]
    assert [w.severity for w in result.warnings] == [WarningSeverity.MEDIUM, WarningSeverity.LOW]
    assert "55%" in result.warnings[0].message


def test_zero_calorie_meal_is_not_flagged_as_small():
    warnings = PlanValidationService.validate_distribution(
        make_plan(
            [
                make_meal("Breakfast", "breakfast", calories=500),
                make_meal("Lunch", "lunch", calories=500),
                make_meal("Water", "snack_1", calories=0),
            ]
        )
    )

    assert warnings == []


# =============================================================================
# REPEATED FOODS
# =============================================================================


def test_repeated_foods_are_listed_once_in_first_seen_order():
    meals = [
        make_meal(f"Meal {i}", "snack_1", calories=500, foods=[make_food("Ovo cozido"), make_food("Arroz branco")])
        for i in range(3)
    ]
    meals.append(make_meal("Meal 3", "dinner", calories=500, foods=[make_food("Ovo cozido")]))
    plan = make_plan(meals)

    result = PlanValidationService.validate_plan(plan)

    repeated = [w for w in result.warnings if w.type == WarningType.REPEATED_FOOD]
    assert len(repeated) == 1
    assert repeated[0].message == "Foods repeated too often: Ovo cozido"
    assert PlanValidationService.find_repeated_foods(plan, threshold=2) == ["Ovo cozido", "Arroz branco"]


# =============================================================================
# NEGATIVE VALUES
# =============================================================================


def test_each_negative_value_is_one_error():
    plan = balanced_plan()
    plan.total_fats = -1
    plan.meals[1].protein = -5
    plan.meals[3].foods[0].quantity = -100
    plan.meals[3].foods[0].carbs = -2

    result = PlanValidationService.validate_plan(plan)

    negative = [e for e in result.errors if e.type == ErrorType.INVALID_MACRO]
    assert len(negative) == 4
    assert result.valid is False
    assert "Fats cannot be negative (plan totals)" in [e.message for e in negative]
    assert any('meal "Lunch"' in e.message for e in negative)
