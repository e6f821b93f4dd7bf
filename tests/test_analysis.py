"""
Tests for the nutritional analysis engine.

Covers:
- Catalog-based aggregation with unit conversion
- Snapshot-vs-catalog resolution for each food line
- Unmatched foods
- Macro percentages, fiber density and the density score
- Recommendation rules
"""

import pytest

from test_fixtures import (
    InMemoryFoodCatalog,
    make_catalog_entry,
    make_food,
    make_meal,
    make_plan,
)
from services.nutritional_analysis_service import (
    RECOMMEND_BALANCED,
    RECOMMEND_CARBS_SHARE,
    RECOMMEND_FATS_SHARE,
    RECOMMEND_LESS_PROTEIN,
    RECOMMEND_LESS_SODIUM,
    RECOMMEND_MORE_FIBER,
    RECOMMEND_MORE_PROTEIN,
    RECOMMEND_PROTEIN_SHARE,
    NutrientTotals,
    NutritionalAnalysisService,
    compute_food_macros,
    food_macro_snapshot,
)


# =============================================================================
# AGGREGATION
# =============================================================================


def test_analyze_plan_from_catalog():
    """200 g of rice + 150 g of chicken, no snapshots on the food lines"""
    plan = make_plan(
        [
            make_meal(
                foods=[
                    make_food("Arroz branco", 200),
                    make_food("Frango grelhado", 150),
                ]
            )
        ]
    )

    report = NutritionalAnalysisService.analyze_plan(plan, InMemoryFoodCatalog())

    assert report.total_calories == 508  # 260 + 247.5
    assert report.total_protein == pytest.approx(51.9)
    assert report.total_carbs == pytest.approx(56.2)
    assert report.total_fats == pytest.approx(6.0)
    assert report.total_fiber == pytest.approx(3.2)
    assert report.total_sodium == pytest.approx(113)
    assert report.unmatched_foods == []


def test_analyze_plan_resolves_names_in_one_batch():
    catalog = InMemoryFoodCatalog()
    plan = make_plan(
        [
            make_meal(foods=[make_food("Arroz branco"), make_food("Feijão carioca")]),
            make_meal(meal_name="Dinner", meal_type="dinner", foods=[make_food("Arroz branco")]),
        ]
    )

    NutritionalAnalysisService.analyze_plan(plan, catalog)

    assert catalog.batch_lookups == 1


def test_serving_units_are_converted_before_scaling():
    """2 'unidade' of egg = 200 g"""
    plan = make_plan([make_meal(foods=[make_food("Ovo cozido", 2, "unidade")])])

    report = NutritionalAnalysisService.analyze_plan(plan, InMemoryFoodCatalog())

    assert report.total_calories == 292
    assert report.total_protein == pytest.approx(26.6)


def test_complete_snapshot_wins_over_catalog_for_macros():
    plan = make_plan(
        [
            make_meal(
                foods=[
                    make_food("Arroz branco", 200, calories=300, protein=6, carbs=60, fats=1),
                ]
            )
        ]
    )

    report = NutritionalAnalysisService.analyze_plan(plan, InMemoryFoodCatalog())

    assert report.total_calories == 300
    assert report.total_protein == pytest.approx(6)
    assert report.total_carbs == pytest.approx(60)
    assert report.total_fats == pytest.approx(1)
    # fiber and sodium still come from the catalog
    assert report.total_fiber == pytest.approx(3.2)
    assert report.total_sodium == pytest.approx(2)


def test_partial_snapshot_falls_back_to_catalog():
    plan = make_plan([make_meal(foods=[make_food("Arroz branco", 200, calories=999)])])

    report = NutritionalAnalysisService.analyze_plan(plan, InMemoryFoodCatalog())

    assert report.total_calories == 260


def test_snapshot_without_catalog_match_still_counts():
    plan = make_plan(
        [
            make_meal(
                foods=[make_food("Whey caseiro", 30, calories=120, protein=24, carbs=3, fats=1.5)]
            )
        ]
    )

    report = NutritionalAnalysisService.analyze_plan(plan, InMemoryFoodCatalog())

    assert report.total_calories == 120
    assert report.total_fiber == 0
    assert report.unmatched_foods == []


def test_unmatched_foods_contribute_zero_and_are_reported_once():
    plan = make_plan(
        [
            make_meal(
                foods=[
                    make_food("Arroz branco", 100),
                    make_food("Pão de queijo", 50),
                ]
            ),
            make_meal(meal_name="Dinner", meal_type="dinner", foods=[make_food("Pão de queijo", 50)]),
        ]
    )

    report = NutritionalAnalysisService.analyze_plan(plan, InMemoryFoodCatalog())

    assert report.total_calories == 130
    assert report.unmatched_foods == ["Pão de queijo"]


def test_inactive_catalog_entries_are_ignored():
    catalog = InMemoryFoodCatalog(
        [make_catalog_entry("Arroz branco", 130, 2.7, 28.1, 0.3, is_active=False)]
    )
    plan = make_plan([make_meal(foods=[make_food("Arroz branco", 100)])])

    report = NutritionalAnalysisService.analyze_plan(plan, catalog)

    assert report.total_calories == 0
    assert report.unmatched_foods == ["Arroz branco"]


def test_empty_plan_reports_zeros():
    report = NutritionalAnalysisService.analyze_plan(make_plan(), InMemoryFoodCatalog())

    assert report.total_calories == 0
    assert report.protein_percentage == 0
    assert report.fiber_per_1000kcal == 0
    assert 0 <= report.nutritional_density_score <= 100


def test_food_macro_snapshot_is_rounded():
    entry = make_catalog_entry("Batata doce", 86, 1.6, 20.1, 0.1)

    snapshot = food_macro_snapshot(entry, 200, "g")

    assert snapshot == {"calories": 172, "protein": 3.2, "carbs": 40.2, "fats": 0.2}


def test_compute_food_macros_uses_serving_units():
    entry = make_catalog_entry("Aveia", 394, 13.9, 66.6, 8.5)

    nutrients = compute_food_macros(entry, 2, "colher de sopa")  # 30 g

    assert nutrients.calories == pytest.approx(118.2)
    assert nutrients.protein == pytest.approx(4.17)


# =============================================================================
# PERCENTAGES AND DENSITY
# =============================================================================


def test_macro_percentages_use_calories_not_grams():
    protein_pct, carbs_pct, fats_pct = NutritionalAnalysisService.macro_percentages(100, 100, 100)

    # 400 / 400 / 900 kcal
    assert protein_pct == pytest.approx(400 / 1700 * 100)
    assert carbs_pct == pytest.approx(400 / 1700 * 100)
    assert fats_pct == pytest.approx(900 / 1700 * 100)


def test_macro_percentages_of_nothing_are_zero():
    assert NutritionalAnalysisService.macro_percentages(0, 0, 0) == (0.0, 0.0, 0.0)


def test_fiber_per_1000kcal():
    assert NutritionalAnalysisService.fiber_per_1000kcal(30, 2000) == pytest.approx(15)
    assert NutritionalAnalysisService.fiber_per_1000kcal(30, 0) == 0


def _good_totals() -> NutrientTotals:
    """150 P / 225 C / 50 F = 30.8% / 46.2% / 23.1% of macro-calories"""
    return NutrientTotals(calories=2000, protein=150, carbs=225, fats=50, fiber=30, sodium=1000)


def test_density_score_for_a_well_built_plan():
    # 50 + 15 protein + 15 fiber + 5 + 5 + 5 percentages
    assert NutritionalAnalysisService.calculate_nutritional_density(_good_totals()) == 95


def test_density_score_for_an_empty_plan():
    # 50 - 10 low protein - 10 low fiber
    assert NutritionalAnalysisService.calculate_nutritional_density(NutrientTotals()) == 30


def test_density_score_sodium_penalties():
    totals = _good_totals()
    totals.sodium = 2500
    assert NutritionalAnalysisService.calculate_nutritional_density(totals) == 90
    totals.sodium = 3500
    assert NutritionalAnalysisService.calculate_nutritional_density(totals) == 80


@pytest.mark.parametrize(
    "totals",
    [
        NutrientTotals(calories=2000, protein=10000, carbs=0, fats=0, fiber=0, sodium=0),
        NutrientTotals(calories=1, protein=0, carbs=0, fats=0, fiber=0, sodium=1_000_000),
        NutrientTotals(calories=100000, protein=150, carbs=100000, fats=100000, fiber=1e9, sodium=0),
    ],
)
def test_density_score_stays_in_range(totals):
    score = NutritionalAnalysisService.calculate_nutritional_density(totals)

    assert isinstance(score, int)
    assert 0 <= score <= 100


def test_report_density_score_with_extreme_protein():
    plan = make_plan(
        [make_meal(foods=[make_food("Frango grelhado", 10000, calories=16500, protein=10000, carbs=0, fats=360)])]
    )

    report = NutritionalAnalysisService.analyze_plan(plan, InMemoryFoodCatalog())

    assert 0 <= report.nutritional_density_score <= 100


# =============================================================================
# RECOMMENDATIONS
# =============================================================================


def test_balanced_plan_gets_single_affirmative_recommendation():
    totals = _good_totals()
    pcts = NutritionalAnalysisService.macro_percentages(totals.protein, totals.carbs, totals.fats)

    assert NutritionalAnalysisService.generate_recommendations(totals, *pcts) == [RECOMMEND_BALANCED]


def test_recommendations_for_an_empty_plan_in_check_order():
    recommendations = NutritionalAnalysisService.generate_recommendations(NutrientTotals(), 0, 0, 0)

    assert recommendations == [
        RECOMMEND_MORE_PROTEIN,
        RECOMMEND_MORE_FIBER,
        RECOMMEND_PROTEIN_SHARE,
        RECOMMEND_CARBS_SHARE,
        RECOMMEND_FATS_SHARE,
    ]


def test_recommendations_for_excess_protein_and_sodium():
    totals = _good_totals()
    totals.protein = 250
    totals.sodium = 2400
    pcts = NutritionalAnalysisService.macro_percentages(totals.protein, totals.carbs, totals.fats)

    recommendations = NutritionalAnalysisService.generate_recommendations(totals, *pcts)

    assert RECOMMEND_LESS_PROTEIN in recommendations
    assert RECOMMEND_LESS_SODIUM in recommendations
    assert RECOMMEND_BALANCED not in recommendations
