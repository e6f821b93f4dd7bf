"""
Tests for the food substitution matcher and for swapping a food on a stored plan.
"""

import uuid

import pytest
from sqlalchemy.orm import Session

from test_fixtures import (
    InMemoryFoodCatalog,
    db_session,
    make_catalog_entry,
    make_food,
    plan_create_payload,
)
from app.exceptions import NotFoundError, ServiceValidationError
from domain.schemas.plan_schemas import PlanCreate
from domain.schemas.substitution_schemas import SubstitutionRequest
from repositories import DietPlanRepository
from services.diet_plan_service import DietPlanService
from services.food_substitution_service import FoodSubstitutionService


def _request(**overrides) -> SubstitutionRequest:
    """100 g of a food with 100 kcal / 10 P / 10 C / 2 F"""
    data = dict(food_name="Iogurte natural", quantity=100, unit="g", calories=100, protein=10, carbs=10, fats=2)
    data.update(overrides)
    return SubstitutionRequest(**data)


# =============================================================================
# MATCHING
# =============================================================================


def test_identical_profile_scores_100_and_keeps_quantity():
    """200 g with exactly the catalog chicken's macros per 100 g"""
    original = SubstitutionRequest(
        food_name="Frango desfiado", quantity=200, unit="g", calories=330, protein=62, carbs=0, fats=7.2
    )

    results = FoodSubstitutionService.find_substitutions(original, InMemoryFoodCatalog())

    best = results[0]
    assert best.food_name == "Frango grelhado"
    assert best.similarity_score == 100
    assert best.quantity_adjustment == 200


def test_quantity_adjustment_is_not_rounded():
    """18.75 g of a food with exactly the candidate's macros per 100 g"""
    catalog = InMemoryFoodCatalog([make_catalog_entry("Peito de peru", 160, 32, 8, 4)])
    original = _request(food_name="Peru fatiado", quantity=18.75, calories=30, protein=6, carbs=1.5, fats=0.75)

    result = FoodSubstitutionService.find_substitutions(original, catalog)[0]

    assert result.similarity_score == 100
    assert result.quantity_adjustment == 18.75


def test_scores_are_not_rounded():
    """a third off in calories only: 1 - 0.4 / 3"""
    catalog = InMemoryFoodCatalog([make_catalog_entry("Lighter", 200, 10, 10, 2)])
    original = _request(calories=300, protein=10, carbs=10, fats=2)

    result = FoodSubstitutionService.find_substitutions(original, catalog)[0]

    assert result.similarity_score == pytest.approx(100 - 40 / 3)
    assert result.similarity_score != round(result.similarity_score, 2)
    assert result.quantity_adjustment == pytest.approx(150)


def test_weighted_score():
    catalog = InMemoryFoodCatalog(
        [
            make_catalog_entry("Double calories", 200, 10, 10, 2),
            make_catalog_entry("Double protein", 100, 20, 10, 2),
        ]
    )

    results = FoodSubstitutionService.find_substitutions(_request(), catalog)

    # calories weigh 0.4, protein 0.25; each candidate is 50% off in one macro
    assert [(r.food_name, r.similarity_score) for r in results] == [
        ("Double protein", pytest.approx(87.5)),
        ("Double calories", pytest.approx(80.0)),
    ]


def test_quantity_adjustment_matches_calories():
    catalog = InMemoryFoodCatalog([make_catalog_entry("Double calories", 200, 10, 10, 2)])

    result = FoodSubstitutionService.find_substitutions(_request(quantity=150, calories=150, protein=15, carbs=15, fats=3), catalog)[0]

    # 150 g at 100 kcal/100g = 150 kcal = 75 g at 200 kcal/100g
    assert result.quantity_adjustment == pytest.approx(75)


def test_zero_calorie_candidate_keeps_original_grams():
    catalog = InMemoryFoodCatalog([make_catalog_entry("Água", 0, 0, 0, 0)])

    result = FoodSubstitutionService.find_substitutions(_request(quantity=2, unit="xícara"), catalog)[0]

    assert result.quantity_adjustment == 480
    assert 0 <= result.similarity_score <= 100


def test_both_zero_compare_as_identical():
    """max(a, b, 1) keeps 0 vs 0 from dividing by zero"""
    catalog = InMemoryFoodCatalog([make_catalog_entry("Chá", 0, 0, 0, 0)])
    original = _request(food_name="Café", calories=0, protein=0, carbs=0, fats=0)

    result = FoodSubstitutionService.find_substitutions(original, catalog)[0]

    assert result.similarity_score == 100


def test_original_is_excluded_by_exact_name():
    original = _request(food_name="Arroz branco", calories=130, protein=2.7, carbs=28.1, fats=0.3)

    results = FoodSubstitutionService.find_substitutions(original, InMemoryFoodCatalog())

    assert "Arroz branco" not in [r.food_name for r in results]
    assert len(results) == 5


def test_results_are_sorted_and_limited():
    results = FoodSubstitutionService.find_substitutions(_request(), InMemoryFoodCatalog(), limit=3)

    assert len(results) == 3
    scores = [r.similarity_score for r in results]
    assert scores == sorted(scores, reverse=True)


def test_default_limit_is_ten():
    catalog = InMemoryFoodCatalog(
        [make_catalog_entry(f"Food {i:02d}", 100 + i, 10, 10, 2) for i in range(15)]
    )

    assert len(FoodSubstitutionService.find_substitutions(_request(), catalog)) == 10


def test_equal_scores_keep_catalog_order():
    catalog = InMemoryFoodCatalog(
        [
            make_catalog_entry("Banana nanica", 100, 10, 10, 2),
            make_catalog_entry("Aveia", 100, 10, 10, 2),
        ]
    )

    results = FoodSubstitutionService.find_substitutions(_request(), catalog)

    assert [r.food_name for r in results] == ["Aveia", "Banana nanica"]


def test_serving_units_feed_the_per_100g_profile():
    """2 unidades = 200 g, so 200 kcal is 100 kcal per 100 g"""
    catalog = InMemoryFoodCatalog([make_catalog_entry("Same", 100, 10, 10, 2)])
    original = _request(quantity=2, unit="unidade", calories=200, protein=20, carbs=20, fats=4)

    result = FoodSubstitutionService.find_substitutions(original, catalog)[0]

    assert result.similarity_score == 100
    assert result.quantity_adjustment == 200


def test_non_positive_grams_are_rejected():
    original = make_food("Arroz branco", 0, calories=0, protein=0, carbs=0, fats=0)

    with pytest.raises(ServiceValidationError):
        FoodSubstitutionService.find_substitutions(original, InMemoryFoodCatalog())


def test_inactive_candidates_are_skipped():
    catalog = InMemoryFoodCatalog(
        [
            make_catalog_entry("Old", 100, 10, 10, 2, is_active=False),
            make_catalog_entry("New", 120, 10, 10, 2),
        ]
    )

    assert [r.food_name for r in FoodSubstitutionService.find_substitutions(_request(), catalog)] == ["New"]


# =============================================================================
# SUBSTITUTE ON A STORED PLAN
# =============================================================================


def _stored_plan(db_session: Session):
    payload = plan_create_payload()
    payload["meals"][1]["foods"] = [
        {"food_name": "Arroz branco", "quantity": 100, "calories": 130, "protein": 2.7, "carbs": 28.1, "fats": 0.3},
        {"food_name": "Frango grelhado", "quantity": 100, "calories": 165, "protein": 31, "carbs": 0, "fats": 3.6, "order": 1},
    ]
    return DietPlanService.create_plan(db_session, PlanCreate(**payload))


def test_substitute_food_refreshes_food_and_meal(db_session: Session):
    plan = _stored_plan(db_session)
    lunch = next(m for m in plan.meals if m.meal_type == "lunch")
    rice = next(f for f in lunch.foods if f.food_name == "Arroz branco")

    food = FoodSubstitutionService.substitute_food(
        db_session, rice.food_id, "Batata doce", 200, "g", InMemoryFoodCatalog()
    )

    assert food.food_name == "Batata doce"
    assert food.quantity == 200
    assert food.calories == 172
    assert food.carbs == pytest.approx(40.2)

    meal = DietPlanRepository(db_session).get_meal(lunch.meal_id)
    assert meal.calories == 337
    assert meal.protein == pytest.approx(34.2)
    assert meal.carbs == pytest.approx(40.2)
    assert meal.fats == pytest.approx(3.8)


def test_substitute_unknown_food_id(db_session: Session):
    with pytest.raises(NotFoundError):
        FoodSubstitutionService.substitute_food(
            db_session, uuid.uuid4(), "Batata doce", 100, "g", InMemoryFoodCatalog()
        )


def test_substitute_with_unknown_catalog_name_changes_nothing(db_session: Session):
    plan = _stored_plan(db_session)
    rice = next(f for m in plan.meals for f in m.foods if f.food_name == "Arroz branco")

    with pytest.raises(NotFoundError):
        FoodSubstitutionService.substitute_food(
            db_session, rice.food_id, "Tapioca", 100, "g", InMemoryFoodCatalog()
        )

    db_session.expire_all()
    assert DietPlanRepository(db_session).get_food(rice.food_id).food_name == "Arroz branco"
