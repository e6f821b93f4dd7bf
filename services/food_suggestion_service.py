from typing import Dict, List, Optional, Set
import logging

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from app.config import settings
from app.exceptions import NotFoundError
from domain.enums import MealType
from domain.models import FoodUsageStat, UserFavoriteFood
from domain.models.food import FoodCatalogEntry
from domain.schemas.suggestion_schemas import FoodSuggestion, MealContext
from repositories import FavoriteFoodRepository, FoodUsageRepository
from repositories.food_catalog_repository import FoodCatalog

logger = logging.getLogger("dietplan.suggestions")

BASE_SCORE = 50
FAVORITE_BONUS = 20
POINTS_PER_USE = 2
MAX_USAGE_BONUS = 15
MACRO_TARGET_BONUS = 5
MEAL_TYPE_BONUS = 10
RESTRICTION_PENALTY = 30

# per 100 g
PROTEIN_RICH_GRAMS = 10
CARB_RICH_GRAMS = 20
HIGH_PROTEIN_REASON_GRAMS = 15
CARB_SOURCE_REASON_GRAMS = 30

FREQUENT_USE_COUNT = 5
PREFERENCE_LOOKUP_LIMIT = 50
REASON_SEPARATOR = " • "

BREAKFAST_KEYWORDS = ("aveia", "ovo", "pão", "leite", "iogurte", "fruta", "cereal")
MAIN_MEAL_KEYWORDS = ("arroz", "feijão", "frango", "carne", "peixe", "salada", "legume")
SNACK_KEYWORDS = ("fruta", "castanha", "iogurte", "queijo", "biscoito")
WORKOUT_KEYWORDS = ("banana", "batata", "pão", "whey", "dextrose")

MEAL_TYPE_KEYWORDS = {
    MealType.BREAKFAST.value: BREAKFAST_KEYWORDS,
    MealType.LUNCH.value: MAIN_MEAL_KEYWORDS,
    MealType.DINNER.value: MAIN_MEAL_KEYWORDS,
    MealType.SNACK_1.value: SNACK_KEYWORDS,
    MealType.SNACK_2.value: SNACK_KEYWORDS,
    MealType.PRE_WORKOUT.value: WORKOUT_KEYWORDS,
    MealType.POST_WORKOUT.value: WORKOUT_KEYWORDS,
}

MEAL_TYPE_NAMES = {
    MealType.BREAKFAST.value: "Breakfast",
    MealType.SNACK_1.value: "Morning Snack",
    MealType.LUNCH.value: "Lunch",
    MealType.SNACK_2.value: "Afternoon Snack",
    MealType.DINNER.value: "Dinner",
    MealType.PRE_WORKOUT.value: "Pre-Workout",
    MealType.POST_WORKOUT.value: "Post-Workout",
}


def _meal_type(value) -> str:
    return value.value if isinstance(value, MealType) else value


class FoodSuggestionService:
    """
    Ranks catalog foods for a meal being built.

    Personal data (favorites, usage counters) belongs to the `user_id` the
    caller passes in; nothing is read from ambient session state.
    """

    @staticmethod
    def get_meal_type_name(meal_type) -> str:
        meal_type = _meal_type(meal_type)
        return MEAL_TYPE_NAMES.get(meal_type, meal_type)

    @staticmethod
    def get_meal_type_bonus(food: FoodCatalogEntry, meal_type) -> int:
        """Bonus when the food name contains a keyword typical for the meal type"""
        keywords = MEAL_TYPE_KEYWORDS.get(_meal_type(meal_type), ())
        name = food.name.lower()
        return MEAL_TYPE_BONUS if any(k in name for k in keywords) else 0

    @staticmethod
    def has_restriction(food: FoodCatalogEntry, restrictions: List[str]) -> bool:
        name = food.name.lower()
        category = (food.category or "").lower()
        for restriction in restrictions:
            word = restriction.lower()
            if word and (word in name or word in category):
                return True
        return False

    @staticmethod
    def calculate_match_score(
        food: FoodCatalogEntry,
        context: MealContext,
        is_favorite: bool,
        usage_count: int,
    ) -> float:
        """Score from 50, adjusted by preference, macro and meal-type signals, kept in [0, 100]"""
        score = BASE_SCORE

        if is_favorite:
            score += FAVORITE_BONUS
        score += min(usage_count * POINTS_PER_USE, MAX_USAGE_BONUS)

        if context.target_protein and (food.protein_per_100g or 0) > PROTEIN_RICH_GRAMS:
            score += MACRO_TARGET_BONUS
        if context.target_carbs and (food.carbs_per_100g or 0) > CARB_RICH_GRAMS:
            score += MACRO_TARGET_BONUS

        score += FoodSuggestionService.get_meal_type_bonus(food, context.meal_type)

        if FoodSuggestionService.has_restriction(food, context.restrictions):
            score -= RESTRICTION_PENALTY

        return max(0, min(100, score))

    @staticmethod
    def get_suggestion_reason(
        food: FoodCatalogEntry, meal_type, is_favorite: bool, usage_count: int
    ) -> str:
        reasons = []
        if is_favorite:
            reasons.append("Your favorite food")
        if usage_count > FREQUENT_USE_COUNT:
            reasons.append(f"Often used at {FoodSuggestionService.get_meal_type_name(meal_type)}")
        if (food.protein_per_100g or 0) > HIGH_PROTEIN_REASON_GRAMS:
            reasons.append("High in protein")
        if (food.carbs_per_100g or 0) > CARB_SOURCE_REASON_GRAMS:
            reasons.append("Good source of carbohydrates")
        if not reasons:
            reasons.append("Nutritious food")
        return REASON_SEPARATOR.join(reasons)

    @staticmethod
    def rank_foods(
        foods: List[FoodCatalogEntry],
        context: MealContext,
        favorites: Set[str],
        usage: Dict[str, int],
        limit: int,
    ) -> List[FoodSuggestion]:
        """
        Score `foods` against the meal context and keep the best `limit`.

        `favorites` and `usage` are keyed by lower-cased food name. Foods already
        in the meal are dropped; equal scores keep the order of `foods`.
        """
        existing = {name.lower() for name in context.existing_foods}

        suggestions = []
        for food in foods:
            key = food.name.lower()
            if key in existing:
                continue
            is_favorite = key in favorites
            usage_count = usage.get(key, 0)
            suggestions.append(
                FoodSuggestion(
                    food_name=food.name,
                    category=food.category,
                    calories_per_100g=food.calories_per_100g or 0,
                    protein_per_100g=food.protein_per_100g or 0,
                    carbs_per_100g=food.carbs_per_100g or 0,
                    fats_per_100g=food.fats_per_100g or 0,
                    match_score=FoodSuggestionService.calculate_match_score(
                        food, context, is_favorite, usage_count
                    ),
                    reason=FoodSuggestionService.get_suggestion_reason(
                        food, context.meal_type, is_favorite, usage_count
                    ),
                )
            )

        suggestions.sort(key=lambda s: s.match_score, reverse=True)
        return suggestions[:limit]

    @staticmethod
    def suggest_foods(
        db: Session,
        user_id: str,
        context: MealContext,
        catalog: FoodCatalog,
        limit: Optional[int] = None,
    ) -> List[FoodSuggestion]:
        """
        Suggest catalog foods for a meal, personalised for `user_id`.

        Args:
            db: Database session holding favorites and usage counters
            user_id: caller-supplied identity
            context: meal type, optional macro targets, foods to skip, restrictions
            catalog: lookup providing the active foods
            limit: how many suggestions to return (default from settings)

        Returns:
            Suggestions sorted by match score, best first
        """
        if limit is None:
            limit = settings.default_suggestion_limit

        meal_type = _meal_type(context.meal_type)
        favorites = FavoriteFoodRepository(db).favorite_names(user_id, PREFERENCE_LOOKUP_LIMIT)
        usage = FoodUsageRepository(db).usage_counts(user_id, meal_type, PREFERENCE_LOOKUP_LIMIT)

        foods = catalog.list_active()
        suggestions = FoodSuggestionService.rank_foods(foods, context, favorites, usage, limit)

        logger.debug(
            "Ranked %d foods for user %s (%s), %d favorites, %d usage counters",
            len(foods), user_id, meal_type, len(favorites), len(usage),
        )
        return suggestions

    @staticmethod
    def record_food_usage(db: Session, user_id: str, food_name: str, meal_type) -> FoodUsageStat:
        """Count one more use of `food_name` in `meal_type` for `user_id`"""
        meal_type = _meal_type(meal_type)
        usage_repo = FoodUsageRepository(db)

        try:
            stat = usage_repo.get(user_id, food_name, meal_type)
            if stat:
                stat.usage_count += 1
                stat.last_used_at = func.now()
            else:
                stat = usage_repo.add(
                    FoodUsageStat(
                        user_id=user_id, food_name=food_name, meal_type=meal_type, usage_count=1
                    )
                )
            db.commit()
            db.refresh(stat)
        except Exception:
            db.rollback()
            logger.exception("Error recording usage of '%s' for user %s", food_name, user_id)
            raise

        logger.info(f"User {user_id} used '{food_name}' in {meal_type} ({stat.usage_count} times)")
        return stat

    @staticmethod
    def list_favorites(db: Session, user_id: str) -> List[UserFavoriteFood]:
        """Most used first"""
        return FavoriteFoodRepository(db).list_by_user(user_id, PREFERENCE_LOOKUP_LIMIT)

    @staticmethod
    def add_favorite(db: Session, user_id: str, food_name: str) -> UserFavoriteFood:
        """Mark a food as favorite; marking it again counts as another use"""
        favorite_repo = FavoriteFoodRepository(db)

        try:
            favorite = favorite_repo.get(user_id, food_name)
            if favorite:
                favorite.usage_count += 1
                favorite.last_used_at = func.now()
            else:
                favorite = favorite_repo.add(
                    UserFavoriteFood(user_id=user_id, food_name=food_name, usage_count=1)
                )
            db.commit()
            db.refresh(favorite)
        except Exception:
            db.rollback()
            logger.exception("Error adding favorite '%s' for user %s", food_name, user_id)
            raise

        logger.info(f"User {user_id} favorited '{food_name}'")
        return favorite

    @staticmethod
    def remove_favorite(db: Session, user_id: str, food_name: str) -> None:
        """
        Raises:
            NotFoundError: If the food is not a favorite of the user
        """
        favorite_repo = FavoriteFoodRepository(db)
        favorite = favorite_repo.get(user_id, food_name)
        if not favorite:
            raise NotFoundError(
                f"Favorite not found: {food_name}",
                details={"user_id": user_id, "food_name": food_name},
            )

        try:
            favorite_repo.remove(favorite)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error removing favorite '%s' for user %s", food_name, user_id)
            raise

        logger.info(f"User {user_id} removed favorite '{food_name}'")
