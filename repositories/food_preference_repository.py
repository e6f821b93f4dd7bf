"""
Food Preference Repositories - Data access layer for favorites and usage counters
"""

from typing import Dict, List, Optional, Set
from sqlalchemy.orm import Session

from domain.models import FoodUsageStat, UserFavoriteFood
from repositories.base import BaseRepository


class FavoriteFoodRepository(BaseRepository[UserFavoriteFood]):
    """Repository for a user's favorite foods"""

    def __init__(self, db: Session):
        super().__init__(db, UserFavoriteFood)

    def get(self, user_id: str, food_name: str) -> Optional[UserFavoriteFood]:
        return (
            self.db.query(UserFavoriteFood)
            .filter(
                UserFavoriteFood.user_id == user_id,
                UserFavoriteFood.food_name == food_name,
            )
            .first()
        )

    def list_by_user(self, user_id: str, limit: int = 50) -> List[UserFavoriteFood]:
        """Most used first, then by name"""
        return (
            self.db.query(UserFavoriteFood)
            .filter(UserFavoriteFood.user_id == user_id)
            .order_by(UserFavoriteFood.usage_count.desc(), UserFavoriteFood.food_name)
            .limit(limit)
            .all()
        )

    def favorite_names(self, user_id: str, limit: int = 50) -> Set[str]:
        """Lower-cased names of the user's most used favorites"""
        return {f.food_name.lower() for f in self.list_by_user(user_id, limit)}

    def remove(self, favorite: UserFavoriteFood) -> None:
        """Stage deletion without committing"""
        self.db.delete(favorite)
        self.db.flush()


class FoodUsageRepository(BaseRepository[FoodUsageStat]):
    """Repository for per meal type usage counters"""

    def __init__(self, db: Session):
        super().__init__(db, FoodUsageStat)

    def get(self, user_id: str, food_name: str, meal_type: str) -> Optional[FoodUsageStat]:
        return (
            self.db.query(FoodUsageStat)
            .filter(
                FoodUsageStat.user_id == user_id,
                FoodUsageStat.food_name == food_name,
                FoodUsageStat.meal_type == meal_type,
            )
            .first()
        )

    def usage_counts(self, user_id: str, meal_type: str, limit: int = 50) -> Dict[str, int]:
        """
        Lower-cased food name -> usage count for one meal type.

        Only the `limit` most used foods are returned.
        """
        rows = (
            self.db.query(FoodUsageStat)
            .filter(FoodUsageStat.user_id == user_id, FoodUsageStat.meal_type == meal_type)
            .order_by(FoodUsageStat.usage_count.desc(), FoodUsageStat.food_name)
            .limit(limit)
            .all()
        )
        counts: Dict[str, int] = {}
        for row in rows:
            key = row.food_name.lower()
            counts[key] = counts.get(key, 0) + row.usage_count
        return counts
