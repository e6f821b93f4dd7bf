"""
Per-user food preference models: favorite foods and usage counters.

`user_id` is whatever identity the caller supplies; there is no user table.
"""

from sqlalchemy import Column, Text, Integer, DateTime, Uuid, UniqueConstraint
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class UserFavoriteFood(Base):
    __tablename__ = "user_favorite_foods"

    favorite_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    food_name = Column(Text, nullable=False)
    usage_count = Column(Integer, nullable=False, default=1)
    last_used_at = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "food_name", name="uq_user_favorite_foods_user_food"),
    )

    def __repr__(self):
        return f"<UserFavoriteFood(user_id='{self.user_id}', food_name='{self.food_name}')>"


class FoodUsageStat(Base):
    """How many times a user put a food into a given meal type"""

    __tablename__ = "food_usage_stats"

    stat_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    food_name = Column(Text, nullable=False)
    meal_type = Column(Text, nullable=False)
    usage_count = Column(Integer, nullable=False, default=0)
    last_used_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint(
            "user_id", "food_name", "meal_type", name="uq_food_usage_stats_user_food_meal"
        ),
    )

    def __repr__(self):
        return (
            f"<FoodUsageStat(user_id='{self.user_id}', food_name='{self.food_name}', "
            f"meal_type='{self.meal_type}', usage_count={self.usage_count})>"
        )
