"""
Food catalog model - read-only reference table of macros per 100g.
"""

from sqlalchemy import Column, Text, Boolean, Float, DateTime, Uuid, UniqueConstraint
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class FoodCatalogEntry(Base):
    """
    Catalog entry keyed by unique food name.

    Plan foods reference entries by name only; a plan food whose name has no
    active entry simply has no catalog data.
    """

    __tablename__ = "food_database"

    food_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    category = Column(Text)

    calories_per_100g = Column(Float, nullable=False, default=0)
    protein_per_100g = Column(Float, nullable=False, default=0)
    carbs_per_100g = Column(Float, nullable=False, default=0)
    fats_per_100g = Column(Float, nullable=False, default=0)
    fiber_per_100g = Column(Float)
    sodium_per_100g = Column(Float)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (UniqueConstraint("name", name="uq_food_database_name"),)

    def __repr__(self):
        return f"<FoodCatalogEntry(name='{self.name}', kcal={self.calories_per_100g})>"
