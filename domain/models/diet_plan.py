"""
Diet plan models: the live plan (plan -> meals -> foods) and its immutable
version snapshots (version -> version meals -> version foods).
"""

from sqlalchemy import (
    Column,
    Text,
    Integer,
    Float,
    DateTime,
    ForeignKey,
    Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class DietPlan(Base):
    """Root aggregate. Declared totals are advisory and may diverge from meal sums."""

    __tablename__ = "diet_plan"

    plan_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text)
    total_calories = Column(Float)
    total_protein = Column(Float)
    total_carbs = Column(Float)
    total_fats = Column(Float)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    meals = relationship(
        "DietMeal",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="DietMeal.meal_order",
    )
    versions = relationship(
        "PlanVersion",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="PlanVersion.version_number",
    )


class DietMeal(Base):
    """A meal inside a live plan"""

    __tablename__ = "diet_meal"

    meal_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id = Column(
        Uuid, ForeignKey("diet_plan.plan_id", ondelete="CASCADE"), nullable=False
    )
    meal_type = Column(Text, nullable=False)  # see MealType
    meal_name = Column(Text, nullable=False)
    meal_order = Column(Integer, nullable=False, default=0)
    suggested_time = Column(Text)
    calories = Column(Float)
    protein = Column(Float)
    carbs = Column(Float)
    fats = Column(Float)
    instructions = Column(Text)

    plan = relationship("DietPlan", back_populates="meals")
    foods = relationship(
        "DietFood",
        back_populates="meal",
        cascade="all, delete-orphan",
        order_by="DietFood.food_order",
    )


class DietFood(Base):
    """A food line inside a live meal; food_name resolves against the catalog by name"""

    __tablename__ = "diet_food"

    food_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    meal_id = Column(
        Uuid, ForeignKey("diet_meal.meal_id", ondelete="CASCADE"), nullable=False
    )
    food_name = Column(Text, nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(Text, nullable=False, default="g")
    calories = Column(Float)
    protein = Column(Float)
    carbs = Column(Float)
    fats = Column(Float)
    notes = Column(Text)
    food_order = Column(Integer, nullable=False, default=0)

    meal = relationship("DietMeal", back_populates="foods")


class PlanVersion(Base):
    """Immutable snapshot of a plan. Rows are written once and never updated."""

    __tablename__ = "diet_plan_version"

    version_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id = Column(
        Uuid, ForeignKey("diet_plan.plan_id", ondelete="CASCADE"), nullable=False
    )
    version_number = Column(Integer, nullable=False)
    name = Column(Text, nullable=False)
    total_calories = Column(Float)
    total_protein = Column(Float)
    total_carbs = Column(Float)
    total_fats = Column(Float)
    notes = Column(Text)
    created_by = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    plan = relationship("DietPlan", back_populates="versions")
    meals = relationship(
        "PlanVersionMeal",
        back_populates="version",
        cascade="all, delete-orphan",
        order_by="PlanVersionMeal.meal_order",
    )

    __table_args__ = (
        UniqueConstraint("plan_id", "version_number", name="uq_plan_version_number"),
    )


class PlanVersionMeal(Base):
    """Snapshot of a meal at version time"""

    __tablename__ = "diet_plan_version_meal"

    version_meal_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    version_id = Column(
        Uuid,
        ForeignKey("diet_plan_version.version_id", ondelete="CASCADE"),
        nullable=False,
    )
    meal_type = Column(Text, nullable=False)
    meal_name = Column(Text, nullable=False)
    meal_order = Column(Integer, nullable=False, default=0)
    suggested_time = Column(Text)
    calories = Column(Float)
    protein = Column(Float)
    carbs = Column(Float)
    fats = Column(Float)
    instructions = Column(Text)

    version = relationship("PlanVersion", back_populates="meals")
    foods = relationship(
        "PlanVersionFood",
        back_populates="meal",
        cascade="all, delete-orphan",
        order_by="PlanVersionFood.food_order",
    )


class PlanVersionFood(Base):
    """Snapshot of a food line at version time"""

    __tablename__ = "diet_plan_version_food"

    version_food_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    version_meal_id = Column(
        Uuid,
        ForeignKey("diet_plan_version_meal.version_meal_id", ondelete="CASCADE"),
        nullable=False,
    )
    food_name = Column(Text, nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(Text, nullable=False)
    calories = Column(Float)
    protein = Column(Float)
    carbs = Column(Float)
    fats = Column(Float)
    notes = Column(Text)
    food_order = Column(Integer, nullable=False, default=0)

    meal = relationship("PlanVersionMeal", back_populates="foods")
