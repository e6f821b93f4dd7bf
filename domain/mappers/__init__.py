"""
Domain mappers package.
Handles transformation between ORM models and the records the engines consume.
"""

from domain.mappers.plan_mapper import PlanMapper

__all__ = ["PlanMapper"]
