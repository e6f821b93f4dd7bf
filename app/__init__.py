"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    DietPlanError,
    ServiceValidationError,
    NotFoundError,
    ConflictError,
)

__all__ = [
    "settings",
    "DietPlanError",
    "ServiceValidationError",
    "NotFoundError",
    "ConflictError",
]
