"""
API dependencies for dependency injection
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from domain.models import get_db_session
from repositories import FoodCatalogRepository


def get_food_catalog(db: Session = Depends(get_db_session)) -> FoodCatalogRepository:
    """
    Food catalog bound to the request's session.

    Usage:
        @router.post("/example")
        def example(catalog: FoodCatalogRepository = Depends(get_food_catalog)):
            catalog.find_by_names({"Arroz branco"})
    """
    return FoodCatalogRepository(db)
