"""Food catalog search and substitution routes"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_food_catalog
from api.responses import NOT_FOUND_RESPONSE
from domain.mappers import PlanMapper
from domain.models import get_db_session
from domain.schemas.plan_schemas import FoodItem
from domain.schemas.substitution_schemas import (
    FoodCatalogEntryResponse,
    FoodSubstitution,
    SubstituteFoodRequest,
    SubstitutionRequest,
)
from repositories import FoodCatalogRepository
from services.food_substitution_service import FoodSubstitutionService

router = APIRouter(tags=["Foods"])
logger = logging.getLogger("dietplan.api.substitutions")


@router.get("/foods", response_model=List[FoodCatalogEntryResponse])
def search_foods(
    query: str = Query(..., min_length=1, description="Part of the food name"),
    limit: int = Query(20, ge=1, le=100),
    catalog: FoodCatalogRepository = Depends(get_food_catalog),
):
    """Case-insensitive name search over active catalog foods"""
    return catalog.search_by_name(query, limit)


@router.post("/substitutions", response_model=List[FoodSubstitution])
def find_substitutions(
    body: SubstitutionRequest,
    catalog: FoodCatalogRepository = Depends(get_food_catalog),
):
    """
    Catalog foods with the closest macro profile to the given food.

    Each result carries a 0-100 similarity score and the grams of the
    candidate that deliver the same calories as the original.
    """
    return FoodSubstitutionService.find_substitutions(body, catalog, body.limit)


@router.post(
    "/foods/{food_id}/substitute", response_model=FoodItem, responses=NOT_FOUND_RESPONSE
)
def substitute_food(
    food_id: UUID,
    body: SubstituteFoodRequest,
    db: Session = Depends(get_db_session),
    catalog: FoodCatalogRepository = Depends(get_food_catalog),
):
    """Swap a food of a stored plan for a catalog food and refresh its meal's macros"""
    food = FoodSubstitutionService.substitute_food(
        db, food_id, body.new_food_name, body.quantity, body.unit, catalog
    )
    return PlanMapper.to_food_items([food])[0]
