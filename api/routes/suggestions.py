"""Personalised food suggestion, usage and favorite routes"""

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_food_catalog
from api.responses import NOT_FOUND_RESPONSE, DeletedResponse
from domain.models import get_db_session
from domain.schemas.suggestion_schemas import (
    FavoriteFoodRequest,
    FavoriteFoodResponse,
    FoodSuggestion,
    FoodUsageRequest,
    FoodUsageResponse,
    SuggestionRequest,
)
from repositories import FoodCatalogRepository
from services.food_suggestion_service import FoodSuggestionService

router = APIRouter(prefix="/users/{user_id}", tags=["Suggestions"])
logger = logging.getLogger("dietplan.api.suggestions")


@router.post("/food-suggestions", response_model=List[FoodSuggestion])
def suggest_foods(
    body: SuggestionRequest,
    user_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db_session),
    catalog: FoodCatalogRepository = Depends(get_food_catalog),
):
    """
    Catalog foods ranked for the meal being built.

    Favorites and foods the user often puts in this meal type rank higher;
    foods matching a restriction rank lower; foods already in the meal are skipped.
    """
    return FoodSuggestionService.suggest_foods(db, user_id, body, catalog, body.limit)


@router.post("/food-usage", response_model=FoodUsageResponse)
def record_food_usage(
    body: FoodUsageRequest,
    user_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db_session),
):
    return FoodSuggestionService.record_food_usage(db, user_id, body.food_name, body.meal_type)


@router.get("/favorite-foods", response_model=List[FavoriteFoodResponse])
def list_favorites(user_id: str = Path(..., min_length=1), db: Session = Depends(get_db_session)):
    return FoodSuggestionService.list_favorites(db, user_id)


@router.post(
    "/favorite-foods",
    response_model=FavoriteFoodResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_favorite(
    body: FavoriteFoodRequest,
    user_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db_session),
):
    return FoodSuggestionService.add_favorite(db, user_id, body.food_name)


@router.delete(
    "/favorite-foods/{food_name}",
    response_model=DeletedResponse,
    responses=NOT_FOUND_RESPONSE,
)
def remove_favorite(
    food_name: str,
    user_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db_session),
):
    FoodSuggestionService.remove_favorite(db, user_id, food_name)
    return DeletedResponse(removed=food_name)
