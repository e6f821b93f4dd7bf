"""Diet plan routes: CRUD, recalculation, analysis, validation and adjustment"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.dependencies import get_food_catalog
from api.responses import NOT_FOUND_RESPONSE, DeletedResponse
from domain.mappers import PlanMapper
from domain.models import get_db_session
from domain.schemas.analysis_schemas import NutritionalAnalysisReport
from domain.schemas.plan_schemas import (
    AdjustCaloriesRequest,
    Plan,
    PlanCreate,
    PlanUpdate,
    ProportionalAdjustment,
)
from domain.schemas.validation_schemas import ValidationResult
from repositories import FoodCatalogRepository
from services.diet_plan_service import DietPlanService
from services.nutritional_analysis_service import NutritionalAnalysisService
from services.plan_validation_service import PlanValidationService
from services.proportional_adjustment_service import ProportionalAdjustmentService

router = APIRouter(prefix="/plans", tags=["Diet Plans"], responses=NOT_FOUND_RESPONSE)
logger = logging.getLogger("dietplan.api.plans")


@router.post("", response_model=Plan, status_code=status.HTTP_201_CREATED)
def create_plan(body: PlanCreate, db: Session = Depends(get_db_session)):
    """Create a plan with its meals and foods"""
    plan = DietPlanService.create_plan(db, body)
    return PlanMapper.to_plan(plan)


@router.get("/{plan_id}", response_model=Plan)
def get_plan(plan_id: UUID, db: Session = Depends(get_db_session)):
    return PlanMapper.to_plan(DietPlanService.get_plan(db, plan_id))


@router.put("/{plan_id}", response_model=Plan)
def update_plan(plan_id: UUID, body: PlanUpdate, db: Session = Depends(get_db_session)):
    """Replace totals, notes and meals. Stored versions are not touched."""
    plan = DietPlanService.update_plan(db, plan_id, body)
    return PlanMapper.to_plan(plan)


@router.delete("/{plan_id}", response_model=DeletedResponse)
def delete_plan(plan_id: UUID, db: Session = Depends(get_db_session)):
    """Delete a plan together with its version history"""
    DietPlanService.delete_plan(db, plan_id)
    return DeletedResponse(removed=str(plan_id))


@router.post("/{plan_id}/recalculate", response_model=Plan)
def recalculate_macros(
    plan_id: UUID,
    db: Session = Depends(get_db_session),
    catalog: FoodCatalogRepository = Depends(get_food_catalog),
):
    """Fill food and meal macro snapshots from the food catalog"""
    plan = DietPlanService.recalculate_macros(db, plan_id, catalog)
    return PlanMapper.to_plan(plan)


@router.get("/{plan_id}/analysis", response_model=NutritionalAnalysisReport)
def analyze_plan(
    plan_id: UUID,
    db: Session = Depends(get_db_session),
    catalog: FoodCatalogRepository = Depends(get_food_catalog),
):
    plan = PlanMapper.to_plan(DietPlanService.get_plan(db, plan_id))
    return NutritionalAnalysisService.analyze_plan(plan, catalog)


@router.get("/{plan_id}/validation", response_model=ValidationResult)
def validate_plan(plan_id: UUID, db: Session = Depends(get_db_session)):
    """
    Classify problems of a stored plan.

    Always answers 200; `valid` is false when errors were found.
    """
    plan = PlanMapper.to_plan(DietPlanService.get_plan(db, plan_id))
    return PlanValidationService.validate_plan(plan)


@router.post("/{plan_id}/adjust", response_model=Plan)
def adjust_plan(
    plan_id: UUID, body: ProportionalAdjustment, db: Session = Depends(get_db_session)
):
    """
    Preview of the plan scaled by a percentage.

    Nothing is saved; send the result to PUT /plans/{plan_id} to keep it.
    """
    plan = PlanMapper.to_plan(DietPlanService.get_plan(db, plan_id))
    logger.info("Adjusting plan %s by %s%%", plan_id, body.percentage)
    return ProportionalAdjustmentService.adjust_plan(plan, body)


@router.post("/{plan_id}/adjust-calories", response_model=Plan)
def adjust_calories(
    plan_id: UUID, body: AdjustCaloriesRequest, db: Session = Depends(get_db_session)
):
    """Preview of the plan scaled so its declared calories hit the target"""
    plan = PlanMapper.to_plan(DietPlanService.get_plan(db, plan_id))
    return ProportionalAdjustmentService.adjust_calories_only(plan, body.target_calories)
