"""Analysis and validation of plans sent in the request body (nothing is stored)"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_food_catalog
from domain.schemas.analysis_schemas import NutritionalAnalysisReport
from domain.schemas.plan_schemas import Plan
from domain.schemas.validation_schemas import ValidationResult
from repositories import FoodCatalogRepository
from services.nutritional_analysis_service import NutritionalAnalysisService
from services.plan_validation_service import PlanValidationService

router = APIRouter(tags=["Analysis"])
logger = logging.getLogger("dietplan.api.analysis")


@router.post("/analysis", response_model=NutritionalAnalysisReport)
def analyze(plan: Plan, catalog: FoodCatalogRepository = Depends(get_food_catalog)):
    """
    Nutritional analysis of an unsaved plan.

    Foods with a complete macro snapshot are taken as given; the rest are
    looked up in the food catalog by name.
    """
    return NutritionalAnalysisService.analyze_plan(plan, catalog)


@router.post("/validation", response_model=ValidationResult)
def validate(plan: Plan):
    return PlanValidationService.validate_plan(plan)
