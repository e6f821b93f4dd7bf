"""Macro distribution routes. Pure computations over the request body."""

from typing import List

from fastapi import APIRouter
import logging

from domain.schemas.distribution_schemas import (
    AdjustDistributionRequest,
    DistributionRequest,
    DistributionValidation,
    MealMacroTarget,
    NormalizeDistributionRequest,
    ValidateDistributionRequest,
)
from services.macro_distribution_service import MacroDistributionService

router = APIRouter(prefix="/distribution", tags=["Distribution"])
logger = logging.getLogger("dietplan.api.distribution")


@router.post("", response_model=List[MealMacroTarget])
def distribute(body: DistributionRequest):
    """Split daily totals across the given meals with the chosen strategy"""
    return MacroDistributionService.distribute_macros(body.totals, body.meal_types, body.strategy)


@router.post("/normalize", response_model=List[MealMacroTarget])
def normalize(body: NormalizeDistributionRequest):
    """Spread the rounding residual evenly so the targets add up to the totals"""
    return MacroDistributionService.normalize_distribution(body.distribution, body.totals)


@router.post("/validate", response_model=DistributionValidation)
def validate(body: ValidateDistributionRequest):
    return MacroDistributionService.validate_distribution(
        body.distribution, body.totals, body.tolerance
    )


@router.post("/adjust", response_model=List[MealMacroTarget])
def adjust(body: AdjustDistributionRequest):
    """Override one meal's target; the other meals are returned unchanged"""
    return MacroDistributionService.adjust_distribution(
        body.distribution, body.meal_index, body.macros
    )
