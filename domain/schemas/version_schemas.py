from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.schemas.plan_schemas import Meal


class CreateVersionRequest(BaseModel):
    name: Optional[str] = Field(None, description="Label; defaults to 'Version {n}'")
    created_by: Optional[str] = Field(None, description="Caller-supplied author identity")


class PlanVersionResponse(BaseModel):
    version_id: UUID
    plan_id: UUID
    version_number: int
    name: str
    total_calories: Optional[float] = None
    total_protein: Optional[float] = None
    total_carbs: Optional[float] = None
    total_fats: Optional[float] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    meals: List[Meal] = Field(default_factory=list)


class RestoreVersionResponse(BaseModel):
    plan_id: UUID
    restored_version_number: int
    backup_version_number: int
    message: Optional[str] = None
