"""Plan version history routes"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from api.responses import NOT_FOUND_RESPONSE
from domain.mappers import PlanMapper
from domain.models import get_db_session
from domain.schemas.version_schemas import (
    CreateVersionRequest,
    PlanVersionResponse,
    RestoreVersionResponse,
)
from repositories import PlanVersionRepository
from services.version_history_service import VersionHistoryService

router = APIRouter(tags=["Versions"], responses=NOT_FOUND_RESPONSE)
logger = logging.getLogger("dietplan.api.versions")


@router.post(
    "/plans/{plan_id}/versions",
    response_model=PlanVersionResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_version(
    plan_id: UUID,
    body: Optional[CreateVersionRequest] = None,
    db: Session = Depends(get_db_session),
):
    """Snapshot the plan's current totals, meals and foods"""
    body = body or CreateVersionRequest()
    version = VersionHistoryService.create_version(db, plan_id, body.name, body.created_by)
    return PlanMapper.to_version_response(version)


@router.get("/plans/{plan_id}/versions", response_model=List[PlanVersionResponse])
def list_versions(plan_id: UUID, db: Session = Depends(get_db_session)):
    """All versions of a plan, newest first"""
    versions = VersionHistoryService.list_versions(db, plan_id)
    return [PlanMapper.to_version_response(v) for v in versions]


@router.get("/versions/{version_id}", response_model=PlanVersionResponse)
def get_version(version_id: UUID, db: Session = Depends(get_db_session)):
    return PlanMapper.to_version_response(VersionHistoryService.get_version(db, version_id))


@router.post("/versions/{version_id}/restore", response_model=RestoreVersionResponse)
def restore_version(version_id: UUID, db: Session = Depends(get_db_session)):
    """
    Make a stored version the live plan.

    The live state is first saved as a "Backup before restore" version, so a
    restore can always be undone by restoring that backup.
    """
    restored_number = VersionHistoryService.get_version(db, version_id).version_number
    plan_id = VersionHistoryService.restore_version(db, version_id)
    backup_number = PlanVersionRepository(db).max_version_number(plan_id)

    logger.info("Version %s restored onto plan %s", version_id, plan_id)
    return RestoreVersionResponse(
        plan_id=plan_id,
        restored_version_number=restored_number,
        backup_version_number=backup_number,
        message=f"Plan restored to version {restored_number}",
    )
