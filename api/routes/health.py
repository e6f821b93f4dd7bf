"""Health check and utility routes"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
import logging

from app.config import settings
from api.responses import HealthResponse
from domain.models import get_db_session

router = APIRouter(tags=["Health"])
logger = logging.getLogger("dietplan.api.health")


@router.get("/health-check", response_model=HealthResponse)
def health_check():
    """Basic health check endpoint"""
    return HealthResponse(status="ok", service=settings.app_name, version=settings.app_version)


@router.get("/health-check/db")
def database_health_check(db: Session = Depends(get_db_session)):
    """Round trip to the relational store."""
    try:
        db.execute(text("SELECT 1"))
        return {"database": "ok"}
    except Exception as e:
        logger.exception("Database health check failed")
        return {"database": "unavailable", "error": str(e)}
