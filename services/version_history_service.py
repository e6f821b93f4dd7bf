from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, NotFoundError
from domain.models import DietPlan, PlanVersion
from domain.schemas.plan_schemas import Meal
from repositories import DietPlanRepository, PlanVersionRepository
from domain.mappers import PlanMapper

logger = logging.getLogger("dietplan.versions")

DEFAULT_VERSION_LABEL = "Version {number}"
BACKUP_VERSION_LABEL = "Backup before restore"


class VersionHistoryService:
    """
    Immutable plan snapshots.

    Version numbers are allocated per plan as max + 1 and never reused; there
    is no operation that deletes a single version.
    """

    @staticmethod
    def _snapshot(
        db: Session, plan: DietPlan, name: Optional[str], created_by: Optional[str]
    ) -> PlanVersion:
        """Stage the next version of `plan`. Does not commit."""
        version_repo = PlanVersionRepository(db)
        number = version_repo.max_version_number(plan.plan_id) + 1
        label = name or DEFAULT_VERSION_LABEL.format(number=number)
        return version_repo.add_snapshot(plan, number, label, created_by)

    @staticmethod
    def create_version(
        db: Session,
        plan_id: UUID,
        name: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> PlanVersion:
        """
        Store a deep copy of the plan's current totals, meals and foods.

        Args:
            db: Database session
            plan_id: plan to snapshot
            name: optional label, defaults to "Version {n}"
            created_by: caller-supplied author identity

        Returns:
            PlanVersion: the stored version

        Raises:
            NotFoundError: If the plan does not exist
            ConflictError: If the version number was taken concurrently
        """
        plan = DietPlanRepository(db).get_by_id(plan_id)
        if not plan:
            raise NotFoundError(f"Plan not found: {plan_id}", details={"plan_id": str(plan_id)})

        try:
            version = VersionHistoryService._snapshot(db, plan, name, created_by)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Version number collision for plan {plan_id}: {e}")
            raise ConflictError(
                f"A version for plan {plan_id} was created concurrently, retry",
                details={"plan_id": str(plan_id)},
            )
        except Exception:
            db.rollback()
            logger.exception("Error creating version for plan %s", plan_id)
            raise

        logger.info(f"Created version {version.version_number} for plan {plan_id}")
        return PlanVersionRepository(db).get_by_id(version.version_id)

    @staticmethod
    def list_versions(db: Session, plan_id: UUID) -> List[PlanVersion]:
        """Newest first"""
        if not DietPlanRepository(db).exists(plan_id):
            raise NotFoundError(f"Plan not found: {plan_id}", details={"plan_id": str(plan_id)})
        return PlanVersionRepository(db).list_by_plan(plan_id)

    @staticmethod
    def get_version(db: Session, version_id: UUID) -> PlanVersion:
        version = PlanVersionRepository(db).get_by_id(version_id)
        if not version:
            raise NotFoundError(
                f"Version not found: {version_id}", details={"version_id": str(version_id)}
            )
        return version

    @staticmethod
    def restore_version(db: Session, version_id: UUID) -> UUID:
        """
        Make a stored version the live state of its plan.

        This method:
        1. Resolves the version (nothing is written if it does not exist)
        2. Snapshots the current live state as a backup version
        3. Deletes the plan's live meals and foods
        4. Copies totals and notes from the version
        5. Re-creates meals and foods with their original order values

        All steps commit together or not at all.

        Returns:
            UUID: id of the restored plan

        Raises:
            NotFoundError: If the version (or its plan) does not exist
        """
        version = VersionHistoryService.get_version(db, version_id)
        plan_repo = DietPlanRepository(db)
        plan = plan_repo.get_by_id(version.plan_id)
        if not plan:
            raise NotFoundError(
                f"Plan not found: {version.plan_id}", details={"plan_id": str(version.plan_id)}
            )
        plan_id = plan.plan_id

        try:
            backup = VersionHistoryService._snapshot(db, plan, BACKUP_VERSION_LABEL, None)

            plan_repo.delete_meals(plan)

            plan.total_calories = version.total_calories
            plan.total_protein = version.total_protein
            plan.total_carbs = version.total_carbs
            plan.total_fats = version.total_fats
            plan.notes = version.notes

            meals: List[Meal] = PlanMapper.to_meals(version.meals)
            plan_repo.add_meals(plan, meals)

            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Version number collision while restoring {version_id}: {e}")
            raise ConflictError(
                f"Plan {plan_id} was changed concurrently, retry the restore",
                details={"version_id": str(version_id)},
            )
        except Exception:
            db.rollback()
            logger.exception("Error restoring version %s", version_id)
            raise

        logger.info(
            f"Restored plan {plan_id} to version {version.version_number} "
            f"(backup is version {backup.version_number})"
        )
        return plan_id
