from typing import List, Optional

from pydantic import BaseModel, Field

from domain.enums import ErrorType, WarningSeverity, WarningType


class ValidationWarning(BaseModel):
    type: WarningType
    message: str
    severity: WarningSeverity
    suggestion: Optional[str] = None


class ValidationErrorItem(BaseModel):
    type: ErrorType
    message: str
    fix: Optional[str] = None


class ValidationResult(BaseModel):
    """Classification only; callers decide whether errors block a save"""

    valid: bool
    warnings: List[ValidationWarning] = Field(default_factory=list)
    errors: List[ValidationErrorItem] = Field(default_factory=list)
