"""
Validation Errors
=================

**Version**: 1.0.0
**Status**: Active

The single error kind the query validator raises, plus its machine-readable
codes.

WHY THIS FILE EXISTS
--------------------
Rejection happens in exactly one place (the validator), before translation.
Every rejection carries:

    1. A code (ErrorCode) for clients, logs and HTTP status mapping
    2. A human-readable reason ("KPI 'roi' is not allowed for dataset 'events'")
    3. Optionally the offending field and extra details

Translation itself never raises for unknown ids: it drops them with a
warning. Registry lookups return None. So callers only ever need to handle
ValidationError (and CubeAPIError once the query leaves this layer).

RELATED FILES
-------------
- reporting/semantic/validator.py: Raises ValidationError
- reporting/routers/analytics.py: Maps codes to HTTP status codes
"""

from enum import Enum
from typing import Any, Dict, Optional


# =============================================================================
# ERROR CODES
# =============================================================================

class ErrorCode(Enum):
    """
    Machine-readable validation failure kinds.

    WHAT: One code per validation rule, in check order.

    WHY: Lets the HTTP layer pick a status (DATASET_NOT_FOUND -> 404,
         everything else -> 400) without parsing messages.
    """
    DATASET_NOT_FOUND = "DATASET_NOT_FOUND"
    UNKNOWN_MEASURE = "UNKNOWN_MEASURE"
    UNKNOWN_DIMENSION = "UNKNOWN_DIMENSION"
    UNKNOWN_FILTER_FIELD = "UNKNOWN_FILTER_FIELD"
    OPERATOR_NOT_ALLOWED = "OPERATOR_NOT_ALLOWED"
    DATE_RANGE_EXCEEDED = "DATE_RANGE_EXCEEDED"
    INVALID_PAGINATION = "INVALID_PAGINATION"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    INVALID_SORT = "INVALID_SORT"
    INVALID_GROUP_LOGIC = "INVALID_GROUP_LOGIC"


# =============================================================================
# EXCEPTION
# =============================================================================

class ValidationError(Exception):
    """
    A request was rejected by the validator.

    ATTRIBUTES:
        code: ErrorCode
        message: Human-readable reason (also available as ``reason``)
        field: Offending request element, e.g. "kpis" or "filters[0].operator"
        details: Extra structured context (values, limits)

    USAGE:
        try:
            validator.validate(request, dataset)
        except ValidationError as e:
            logger.warning("[ANALYTICS] Rejected: %s", e)
            return {"detail": e.to_dict()}
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field
        self.details = dict(details or {})

    @property
    def reason(self) -> str:
        return self.message

    def __str__(self) -> str:
        if self.field:
            return f"[{self.code.value}] {self.field}: {self.message}"
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """
        Structured form for API payloads and logs.

        RETURNS:
            {"code", "message", "field"?, "details"?}
        """
        result: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        return result
