"""Custom exception hierarchy for OpsBoard.

Every application error carries a user-facing message, a stable error code,
the HTTP status the API layer should answer with, and optional details.

Error codes follow pattern: [CATEGORY][NUMBER]
- DEL: Deal errors (001-099)
- CST: Business cost errors (001-099)
- USR: User/Auth errors (100-199)
- RPT: P&L report errors (300-399)
"""

from __future__ import annotations

from typing import Any


class OpsBoardException(Exception):
    """Base exception for all OpsBoard application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with user-friendly message and metadata.

        Args:
            message: User-friendly error message
            code: Unique error code (e.g., "RPT300")
            status_code: HTTP status code (default: 400 Bad Request)
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


# ============================================================================
# DEAL ERRORS (DEL001-099)
# ============================================================================

class DealError(OpsBoardException):
    """Base class for deal-related errors."""
    pass


class DealNotFoundError(DealError):
    """Deal does not exist."""

    def __init__(self, deal_id: int | None = None):
        message = "Deal not found" if deal_id is None else f"Deal {deal_id} not found"
        super().__init__(
            message=message,
            code="DEL001",
            status_code=404,
            details={"deal_id": deal_id} if deal_id is not None else {},
        )


class DealValidationError(DealError):
    """Deal input failed a business rule."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="DEL002",
            status_code=422,
            details={"field": field} if field else {},
        )


# ============================================================================
# BUSINESS COST ERRORS (CST001-099)
# ============================================================================

class BusinessCostError(OpsBoardException):
    """Base class for business cost errors."""
    pass


class BusinessCostNotFoundError(BusinessCostError):
    """Business cost does not exist."""

    def __init__(self, cost_id: int | None = None):
        message = "Business cost not found" if cost_id is None else f"Business cost {cost_id} not found"
        super().__init__(
            message=message,
            code="CST001",
            status_code=404,
            details={"cost_id": cost_id} if cost_id is not None else {},
        )


class BusinessCostValidationError(BusinessCostError):
    """Business cost input failed a business rule."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="CST002",
            status_code=422,
            details={"field": field} if field else {},
        )


# ============================================================================
# USER/AUTH ERRORS (USR100-199)
# ============================================================================

class UserError(OpsBoardException):
    """Base class for user/authentication errors."""
    pass


class UnauthorizedError(UserError):
    """User is not authorized to perform this action."""

    def __init__(self, action: str | None = None):
        message = "You are not authorized to perform this action" if not action else f"Not authorized: {action}"
        super().__init__(
            message=message,
            code="USR106",
            status_code=403,
        )


# ============================================================================
# REPORT ERRORS (RPT300-399)
# ============================================================================

class ReportError(OpsBoardException):
    """Base class for P&L report errors."""
    pass


class InvalidPeriodTypeError(ReportError):
    """Period type is not one the resolver understands."""

    def __init__(self, period_type: object, allowed: tuple[str, ...] = ()):
        message = f"Invalid period type: {period_type!r}"
        if allowed:
            message = f"{message}. Must be one of: {', '.join(allowed)}"
        super().__init__(
            message=message,
            code="RPT300",
            status_code=400,
            details={"period_type": str(period_type), "allowed": list(allowed)},
        )


class InvalidOffsetError(ReportError):
    """Period offset is negative or not an integer."""

    def __init__(self, offset: object):
        super().__init__(
            message=f"Invalid period offset: {offset!r}. Offset must be a non-negative integer",
            code="RPT301",
            status_code=400,
            details={"offset": str(offset)},
        )


class InvalidDateRangeError(ReportError):
    """Custom range has its start after its end, or a bound is missing."""

    def __init__(self, start: object, end: object, reason: str | None = None):
        message = reason or f"Invalid date range: {start} is after {end}"
        super().__init__(
            message=message,
            code="RPT302",
            status_code=400,
            details={"start_date": str(start), "end_date": str(end)},
        )


class MalformedCostDefinitionError(ReportError):
    """Stored cost record cannot be aggregated (e.g. recurring without frequency)."""

    def __init__(self, cost_id: object, reason: str):
        super().__init__(
            message=f"Malformed cost definition {cost_id}: {reason}",
            code="RPT303",
            status_code=422,
            details={"cost_id": cost_id, "reason": reason},
        )
