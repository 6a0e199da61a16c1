"""
Error taxonomy for lead operations.

Services raise these; routes translate them into HTTP responses.
Anything else that escapes a mutation is treated as a backend failure
and reported generically.
"""
from typing import Any, Dict, List, Optional


class CRMError(Exception):
    """Base exception for controlled CRM failures."""

    error_code = "crm_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationFailed(CRMError):
    """Input rejected before any write was attempted."""

    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class NotFoundError(CRMError):
    error_code = "not_found"

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(f"{resource_type} not found", {"id": str(resource_id)})
        self.resource_type = resource_type


class EmptyResultError(CRMError):
    """Soft failure: the operation had nothing to act on."""

    error_code = "empty_result"


class TwoPhaseWriteError(CRMError):
    """
    A later phase of a sequential multi-write failed.

    Phases in ``committed`` were already written and are not undone.
    """

    error_code = "partial_write"

    def __init__(self, failed_phase: str, committed: List[str], original: Exception):
        super().__init__(
            f"Phase '{failed_phase}' failed; already committed: {', '.join(committed) or 'none'}",
            {"failed_phase": failed_phase, "committed": list(committed)},
        )
        self.failed_phase = failed_phase
        self.committed = list(committed)
        self.original = original
