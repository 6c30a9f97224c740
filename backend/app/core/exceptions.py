class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(AppError):
    """Raised for malformed scheduling input (time format, recurrence days, date range)."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ConflictError(AppError):
    """Raised when a proposed schedule collides with existing sessions or exams.

    ``details`` carries the full conflict report, or the per-draft breakdown for
    template batches, so callers can explain why a slot is unavailable.
    """
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class InvalidTransitionError(AppError):
    """Raised when a lifecycle operation is attempted from a state that forbids it."""
    def __init__(self, operation: str, current_status: str):
        super().__init__(
            f"Cannot {operation} a session that is {current_status}",
            status_code=400,
            details={"operation": operation, "currentStatus": current_status},
        )
        self.operation = operation
        self.current_status = current_status

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class BatchValidationTimeout(AppError):
    """Raised when validating a template batch exceeds its wall-clock budget."""
    def __init__(self, validated: int, total: int, budget_seconds: float):
        super().__init__(
            f"Batch validation exceeded {budget_seconds:.1f}s after {validated} of {total} drafts",
            status_code=503,
            details={"validated": validated, "total": total, "budgetSeconds": budget_seconds},
        )

class NotificationDeliveryError(Exception):
    """Raised by notification adapters; never propagated past the lifecycle layer."""
