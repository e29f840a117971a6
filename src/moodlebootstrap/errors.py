"""Domain errors for moodle-bootstrap."""


class BootstrapError(RuntimeError):
    """Raised when a bootstrap step cannot complete."""


class ValidationError(BootstrapError):
    """Raised when a user-supplied parameter is missing or malformed."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid parameter '{field}': {reason}")


class BackendUnavailableError(BootstrapError):
    """Raised when the Docker daemon or compose wrapper cannot be reached."""


class CommandTimeoutError(BootstrapError):
    """Raised when an external command exceeds its timeout."""


class ReadinessError(BootstrapError):
    """Raised when the database readiness probe fails."""


class ReadinessTimeoutError(ReadinessError):
    """Raised when the database does not become ready in time."""


class ToleratedStepFailure(BootstrapError):
    """Raised by steps whose failure is logged but never aborts the bootstrap."""
