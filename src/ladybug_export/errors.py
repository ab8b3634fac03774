"""Fatal error kinds raised during argument resolution and session setup.

Non-fatal conditions (configuration warnings and per-frame failures) are
logged where they occur and never raised.
"""


class ArgumentError(ValueError):
    """Raised when command-line arguments cannot be resolved into a config."""


class InitializationError(RuntimeError):
    """Raised when a fatal engine setup step fails.

    Attributes:
        operation: Name of the engine operation that failed.
        status: Engine status returned by the operation (None if the failure
            did not come from the engine).
    """

    def __init__(self, operation: str, status=None, detail: str | None = None):
        self.operation = operation
        self.status = status
        message = f"{operation} failed"
        if status is not None:
            message += f": {status.describe()}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class ResourceExhaustion(InitializationError):
    """Raised when per-camera buffers cannot be allocated."""


class MissingInputError(ArgumentError):
    """Raised when no input stream was given."""
