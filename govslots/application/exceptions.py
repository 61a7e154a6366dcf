class InvalidTimeFormat(ValueError):
    """Raised when a wall-clock value is not a well-formed HH:MM time."""
    pass


class SlotValidationError(ValueError):
    """Raised when a slot draft fails local validation before submission."""
    pass


class SubmissionInProgress(RuntimeError):
    """Raised when a form is submitted again while a submission is pending."""
    pass


class GatewayError(RuntimeError):
    """Raised when the REST backend fails (network errors, non-success responses)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GatewayContractError(GatewayError):
    """Raised when the REST backend answers with a body we cannot interpret."""
    pass
