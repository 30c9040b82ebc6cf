"""Custom exceptions for the data service."""


class DataServiceError(Exception):
    """Base exception for data service errors."""
    pass


class NotFoundError(DataServiceError):
    """Referenced record does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ValidationConflictError(DataServiceError):
    """Write rejected because it conflicts with stored state (e.g. duplicate slug)."""
    pass


class RequestValidationError(DataServiceError):
    """Request parameters or body are malformed."""

    def __init__(self, message: str, errors=None):
        self.errors = errors or []
        super().__init__(message)


class InjectedTransientFailure(DataServiceError):
    """Randomized server error standing in for network flakiness."""

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        super().__init__(f"Injected failure on {endpoint}")


class ConfigurationError(DataServiceError):
    """Error in application configuration."""
    pass
