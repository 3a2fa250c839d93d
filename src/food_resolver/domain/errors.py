"""Error taxonomy for food resolution."""


class FoodResolverError(Exception):
    """Base class for food resolver errors."""


class StorageError(FoodResolverError):
    """Raised when the local food catalog cannot be read or written."""


class CatalogConfigurationError(FoodResolverError):
    """Raised when an external catalog is built without credentials."""


class ExternalUnavailable(FoodResolverError):
    """Raised when an external catalog is unreachable, rate-limited or denied."""

    def __init__(
        self, provider: str, reason: str, status_code: int | None = None
    ) -> None:
        self.provider = provider
        self.reason = reason
        self.status_code = status_code
        detail = f"{provider} unavailable: {reason}"
        if status_code is not None:
            detail = f"{detail} (status={status_code})"
        super().__init__(detail)
