"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"
    retryable = False


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class SourceUnavailable(PipelineError):
    """Raised when the open-data source does not answer with HTTP 200."""

    error_code = "SOURCE_UNAVAILABLE"
    retryable = True

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(PipelineError):
    """Raised when a source payload cannot be decoded."""

    error_code = "DECODE_ERROR"


class MalformedWKT(PipelineError):
    """Raised when a location is not a valid WKT point."""

    error_code = "MALFORMED_WKT"


class StoreError(PipelineError):
    """Raised for catalog lookup or insert failures."""

    error_code = "STORE_ERROR"
    retryable = True


class SpecialtyNotFound(PipelineError):
    """Raised when a record references a specialty missing from the catalog."""

    error_code = "SPECIALTY_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"specialty not found: {name!r}")
        self.name = name
