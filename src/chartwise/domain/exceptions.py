class ChartwiseError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ChartwiseError):
    """Requested resource does not exist (e.g. no dataset loaded)."""


class CSVParseError(ChartwiseError):
    """Uploaded text could not be parsed into rows."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        super().__init__(message)


class DatasetValidationError(ChartwiseError):
    """Parsed rows failed structural validation."""

    def __init__(self, message: str, warnings: list[str] | None = None) -> None:
        self.warnings = list(warnings or [])
        super().__init__(message)


class UploadRejectedError(ChartwiseError):
    """File is not a CSV by name or MIME type."""


class ChartConfigError(ChartwiseError):
    """Chart configuration references missing columns or lacks required fields."""


class ExportError(ChartwiseError):
    """Export to a file format failed."""


class AIError(ChartwiseError):
    """Base for failures talking to the completion endpoint."""

    kind = "ai_error"
    retryable = False


class AIConfigurationError(AIError):
    """AI features are disabled or the API key is missing."""

    kind = "configuration"


class AIAuthenticationError(AIError):
    """Remote rejected the credentials (401/403)."""

    kind = "authentication"


class AIRateLimitError(AIError):
    """Remote rate limit hit (429). Never retried automatically."""

    kind = "rate_limit"


class LocalRateLimitError(AIError):
    """Call issued before the minimum interval elapsed."""

    kind = "local_rate_limit"

    def __init__(self, wait_seconds: int) -> None:
        self.wait_seconds = wait_seconds
        super().__init__(
            f"Please wait {wait_seconds} seconds before making another request to avoid rate limits."
        )


class AIRequestError(AIError):
    """Remote rejected the request (4xx other than 401/403/429)."""

    kind = "request"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AITransientError(AIError):
    """Server error or network failure; retried with backoff."""

    kind = "transient"
    retryable = True


class AIResponseError(AIError):
    """Reply was not the expected JSON shape."""

    kind = "malformed_response"


class InvalidInputError(ChartwiseError):
    """Caller supplied unusable input (e.g. an empty question)."""
