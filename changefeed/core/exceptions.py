from fastapi import HTTPException, status


class UpstreamError(HTTPException):
    """Raised when GitHub could not produce the requested data."""

    def __init__(self, message: str = "GitHub API error"):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=message,
        )


class ConfigurationError(HTTPException):
    """Raised when the server is missing required configuration."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )
