"""Application errors and their HTTP status codes."""


class TranscriptHubError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(TranscriptHubError):
    status_code = 400


class UnauthorizedError(TranscriptHubError):
    status_code = 401


class ForbiddenError(TranscriptHubError):
    status_code = 403


class NotFoundError(TranscriptHubError):
    status_code = 404


class ConflictError(TranscriptHubError):
    status_code = 409


class RateLimitError(TranscriptHubError):
    status_code = 429


class UpstreamError(TranscriptHubError):
    """An external API (YouTube, Gemini) failed or is not configured."""

    status_code = 502


class SrtFormatError(InvalidRequestError, ValueError):
    pass
