# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: EmbeddingErrors
# -----------------------------------------------------------------------------
class EmbedAPIError(Exception):
    """
    Base for every failure the API reports to its caller.
    The exception handler renders it as {"error": message} with status_code.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(EmbedAPIError):
    status_code = 400


class UnauthorizedError(EmbedAPIError):
    status_code = 401


class NotFoundError(EmbedAPIError):
    status_code = 404


class UpstreamError(EmbedAPIError):
    """Embedding provider failure; status_code is the provider's own."""
    status_code = 502


class StorageError(EmbedAPIError):
    status_code = 500


class ServerError(EmbedAPIError):
    status_code = 500


# -----------------------------------------------------------------------------
# Collaborator-level failures (raised by the embedder, mapped by the service)
# -----------------------------------------------------------------------------
class EmbeddingProviderError(Exception):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"embedding provider returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class InvalidEmbeddingError(Exception):
    def __init__(self, dimensions: int):
        super().__init__(f"Invalid embedding data received: {dimensions} dimensions")
        self.dimensions = dimensions
