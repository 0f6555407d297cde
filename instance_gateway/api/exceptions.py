"""API exceptions rendered as ``{"message": ...}`` responses."""


class APIError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingContainerIdError(APIError):
    """Raised when a container-scoped request has no container ID."""

    status_code = 400

    def __init__(self):
        super().__init__("Container ID is required")


class ContainerNotFoundError(APIError):
    """Raised when the engine cannot inspect or remove a container.

    The engine's own error detail is not part of the message.
    """

    status_code = 404

    def __init__(self, container_id: str | None = None):
        super().__init__("Container not found")
        self.container_id = container_id


class EngineUnavailableError(APIError):
    """Raised when the engine cannot list containers."""

    status_code = 500
