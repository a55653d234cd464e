"""Custom exception hierarchy for the application."""


class SearchSyncError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, is_retryable: bool = False) -> None:
        """Initialize exception.

        Args:
            message: Error message
            is_retryable: Whether the operation can be retried
        """
        super().__init__(message)
        self.message = message
        self.is_retryable = is_retryable


class ConfigurationError(SearchSyncError):
    """Configuration or environment setup error."""

    pass


class PermissionDeniedError(SearchSyncError):
    """Indexing credential was rejected by the remote index."""

    pass


class ContentLoadError(SearchSyncError):
    """Site content could not be loaded."""

    pass


class RemoteIndexError(SearchSyncError):
    """Remote index operation error."""

    pass


class FlushError(RemoteIndexError):
    """Clearing the remote index failed."""

    pass


class ChunkSubmitError(RemoteIndexError):
    """Submitting one chunk of batch actions failed."""

    pass


class ValidationError(SearchSyncError):
    """Input validation error."""

    pass


class InvalidChunkSizeError(ValidationError):
    """Chunk size is not a positive integer."""

    pass
