"""Exceptions raised by the export pipeline."""


class ArtifactExportError(Exception):
    """Base class for all export errors."""

    pass


class RemoteFetchError(ArtifactExportError):
    """Raised when a remote API call does not return a successful response.

    ``status`` is the HTTP status code, or None when the request never
    produced a response (connection error, timeout, invalid JSON).
    """

    def __init__(self, message: str, status: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.url = url


class IndexFetchError(RemoteFetchError):
    """Raised when the conversation index cannot be fetched.

    Fatal for the export job.
    """

    pass


class ConversationFetchError(RemoteFetchError):
    """Raised when a single conversation cannot be fetched."""

    pass


class ConversationProcessError(ArtifactExportError):
    """Raised when a fetched conversation cannot be turned into archive entries."""

    def __init__(self, message: str, conversation_id: str | None = None) -> None:
        super().__init__(message)
        self.conversation_id = conversation_id


class NoArtifactsFoundError(ArtifactExportError):
    """Raised when an export finishes without finding a single artifact."""

    pass


class ArchiveFinalizationError(ArtifactExportError):
    """Raised when the archive cannot be serialized."""

    pass


class TransferError(ArtifactExportError):
    """Raised when the finished archive cannot be delivered."""

    pass


class ExportStateError(ArtifactExportError):
    """Raised when an orchestrator is started outside the idle state."""

    pass
