"""Turns one fetched conversation into archive entries."""

from artifact_export.errors import ConversationProcessError
from artifact_export.extract import extract, normalize
from artifact_export.logging import get_logger
from artifact_export.models import ArchivePathRegistry, ConversationFull, Sender
from artifact_export.packaging.archive import Archive
from artifact_export.packaging.paths import allocate, sanitize_namespace

logger = get_logger("artifact_export.processor")


class ConversationProcessor:
    """Scans assistant messages for artifacts and writes them to an archive.

    User messages are never scanned. The conversation itself is not
    modified; the archive and the path registry are. A conversation is
    written all or nothing: if any entry fails, the entries it already
    added are removed from the archive again.
    """

    def process(
        self,
        conversation: ConversationFull,
        archive: Archive,
        registry: ArchivePathRegistry,
    ) -> int:
        """Write every artifact of a conversation into the archive.

        Args:
            conversation: Fetched conversation
            archive: Archive receiving (path, content) entries
            registry: Paths already allocated in this export job

        Returns:
            Number of artifacts written (0 when there is no message list)

        Raises:
            ConversationProcessError: If an entry cannot be written
        """
        if conversation.messages is None:
            return 0

        written: list[str] = []
        try:
            entries = self._collect(conversation, registry)
            for path, data in entries:
                archive.put(path, data)
                written.append(path)
                logger.debug("artifact_added", path=path, size=len(data))
        except Exception as e:
            # Allocated paths stay reserved in the registry
            for path in written:
                archive.discard(path)
            raise ConversationProcessError(
                f"Failed to process conversation {conversation.id}: {e}",
                conversation_id=conversation.id,
            ) from e

        return len(written)

    def _collect(
        self,
        conversation: ConversationFull,
        registry: ArchivePathRegistry,
    ) -> list[tuple[str, bytes]]:
        """Extract and allocate every artifact before anything is written."""
        namespace = sanitize_namespace(conversation.display_name)
        entries: list[tuple[str, bytes]] = []

        for message in conversation.messages or []:
            if message.sender is not Sender.ASSISTANT:
                continue

            text = normalize(message)
            if not text:
                continue

            for artifact in extract(text):
                path = allocate(artifact.title, artifact.language, namespace, registry)
                entries.append((path, artifact.content.encode("utf-8")))

        return entries
