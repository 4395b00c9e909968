"""Export orchestrator coordinating fetch, extraction, packaging and delivery."""

from __future__ import annotations

import asyncio
import inspect
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Protocol

from artifact_export.engine.processor import ConversationProcessor
from artifact_export.errors import (
    ArchiveFinalizationError,
    ArtifactExportError,
    ConversationFetchError,
    ExportStateError,
    IndexFetchError,
    NoArtifactsFoundError,
    RemoteFetchError,
    TransferError,
)
from artifact_export.logging import (
    get_logger,
    log_conversation_failed,
    log_conversation_processed,
    log_export_finished,
    log_export_started,
    set_job_id,
)
from artifact_export.models import (
    ArchivePathRegistry,
    ConversationOutcome,
    ConversationSummary,
    ExportResult,
    ProgressEvent,
)
from artifact_export.packaging.archive import Archive, ZipArchive
from artifact_export.packaging.delivery import Downloader, archive_filename
from artifact_export.remote.client import RemoteSource

logger = get_logger("artifact_export.engine")

NO_ARTIFACTS_MESSAGE = "No artifacts found in any conversations"


class ExportState(Enum):
    """Lifecycle state of an export job."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ProgressSink(Protocol):
    """Receives progress notifications. Must not block."""

    def notify(self, event: ProgressEvent) -> None: ...


def _utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


class ExportOrchestrator:
    """Runs one export job from conversation index to delivered archive.

    Conversations are fetched one at a time with a pause between them.
    A conversation that fails to fetch or process is recorded and
    skipped; only an index failure, an empty result, or a failing
    archive/delivery step fails the job.

    Each instance runs once, with its own archive and path registry.

    Example:
        async with ClaudeClient(org_id, session_key=key) as client:
            orchestrator = ExportOrchestrator(client, DirectoryDownloader(out))
            result = await orchestrator.run()
    """

    def __init__(
        self,
        source: RemoteSource,
        downloader: Downloader,
        progress: ProgressSink | None = None,
        archive: Archive | None = None,
        processor: ConversationProcessor | None = None,
        pacing_interval: float = 0.5,
        org_id: str = "",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            source: Fetches the index and full conversations
            downloader: Receives the finished archive
            progress: Optional sink for progress events
            archive: Archive to fill (defaults to a new ZipArchive)
            processor: Conversation processor (defaults to a new one)
            pacing_interval: Seconds to wait between conversations
            org_id: Organization id, for logging
            sleep: Awaitable sleep function
            today: Returns the date used in the archive filename
        """
        self.source = source
        self.downloader = downloader
        self.progress = progress
        self.archive = archive if archive is not None else ZipArchive()
        self.processor = processor or ConversationProcessor()
        self.pacing_interval = pacing_interval
        self.org_id = org_id
        self.registry = ArchivePathRegistry()
        self.job_id = uuid.uuid4().hex[:12]

        self._sleep = sleep
        self._today = today
        self._state = ExportState.IDLE
        self._outcomes: list[ConversationOutcome] = []
        self._total = 0
        self._result: ExportResult | None = None

    @property
    def state(self) -> ExportState:
        return self._state

    @property
    def outcomes(self) -> list[ConversationOutcome]:
        """Per-conversation results, in index order."""
        return list(self._outcomes)

    @property
    def result(self) -> ExportResult | None:
        return self._result

    async def run(self) -> ExportResult:
        """Run the export job to completion.

        Returns:
            The job's ExportResult; failures are reported, not raised

        Raises:
            ExportStateError: If this orchestrator has already been started
        """
        if self._state is not ExportState.IDLE:
            raise ExportStateError(f"Export job already {self._state.value}")

        self._state = ExportState.RUNNING
        set_job_id(self.job_id)
        try:
            try:
                result = await self._run()
            except (
                IndexFetchError,
                NoArtifactsFoundError,
                ArchiveFinalizationError,
                TransferError,
            ) as e:
                result = ExportResult(
                    succeeded=False,
                    total_conversations=self._total,
                    error_message=str(e),
                    failed_conversations=self._failed_ids(),
                )

            self._state = ExportState.COMPLETED if result.succeeded else ExportState.FAILED
            self._result = result
            log_export_finished(
                logger,
                succeeded=result.succeeded,
                artifact_count=result.artifact_count,
                conversations_with_artifacts=result.conversations_with_artifacts,
                total_conversations=result.total_conversations,
                error=result.error_message,
            )
            return result
        finally:
            set_job_id(None)

    async def _run(self) -> ExportResult:
        summaries = await self._fetch_index()
        self._total = len(summaries)
        log_export_started(logger, org_id=self.org_id, total_conversations=self._total)

        for index, summary in enumerate(summaries, start=1):
            self._notify(
                ProgressEvent(current=index, total=self._total, conversation_name=summary.label)
            )
            logger.info(
                "conversation_started",
                current=index,
                total=self._total,
                conversation=summary.display_name or summary.id,
            )

            self._outcomes.append(await self._export_one(summary))

            if index < self._total:
                await self._sleep(self.pacing_interval)

        artifact_count = sum(o.artifact_count for o in self._outcomes)
        with_artifacts = sum(1 for o in self._outcomes if o.artifact_count > 0)

        if artifact_count == 0:
            raise NoArtifactsFoundError(NO_ARTIFACTS_MESSAGE)

        logger.info(
            "archive_building",
            artifact_count=artifact_count,
            conversations_with_artifacts=with_artifacts,
        )
        delivered = await self._deliver(self._finalize(), archive_filename(self._today()))

        return ExportResult(
            succeeded=True,
            artifact_count=artifact_count,
            conversations_with_artifacts=with_artifacts,
            total_conversations=self._total,
            filename=str(delivered),
            failed_conversations=self._failed_ids(),
        )

    async def _fetch_index(self) -> list[ConversationSummary]:
        try:
            return await self.source.fetch_index()
        except IndexFetchError as e:
            logger.error("index_fetch_failed", status=e.status, error=str(e))
            raise
        except RemoteFetchError as e:
            logger.error("index_fetch_failed", status=e.status, error=str(e))
            raise IndexFetchError(str(e), status=e.status, url=e.url) from e
        except Exception as e:
            logger.exception("index_fetch_failed")
            raise IndexFetchError(f"Failed to fetch conversations: {e}") from e

    def _finalize(self) -> bytes:
        try:
            return self.archive.finalize()
        except ArchiveFinalizationError:
            logger.exception("archive_finalization_failed")
            raise
        except Exception as e:
            logger.exception("archive_finalization_failed")
            raise ArchiveFinalizationError(f"Failed to create ZIP archive: {e}") from e

    async def _deliver(self, data: bytes, filename: str) -> Path | str:
        try:
            delivered = self.downloader.deliver(data, filename)
            if inspect.isawaitable(delivered):
                delivered = await delivered
        except TransferError:
            logger.exception("archive_transfer_failed", filename=filename)
            raise
        except Exception as e:
            logger.exception("archive_transfer_failed", filename=filename)
            raise TransferError(f"Failed to download ZIP file: {e}") from e
        return delivered or filename

    def _failed_ids(self) -> list[str]:
        return [o.summary.id for o in self._outcomes if not o.succeeded]

    async def _export_one(self, summary: ConversationSummary) -> ConversationOutcome:
        """Fetch and process a single conversation, capturing any failure."""
        try:
            conversation = await self.source.fetch_full(summary.id)
            count = self.processor.process(conversation, self.archive, self.registry)
        except ArtifactExportError as e:
            return self._failed(summary, e)
        except Exception as e:
            error = ConversationFetchError(f"Failed to fetch conversation: {e}")
            error.__cause__ = e
            return self._failed(summary, error)

        log_conversation_processed(logger, conversation_id=summary.id, artifact_count=count)
        return ConversationOutcome(summary=summary, artifact_count=count)

    def _failed(self, summary: ConversationSummary, error: ArtifactExportError) -> ConversationOutcome:
        log_conversation_failed(
            logger,
            conversation_id=summary.id,
            error_type=type(error).__name__,
            message=str(error),
            status=getattr(error, "status", None),
        )
        return ConversationOutcome(summary=summary, error=error)

    def _notify(self, event: ProgressEvent) -> None:
        if self.progress is None:
            return
        try:
            self.progress.notify(event)
        except Exception as e:
            logger.warning("progress_sink_failed", error=str(e))
