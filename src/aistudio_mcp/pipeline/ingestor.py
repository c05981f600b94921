"""File ingestion stage of the pipeline.

Turns the file descriptors of a tool call into base64-encoded, typed file
records while enforcing the per-call file count and cumulative size ceiling.
Per-file problems are collected as data; only the count precondition raises.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
from collections.abc import Sequence
import logging
import math
import os
from pathlib import Path
from typing import TYPE_CHECKING, Final

from aistudio_mcp.core.exceptions import FileCountError, FileProcessingError
from aistudio_mcp.core.types import (
    Failure,
    FileDescriptor,
    IngestedCommand,
    IngestFailure,
    IngestLimits,
    IngestResult,
    InlineFile,
    MalformedFile,
    NormalizedFile,
    PathFile,
    Result,
    Success,
    ToolCommand,
)
from aistudio_mcp.files.mime import DEFAULT_MIME_TYPE, guess_mime_type
from aistudio_mcp.pipeline.base import BaseAsyncHandler
from aistudio_mcp.telemetry import TelemetryContext

if TYPE_CHECKING:
    from aistudio_mcp.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)

INLINE_DISPLAY_NAME: Final = "inline-content"
MISSING_SOURCE_REASON: Final = "Either content or path must be provided for each file"
_MB: Final = 1024 * 1024


def _format_mb(size: int) -> str:
    return f"{math.floor(size / _MB + 0.5)}MB"


def _size_exceeded_reason(total: int, limit: int) -> str:
    return (
        f"Total file size exceeded: {_format_mb(total)}. "
        f"Maximum allowed: {_format_mb(limit)}"
    )


def format_failures(failures: Sequence[IngestFailure]) -> str:
    """Render failures as the multi-line aggregate error message."""
    lines = "\n".join(f.describe() for f in failures)
    return f"File processing errors:\n{lines}"


class FileIngestor(BaseAsyncHandler[ToolCommand, IngestedCommand, FileProcessingError]):
    """Validates, size-bounds and base64-encodes the files of a tool call.

    Descriptors are processed strictly in input order. Reads happen off the
    event loop but never in parallel, because the size ceiling is a running
    total and failure messages follow encounter order.
    """

    def __init__(self, telemetry: TelemetryContextProtocol | None = None) -> None:
        """Initialize the ingestor with optional telemetry."""
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    async def handle(
        self, command: ToolCommand
    ) -> Result[IngestedCommand, FileProcessingError]:
        """Ingest the command's files and apply the all-or-nothing policy."""
        if not command.files:
            if command.require_files:
                return Failure(
                    FileProcessingError("No files were successfully processed")
                )
            return Success(IngestedCommand(initial=command, files=()))

        try:
            result = await self.ingest(command.files, command.config.ingest_limits())
        except FileCountError as e:
            return Failure(FileProcessingError(str(e)))

        if result.failures:
            logger.info(
                "Rejecting tool call: %d of %d files failed ingestion",
                len(result.failures),
                len(command.files),
            )
            return Failure(
                FileProcessingError(
                    format_failures(result.failures), failures=result.failures
                )
            )
        if command.require_files and not result.successes:
            return Failure(FileProcessingError("No files were successfully processed"))

        return Success(
            IngestedCommand(
                initial=command,
                files=result.successes,
                total_bytes=result.total_bytes,
            )
        )

    async def ingest(
        self, descriptors: Sequence[FileDescriptor], limits: IngestLimits
    ) -> IngestResult:
        """Normalize ``descriptors`` into an `IngestResult`.

        Raises:
            FileCountError: If more descriptors are given than ``limits`` allow.
                No file is read in that case.
        """
        if len(descriptors) > limits.max_count:
            raise FileCountError(
                f"Too many files: {len(descriptors)}. "
                f"Maximum allowed: {limits.max_count}"
            )

        successes: list[NormalizedFile] = []
        failures: list[IngestFailure] = []
        total = 0

        with self._telemetry("ingest", files=len(descriptors)):
            for descriptor in descriptors:
                try:
                    normalized, size = await self._ingest_one(descriptor, limits)
                except _DescriptorFailure as failed:
                    failures.append(failed.failure)
                    continue
                except Exception as e:
                    failures.append(
                        IngestFailure(
                            display_name=_name_of(descriptor),
                            reason=f"Processing error: {e}",
                        )
                    )
                    continue

                if size is not None:
                    total += size
                    if total > limits.max_total_bytes:
                        failures.append(
                            IngestFailure(
                                display_name=normalized.display_name,
                                reason=_size_exceeded_reason(
                                    total, limits.max_total_bytes
                                ),
                            )
                        )
                        break
                successes.append(normalized)

            self._telemetry.count("ingest.files_ok", len(successes))
            self._telemetry.gauge("ingest.total_bytes", total)

        return IngestResult(
            successes=tuple(successes), failures=tuple(failures), total_bytes=total
        )

    # ------------------------------
    # Internal helpers
    # ------------------------------
    async def _ingest_one(
        self, descriptor: FileDescriptor, limits: IngestLimits
    ) -> tuple[NormalizedFile, int | None]:
        """Normalize one descriptor.

        Returns the record and the byte count that applies to the size ceiling
        (``None`` when the entry is not size-accounted).
        """
        match descriptor:
            case InlineFile():
                return self._ingest_inline(descriptor, limits)
            case PathFile():
                return await self._ingest_path(descriptor)
            case MalformedFile():
                raise _DescriptorFailure(
                    IngestFailure(
                        display_name=descriptor.name, reason=descriptor.reason
                    )
                )
        raise TypeError(f"Unsupported file descriptor: {type(descriptor).__name__}")

    def _ingest_inline(
        self, descriptor: InlineFile, limits: IngestLimits
    ) -> tuple[NormalizedFile, int | None]:
        name = descriptor.name or INLINE_DISPLAY_NAME
        content = "".join(descriptor.content.split())
        try:
            decoded = base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise _DescriptorFailure(
                IngestFailure(display_name=name, reason=f"Invalid base64 content: {e}")
            ) from e

        record = NormalizedFile(
            content=content,
            mime_type=descriptor.mime_type or DEFAULT_MIME_TYPE,
            display_name=name,
        )
        return record, len(decoded) if limits.count_inline_bytes else None

    async def _ingest_path(
        self, descriptor: PathFile
    ) -> tuple[NormalizedFile, int | None]:
        raw_path = descriptor.path
        normalized = os.path.normpath(raw_path)
        # No traversal restriction: callers are trusted to name any readable file.
        if ".." in normalized or os.path.isabs(normalized):
            logger.warning("Accessing path: %s", raw_path)

        resolved = Path(raw_path).expanduser().resolve()
        try:
            data = await asyncio.to_thread(resolved.read_bytes)
        except OSError as e:
            raise _DescriptorFailure(
                IngestFailure(display_name=raw_path, reason=f"Failed to read file: {e}")
            ) from e

        record = NormalizedFile(
            content=base64.b64encode(data).decode("ascii"),
            mime_type=descriptor.mime_type or guess_mime_type(raw_path),
            # Named lexically so a symlink keeps its own name
            display_name=Path(normalized).name,
        )
        logger.debug("Ingested %s (%d bytes, %s)", raw_path, len(data), record.mime_type)
        return record, len(data)


class _DescriptorFailure(Exception):
    """Internal signal carrying the failure recorded for one descriptor."""

    def __init__(self, failure: IngestFailure) -> None:
        super().__init__(failure.reason)
        self.failure = failure


def _name_of(descriptor: FileDescriptor) -> str:
    match descriptor:
        case PathFile(path=path):
            return path
        case InlineFile(name=name):
            return name or INLINE_DISPLAY_NAME
        case MalformedFile(name=name):
            return name or "unknown"
    return "unknown"
