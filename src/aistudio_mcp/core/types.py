"""Core data types that flow through the tool pipeline.

This module defines the immutable data structures that represent a tool call
as it moves through the ingestion, composition and generation stages. Each
stage transforms the data into a new state, ensuring type safety and
preventing invalid state transitions.
"""

from __future__ import annotations

import dataclasses
import typing

if typing.TYPE_CHECKING:
    from aistudio_mcp.config import FrozenConfig

# --- Minimal guard helpers (clarity > boilerplate) ---


def _is_tuple_of(value: object, typ: type | tuple[type, ...]) -> bool:
    return isinstance(value, tuple) and all(isinstance(v, typ) for v in value)


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _optional_str(value: object) -> bool:
    return value is None or isinstance(value, str)


# --- Result Monad for Robust Error Handling ---
# Stages return failures as values; the executor decides when to raise.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful result in the pipeline."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failure in the pipeline, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

# --- File descriptors (tagged variant built at the tool boundary) ---


@dataclasses.dataclass(frozen=True, slots=True)
class PathFile:
    """A file to be read from a location reachable by the process."""

    path: str
    mime_type: str | None = None

    def __post_init__(self) -> None:
        """Validate PathFile invariants."""
        _require(
            condition=isinstance(self.path, str) and self.path != "",
            message="must be a non-empty str",
            field_name="path",
            exc=TypeError,
        )
        _require(
            condition=_optional_str(self.mime_type),
            message="must be a str or None",
            field_name="mime_type",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class InlineFile:
    """File content supplied inline as base64 text."""

    content: str
    name: str | None = None
    mime_type: str | None = None

    def __post_init__(self) -> None:
        """Validate InlineFile invariants."""
        _require(
            condition=isinstance(self.content, str) and self.content != "",
            message="must be a non-empty str",
            field_name="content",
            exc=TypeError,
        )
        _require(
            condition=_optional_str(self.name) and _optional_str(self.mime_type),
            message="name and mime_type must be str or None",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class MalformedFile:
    """An entry that matched neither the path nor the inline shape.

    Classified at the boundary; the ingestor reports it in encounter order.
    """

    reason: str
    name: str | None = None


type FileDescriptor = PathFile | InlineFile | MalformedFile

# --- Ingestion results ---


@dataclasses.dataclass(frozen=True, slots=True)
class NormalizedFile:
    """A file ready to be attached to a generation request."""

    content: str  # base64 of the original bytes
    mime_type: str
    display_name: str | None = None

    def __post_init__(self) -> None:
        """Validate NormalizedFile invariants."""
        _require(
            condition=isinstance(self.content, str),
            message="must be a base64 str",
            field_name="content",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.mime_type, str) and self.mime_type.strip() != "",
            message="must be a non-empty str",
            field_name="mime_type",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class IngestFailure:
    """A descriptor that could not be normalized, with the reason."""

    reason: str
    display_name: str | None = None

    def describe(self) -> str:
        """Render as ``name: reason`` (or just the reason when unnamed)."""
        if self.display_name:
            return f"{self.display_name}: {self.reason}"
        return self.reason


@dataclasses.dataclass(frozen=True, slots=True)
class IngestResult:
    """Partitioned outcome of ingesting a batch of file descriptors."""

    successes: tuple[NormalizedFile, ...] = ()
    failures: tuple[IngestFailure, ...] = ()
    # Bytes counted toward the size ceiling
    total_bytes: int = 0

    def __post_init__(self) -> None:
        """Validate collection types."""
        _require(
            condition=_is_tuple_of(self.successes, NormalizedFile),
            message="must be a tuple[NormalizedFile, ...]",
            field_name="successes",
            exc=TypeError,
        )
        _require(
            condition=_is_tuple_of(self.failures, IngestFailure),
            message="must be a tuple[IngestFailure, ...]",
            field_name="failures",
            exc=TypeError,
        )

    @property
    def ok(self) -> bool:
        """True when no descriptor failed."""
        return not self.failures


@dataclasses.dataclass(frozen=True, slots=True)
class IngestLimits:
    """Quota applied to one batch of files."""

    max_count: int
    max_total_bytes: int
    count_inline_bytes: bool = True

    def __post_init__(self) -> None:
        """Validate limits are positive integers."""
        _require(
            condition=isinstance(self.max_count, int) and self.max_count >= 1,
            message="must be an int >= 1",
            field_name="max_count",
        )
        _require(
            condition=isinstance(self.max_total_bytes, int)
            and self.max_total_bytes >= 1,
            message="must be an int >= 1",
            field_name="max_total_bytes",
        )


# --- Library-owned neutral request types ---


@dataclasses.dataclass(frozen=True, slots=True)
class TextPart:
    """A text part of a conversational turn."""

    text: str

    def __post_init__(self) -> None:
        """Validate TextPart invariants."""
        _require(
            condition=isinstance(self.text, str),
            message="text must be a str",
            exc=TypeError,
        )

    def to_dict(self) -> dict[str, typing.Any]:
        return {"text": self.text}


@dataclasses.dataclass(frozen=True, slots=True)
class InlineDataPart:
    """Inline file content (base64) plus its MIME type."""

    mime_type: str
    data: str

    def __post_init__(self) -> None:
        """Validate InlineDataPart invariants."""
        _require(
            condition=isinstance(self.mime_type, str) and self.mime_type.strip() != "",
            message="mime_type must be a non-empty str",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.data, str),
            message="data must be a base64 str",
            exc=TypeError,
        )

    def to_dict(self) -> dict[str, typing.Any]:
        return {"inlineData": {"mimeType": self.mime_type, "data": self.data}}


type Part = TextPart | InlineDataPart


@dataclasses.dataclass(frozen=True, slots=True)
class Turn:
    """A single conversational turn. Only user turns are produced."""

    parts: tuple[Part, ...]
    role: typing.Literal["user"] = "user"

    def __post_init__(self) -> None:
        """Validate Turn invariants."""
        _require(
            condition=self.role == "user",
            message=f"must be 'user', got {self.role!r}",
            field_name="role",
        )
        _require(
            condition=_is_tuple_of(self.parts, (TextPart, InlineDataPart))
            and len(self.parts) > 0,
            message="must be a non-empty tuple[TextPart | InlineDataPart, ...]",
            field_name="parts",
            exc=TypeError,
        )

    def to_dict(self) -> dict[str, typing.Any]:
        return {"role": self.role, "parts": [p.to_dict() for p in self.parts]}


@dataclasses.dataclass(frozen=True, slots=True)
class GenerationConfig:
    """Top-level generation parameters."""

    max_output_tokens: int
    temperature: float

    def __post_init__(self) -> None:
        """Validate GenerationConfig invariants."""
        _require(
            condition=isinstance(self.max_output_tokens, int)
            and self.max_output_tokens >= 1,
            message="must be an int >= 1",
            field_name="max_output_tokens",
        )
        _require(
            condition=isinstance(self.temperature, int | float),
            message="must be numeric",
            field_name="temperature",
            exc=TypeError,
        )

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "maxOutputTokens": self.max_output_tokens,
            "temperature": self.temperature,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class GenerationRequest:
    """A fully assembled request for the generation backend."""

    model: str
    conversation: tuple[Turn, ...]
    generation_config: GenerationConfig
    system_instruction: str | None = None

    def __post_init__(self) -> None:
        """Validate GenerationRequest invariants."""
        _require(
            condition=isinstance(self.model, str) and self.model != "",
            message="must be a non-empty str",
            field_name="model",
            exc=TypeError,
        )
        _require(
            condition=_is_tuple_of(self.conversation, Turn),
            message="must be a tuple[Turn, ...]",
            field_name="conversation",
            exc=TypeError,
        )
        _require(
            condition=_optional_str(self.system_instruction),
            message="must be a str or None",
            field_name="system_instruction",
            exc=TypeError,
        )

    def to_dict(self) -> dict[str, typing.Any]:
        """Render the camelCase wire shape; ``systemInstruction`` only when set."""
        payload: dict[str, typing.Any] = {
            "model": self.model,
            "conversation": [turn.to_dict() for turn in self.conversation],
            "generationConfig": self.generation_config.to_dict(),
        }
        if self.system_instruction is not None:
            payload["systemInstruction"] = {
                "parts": [{"text": self.system_instruction}]
            }
        return payload


@dataclasses.dataclass(frozen=True, slots=True)
class GenerationResult:
    """Text returned for a tool call."""

    text: str
    model: str


# --- Typed Command States ---
# These dataclasses define the shape of a tool call as it is transformed by
# each stage of the pipeline.


@dataclasses.dataclass(frozen=True, slots=True)
class ToolCommand:
    """The initial state of a tool call, built from validated arguments."""

    tool_name: str
    prompt: str
    config: FrozenConfig
    files: tuple[FileDescriptor, ...] = ()
    system_prompt: str | None = None
    model: str | None = None
    temperature: float | None = None
    # Tool-specific behaviour toggles
    require_files: bool = False
    annotate_multiple_files: bool = False

    def __post_init__(self) -> None:
        """Validate ToolCommand invariants."""
        _require(
            condition=isinstance(self.prompt, str),
            message="must be a str",
            field_name="prompt",
            exc=TypeError,
        )
        _require(
            condition=_is_tuple_of(self.files, (PathFile, InlineFile, MalformedFile)),
            message="must be a tuple[FileDescriptor, ...]",
            field_name="files",
            exc=TypeError,
        )
        _require(
            condition=_optional_str(self.system_prompt) and _optional_str(self.model),
            message="system_prompt and model must be str or None",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class IngestedCommand:
    """The state after the call's files have been ingested."""

    initial: ToolCommand
    files: tuple[NormalizedFile, ...]
    total_bytes: int = 0


@dataclasses.dataclass(frozen=True, slots=True)
class ComposedCommand:
    """The state after the generation request has been assembled."""

    ingested: IngestedCommand
    request: GenerationRequest
