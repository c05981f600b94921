"""Extension-based MIME type detection.

Detection is a pure function of the file extension over a fixed table, so
results do not depend on the host's ``mimetypes`` registry.
"""

from pathlib import PurePath
from types import MappingProxyType
from typing import Final

DEFAULT_MIME_TYPE: Final = "application/octet-stream"

MIME_TYPES: Final = MappingProxyType(
    {
        # Documents
        ".pdf": "application/pdf",
        ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ".json": "application/json",
        ".xml": "application/xml",
        # Images
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".gif": "image/gif",
        ".webp": "image/webp",
        ".bmp": "image/bmp",
        ".tiff": "image/tiff",
        ".svg": "image/svg+xml",
        ".heic": "image/heic",
        ".heif": "image/heif",
        # Video
        ".mp4": "video/mp4",
        ".mpeg": "video/mpeg",
        ".mov": "video/quicktime",
        ".avi": "video/x-msvideo",
        ".mkv": "video/x-matroska",
        ".webm": "video/webm",
        ".flv": "video/x-flv",
        ".wmv": "video/x-ms-wmv",
        ".3gp": "video/3gpp",
        # Audio
        ".mp3": "audio/mpeg",
        ".wav": "audio/wav",
        ".aiff": "audio/aiff",
        ".aac": "audio/aac",
        ".ogg": "audio/ogg",
        ".flac": "audio/flac",
        ".m4a": "audio/mp4",
        # Text/code
        ".txt": "text/plain",
        ".md": "text/markdown",
        ".csv": "text/csv",
        ".html": "text/html",
        ".htm": "text/html",
        ".css": "text/css",
        ".js": "text/javascript",
        ".py": "text/x-python",
    }
)


def guess_mime_type(path: str | PurePath) -> str:
    """Return the MIME type for ``path`` based on its extension.

    Unknown or missing extensions map to ``application/octet-stream``.
    """
    suffix = PurePath(path).suffix.lower()
    return MIME_TYPES.get(suffix, DEFAULT_MIME_TYPE)
