"""File helpers: MIME type detection."""

from .mime import DEFAULT_MIME_TYPE, MIME_TYPES, guess_mime_type

__all__ = ["DEFAULT_MIME_TYPE", "MIME_TYPES", "guess_mime_type"]
