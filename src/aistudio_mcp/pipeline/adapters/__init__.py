"""Provider adapters for the generation backend."""

from .base import GenerationAdapter
from .gemini import GoogleGenAIAdapter

__all__ = ["GenerationAdapter", "GoogleGenAIAdapter"]
