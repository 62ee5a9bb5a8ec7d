"""Application services: configuration, generation and file output."""

from .generation_service import GenerationResult, GenerationService

__all__ = ["GenerationResult", "GenerationService"]
